import logging
import re
from pathlib import Path
from typing import Any, Optional

from playwright.sync_api import Error as PlaywrightError

from webtest.domain.config import ArtifactsConfig
from webtest.driver_adapter.driver import Driver

logger = logging.getLogger(__name__)


def screenshot_file_name(node_id: str) -> str:
    """`tests/test_a.py::test_b[x]` -> `tests_test_a.py_test_b_x_.png`"""
    return re.sub(r"[^\w.-]+", "_", node_id) + ".png"


def save_failure_screenshot(driver: Driver, node: Any, artifacts_config: ArtifactsConfig) -> Optional[Path]:
    """Screenshot the page when the body of the test behind `node` failed.

    `node` is a pytest item carrying the `rep_call` report set by the
    makereport hook. Returns the file written, or None when nothing was taken.
    """
    report = getattr(node, "rep_call", None)
    if report is None or not report.failed or not artifacts_config.screenshot_on_failure:
        return None

    try:
        return driver.take_screenshot(screenshot_file_name(node.nodeid), full_page=True)
    except PlaywrightError as e:
        logger.warning(f"Failure screenshot not taken: {e.message}")
        return None
