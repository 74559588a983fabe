import logging
from contextlib import contextmanager
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Iterator, List, Optional, Tuple

from playwright.sync_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    sync_playwright,
)

from webtest.domain.config import Config
from webtest.domain.errors import LaunchError, SessionStateError
from webtest.driver_adapter.driver import Driver

logger = logging.getLogger(__name__)


@dataclass
class TestSession:
    """The context, page and driver owned by exactly one test."""
    __test__ = False

    context: BrowserContext
    page: Page
    driver: Driver
    closed: bool = False


class SessionManager:
    """Owns one browser per run and one isolated context + page per test.

    Order of use: start_run() once, then begin_test()/end_test() around every
    test, then end_run() once. end_test() releases the page and the context
    whatever happened in the test body.
    """

    def __init__(self, config: Config, playwright_factory: Callable = sync_playwright):
        self.config = config
        self._playwright_factory = playwright_factory
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.active_session: Optional[TestSession] = None

    @property
    def running(self) -> bool:
        return self.browser is not None

    def start_run(self) -> None:
        if self.running:
            raise SessionStateError("start_run() called twice; one browser per run")

        browser_config = self.config.browser_config
        logger.info(f"Launching {browser_config.browser.value} (headless={browser_config.headless})")
        try:
            self.playwright = self._playwright_factory().start()
            browser_type = getattr(self.playwright, browser_config.browser.value)
            launch_options = {"headless": browser_config.headless, "slow_mo": browser_config.slow_mo}
            if browser_config.channel:
                launch_options["channel"] = browser_config.channel
            self.browser = browser_type.launch(**launch_options)
        except Exception as e:
            self._stop_playwright()
            raise LaunchError(f"Cannot launch {browser_config.browser.value}: {e}") from e
        logger.info("Browser launched.")

    def begin_test(self) -> TestSession:
        if not self.running:
            raise SessionStateError("begin_test() called before start_run()")
        if self.active_session is not None:
            raise SessionStateError("begin_test() called while a test session is still open")

        browser_config = self.config.browser_config
        wait_config = self.config.wait_config
        context = self.browser.new_context(
            viewport={"width": browser_config.viewport_width, "height": browser_config.viewport_height},
            locale=browser_config.locale,
            ignore_https_errors=browser_config.ignore_https_errors,
        )
        context.set_default_timeout(wait_config.default_timeout_ms)
        context.set_default_navigation_timeout(wait_config.navigation_timeout_ms)
        try:
            page = context.new_page()
        except PlaywrightError:
            context.close()
            raise

        driver = Driver(page, context, wait_config, self.config.artifacts_config.screenshot_dir)
        self.active_session = TestSession(context=context, page=page, driver=driver)
        logger.debug("Test session opened.")
        return self.active_session

    def end_test(self, session: TestSession) -> None:
        """Cancel listeners, close the page, then the context. Every step runs."""
        if session.closed:
            return
        session.closed = True
        if self.active_session is session:
            self.active_session = None

        _run_cleanup([
            ("remove listeners", session.driver.remove_listeners),
            ("close page", session.page.close),
            ("close context", session.context.close),
        ])
        logger.debug("Test session closed.")

    def end_run(self) -> None:
        browser, self.browser = self.browser, None
        steps = []
        if self.active_session is not None:
            logger.warning("end_run() with a test session still open; closing it")
            steps.append(("close test session", partial(self.end_test, self.active_session)))
        if browser is not None:
            steps.append(("close browser", browser.close))
        steps.append(("stop playwright", self._stop_playwright))

        _run_cleanup(steps)
        logger.info("Browser closed.")

    def _stop_playwright(self) -> None:
        if self.playwright is not None:
            playwright, self.playwright = self.playwright, None
            playwright.stop()

    @contextmanager
    def test_session(self) -> Iterator[TestSession]:
        session = self.begin_test()
        try:
            yield session
        finally:
            self.end_test(session)

    def __enter__(self) -> "SessionManager":
        self.start_run()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.end_run()


def _run_cleanup(steps: List[Tuple[str, Callable[[], Any]]]) -> None:
    """Run every step even if earlier ones fail, then re-raise the first failure."""
    first_error: Optional[Exception] = None
    for name, step in steps:
        try:
            step()
        except Exception as e:
            logger.exception(f"Cleanup step failed: {name}")
            if first_error is None:
                first_error = e
    if first_error is not None:
        raise first_error
