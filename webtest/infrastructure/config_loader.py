import os
import re
from pathlib import Path
from typing import Any, Iterator, Optional

import yaml
from dotenv import load_dotenv

from webtest.domain.config import Config, BrowserConfig, BrowserName, WaitConfig, SiteConfig, ArtifactsConfig

CONFIG_FILENAME = "config.yaml"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _candidate_paths() -> Iterator[Path]:
    """Places a config.yaml may live when CONFIG_PATH is unset, nearest first."""
    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        yield directory / CONFIG_FILENAME
    # checkout the package was imported from
    yield Path(__file__).resolve().parents[2] / CONFIG_FILENAME


def find_config_path() -> str:
    """Return the config.yaml the harness reads.

    CONFIG_PATH wins when set and must then name an existing file. Without it the
    working directory and each of its parents are tried before the project checkout.
    """
    explicit = os.getenv("CONFIG_PATH")
    if explicit:
        if not Path(explicit).is_file():
            raise FileNotFoundError(f"CONFIG_PATH points at {explicit}, which does not exist")
        return explicit

    found = next((path for path in _candidate_paths() if path.is_file()), None)
    if found is None:
        raise FileNotFoundError(f"No {CONFIG_FILENAME} in {Path.cwd()} or above it; set CONFIG_PATH to pick one")
    return str(found)


def load(config_path: Optional[str] = None) -> Config:
    file = _find_config(config_path)
    data = _read_config(file)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Parsed config file {file} does not contain a mapping")

    return _map_to_domain(data)


def _read_config(file: Path) -> Any:
    content = file.read_text()

    def replace_env_var(match: re.Match) -> str:
        var_name = match.group(1)
        return os.getenv(var_name, match.group(0))

    content = re.sub(r'\$\{(\w+)}', replace_env_var, content)

    return yaml.safe_load(content)


def _find_config(config_path: str | None) -> Path:
    load_dotenv()

    if config_path:
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        return path
    return Path(find_config_path())


def _as_bool(value: Any, default: bool) -> bool:
    """Interpret YAML booleans as well as strings left behind by ${VAR} substitution."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if not text:
        return default
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    # an unresolved ${VAR} token means the variable was not set
    if text.startswith("${"):
        return default
    raise ValueError(f"Expected a boolean, got: {value!r}")


def _map_to_domain(data: dict) -> Config:
    browser_data = data.get('browser', {}) or {}
    viewport = browser_data.get('viewport', {}) or {}
    browser_config = BrowserConfig(
        browser=BrowserName(browser_data.get('name', BrowserName.CHROMIUM.value)),
        headless=_as_bool(os.getenv('HEADLESS', browser_data.get('headless')), True),
        slow_mo=float(browser_data.get('slow-mo') or 0),
        channel=browser_data.get('channel') or None,
        viewport_width=int(viewport.get('width', 1280)),
        viewport_height=int(viewport.get('height', 720)),
        locale=browser_data.get('locale') or None,
        ignore_https_errors=_as_bool(browser_data.get('ignore-https-errors'), False),
    )

    wait_data = data.get('wait', {}) or {}
    wait_config = WaitConfig(
        default_timeout_ms=int(wait_data.get('default-timeout-ms', 30000)),
        navigation_timeout_ms=int(wait_data.get('navigation-timeout-ms', 30000)),
        poll_interval_ms=int(wait_data.get('poll-interval-ms', 100)),
        clickable_timeout_ms=int(wait_data.get('clickable-timeout-ms', 10000)),
    )

    sites_data = data.get('sites', {}) or {}
    site_config = SiteConfig(
        search_url=sites_data.get('search-url', SiteConfig.search_url),
        shop_url=sites_data.get('shop-url', SiteConfig.shop_url),
    )

    artifacts_data = data.get('artifacts', {}) or {}
    artifacts_config = ArtifactsConfig(
        screenshot_dir=Path(artifacts_data.get('screenshot-dir', ArtifactsConfig.screenshot_dir)),
        screenshot_on_failure=_as_bool(artifacts_data.get('screenshot-on-failure'), True),
    )

    return Config(
        log_level=os.getenv('LOG_LEVEL', data.get('log_level', 'INFO')),
        browser_config=browser_config,
        wait_config=wait_config,
        site_config=site_config,
        artifacts_config=artifacts_config,
    )
