from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class BrowserName(Enum):
    CHROMIUM = "chromium"
    FIREFOX = "firefox"
    WEBKIT = "webkit"


@dataclass(frozen=True)
class BrowserConfig:
    """Configuration for the browser process and the per-test contexts."""
    browser: BrowserName = BrowserName.CHROMIUM
    headless: bool = True
    slow_mo: float = 0
    channel: str | None = None
    viewport_width: int = 1280
    viewport_height: int = 720
    locale: str | None = None
    ignore_https_errors: bool = False


@dataclass(frozen=True)
class WaitConfig:
    """Timeouts (milliseconds) applied to every page and to the wait helpers."""
    default_timeout_ms: int = 30000
    navigation_timeout_ms: int = 30000
    poll_interval_ms: int = 100
    clickable_timeout_ms: int = 10000

    def __post_init__(self):
        for name, value in vars(self).items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got: {value}")


@dataclass(frozen=True)
class SiteConfig:
    """Entry points of the sites exercised by the scenario tests."""
    search_url: str = "https://www.google.com"
    shop_url: str = "https://automationexercise.com"


@dataclass(frozen=True)
class ArtifactsConfig:
    """Where screenshots go."""
    screenshot_dir: Path = Path("artifacts/screenshots")
    screenshot_on_failure: bool = True


@dataclass(frozen=True)
class Config:
    """Main configuration containing log level and nested config objects."""
    log_level: str = "INFO"
    browser_config: BrowserConfig = field(default_factory=BrowserConfig)
    wait_config: WaitConfig = field(default_factory=WaitConfig)
    site_config: SiteConfig = field(default_factory=SiteConfig)
    artifacts_config: ArtifactsConfig = field(default_factory=ArtifactsConfig)
