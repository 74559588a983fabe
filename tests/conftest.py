import os
from dataclasses import replace
from typing import Iterator

import pytest

from webtest.config.logging_config import configure_logging
from webtest.core.protocols.driver_protocol import DriverProtocol
from webtest.domain.config import BrowserName, Config
from webtest.domain.errors import ElementNotFoundError, LaunchError
from webtest.infrastructure.config_loader import load
from webtest.session.failure_screenshot import save_failure_screenshot
from webtest.session.session_manager import SessionManager, TestSession


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption("--run-e2e", action="store_true", default=False,
                     help="Run scenario tests against public websites")
    parser.addoption("--headed", action="store_true", default=False, help="Show the browser window")
    parser.addoption("--browser-name", action="store", default=None,
                     choices=[name.value for name in BrowserName], help="Browser engine to launch")


def pytest_configure(config):
    config.addinivalue_line("markers", "e2e: scenario test against a public website (needs --run-e2e)")
    config.addinivalue_line("markers", "browser: test that launches a real browser")


def _e2e_enabled(config) -> bool:
    return config.getoption("--run-e2e") or os.getenv("RUN_E2E") == "1"


def pytest_collection_modifyitems(config, items):
    if _e2e_enabled(config):
        return
    skip_e2e = pytest.mark.skip(reason="scenario test; pass --run-e2e to run it")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


@pytest.fixture(scope="session")
def config(pytestconfig) -> Config:
    loaded = load()
    configure_logging(loaded.log_level)

    browser_config = loaded.browser_config
    if pytestconfig.getoption("--headed"):
        browser_config = replace(browser_config, headless=False)
    browser_name = pytestconfig.getoption("--browser-name")
    if browser_name:
        browser_config = replace(browser_config, browser=BrowserName(browser_name))
    return replace(loaded, browser_config=browser_config)


@pytest.fixture(scope="session")
def session_manager(pytestconfig, config: Config) -> Iterator[SessionManager]:
    """One browser for the whole run."""
    manager = SessionManager(config)
    try:
        manager.start_run()
    except LaunchError as e:
        if _e2e_enabled(pytestconfig):
            pytest.exit(e.message, returncode=pytest.ExitCode.INTERNAL_ERROR)
        pytest.skip(f"No browser available: {e.message}")
    yield manager
    manager.end_run()


@pytest.fixture
def test_session(request, session_manager: SessionManager, config: Config) -> Iterator[TestSession]:
    """A fresh context and page, closed after the test whatever its outcome."""
    with session_manager.test_session() as session:
        yield session

        save_failure_screenshot(session.driver, request.node, config.artifacts_config)


@pytest.fixture
def driver(test_session: TestSession):
    return test_session.driver


@pytest.fixture
def page(test_session: TestSession):
    return test_session.page


@pytest.fixture
def context(test_session: TestSession):
    return test_session.context


class _FakeDriver(DriverProtocol):
    """Records what page objects ask of the driver."""

    def __init__(self, *, visible: set[str] | None = None, texts: dict[str, str] | None = None) -> None:
        self.visible = visible or set()
        self.texts = texts or {}

        # recording
        self.calls: list[tuple] = []
        self.clicked: list[str] = []
        self.filled: dict[str, str] = {}
        self.selected: dict[str, str] = {}
        self.checked: set[str] = set()

    def go_to(self, url: str) -> None:
        self.calls.append(("go_to", url))

    def click(self, selector: str) -> None:
        self.calls.append(("click", selector))
        self.clicked.append(selector)

    def fill_input(self, selector: str, text: str) -> None:
        self.calls.append(("fill_input", selector, text))
        self.filled[selector] = text

    def press_enter(self) -> None:
        self.calls.append(("press_enter",))

    def is_visible(self, selector: str) -> bool:
        return selector in self.visible

    def wait_for_element(self, selector: str, timeout: float | None = None) -> None:
        self.calls.append(("wait_for_element", selector))

    def select_option_by_text(self, selector: str, visible_text: str) -> None:
        self.selected[selector] = visible_text

    def select_option_by_value(self, selector: str, value: str) -> None:
        self.selected[selector] = value

    def check_if_not_checked(self, selector: str) -> bool:
        if selector in self.checked:
            return False
        self.checked.add(selector)
        return True

    def get_text(self, selector: str) -> str:
        if selector not in self.texts:
            raise ElementNotFoundError(selector)
        return self.texts[selector]


@pytest.fixture
def fake_driver_factory():
    """Return a factory that constructs a configured FakeDriver.

    Usage:
        driver = fake_driver_factory(visible={GooglePage.accept_all})
    """

    def _factory(**kwargs):
        return _FakeDriver(**kwargs)

    return _factory
