import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, List, Optional
from urllib.parse import urlparse

from playwright.sync_api import (
    BrowserContext,
    ConsoleMessage,
    Dialog,
    Error as PlaywrightError,
    Locator,
    Page,
    TimeoutError as PlaywrightTimeoutError,
)

from webtest.domain.config import WaitConfig
from webtest.domain.errors import (
    ElementNotFoundError,
    NavigationError,
    OptionNotFoundError,
    UploadFileNotFoundError,
    WaitTimeoutError,
)

logger = logging.getLogger(__name__)

_IS_ENABLED_JS = "element => !element.matches(':disabled') && element.getAttribute('aria-disabled') !== 'true'"
_HAS_OPTION_JS = """(element, [attribute, expected]) =>
    Array.from(element.options || []).some(option => option[attribute] === expected)"""


@dataclass
class Subscription:
    """An event handler attached to a page; cancelling detaches it."""
    page: Page
    event: str
    handler: Callable[..., Any]
    active: bool = True

    def cancel(self) -> None:
        if not self.active:
            return
        self.active = False
        self.page.remove_listener(self.event, self.handler)


class Driver:
    """Intention-revealing helpers over a single Playwright page.

    Every helper re-resolves its locator against the live DOM. Helpers that act
    on one element raise ElementNotFoundError when nothing matches at call time;
    predicates return False instead.
    """

    def __init__(self, page: Page, context: BrowserContext, wait_config: WaitConfig,
                 screenshot_dir: Path = Path(".")):
        self.page = page
        self.context = context
        self.wait_config = wait_config
        self.screenshot_dir = screenshot_dir
        self.subscriptions: List[Subscription] = []

    # --- Resolution helpers ---
    def _resolve(self, selector: str) -> Locator:
        locator = self.page.locator(selector)
        if locator.count() == 0:
            raise ElementNotFoundError(selector)
        return locator

    def _act(self, selector: str, action: Callable[[Locator], Any]) -> Any:
        locator = self._resolve(selector)
        return self._run(selector, lambda: action(locator))

    @staticmethod
    def _run(selector: str, action: Callable[[], Any]) -> Any:
        try:
            return action()
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(selector, e.message) from e

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.wait_config.default_timeout_ms if timeout is None else timeout

    # --- Navigation ---
    def go_to(self, url: str) -> None:
        parsed = urlparse(url)
        if not (parsed.scheme and parsed.netloc):
            raise NavigationError(url, "not an absolute URL")

        logger.debug(f"Navigating to: {url}")
        try:
            self.page.goto(url, timeout=self.wait_config.navigation_timeout_ms)
        except PlaywrightError as e:
            raise NavigationError(url, e.message) from e

    def current_url(self) -> str:
        return self.page.url

    def title(self) -> str:
        return self.page.title()

    def wait_for_page_load(self, state: str = "load") -> None:
        try:
            self.page.wait_for_load_state(state, timeout=self.wait_config.navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(self.page.url, e.message) from e

    def wait_for_url(self, url: str, timeout: Optional[float] = None) -> None:
        """Wait until the page URL matches `url` (a string or glob pattern)."""
        try:
            self.page.wait_for_url(url, timeout=self._timeout(timeout))
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(url, e.message) from e

    # --- Actions ---
    def click(self, selector: str) -> None:
        logger.debug(f"Clicking: {selector}")
        self._act(selector, lambda locator: locator.click())

    def double_click(self, selector: str) -> None:
        self._act(selector, lambda locator: locator.dblclick())

    def js_click(self, selector: str) -> None:
        """Click through element.click() in the page, bypassing actionability checks."""
        logger.debug(f"JS-clicking: {selector}")
        self._act(selector, lambda locator: locator.evaluate("element => element.click()"))

    def click_multiple(self, *selectors: str) -> None:
        for selector in selectors:
            self.click(selector)

    def hover(self, selector: str) -> None:
        self._act(selector, lambda locator: locator.hover())

    def scroll_to_element(self, selector: str) -> None:
        self._act(selector, lambda locator: locator.scroll_into_view_if_needed())

    def fill_input(self, selector: str, text: str) -> None:
        logger.debug(f"Filling {selector}")
        self._act(selector, lambda locator: locator.fill(text))

    def clear_and_fill_input(self, selector: str, text: str) -> None:
        def clear_and_fill(locator: Locator) -> None:
            locator.clear()
            locator.fill(text)

        self._act(selector, clear_and_fill)

    def type_text(self, selector: str, text: str, delay: float = 0) -> None:
        """Type key by key, for inputs that react to individual keystrokes."""
        self._act(selector, lambda locator: locator.press_sequentially(text, delay=delay))

    def press_enter(self) -> None:
        self.press_key("Enter")

    def press_key(self, key: str) -> None:
        self.page.keyboard.press(key)

    def wait_for(self, ms: float) -> None:
        self.page.wait_for_timeout(ms)

    # --- Queries ---
    def is_visible(self, selector: str) -> bool:
        return self.page.locator(selector).first.is_visible()

    def is_element_present(self, selector: str) -> bool:
        return self.count(selector) > 0

    def count(self, selector: str) -> int:
        return self.page.locator(selector).count()

    def is_checked(self, selector: str) -> bool:
        locator = self.page.locator(selector)
        if locator.count() == 0:
            return False
        return locator.first.is_checked()

    def is_enabled(self, selector: str) -> bool:
        locator = self.page.locator(selector)
        if locator.count() == 0:
            return False
        return locator.first.is_enabled()

    def is_text_present(self, text: str) -> bool:
        return text in self.page.locator("body").inner_text()

    def get_text(self, selector: str) -> str:
        return self._act(selector, lambda locator: locator.inner_text()) or ""

    def get_attribute(self, selector: str, attribute: str) -> str:
        return self._act(selector, lambda locator: locator.get_attribute(attribute)) or ""

    # --- Waits ---
    def wait_for_element(self, selector: str, timeout: Optional[float] = None) -> None:
        try:
            self.page.wait_for_selector(selector, state="visible", timeout=self._timeout(timeout))
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(selector, e.message) from e

    def wait_for_element_to_disappear(self, selector: str, timeout: Optional[float] = None) -> None:
        try:
            self.page.wait_for_selector(selector, state="hidden", timeout=self._timeout(timeout))
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(selector, e.message) from e

    def wait_for_element_to_be_clickable(self, selector: str, timeout: Optional[float] = None) -> None:
        """Block until the element is visible and enabled.

        All stages share the one `timeout` budget. Enabled state is polled in
        the page every `poll_interval_ms`.
        """
        timeout = self.wait_config.clickable_timeout_ms if timeout is None else timeout
        deadline = time.monotonic() + timeout / 1000

        def time_left() -> float:
            # Playwright reads a timeout of 0 as "wait forever"
            return max((deadline - time.monotonic()) * 1000, 1)

        locator = self.page.locator(selector).first
        try:
            locator.wait_for(state="visible", timeout=time_left())
            handle = locator.element_handle(timeout=time_left())
            self.page.wait_for_function(
                _IS_ENABLED_JS,
                arg=handle,
                polling=self.wait_config.poll_interval_ms,
                timeout=time_left(),
            )
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(selector, e.message) from e

    # --- Forms ---
    def _select_option(self, selector: str, attribute: str, option: str, **kwargs: str) -> None:
        locator = self._resolve(selector).first
        if not locator.evaluate(_HAS_OPTION_JS, [attribute, option]):
            raise OptionNotFoundError(selector, option)
        try:
            locator.select_option(**kwargs)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError(selector, e.message) from e

    def select_option_by_text(self, selector: str, visible_text: str) -> None:
        self._select_option(selector, "label", visible_text, label=visible_text)

    def select_option_by_value(self, selector: str, value: str) -> None:
        self._select_option(selector, "value", value, value=value)

    def check(self, selector: str) -> None:
        self._act(selector, lambda locator: locator.check())

    def uncheck(self, selector: str) -> None:
        self._act(selector, lambda locator: locator.uncheck())

    def check_if_not_checked(self, selector: str) -> bool:
        """Check the box unless it already is. Returns True if the DOM was changed."""
        locator = self._resolve(selector)
        if locator.is_checked():
            return False
        self._run(selector, locator.check)
        return True

    def uncheck_if_checked(self, selector: str) -> bool:
        """Uncheck the box if it is checked. Returns True if the DOM was changed."""
        locator = self._resolve(selector)
        if not locator.is_checked():
            return False
        self._run(selector, locator.uncheck)
        return True

    def upload_file(self, selector: str, file_path: str | Path) -> None:
        self.upload_multiple_files(selector, file_path)

    def upload_multiple_files(self, selector: str, *file_paths: str | Path) -> None:
        paths = [Path(p) for p in file_paths]
        for path in paths:
            if not path.is_file():
                raise UploadFileNotFoundError(str(path))
        self._act(selector, lambda locator: locator.set_input_files(paths))

    # --- Artifacts ---
    def take_screenshot(self, file_name: str | Path, full_page: bool = False) -> Path:
        path = Path(file_name)
        if not path.is_absolute():
            path = self.screenshot_dir / path
        path.parent.mkdir(parents=True, exist_ok=True)
        self.page.screenshot(path=path, full_page=full_page)
        logger.info(f"Screenshot saved: {path}")
        return path

    # --- Listeners ---
    def _subscribe(self, event: str, handler: Callable[..., Any]) -> Subscription:
        self.page.on(event, handler)
        subscription = Subscription(page=self.page, event=event, handler=handler)
        self.subscriptions.append(subscription)
        return subscription

    def log_console_messages(self) -> Subscription:
        def on_console(message: ConsoleMessage) -> None:
            logger.info(f"Console {message.type}: {message.text}")

        return self._subscribe("console", on_console)

    def auto_accept_dialogs(self) -> Subscription:
        def on_dialog(dialog: Dialog) -> None:
            logger.info(f"Accepting {dialog.type} dialog: {dialog.message}")
            dialog.accept()

        return self._subscribe("dialog", on_dialog)

    def auto_dismiss_dialogs(self) -> Subscription:
        def on_dialog(dialog: Dialog) -> None:
            logger.info(f"Dismissing {dialog.type} dialog: {dialog.message}")
            dialog.dismiss()

        return self._subscribe("dialog", on_dialog)

    def remove_listeners(self) -> None:
        """Cancel every subscription made through this driver."""
        while self.subscriptions:
            self.subscriptions.pop().cancel()

    # --- Tabs ---
    def switch_to_new_tab(self, action_that_opens_tab: Callable[[], Any],
                          timeout: Optional[float] = None) -> "Driver":
        """Run the action and return a Driver bound to the tab it opened.

        The tab driver shares this driver's subscriptions, so remove_listeners()
        on either one also detaches handlers registered on the tab.
        """
        try:
            with self.context.expect_page(timeout=self._timeout(timeout)) as page_info:
                action_that_opens_tab()
            new_page = page_info.value
            new_page.wait_for_load_state(timeout=self.wait_config.navigation_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise WaitTimeoutError("new tab", e.message) from e
        tab = Driver(new_page, self.context, self.wait_config, self.screenshot_dir)
        tab.subscriptions = self.subscriptions
        return tab
