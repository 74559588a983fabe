from __future__ import annotations

from typing import Protocol


class DriverProtocol(Protocol):
    """Driver surface used by the page objects.

    Kept small so page flows can be exercised with a fake driver and do not
    depend on Playwright. The Playwright-backed implementation lives in
    `webtest/driver_adapter/driver.py`.
    """

    def go_to(self, url: str) -> None:
        """Navigate to an absolute URL."""

    def click(self, selector: str) -> None:
        """Click the element matching `selector`; raise ElementNotFoundError on zero matches."""

    def fill_input(self, selector: str, text: str) -> None:
        """Replace the value of the input matching `selector`."""

    def press_enter(self) -> None:
        """Press Enter on the focused element."""

    def is_visible(self, selector: str) -> bool:
        """Return True if the first element matching `selector` is visible."""

    def wait_for_element(self, selector: str, timeout: float | None = None) -> None:
        """Block until `selector` is visible; raise WaitTimeoutError on expiry."""

    def select_option_by_text(self, selector: str, visible_text: str) -> None:
        """Select the option whose label is `visible_text`."""

    def select_option_by_value(self, selector: str, value: str) -> None:
        """Select the option whose value attribute is `value`."""

    def check_if_not_checked(self, selector: str) -> bool:
        """Check the box unless it already is; return True if it changed."""

    def get_text(self, selector: str) -> str:
        """Return the inner text of the element matching `selector`."""
