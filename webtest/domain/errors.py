"""Errors raised by the session manager and the action helpers."""


class WebTestError(Exception):
    """Base class for every error raised by the harness."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class LaunchError(WebTestError):
    """The browser (or the automation engine) could not be started. Fatal to the run."""


class SessionStateError(WebTestError):
    """A lifecycle operation was called out of order."""


class NavigationError(WebTestError):
    """The page could not be reached."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        super().__init__(f"Cannot navigate to {url!r}: {reason}")


class ElementNotFoundError(WebTestError):
    """A single-element operation was attempted on a locator with zero matches."""

    def __init__(self, locator: str) -> None:
        self.locator = locator
        super().__init__(f"No element matches locator {locator!r}")


class OptionNotFoundError(WebTestError):
    """A <select> has no option with the requested label or value."""

    def __init__(self, locator: str, option: str) -> None:
        self.locator = locator
        self.option = option
        super().__init__(f"Select {locator!r} has no option {option!r}")


class WaitTimeoutError(WebTestError, TimeoutError):
    """A wait condition did not hold within the allotted time."""

    def __init__(self, locator: str, reason: str) -> None:
        self.locator = locator
        super().__init__(f"Timed out on {locator!r}: {reason}")


class UploadFileNotFoundError(WebTestError, FileNotFoundError):
    """A file handed to an upload helper does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Upload file not found: {path}")
