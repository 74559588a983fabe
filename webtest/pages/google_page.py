import logging

from webtest.core.protocols.driver_protocol import DriverProtocol

logger = logging.getLogger(__name__)


class GooglePage:
    accept_all = "button:has-text('Accept all'), #L2AGLb"
    search_input = "textarea[name='q'], input[name='q']"
    results = "#search"

    @staticmethod
    def result_heading(term: str) -> str:
        return f"#search h3:has-text('{term}')"

    @classmethod
    def dismiss_cookie_consent(cls, driver: DriverProtocol) -> bool:
        """Click 'Accept all' if the consent overlay is showing. Returns True if it was."""
        if not driver.is_visible(cls.accept_all):
            return False
        logger.info("Dismissing cookie consent overlay")
        driver.click(cls.accept_all)
        return True

    @classmethod
    def search(cls, driver: DriverProtocol, term: str) -> None:
        driver.fill_input(cls.search_input, term)
        driver.press_enter()
