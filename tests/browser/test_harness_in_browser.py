"""Harness behaviour against a real browser, on pages served from tests/browser/site."""
import logging

import pytest

from webtest.domain.errors import (
    ElementNotFoundError,
    NavigationError,
    OptionNotFoundError,
    WaitTimeoutError,
)
from tests.browser.html_utils import HtmlUtils, UNREACHABLE_URL

pytestmark = pytest.mark.browser


@pytest.fixture
def site(test_session) -> str:
    return HtmlUtils.serve(test_session.context)


def test_cookies_and_storage_do_not_leak_between_tests(session_manager) -> None:
    with session_manager.test_session() as first:
        base = HtmlUtils.serve(first.context)
        first.driver.go_to(f"{base}/")
        first.page.evaluate("() => { document.cookie = 'visited=yes'; localStorage.setItem('cart', '3'); }")
        assert first.page.evaluate("() => document.cookie") == "visited=yes"

    with session_manager.test_session() as second:
        HtmlUtils.serve(second.context)
        second.driver.go_to(f"{base}/")
        assert second.page.evaluate("() => document.cookie") == ""
        assert second.page.evaluate("() => localStorage.getItem('cart')") is None
        assert second.context.cookies() == []


def test_page_and_context_are_released_when_test_body_raises(session_manager) -> None:
    with pytest.raises(ElementNotFoundError):
        with session_manager.test_session() as failing:
            base = HtmlUtils.serve(failing.context)
            failing.driver.go_to(f"{base}/")
            failing.driver.click("#does-not-exist")

    assert failing.closed
    assert failing.page.is_closed()
    assert session_manager.active_session is None

    with session_manager.test_session() as clean:
        HtmlUtils.serve(clean.context)
        clean.driver.go_to(f"{base}/")
        assert clean.driver.get_text("#heading") == "Welcome to webtest"


def test_zero_matches(driver, site) -> None:
    driver.go_to(f"{site}/forms")

    assert driver.is_visible("#missing") is False
    assert driver.is_element_present("#missing") is False
    assert driver.is_checked("#missing") is False
    with pytest.raises(ElementNotFoundError):
        driver.click("#missing")
    with pytest.raises(ElementNotFoundError):
        driver.fill_input("#missing", "text")
    with pytest.raises(ElementNotFoundError):
        driver.get_text("#missing")


def test_queries(driver, site) -> None:
    driver.go_to(f"{site}/")

    assert driver.title() == "webtest home"
    assert driver.is_visible("#heading")
    assert not driver.is_visible("#hidden")
    assert driver.is_element_present("#hidden")
    assert driver.is_text_present("Welcome to webtest")
    assert driver.get_attribute("#link", "href") == "https://example.com/docs"
    assert driver.get_attribute("#link", "data-kind") == ""
    assert driver.get_attribute("#link", "rel") == ""


def test_conditional_checkbox_helpers_mutate_once(driver, site) -> None:
    driver.go_to(f"{site}/forms")

    assert driver.check_if_not_checked("#newsletter") is True
    assert driver.check_if_not_checked("#newsletter") is False
    assert driver.is_checked("#newsletter")
    assert driver.page.evaluate("() => window.changes") == 1

    assert driver.uncheck_if_checked("#optin") is True
    assert driver.uncheck_if_checked("#optin") is False
    assert not driver.is_checked("#optin")
    assert driver.page.evaluate("() => window.changes") == 2


def test_fill_and_select(driver, site) -> None:
    driver.go_to(f"{site}/forms")

    driver.clear_and_fill_input("#name", "Ola Nordmann")
    driver.select_option_by_text("#country", "Canada")
    assert driver.page.locator("#name").input_value() == "Ola Nordmann"
    assert driver.page.locator("#country").input_value() == "CA"

    driver.select_option_by_value("#country", "IN")
    assert driver.page.locator("#country").input_value() == "IN"

    with pytest.raises(OptionNotFoundError):
        driver.select_option_by_text("#country", "Atlantis")
    with pytest.raises(OptionNotFoundError):
        driver.select_option_by_value("#country", "XX")


def test_wait_for_element_to_be_clickable(driver, site) -> None:
    driver.go_to(f"{site}/forms")

    driver.wait_for_element_to_be_clickable("#late", timeout=5000)
    assert driver.is_enabled("#late")

    with pytest.raises(WaitTimeoutError):
        driver.wait_for_element_to_be_clickable("#never", timeout=300)


def test_wait_for_element_times_out(driver, site) -> None:
    driver.go_to(f"{site}/")

    driver.wait_for_element("#heading", timeout=2000)
    with pytest.raises(WaitTimeoutError):
        driver.wait_for_element("#hidden", timeout=200)


@pytest.mark.parametrize("helper,expected", [("auto_accept_dialogs", True), ("auto_dismiss_dialogs", False)])
def test_dialog_handlers(driver, site, helper, expected) -> None:
    driver.go_to(f"{site}/forms")
    getattr(driver, helper)()

    driver.click("#confirm")

    assert driver.page.evaluate("() => window.answer") is expected


def test_console_messages_are_logged(driver, site, caplog) -> None:
    caplog.set_level(logging.INFO, logger="webtest.driver_adapter.driver")
    driver.log_console_messages()

    driver.go_to(f"{site}/")
    driver.wait_for_page_load()

    assert "Console log: home loaded" in caplog.text


def test_upload_multiple_files(driver, site, tmp_path) -> None:
    first = tmp_path / "a.txt"
    second = tmp_path / "b.txt"
    first.write_text("a")
    second.write_text("b")
    driver.go_to(f"{site}/forms")

    driver.upload_multiple_files("#files", first, second)

    assert driver.page.evaluate("() => Array.from(document.getElementById('files').files, f => f.name)") == [
        "a.txt", "b.txt",
    ]


def test_switch_to_new_tab(driver, site) -> None:
    driver.go_to(f"{site}/")

    tab = driver.switch_to_new_tab(lambda: driver.click("#open-tab"))

    assert tab.current_url().endswith("/other")
    assert tab.get_text("#heading") == "Second tab"
    assert driver.get_text("#heading") == "Welcome to webtest"


def test_screenshot_is_written(driver, site, tmp_path) -> None:
    driver.go_to(f"{site}/")

    path = driver.take_screenshot(tmp_path / "home.png")

    assert path.is_file()
    assert path.stat().st_size > 0


def test_unreachable_page_is_a_navigation_error(driver, site) -> None:
    with pytest.raises(NavigationError) as excinfo:
        driver.go_to(UNREACHABLE_URL)

    assert excinfo.value.url == UNREACHABLE_URL
