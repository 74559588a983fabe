import logging
import uuid
from dataclasses import dataclass
from datetime import date

from webtest.core.protocols.driver_protocol import DriverProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountDetails:
    """Everything the signup and 'Enter Account Information' forms ask for."""
    name: str
    email: str
    password: str
    title: str = "Mr"
    birth_date: date = date(1990, 5, 17)
    first_name: str = "Ola"
    last_name: str = "Nordmann"
    company: str = "NTNU"
    address: str = "Hogskoleringen 1"
    address2: str = "Gloshaugen"
    country: str = "Canada"
    state: str = "Ontario"
    city: str = "Toronto"
    zipcode: str = "M5H 2N2"
    mobile_number: str = "+1 416 555 0100"

    @classmethod
    def generate(cls, name: str = "webtest") -> "AccountDetails":
        """Fresh credentials so repeated runs never collide on the e-mail address."""
        token = uuid.uuid4().hex[:12]
        return cls(name=name, email=f"{name}.{token}@example.com", password=f"Pw-{token}")


class AutomationExercisePage:
    consent_button = "button.fc-cta-consent"
    home_slider = "#slider"
    signup_login_link = "a[href='/login']"
    new_user_signup = "div.signup-form h2:has-text('New User Signup!')"
    signup_name = "input[data-qa='signup-name']"
    signup_email = "input[data-qa='signup-email']"
    signup_button = "button[data-qa='signup-button']"

    account_information = "h2:has-text('Enter Account Information')"
    title_mr = "#id_gender1"
    title_mrs = "#id_gender2"
    password = "input[data-qa='password']"
    birth_day = "select[data-qa='days']"
    birth_month = "select[data-qa='months']"
    birth_year = "select[data-qa='years']"
    newsletter = "#newsletter"
    special_offers = "#optin"
    first_name = "input[data-qa='first_name']"
    last_name = "input[data-qa='last_name']"
    company = "input[data-qa='company']"
    address = "input[data-qa='address']"
    address2 = "input[data-qa='address2']"
    country = "select[data-qa='country']"
    state = "input[data-qa='state']"
    city = "input[data-qa='city']"
    zipcode = "input[data-qa='zipcode']"
    mobile_number = "input[data-qa='mobile_number']"
    create_account_button = "button[data-qa='create-account']"

    account_created = "h2[data-qa='account-created']"
    account_deleted = "h2[data-qa='account-deleted']"
    continue_button = "a[data-qa='continue-button']"
    logged_in_as = "a:has-text('Logged in as')"
    delete_account_link = "a[href='/delete_account']"

    @classmethod
    def dismiss_consent(cls, driver: DriverProtocol) -> bool:
        if not driver.is_visible(cls.consent_button):
            return False
        driver.click(cls.consent_button)
        return True

    @classmethod
    def submit_signup(cls, driver: DriverProtocol, account: AccountDetails) -> None:
        driver.fill_input(cls.signup_name, account.name)
        driver.fill_input(cls.signup_email, account.email)
        driver.click(cls.signup_button)

    @classmethod
    def fill_account_information(cls, driver: DriverProtocol, account: AccountDetails) -> None:
        logger.info(f"Filling account information for {account.email}")
        driver.click(cls.title_mrs if account.title == "Mrs" else cls.title_mr)
        driver.fill_input(cls.password, account.password)
        driver.select_option_by_value(cls.birth_day, str(account.birth_date.day))
        driver.select_option_by_value(cls.birth_month, str(account.birth_date.month))
        driver.select_option_by_value(cls.birth_year, str(account.birth_date.year))
        driver.check_if_not_checked(cls.newsletter)
        driver.check_if_not_checked(cls.special_offers)

        driver.fill_input(cls.first_name, account.first_name)
        driver.fill_input(cls.last_name, account.last_name)
        driver.fill_input(cls.company, account.company)
        driver.fill_input(cls.address, account.address)
        driver.fill_input(cls.address2, account.address2)
        driver.select_option_by_text(cls.country, account.country)
        driver.fill_input(cls.state, account.state)
        driver.fill_input(cls.city, account.city)
        driver.fill_input(cls.zipcode, account.zipcode)
        driver.fill_input(cls.mobile_number, account.mobile_number)
