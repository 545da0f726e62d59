"""
Authentication Module for Skool

Two interchangeable ways of getting an authenticated browser session:

- CredentialLogin fills in Skool's login form with an email and password
- CookieInjection installs cookies exported from a logged-in browser

Both expose authenticate(browser) and return an AuthOutcome. Cookie injection
has no way of checking the session itself; a bad cookie file only shows up
as a redirect to the public page once the classroom is opened.
"""
from selenium.webdriver.common.by import By

from cookie_utils import find_auth_token
from exceptions import AuthOutcome, NavigationError
from url_utils import SKOOL_BASE_URL, SKOOL_LOGIN_URL, is_login_page

import logger
log = logger

INITIAL_WAIT_TIME = 3  # seconds
LOGIN_BUTTON_WAIT_TIME = 2  # seconds
LOGIN_WAIT_TIME = 3  # seconds
LOGIN_BUTTON_TIMEOUT = 10  # seconds
FORM_FIELD_TIMEOUT = 10  # seconds

# Selectors
LOGIN_BUTTON = (By.XPATH, '//button[@type="button"]/span[text()="Log In"]')
EMAIL_INPUT = (By.XPATH, '//input[@type="email" or @name="email" or contains(@placeholder, "email")]')
PASSWORD_INPUT = (By.XPATH, '//input[@type="password" or @name="password" or contains(@placeholder, "password")]')
SUBMIT_BUTTON = (
    By.XPATH,
    '//button[@type="submit" and .//span[contains(text(), "Log") or contains(text(), "Log In") '
    'or contains(text(), "Login")]]',
)

# Text Skool shows on the login form when it rejects the credentials
LOGIN_ERROR_PHRASES = (
    "Incorrect password",
    "No account found for this email.",
)

COOKIE_REQUEST_HEADERS = {
    "Referer": SKOOL_BASE_URL,
    "Accept": "text/html,application/xhtml+xml,application/xml",
    "Accept-Language": "en-US,en;q=0.9",
    "Connection": "keep-alive",
}


def is_login_successful(current_url, page_text):
    """
    Decide whether a submitted login form was accepted.

    Args:
        current_url (str): Location after submitting the form
        page_text (str): Text content of the page body

    Returns:
        bool: True if the browser left the login page without an error message
    """
    if is_login_page(current_url):
        return False
    page_text = page_text or ""
    return not any(phrase in page_text for phrase in LOGIN_ERROR_PHRASES)


class CredentialLogin:
    """
    Logs in through Skool's login form.
    """

    def __init__(self, email, password):
        """
        Args:
            email (str): Skool account email
            password (str): Skool account password
        """
        self.email = email
        self.password = password

    def authenticate(self, browser):
        """
        Log in to Skool.

        Args:
            browser (BrowserManager): An initialized browser session

        Returns:
            AuthOutcome: SUCCESS or INVALID_CREDENTIALS

        Raises:
            NavigationError: If Skool or its login page could not be reached
            ElementNotFound: If a login form field never appeared
        """
        log.info("Attempting login with email and password")

        browser.navigate(SKOOL_BASE_URL)
        browser.pause(INITIAL_WAIT_TIME)
        log.info(f"Landed on: {browser.current_url()}")

        self._open_login_form(browser)
        log.info(f"Login page: {browser.current_url()}")

        email_field = browser.require_element(*EMAIL_INPUT, "Email input", timeout=FORM_FIELD_TIMEOUT)
        browser.type_text(email_field, self.email)

        password_field = browser.require_element(*PASSWORD_INPUT, "Password input", timeout=FORM_FIELD_TIMEOUT)
        browser.type_text(password_field, self.password)

        submit_button = browser.require_element(
            *SUBMIT_BUTTON, "Login submit button", timeout=FORM_FIELD_TIMEOUT, condition="clickable"
        )
        browser.click(submit_button)

        browser.pause(LOGIN_WAIT_TIME)
        current_url = browser.current_url()
        page_text = browser.execute_javascript("return document.body ? document.body.textContent : '';")

        if not is_login_successful(current_url, page_text):
            log.error("Login failed: invalid credentials or captcha required")
            return AuthOutcome.INVALID_CREDENTIALS

        log.info(f"Login successful! Redirected to: {current_url}")
        return AuthOutcome.SUCCESS

    def _open_login_form(self, browser):
        """Click the Log In button, or go straight to the login page if there is none."""
        login_button = browser.wait_for_element(
            *LOGIN_BUTTON, timeout=LOGIN_BUTTON_TIMEOUT, condition="clickable"
        )
        if login_button is not None:
            try:
                browser.click(login_button)
                browser.pause(LOGIN_BUTTON_WAIT_TIME)
                return
            except NavigationError as e:
                log.debug(f"Clicking the login button failed: {e}")

        log.warning("Couldn't find login button, trying direct navigation to login page...")
        try:
            browser.navigate(SKOOL_LOGIN_URL)
        except NavigationError as e:
            raise NavigationError(f"Couldn't access login page: {e}") from e
        browser.pause(INITIAL_WAIT_TIME)


class CookieInjection:
    """
    Authenticates by installing exported browser cookies.
    """

    def __init__(self, cookies):
        """
        Args:
            cookies (list): Cookie record dicts from cookie_utils
        """
        self.cookies = cookies

    def authenticate(self, browser):
        """
        Install the cookies and open Skool so the session is established.

        Args:
            browser (BrowserManager): An initialized browser session

        Returns:
            AuthOutcome: Always SUCCESS; rejection is detected on the target page

        Raises:
            NavigationError: If the cookies could not be installed or Skool
                could not be reached
        """
        log.info("Setting cookies...")
        self._log_auth_token()

        browser.execute_cdp("Network.enable")
        try:
            browser.execute_cdp("Network.setCookies", {"cookies": self.cookies})
        except NavigationError as e:
            raise NavigationError(f"Error setting cookies: {e}") from e
        log.debug(f"Installed {len(self.cookies)} cookies")

        browser.execute_cdp("Network.setExtraHTTPHeaders", {"headers": COOKIE_REQUEST_HEADERS})

        try:
            browser.navigate(SKOOL_BASE_URL)
        except NavigationError as e:
            raise NavigationError(f"Failed to navigate to main site: {e}") from e
        browser.pause(INITIAL_WAIT_TIME)
        log.info(f"Initial navigation landed on: {browser.current_url()}")

        return AuthOutcome.SUCCESS

    def _log_auth_token(self):
        token = find_auth_token(self.cookies)
        if token is None:
            log.warning("No Skool auth_token cookie found; the classroom may not be accessible")
            return
        truncated = token[:20] + "..." if len(token) > 20 else token
        log.info(f"Auth token found: {truncated}")
