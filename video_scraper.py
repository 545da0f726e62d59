"""
Scrape orchestration for skool-loom-dl.

Runs one scrape: picks the authentication method, opens the browser,
authenticates, captures the classroom page and extracts the Loom links.
The browser is closed on every exit path.
"""
from authenticator import CookieInjection, CredentialLogin
from browser_manager import BrowserManager
from cookie_utils import load_cookies_file
from exceptions import AuthenticationError, AuthOutcome
from page_loader import load_target
from url_utils import extract_loom_urls

import logger
log = logger

DEFAULT_WAIT_TIME = 2  # seconds
MARKUP_EXCERPT_LENGTH = 500


def build_authenticator(email=None, password=None, cookies_file=None):
    """
    Choose the authentication method for a scrape.

    Email and password take precedence over a cookie file.

    Returns:
        CredentialLogin or CookieInjection

    Raises:
        ValueError: If neither credentials nor a cookie file were given
        CookieParseError: If the cookie file cannot be read or parsed
    """
    if email and password:
        return CredentialLogin(email, password)
    if cookies_file:
        return CookieInjection(load_cookies_file(cookies_file))
    raise ValueError("You must provide either cookies file or email+password for authentication")


def scrape_videos(skool_url, cookies_file=None, email=None, password=None,
                  wait_time=DEFAULT_WAIT_TIME, headless=True):
    """
    Collect the Loom video URLs embedded in a Skool classroom page.

    Args:
        skool_url (str): The classroom URL
        cookies_file (str, optional): JSON or Netscape cookie file
        email (str, optional): Skool account email
        password (str, optional): Skool account password
        wait_time (int): Seconds to let the classroom page load
        headless (bool): Whether to run the browser without a window

    Returns:
        list: Unique Loom share URLs, possibly empty

    Raises:
        AuthenticationError: If login failed or the classroom is not accessible
        NavigationError: If a page could not be loaded or the session timed out
        ElementNotFound: If the login form could not be filled in
        CookieParseError: If the cookie file is unusable
    """
    authenticator = build_authenticator(email=email, password=password, cookies_file=cookies_file)

    with BrowserManager(headless=headless) as browser:
        outcome = authenticator.authenticate(browser)
        if outcome is not AuthOutcome.SUCCESS:
            raise AuthenticationError(outcome)

        html = load_target(browser, skool_url, wait_time)

    urls = extract_loom_urls(html)
    if not urls:
        excerpt = html[:MARKUP_EXCERPT_LENGTH]
        log.warning(f"No videos found on the page. Markup excerpt: {excerpt!r}")
    else:
        log.debug(f"Extracted {len(urls)} Loom URLs")

    return urls
