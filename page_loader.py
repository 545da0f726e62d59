"""
Page loading for Skool classroom pages.

Opens the classroom in an authenticated browser session, scrolls through it
so lazily loaded lessons render, and captures the resulting markup.

Readiness is approximated with fixed pauses rather than DOM events, so a
slow page can still be captured before every embed has rendered. Raise the
wait time when videos go missing.
"""
from exceptions import AuthenticationError, AuthOutcome
from url_utils import is_public_page

import logger
log = logger

SCROLL_PAUSE_TIME = 1  # seconds
SETTLE_WAIT_TIME = 2  # seconds

# Fractions of the page height scrolled to, in order
SCROLL_STAGES = (1 / 3, 2 / 3, 1)

SCROLL_SCRIPT = "window.scrollTo(0, document.body.scrollHeight * arguments[0]);"


def scroll_page(browser):
    """
    Scroll down the page in stages to trigger lazy-loaded content.

    Args:
        browser (BrowserManager): The browser session
    """
    for index, fraction in enumerate(SCROLL_STAGES):
        if index:
            browser.pause(SCROLL_PAUSE_TIME)
        browser.execute_javascript(SCROLL_SCRIPT, fraction)


def load_target(browser, target_url, wait_seconds):
    """
    Open a classroom page and capture its rendered markup.

    Args:
        browser (BrowserManager): An authenticated browser session
        target_url (str): The classroom URL
        wait_seconds (int): Time to let the page load before inspecting it

    Returns:
        str: The page markup

    Raises:
        AuthenticationError: If Skool redirected to the public about page
        NavigationError: If the page could not be loaded or read
    """
    log.info(f"Navigating to classroom: {target_url}")
    browser.navigate(target_url)
    browser.pause(wait_seconds)

    current_url = browser.current_url()
    log.info(f"Landed on: {current_url}")

    if is_public_page(current_url):
        raise AuthenticationError(AuthOutcome.REDIRECT_TO_PUBLIC_PAGE)

    scroll_page(browser)
    browser.pause(SETTLE_WAIT_TIME)

    html = browser.page_source() or ""
    log.debug(f"Captured {len(html)} characters of markup")
    return html
