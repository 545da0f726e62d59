"""
Pytest configuration and fixtures for skool-loom-dl tests.
"""
import json
import pytest
from unittest.mock import MagicMock

import logger
from browser_manager import BrowserManager


@pytest.fixture(autouse=True)
def reset_logger():
    """Give every test a fresh console-only logger."""
    yield
    logger.reset_logger()


@pytest.fixture
def mock_driver():
    """Create a mock Selenium WebDriver."""
    driver = MagicMock()
    driver.get.return_value = None
    driver.current_url = "https://www.skool.com/"
    driver.execute_script.return_value = None
    driver.execute_cdp_cmd.return_value = {}
    driver.find_element.return_value = MagicMock()
    driver.find_elements.return_value = []
    return driver


@pytest.fixture
def mock_browser():
    """Create a mock BrowserManager for testing the steps that drive it."""
    browser = MagicMock(spec=BrowserManager)
    browser.current_url.return_value = "https://www.skool.com/"
    browser.wait_for_element.return_value = MagicMock()
    browser.require_element.return_value = MagicMock()
    browser.execute_javascript.return_value = ""
    browser.execute_cdp.return_value = {}
    browser.page_source.return_value = "<html></html>"
    return browser


@pytest.fixture
def sample_json_cookies():
    """Sample JSON cookie export."""
    return json.dumps([
        {
            "host": ".skool.com",
            "name": "auth_token",
            "value": "eyJhbGciOiJIUzI1NiJ9.session.signature",
            "path": "/",
            "expiry": 1735689600,
            "isSecure": 1,
            "isHttpOnly": 1,
            "sameSite": 1
        },
        {
            "host": "www.skool.com",
            "name": "client_id",
            "value": "abc",
            "path": "/",
            "expiry": 0,
            "isSecure": 0,
            "isHttpOnly": 0,
            "sameSite": 0
        }
    ])


@pytest.fixture
def sample_netscape_cookies():
    """Sample Netscape cookies.txt content."""
    return (
        "# Netscape HTTP Cookie File\n"
        "# https://curl.se/docs/http-cookies.html\n"
        "\n"
        ".skool.com\tTRUE\t/\tTRUE\t1735689600\tauth_token\tabcdef\n"
        "www.skool.com\tFALSE\t/classroom\tFALSE\t0\tclient_id\txyz\n"
    )


@pytest.fixture
def sample_classroom_html():
    """Sample classroom markup with Loom links in both shapes."""
    return """
    <html>
    <body>
      <div class="lesson">
        <a href="https://www.loom.com/share/abc123">Lesson 1</a>
        <iframe src="https://www.loom.com/embed/def456?hideEmbedTopBar=true"></iframe>
        <a href="https://www.loom.com/share/abc123">Lesson 1 again</a>
        <iframe src="https://www.loom.com/embed/abc123"></iframe>
      </div>
    </body>
    </html>
    """
