"""
Browser Management Module for skool-loom-dl

This module owns the single Chrome instance used for a scrape. It handles
browser initialization and configuration, and wraps the browser operations
the authentication and page loading steps need.

Every operation is bounded by the overall session deadline, which starts when
the browser is initialized. Once it has passed, operations raise
NavigationError and the caller tears the session down.
"""
import os
import platform
import time

from selenium import webdriver
from selenium.webdriver.support.ui import WebDriverWait
from selenium.webdriver.support import expected_conditions as EC
from selenium.common.exceptions import TimeoutException, WebDriverException

from exceptions import ElementNotFound, NavigationError

# Import logger
import logger
log = logger

SESSION_TIMEOUT = 180  # seconds
DEFAULT_ELEMENT_TIMEOUT = 10  # seconds
WINDOW_WIDTH = 1920
WINDOW_HEIGHT = 1080
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

# Where chromedriver usually lives when installed by a package manager
STANDARD_DRIVER_PATHS = {
    "Darwin": "/usr/local/bin/chromedriver",
    "Linux": "/usr/bin/chromedriver",
}
WINDOWS_DRIVER_PATH = "C:\\Program Files\\Google\\Chrome\\Application\\chromedriver.exe"


class BrowserManager:
    """
    Manages the browser session and provides the browser interaction methods
    used while authenticating and capturing a page.
    """

    def __init__(self, headless=True, session_timeout=SESSION_TIMEOUT):
        """
        Initialize the browser manager.

        Args:
            headless (bool): Whether to run browser in headless mode
            session_timeout (int): Overall lifetime budget of the session (seconds)
        """
        self.driver = None
        self.headless = headless
        self.session_timeout = session_timeout
        self._deadline = None

    def __enter__(self):
        try:
            self.initialize()
        except Exception:
            self.close()
            raise
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    def initialize(self):
        """
        Start Chrome with the session's fixed window size and identity.

        Returns:
            webdriver.Chrome: Initialized WebDriver

        Raises:
            NavigationError: If no Chrome driver could be started
        """
        options = self._configure_chrome_options()
        self.driver = self._initialize_chrome_driver(options)

        if not self.driver:
            raise NavigationError("Failed to initialize Chrome browser")

        self.driver.set_window_size(WINDOW_WIDTH, WINDOW_HEIGHT)
        self._deadline = time.monotonic() + self.session_timeout
        log.debug(f"Browser session started with a {self.session_timeout}s budget")

        return self.driver

    def _configure_chrome_options(self):
        """
        Configure Chrome options for automation in containers and CI.

        Returns:
            webdriver.ChromeOptions: Configured options
        """
        chrome_options = webdriver.ChromeOptions()

        chrome_options.add_argument("--disable-notifications")
        chrome_options.add_argument("--disable-popup-blocking")
        chrome_options.add_argument("--disable-infobars")
        chrome_options.add_argument("--disable-extensions")
        chrome_options.add_argument("--no-sandbox")
        chrome_options.add_argument("--disable-gpu")
        chrome_options.add_argument("--disable-dev-shm-usage")
        chrome_options.add_argument(f"--window-size={WINDOW_WIDTH},{WINDOW_HEIGHT}")

        if self.headless:
            chrome_options.add_argument("--headless=new")

        chrome_options.add_argument(f"--user-agent={USER_AGENT}")

        return chrome_options

    def _initialize_chrome_driver(self, options):
        """
        Start a Chrome driver, trying each way of locating chromedriver in turn:
        whatever Selenium finds on its own, a binary fetched by
        ChromeDriverManager, then the usual install location for the OS.

        Args:
            options (webdriver.ChromeOptions): Chrome options

        Returns:
            webdriver.Chrome: Chrome WebDriver instance or None if every attempt fails
        """
        attempts = (
            ("system Chrome", lambda: None),
            ("ChromeDriverManager", self._driver_manager_path),
            ("standard OS path", self._standard_driver_path),
        )

        for description, resolve_driver_path in attempts:
            try:
                log.debug(f"Attempting to initialize Chrome driver with {description}")
                driver_path = resolve_driver_path()
                if driver_path is None:
                    driver = webdriver.Chrome(options=options)
                else:
                    from selenium.webdriver.chrome.service import Service as ChromeService
                    service = ChromeService(executable_path=driver_path)
                    driver = webdriver.Chrome(service=service, options=options)
                log.info(f"Successfully initialized Chrome driver with {description}")
                return driver
            except Exception as e:
                log.warning(f"Failed to create Chrome driver with {description}: {e}")

        log.error("All Chrome driver initialization methods failed")
        return None

    @staticmethod
    def _driver_manager_path():
        """Download a matching chromedriver and return the executable's path."""
        from webdriver_manager.chrome import ChromeDriverManager

        driver_path = ChromeDriverManager().install()

        # Some driver archives resolve to the notices file instead of the executable
        if "THIRD_PARTY_NOTICES" in driver_path:
            driver_dir = os.path.dirname(driver_path)
            for file in sorted(os.listdir(driver_dir)):
                if file.startswith("chromedriver") and not file.endswith((".zip", ".md")):
                    return os.path.join(driver_dir, file)

        return driver_path

    @staticmethod
    def _standard_driver_path():
        return STANDARD_DRIVER_PATHS.get(platform.system(), WINDOWS_DRIVER_PATH)

    def remaining_time(self):
        """
        Seconds left in the session budget.

        Returns:
            float: Remaining seconds, never negative
        """
        if self._deadline is None:
            return float(self.session_timeout)
        return max(0.0, self._deadline - time.monotonic())

    def _timed_out_error(self):
        return NavigationError(f"Browser session timed out after {self.session_timeout} seconds")

    def _bounded(self, timeout):
        """Clamp a wait to the remaining budget, failing if nothing is left."""
        remaining = self.remaining_time()
        if remaining <= 0:
            raise self._timed_out_error()
        return min(timeout, remaining)

    def _require_driver(self):
        if self.driver is None:
            raise NavigationError("Browser session is not open")

    def navigate(self, url):
        """
        Load a URL, bounded by the remaining session time.

        Args:
            url (str): The URL to open

        Raises:
            NavigationError: If the page could not be loaded in time
        """
        self._require_driver()
        timeout = self._bounded(self.session_timeout)
        try:
            self.driver.set_page_load_timeout(timeout)
            self.driver.get(url)
        except TimeoutException as e:
            raise NavigationError(f"Timed out loading {url}") from e
        except WebDriverException as e:
            raise NavigationError(f"Failed to navigate to {url}: {e}") from e

    def pause(self, seconds):
        """
        Sleep for a fixed settle duration.

        Raises:
            NavigationError: If the session budget runs out during the pause
        """
        remaining = self.remaining_time()
        if seconds > remaining:
            time.sleep(remaining)
            raise self._timed_out_error()
        time.sleep(seconds)

    def current_url(self):
        """
        Returns:
            str: The browser's current location
        """
        self._require_driver()
        try:
            return self.driver.current_url
        except WebDriverException as e:
            raise NavigationError(f"Could not read current location: {e}") from e

    def wait_for_element(self, by, value, timeout=DEFAULT_ELEMENT_TIMEOUT, condition="presence"):
        """
        Wait for an element to be available in the DOM.

        Args:
            by (selenium.webdriver.common.by.By): The method to locate the element
            value (str): The locator value
            timeout (int): Maximum time to wait (seconds)
            condition (str): Type of wait condition: "presence", "visible", or "clickable"

        Returns:
            WebElement: The element if found, None otherwise
        """
        self._require_driver()
        timeout = self._bounded(timeout)
        try:
            wait = WebDriverWait(self.driver, timeout)

            if condition == "visible":
                return wait.until(EC.visibility_of_element_located((by, value)))
            elif condition == "clickable":
                return wait.until(EC.element_to_be_clickable((by, value)))
            else:  # default to presence
                return wait.until(EC.presence_of_element_located((by, value)))
        except TimeoutException:
            log.warning(f"Timeout waiting for element: {value} (condition: {condition})")
            return None
        except WebDriverException as e:
            log.warning(f"Error waiting for element {value}: {e}")
            return None

    def require_element(self, by, value, description, timeout=DEFAULT_ELEMENT_TIMEOUT, condition="visible"):
        """
        Wait for an element that the current step cannot do without.

        Args:
            by (selenium.webdriver.common.by.By): The method to locate the element
            value (str): The locator value
            description (str): Human readable name used in the error
            timeout (int): Maximum time to wait (seconds)
            condition (str): Type of wait condition

        Returns:
            WebElement: The element

        Raises:
            ElementNotFound: If the element did not appear in time
            NavigationError: If the session budget ran out while waiting
        """
        element = self.wait_for_element(by, value, timeout=timeout, condition=condition)
        if element is None:
            if self.remaining_time() <= 0:
                raise self._timed_out_error()
            raise ElementNotFound(description, value)
        return element

    def click(self, element):
        """Click an element."""
        try:
            element.click()
        except WebDriverException as e:
            raise NavigationError(f"Could not click element: {e}") from e

    def type_text(self, element, text):
        """Replace the contents of an input element with text."""
        try:
            element.clear()
            element.send_keys(text)
        except WebDriverException as e:
            raise NavigationError(f"Could not type into element: {e}") from e

    def execute_javascript(self, script, *args):
        """
        Execute JavaScript in the browser.

        Args:
            script (str): JavaScript code to execute
            *args: Arguments to pass to the script

        Returns:
            Any: Result of the JavaScript execution
        """
        self._require_driver()
        self._bounded(self.session_timeout)
        try:
            return self.driver.execute_script(script, *args)
        except WebDriverException as e:
            raise NavigationError(f"Error executing JavaScript: {e}") from e

    def execute_cdp(self, cmd, params=None):
        """
        Send a Chrome DevTools Protocol command.

        Args:
            cmd (str): Command name, e.g. "Network.enable"
            params (dict, optional): Command parameters

        Returns:
            dict: The command result
        """
        self._require_driver()
        self._bounded(self.session_timeout)
        try:
            return self.driver.execute_cdp_cmd(cmd, params or {})
        except WebDriverException as e:
            raise NavigationError(f"DevTools command {cmd} failed: {e}") from e

    def page_source(self):
        """
        Returns:
            str: The full rendered markup of the document
        """
        return self.execute_javascript("return document.documentElement.outerHTML;")

    def close(self):
        """Close the browser. Safe to call more than once."""
        if self.driver:
            try:
                self.driver.quit()
                log.debug("Browser closed successfully")
            except Exception as e:
                log.warning(f"Error closing browser: {e}")
            finally:
                self.driver = None
                self._deadline = None
