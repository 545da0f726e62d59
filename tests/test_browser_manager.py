"""
Tests for the browser_manager module.
"""
import pytest
from unittest.mock import patch, MagicMock
from selenium.common.exceptions import TimeoutException, WebDriverException
from selenium.webdriver.common.by import By

from browser_manager import BrowserManager, SESSION_TIMEOUT, USER_AGENT
from exceptions import ElementNotFound, NavigationError


@pytest.fixture
def open_browser(mock_driver):
    """A BrowserManager with a mock driver and a fresh session budget."""
    manager = BrowserManager()
    with patch.object(BrowserManager, '_initialize_chrome_driver', return_value=mock_driver):
        manager.initialize()
    return manager


class TestBrowserManagerInit:
    """Tests for BrowserManager initialization."""

    def test_init_default_values(self):
        """Test initialization with default values."""
        manager = BrowserManager()
        assert manager.driver is None
        assert manager.headless is True
        assert manager.session_timeout == SESSION_TIMEOUT

    def test_init_custom_values(self):
        """Test initialization with custom values."""
        manager = BrowserManager(headless=False, session_timeout=30)
        assert manager.headless is False
        assert manager.session_timeout == 30


class TestChromeConfiguration:
    """Tests for Chrome configuration."""

    def test_configure_chrome_options_default(self):
        """Test configuring Chrome options with default settings."""
        manager = BrowserManager()
        args = manager._configure_chrome_options().arguments

        assert "--no-sandbox" in args
        assert "--disable-gpu" in args
        assert "--disable-dev-shm-usage" in args
        assert "--window-size=1920,1080" in args
        assert "--headless=new" in args
        assert f"--user-agent={USER_AGENT}" in args

    def test_configure_chrome_options_headed(self):
        """Test configuring Chrome options with a visible window."""
        manager = BrowserManager(headless=False)
        args = manager._configure_chrome_options().arguments

        assert "--headless=new" not in args
        assert "--no-sandbox" in args


class TestChromeDriverInitialization:
    """Tests for Chrome driver initialization."""

    def test_initialize_chrome_driver_method1_success(self):
        """Test successful initialization with system Chrome (method 1)."""
        manager = BrowserManager()
        options = MagicMock()
        mock_chrome_instance = MagicMock()

        with patch('selenium.webdriver.Chrome', return_value=mock_chrome_instance) as mock_chrome, \
             patch('logger.debug') as mock_debug, \
             patch('logger.info') as mock_info, \
             patch('logger.warning') as mock_warning:
            driver = manager._initialize_chrome_driver(options)

        mock_chrome.assert_called_once_with(options=options)
        mock_debug.assert_called_once_with("Attempting to initialize Chrome driver with system Chrome")
        mock_info.assert_called_once_with("Successfully initialized Chrome driver with system Chrome")
        mock_warning.assert_not_called()
        assert driver is mock_chrome_instance

    def test_initialize_chrome_driver_falls_back_to_driver_manager(self):
        """Test that ChromeDriverManager is tried when system Chrome fails."""
        manager = BrowserManager()
        options = MagicMock()
        mock_chrome_instance = MagicMock()

        with patch('selenium.webdriver.Chrome',
                   side_effect=[WebDriverException("no chromedriver"), mock_chrome_instance]) as mock_chrome, \
             patch('webdriver_manager.chrome.ChromeDriverManager') as mock_manager, \
             patch('selenium.webdriver.chrome.service.Service') as mock_service:
            mock_manager.return_value.install.return_value = "/tmp/chromedriver"
            driver = manager._initialize_chrome_driver(options)

        assert driver is mock_chrome_instance
        assert mock_chrome.call_count == 2
        mock_service.assert_called_once_with(executable_path="/tmp/chromedriver")

    def test_initialize_chrome_driver_all_methods_fail(self):
        """Test that None is returned when no method works."""
        manager = BrowserManager()

        with patch('selenium.webdriver.Chrome', side_effect=WebDriverException("boom")), \
             patch('webdriver_manager.chrome.ChromeDriverManager') as mock_manager, \
             patch('selenium.webdriver.chrome.service.Service'), \
             patch('logger.error') as mock_error:
            mock_manager.return_value.install.return_value = "/tmp/chromedriver"
            driver = manager._initialize_chrome_driver(MagicMock())

        assert driver is None
        mock_error.assert_called_once()

    def test_initialize_sets_window_size(self, mock_driver):
        """Test that initialize applies the fixed viewport."""
        manager = BrowserManager()
        with patch.object(BrowserManager, '_initialize_chrome_driver', return_value=mock_driver):
            driver = manager.initialize()

        assert driver is mock_driver
        mock_driver.set_window_size.assert_called_once_with(1920, 1080)

    def test_initialize_raises_when_no_driver(self):
        """Test that initialize fails loudly when Chrome cannot start."""
        manager = BrowserManager()
        with patch.object(BrowserManager, '_initialize_chrome_driver', return_value=None), \
             pytest.raises(NavigationError) as excinfo:
            manager.initialize()

        assert "Failed to initialize Chrome browser" in str(excinfo.value)

    def test_context_manager_closes_browser(self, mock_driver):
        """Test that leaving the with block quits the driver even on error."""
        with patch.object(BrowserManager, '_initialize_chrome_driver', return_value=mock_driver):
            with pytest.raises(RuntimeError):
                with BrowserManager() as manager:
                    assert manager.driver is mock_driver
                    raise RuntimeError("scrape failed")

        mock_driver.quit.assert_called_once()
        assert manager.driver is None

    def test_context_manager_closes_when_initialize_fails(self, mock_driver):
        """Test that a driver started before a setup failure is still quit."""
        mock_driver.set_window_size.side_effect = WebDriverException("window gone")

        with patch.object(BrowserManager, '_initialize_chrome_driver', return_value=mock_driver), \
             pytest.raises(WebDriverException):
            with BrowserManager():
                pass

        mock_driver.quit.assert_called_once()

    def test_driver_manager_path_skips_notices_file(self, tmp_path):
        """Test that the chromedriver binary is used when the notices file is returned."""
        (tmp_path / "THIRD_PARTY_NOTICES.chromedriver").write_text("notices")
        (tmp_path / "LICENSE.chromedriver.md").write_text("license")
        (tmp_path / "chromedriver").write_text("binary")

        with patch('webdriver_manager.chrome.ChromeDriverManager') as mock_manager:
            mock_manager.return_value.install.return_value = str(tmp_path / "THIRD_PARTY_NOTICES.chromedriver")
            driver_path = BrowserManager._driver_manager_path()

        assert driver_path == str(tmp_path / "chromedriver")

    def test_standard_driver_path(self):
        """Test the per-OS chromedriver location."""
        with patch('browser_manager.platform.system', return_value="Linux"):
            assert BrowserManager._standard_driver_path() == "/usr/bin/chromedriver"
        with patch('browser_manager.platform.system', return_value="Windows"):
            assert BrowserManager._standard_driver_path().endswith("chromedriver.exe")


class TestSessionDeadline:
    """Tests for the overall session budget."""

    def test_remaining_time_before_initialize(self):
        """Test the full budget is reported before the session starts."""
        assert BrowserManager(session_timeout=60).remaining_time() == 60.0

    def test_remaining_time_counts_down(self, mock_driver):
        """Test the remaining time after the clock has advanced."""
        manager = BrowserManager(session_timeout=180)
        with patch('browser_manager.time.monotonic', return_value=1000.0), \
             patch.object(BrowserManager, '_initialize_chrome_driver', return_value=mock_driver):
            manager.initialize()

        with patch('browser_manager.time.monotonic', return_value=1100.0):
            assert manager.remaining_time() == 80.0

        with patch('browser_manager.time.monotonic', return_value=2000.0):
            assert manager.remaining_time() == 0.0

    def test_navigate_after_deadline_fails(self, open_browser, mock_driver):
        """Test that actions are refused once the budget is spent."""
        with patch.object(BrowserManager, 'remaining_time', return_value=0.0), \
             pytest.raises(NavigationError) as excinfo:
            open_browser.navigate("https://www.skool.com/")

        assert "timed out" in str(excinfo.value)
        mock_driver.get.assert_not_called()

    def test_pause_within_budget(self, open_browser):
        """Test a pause that fits in the budget."""
        with patch('browser_manager.time.sleep') as mock_sleep:
            open_browser.pause(3)
        mock_sleep.assert_called_once_with(3)

    def test_pause_past_deadline(self, open_browser):
        """Test that a pause longer than the budget sleeps what is left and fails."""
        with patch.object(BrowserManager, 'remaining_time', return_value=1.5), \
             patch('browser_manager.time.sleep') as mock_sleep, \
             pytest.raises(NavigationError):
            open_browser.pause(3)
        mock_sleep.assert_called_once_with(1.5)

    def test_wait_is_clamped_to_remaining_time(self, open_browser):
        """Test that element waits never outlive the session."""
        with patch.object(BrowserManager, 'remaining_time', return_value=4.0), \
             patch('browser_manager.WebDriverWait') as mock_wait:
            open_browser.wait_for_element(By.ID, "email", timeout=10)

        assert mock_wait.call_args[0][1] == 4.0


class TestNavigation:
    """Tests for navigation helpers."""

    def test_navigate_sets_page_load_timeout(self, open_browser, mock_driver):
        """Test that navigation is bounded by the remaining budget."""
        open_browser.navigate("https://www.skool.com/")

        mock_driver.get.assert_called_once_with("https://www.skool.com/")
        timeout = mock_driver.set_page_load_timeout.call_args[0][0]
        assert 0 < timeout <= SESSION_TIMEOUT

    def test_navigate_timeout(self, open_browser, mock_driver):
        """Test that a page load timeout becomes a NavigationError."""
        mock_driver.get.side_effect = TimeoutException("slow")

        with pytest.raises(NavigationError) as excinfo:
            open_browser.navigate("https://www.skool.com/")
        assert "Timed out loading" in str(excinfo.value)

    def test_navigate_webdriver_error(self, open_browser, mock_driver):
        """Test that driver failures become a NavigationError."""
        mock_driver.get.side_effect = WebDriverException("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(NavigationError):
            open_browser.navigate("https://www.skool.com/")

    def test_navigate_without_session(self):
        """Test that navigation requires an initialized browser."""
        with pytest.raises(NavigationError):
            BrowserManager().navigate("https://www.skool.com/")

    def test_current_url(self, open_browser, mock_driver):
        """Test reading the current location."""
        mock_driver.current_url = "https://www.skool.com/group/classroom"
        assert open_browser.current_url() == "https://www.skool.com/group/classroom"


class TestElementWaits:
    """Tests for element wait helpers."""

    def test_wait_for_element_visible(self, open_browser):
        """Test waiting for a visible element."""
        element = MagicMock()
        with patch('browser_manager.WebDriverWait') as mock_wait:
            mock_wait.return_value.until.return_value = element
            result = open_browser.wait_for_element(By.XPATH, "//input", condition="visible")

        assert result is element

    def test_wait_for_element_timeout_returns_none(self, open_browser):
        """Test that a wait timeout returns None and logs a warning."""
        with patch('browser_manager.WebDriverWait') as mock_wait, \
             patch('logger.warning') as mock_warning:
            mock_wait.return_value.until.side_effect = TimeoutException()
            result = open_browser.wait_for_element(By.XPATH, "//input")

        assert result is None
        mock_warning.assert_called_once_with("Timeout waiting for element: //input (condition: presence)")

    def test_require_element_returns_element(self, open_browser):
        """Test require_element when the element shows up."""
        element = MagicMock()
        with patch.object(BrowserManager, 'wait_for_element', return_value=element):
            assert open_browser.require_element(By.XPATH, "//input", "Email input") is element

    def test_require_element_raises(self, open_browser):
        """Test require_element when the element never appears."""
        with patch.object(BrowserManager, 'wait_for_element', return_value=None), \
             pytest.raises(ElementNotFound) as excinfo:
            open_browser.require_element(By.XPATH, "//input", "Email input")

        assert excinfo.value.description == "Email input"
        assert "Email input not found" in str(excinfo.value)


class TestScriptsAndCommands:
    """Tests for JavaScript and DevTools helpers."""

    def test_execute_javascript(self, open_browser, mock_driver):
        """Test that scripts and their arguments reach the driver."""
        mock_driver.execute_script.return_value = 42
        assert open_browser.execute_javascript("return arguments[0];", 42) == 42
        mock_driver.execute_script.assert_called_once_with("return arguments[0];", 42)

    def test_execute_javascript_error(self, open_browser, mock_driver):
        """Test that script errors become a NavigationError."""
        mock_driver.execute_script.side_effect = WebDriverException("javascript error")
        with pytest.raises(NavigationError):
            open_browser.execute_javascript("throw new Error();")

    def test_execute_cdp(self, open_browser, mock_driver):
        """Test that DevTools commands default to empty parameters."""
        open_browser.execute_cdp("Network.enable")
        mock_driver.execute_cdp_cmd.assert_called_once_with("Network.enable", {})

    def test_execute_cdp_error(self, open_browser, mock_driver):
        """Test that DevTools failures become a NavigationError."""
        mock_driver.execute_cdp_cmd.side_effect = WebDriverException("Invalid cookie fields")
        with pytest.raises(NavigationError) as excinfo:
            open_browser.execute_cdp("Network.setCookies", {"cookies": []})
        assert "Network.setCookies" in str(excinfo.value)

    def test_page_source(self, open_browser, mock_driver):
        """Test capturing the rendered document."""
        mock_driver.execute_script.return_value = "<html></html>"
        assert open_browser.page_source() == "<html></html>"
        mock_driver.execute_script.assert_called_once_with("return document.documentElement.outerHTML;")


class TestClose:
    """Tests for closing the browser."""

    def test_close_quits_driver(self, open_browser, mock_driver):
        """Test that close quits the driver and forgets it."""
        open_browser.close()
        mock_driver.quit.assert_called_once()
        assert open_browser.driver is None

    def test_close_is_idempotent(self, open_browser, mock_driver):
        """Test that close can be called repeatedly."""
        open_browser.close()
        open_browser.close()
        mock_driver.quit.assert_called_once()

    def test_close_swallows_quit_errors(self, open_browser, mock_driver):
        """Test that a failing quit is logged, not raised."""
        mock_driver.quit.side_effect = WebDriverException("already gone")
        with patch('logger.warning') as mock_warning:
            open_browser.close()
        mock_warning.assert_called_once()
        assert open_browser.driver is None
