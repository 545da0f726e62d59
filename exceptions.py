"""
Exception types for skool-loom-dl.

Navigation, element and authentication failures abort a scrape. Dispatch
failures are reported per video and do not stop the remaining downloads.
"""
from enum import Enum


class AuthOutcome(Enum):
    """Result of an authentication attempt."""
    SUCCESS = "success"
    INVALID_CREDENTIALS = "invalid_credentials"
    REDIRECT_TO_PUBLIC_PAGE = "redirect_to_public_page"


class SkoolLoomError(Exception):
    """Base class for all errors raised by skool-loom-dl."""
    pass


class NavigationError(SkoolLoomError):
    """Raised when navigation, a browser action or the session deadline fails."""
    pass


class ElementNotFound(SkoolLoomError):
    """Raised when a required element does not appear within its wait."""

    def __init__(self, description, selector=None):
        self.description = description
        self.selector = selector
        message = f"{description} not found"
        if selector:
            message = f"{message} (selector: {selector})"
        super().__init__(message)


class AuthenticationError(SkoolLoomError):
    """Raised when authentication did not give access to the classroom."""

    MESSAGES = {
        AuthOutcome.INVALID_CREDENTIALS: "login failed: invalid credentials or captcha required",
        AuthOutcome.REDIRECT_TO_PUBLIC_PAGE: (
            "authentication succeeded but redirected to public page, check URL permissions"
        ),
    }

    def __init__(self, outcome, message=None):
        self.outcome = outcome
        super().__init__(message or self.MESSAGES.get(outcome, "authentication failed"))


class CookieParseError(SkoolLoomError):
    """Raised when a cookie file cannot be read or is malformed."""
    pass


class DispatchError(SkoolLoomError):
    """Raised when the external downloader fails for a single video."""

    def __init__(self, url, message):
        self.url = url
        super().__init__(message)
