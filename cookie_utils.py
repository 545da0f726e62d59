"""
Cookie Utilities Module for Skool Authentication

This module converts between the two cookie file formats the tool accepts:

- the JSON ("structured") export produced by browser cookie extensions, an
  array of objects with host, name, value, path, expiry, isSecure,
  isHttpOnly and sameSite fields
- the Netscape ("legacy") cookies.txt table, which is also the only format
  yt-dlp accepts

Both are parsed into cookie records shaped like Chrome DevTools Protocol
Network.CookieParam dicts, so they can be installed into the browser as-is.
"""
import json
import os
import re
from enum import Enum

from exceptions import CookieParseError


class CookieFormat(Enum):
    """On-disk cookie serialization."""
    STRUCTURED = "json"
    LEGACY = "netscape"


# Structured sameSite enum values mapped to CDP CookieSameSite values
SAME_SITE_VALUES = {
    1: "Lax",
    2: "Strict",
    3: "None",
}

LEGACY_HEADER = (
    "# Netscape HTTP Cookie File\n"
    "# This file was generated by skool-loom-dl\n"
)
LEGACY_FIELD_COUNT = 7

STRUCTURED_STRING_FIELDS = ("host", "name", "value", "path")
STRUCTURED_INT_FIELDS = ("expiry", "isSecure", "isHttpOnly", "sameSite")

AUTH_TOKEN_COOKIE = "auth_token"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _strip_leading_dot(domain):
    return domain[1:] if domain.startswith(".") else domain


def _parse_int_lenient(value):
    """Parse the leading integer of a string, returning None if there is none."""
    match = _LEADING_INT.match(value)
    if not match:
        return None
    return int(match.group(1))


def detect_format(path, content):
    """
    Decide whether a cookie file is structured JSON or a Netscape table.

    Args:
        path (str): Path of the cookie file, used for its extension
        content (str): Contents of the file

    Returns:
        CookieFormat: The detected format
    """
    extension = os.path.splitext(path or "")[1].lower()
    if extension == ".json":
        return CookieFormat.STRUCTURED
    if extension == ".txt":
        return CookieFormat.LEGACY

    trimmed = content.strip()
    if trimmed.startswith("[") and trimmed.endswith("]"):
        return CookieFormat.STRUCTURED
    return CookieFormat.LEGACY


def _structured_fields(index, entry):
    """Validate one JSON cookie object and fill in defaults for absent or null fields."""
    if not isinstance(entry, dict):
        raise CookieParseError(f"error parsing JSON cookies: entry {index} is not an object")

    fields = {}
    for field in STRUCTURED_STRING_FIELDS:
        value = entry.get(field)
        if value is None:
            value = ""
        if not isinstance(value, str):
            raise CookieParseError(
                f"error parsing JSON cookies: entry {index} field '{field}' must be a string"
            )
        fields[field] = value

    for field in STRUCTURED_INT_FIELDS:
        value = entry.get(field)
        if value is None:
            value = 0
        # bool is a subclass of int but is not a valid value here
        if isinstance(value, bool) or not isinstance(value, int):
            raise CookieParseError(
                f"error parsing JSON cookies: entry {index} field '{field}' must be an integer"
            )
        fields[field] = value

    return fields


def parse_structured(content):
    """
    Parse a JSON cookie export into cookie records.

    A top-level null reads as an empty export.

    Args:
        content (str): JSON array of cookie objects

    Returns:
        list: Cookie record dicts

    Raises:
        CookieParseError: If the content is not a valid cookie array
    """
    try:
        entries = json.loads(content)
    except (TypeError, ValueError) as e:
        raise CookieParseError(f"error parsing JSON cookies: {e}") from e

    if entries is None:
        return []
    if not isinstance(entries, list):
        raise CookieParseError("error parsing JSON cookies: expected an array of cookies")

    cookies = []
    for index, entry in enumerate(entries):
        fields = _structured_fields(index, entry)

        cookie = {
            "domain": _strip_leading_dot(fields["host"]),
            "name": fields["name"],
            "value": fields["value"],
            "path": fields["path"],
            "secure": fields["isSecure"] == 1,
            "httpOnly": fields["isHttpOnly"] == 1,
        }

        same_site = SAME_SITE_VALUES.get(fields["sameSite"])
        if same_site:
            cookie["sameSite"] = same_site

        if fields["expiry"] > 0:
            cookie["expires"] = fields["expiry"]

        cookies.append(cookie)

    return cookies


def parse_legacy(content):
    """
    Parse a Netscape cookies.txt table into cookie records.

    Lines with fewer than seven tab-separated fields are skipped.

    Args:
        content (str): Contents of the cookie file

    Returns:
        list: Cookie record dicts
    """
    cookies = []

    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        # Only the line ending is dropped so an empty trailing value survives
        fields = line.rstrip("\r\n").split("\t")
        if len(fields) < LEGACY_FIELD_COUNT:
            continue

        cookie = {
            "domain": _strip_leading_dot(fields[0].strip()),
            "name": fields[5],
            "value": fields[6],
            "path": fields[2],
            "secure": fields[3] == "TRUE",
            "httpOnly": False,
        }

        expiry = _parse_int_lenient(fields[4])
        if expiry is not None and expiry > 0:
            cookie["expires"] = expiry

        cookies.append(cookie)

    return cookies


def _legacy_domain(domain):
    # Multi-label hosts are written as wildcard domains
    if not domain.startswith(".") and domain.count(".") > 1:
        return "." + domain
    return domain


def to_legacy(cookies):
    """
    Serialize cookie records into a Netscape cookies.txt table.

    Args:
        cookies (list): Cookie record dicts

    Returns:
        str: File contents, including the header comment
    """
    lines = [LEGACY_HEADER]
    for cookie in cookies:
        secure = "TRUE" if cookie.get("secure") else "FALSE"
        # DOMAIN FLAG PATH SECURE EXPIRY NAME VALUE
        lines.append(
            f"{_legacy_domain(cookie.get('domain', ''))}\tTRUE\t{cookie.get('path', '')}\t"
            f"{secure}\t{int(cookie.get('expires', 0))}\t"
            f"{cookie.get('name', '')}\t{cookie.get('value', '')}\n"
        )
    return "".join(lines)


def read_cookies_file(path):
    """
    Read a cookie file and detect its format.

    Args:
        path (str): Path to the cookie file

    Returns:
        tuple: (CookieFormat, str content)

    Raises:
        CookieParseError: If the file cannot be read
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            content = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise CookieParseError(f"could not read cookies file {path}: {e}") from e

    return detect_format(path, content), content


def load_cookies_file(path):
    """
    Load cookie records from a JSON or Netscape cookie file.

    Args:
        path (str): Path to the cookie file

    Returns:
        list: Cookie record dicts
    """
    cookie_format, content = read_cookies_file(path)
    if cookie_format is CookieFormat.STRUCTURED:
        return parse_structured(content)
    return parse_legacy(content)


def find_auth_token(cookies):
    """
    Find the Skool session token among cookie records.

    Returns:
        str: The auth_token value, or None if it is missing
    """
    for cookie in cookies:
        if cookie.get("name") == AUTH_TOKEN_COOKIE and "skool" in cookie.get("domain", ""):
            return cookie.get("value")
    return None
