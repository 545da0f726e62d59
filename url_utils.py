"""
URL Utilities Module for Loom Video Links

This module contains the URL constants for Skool and Loom and the link
extraction used on captured classroom pages.

Loom videos show up in two shapes: share links (loom.com/share/<id>) and
embed links (loom.com/embed/<id>), the latter inside player iframes. Only the
share shape is kept; embed links are rewritten to it.
"""
import re


# Skool site
SKOOL_BASE_URL = "https://www.skool.com/"
SKOOL_LOGIN_URL = "https://www.skool.com/login"
LOGIN_PATH_MARKER = "/login"
PUBLIC_PAGE_MARKER = "/about"

# Loom video links
LOOM_SHARE_BASE = "https://www.loom.com/share"

# Regular expression patterns
LOOM_SHARE_PATTERN = re.compile(r"https?://(?:www\.)?loom\.com/share/([a-zA-Z0-9]+)")
LOOM_EMBED_PATTERN = re.compile(r"https?://(?:www\.)?loom\.com/embed/([a-zA-Z0-9]+)")


def to_share_url(video_id):
    """
    Construct the canonical share URL for a Loom video.

    Args:
        video_id (str): The Loom video token

    Returns:
        str: The share URL
    """
    return f"{LOOM_SHARE_BASE}/{video_id}"


def extract_loom_urls(html):
    """
    Extract Loom share URLs from page markup.

    Share and embed links are both written as https://www.loom.com/share/<id>,
    so http and bare-domain variants of the same video collapse into one
    entry. The result keeps the order in which each distinct URL was first
    seen, share matches before embed matches.

    Args:
        html (str): Page markup

    Returns:
        list: Unique share URLs, empty if none were found
    """
    if not html:
        return []

    matches = [to_share_url(video_id) for video_id in LOOM_SHARE_PATTERN.findall(html)]
    matches.extend(to_share_url(video_id) for video_id in LOOM_EMBED_PATTERN.findall(html))

    seen = set()
    unique_urls = []
    for url in matches:
        if url not in seen:
            seen.add(url)
            unique_urls.append(url)

    return unique_urls


def is_login_page(url):
    """Check whether a location is still on the login page."""
    return LOGIN_PATH_MARKER in (url or "")


def is_public_page(url):
    """Check whether a location is the classroom's public about page."""
    return PUBLIC_PAGE_MARKER in (url or "")
