"""
Download dispatch for skool-loom-dl.

Each Loom URL is handed to yt-dlp in its own subprocess. yt-dlp only reads
Netscape cookie files, so JSON cookie exports are converted into a temporary
file for the duration of each invocation.
"""
import os
import subprocess
import tempfile
from contextlib import contextmanager

from cookie_utils import CookieFormat, parse_structured, read_cookies_file, to_legacy
from exceptions import CookieParseError, DispatchError

import logger
log = logger

YTDLP_BINARY = "yt-dlp"
OUTPUT_TEMPLATE = "%(title)s.%(ext)s"


def build_ytdlp_command(video_url, output_dir, cookies_file=None):
    """
    Build the yt-dlp command line for one video.

    Args:
        video_url (str): The Loom share URL
        output_dir (str): Directory the video is saved in
        cookies_file (str, optional): Netscape cookie file to pass along

    Returns:
        list: The command and its arguments
    """
    cmd = [YTDLP_BINARY]
    if cookies_file:
        cmd.extend(["--cookies", cookies_file])
    cmd.extend([
        "-o", os.path.join(output_dir, OUTPUT_TEMPLATE),
        "--no-warnings",
        video_url,
    ])
    return cmd


@contextmanager
def legacy_cookies_file(cookies_file):
    """
    Provide a Netscape cookie file path for yt-dlp.

    Yields None when there are no cookies and the original path when the file
    is already in Netscape format. JSON files are converted into a temporary
    file which is removed when the block exits.

    Raises:
        CookieParseError: If the cookie file cannot be read or converted
    """
    if not cookies_file:
        yield None
        return

    cookie_format, content = read_cookies_file(cookies_file)
    if cookie_format is CookieFormat.LEGACY:
        yield cookies_file
        return

    legacy_content = to_legacy(parse_structured(content))
    fd, tmp_path = tempfile.mkstemp(prefix="cookies-", suffix=".txt")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp_file:
            tmp_file.write(legacy_content)
        log.debug(f"Converted JSON cookies to temporary Netscape file: {tmp_path}")
        yield tmp_path
    finally:
        try:
            os.remove(tmp_path)
        except OSError as e:
            log.warning(f"Could not remove temporary cookies file {tmp_path}: {e}")


def download_with_ytdlp(video_url, cookies_file, output_dir):
    """
    Download one video with yt-dlp.

    yt-dlp writes its progress straight to the terminal.

    Args:
        video_url (str): The Loom share URL
        cookies_file (str, optional): JSON or Netscape cookie file
        output_dir (str): Directory the video is saved in

    Raises:
        DispatchError: If the cookies could not be prepared or yt-dlp failed
    """
    try:
        with legacy_cookies_file(cookies_file) as ytdlp_cookies:
            cmd = build_ytdlp_command(video_url, output_dir, ytdlp_cookies)
            log.debug(f"yt-dlp command: {' '.join(cmd)}")
            result = subprocess.run(cmd)
    except CookieParseError as e:
        raise DispatchError(video_url, f"error converting JSON cookies: {e}") from e
    except OSError as e:
        raise DispatchError(video_url, f"could not run {YTDLP_BINARY}: {e}") from e

    if result.returncode != 0:
        raise DispatchError(video_url, f"{YTDLP_BINARY} exited with code {result.returncode}")


def dispatch_downloads(urls, cookies_file, output_dir):
    """
    Download every video, continuing past failures.

    Args:
        urls (list): Loom share URLs
        cookies_file (str, optional): JSON or Netscape cookie file
        output_dir (str): Directory the videos are saved in

    Returns:
        int: Number of videos that failed to download
    """
    failures = 0
    total = len(urls)

    for i, url in enumerate(urls, 1):
        log.info(f"[{i}/{total}] Downloading: {url}")
        try:
            download_with_ytdlp(url, cookies_file, output_dir)
        except DispatchError as e:
            log.error(f"Error downloading {url}: {e}")
            failures += 1

    return failures
