#!/usr/bin/env python3
"""
Skool Loom Downloader

Main entry point script for downloading the Loom videos embedded in a
skool.com classroom. Authenticates with either an email and password or an
exported cookie file, collects the Loom links from the classroom page and
downloads each one with yt-dlp.
"""
import argparse
import json
import os
import sys
import time
from getpass import getpass

from exceptions import SkoolLoomError
from downloader import dispatch_downloads
from video_scraper import DEFAULT_WAIT_TIME, scrape_videos

# Import the logger module
import logger

DEFAULT_OUTPUT_DIR = "downloads"

USAGE = (
    "Usage: skool-loom-dl --url=https://skool.com/yourschool/classroom/path "
    "[--cookies=cookies.json | --email=user@example.com --password=pass]"
)

BANNER = r"""
    ╔═══╗╔╗   ╔═══╗
    ║╔═╗║║║   ║╔═╗║
    ║╚══╗║║   ║║ ║║
    ╚══╗║║║   ║║ ║║
    ║╚═╝║║╚═╗ ║╚═╝║
    ╚═══╝╚══╝ ╚═══╝
    Skool Loom Downloader
"""


def print_banner():
    """Print the startup banner."""
    print(BANNER)


def load_config(config_path):
    """
    Load email, password and cookies settings from a JSON file.

    Args:
        config_path (str): Path to the config file

    Returns:
        dict: The settings found, empty if the file is missing or unreadable
    """
    config = {}

    if not config_path or not os.path.exists(config_path):
        return config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config = json.load(f)
        logger.info(f"Loaded configuration from {config_path}")
    except (OSError, ValueError) as e:
        logger.error(f"Error loading config: {str(e)}")
        return {}

    if not isinstance(config, dict):
        logger.error(f"Ignoring config {config_path}: expected a JSON object")
        return {}

    return config


def build_parser():
    """Create the command line parser."""
    parser = argparse.ArgumentParser(description='Download Loom videos from a Skool classroom')
    parser.add_argument('--url', help='URL of the skool.com classroom to scrape (required)')
    parser.add_argument('--cookies', help='Path to cookies file (JSON or TXT) for authentication')
    parser.add_argument('--email', help='Email for Skool login (alternative to cookies)')
    parser.add_argument('--password', help='Password for Skool login (required with email)')
    parser.add_argument('--output', default=DEFAULT_OUTPUT_DIR,
                        help='Directory to save downloaded videos')
    parser.add_argument('--wait', type=int, default=DEFAULT_WAIT_TIME,
                        help='Time to wait for page to load in seconds')
    parser.add_argument('--no-headless', dest='headless', action='store_false',
                        help='Show the browser window instead of running headless')
    parser.add_argument('--config', help='Path to JSON config file with email, password or cookies')
    parser.add_argument('--log-level', choices=['debug', 'info', 'warning', 'error'],
                        default='info', help='Logging level (for file logging)')
    parser.add_argument('--no-log-file', action='store_true',
                        help='Disable logging to file')
    parser.add_argument('--verbose', action='store_true',
                        help='Use the same log level for console as for the log file')
    return parser


def resolve_credentials(args, config):
    """
    Merge command line options with the config file.

    Command line values win. When an email is known but no password and the
    session is interactive, the password is prompted for.

    Returns:
        tuple: (email, password, cookies_file)
    """
    email = args.email or config.get('email')
    password = args.password or config.get('password')
    cookies_file = args.cookies or config.get('cookies')

    if email and not password and sys.stdin.isatty():
        password = getpass("Enter your Skool password: ")

    return email, password, cookies_file


def main():
    """Main entry point for the script."""
    args = build_parser().parse_args()

    log_levels = {
        'debug': logger.DEBUG,
        'info': logger.INFO,
        'warning': logger.WARNING,
        'error': logger.ERROR
    }
    # Use the specified log level for the file, but keep INFO level for console by default
    # unless verbose mode is enabled
    console_level = log_levels[args.log_level] if args.verbose else log_levels['info']

    logger.setup_logger(
        level=log_levels[args.log_level],
        log_to_file=not args.no_log_file,
        console_level=console_level
    )

    print_banner()

    if not args.url:
        print(USAGE)
        return 1

    config = load_config(args.config)
    email, password, cookies_file = resolve_credentials(args, config)

    if not (email and password) and not cookies_file:
        logger.error("You must provide either cookies file or email+password for authentication")
        return 1

    try:
        os.makedirs(args.output, exist_ok=True)
    except OSError as e:
        logger.error(f"Error creating output directory: {e}")
        return 1

    logger.info(f"Scraping Loom videos from: {args.url}")
    start_time = time.time()

    try:
        loom_urls = scrape_videos(
            args.url,
            cookies_file=cookies_file,
            email=email,
            password=password,
            wait_time=args.wait,
            headless=args.headless
        )

        if not loom_urls:
            logger.warning("No Loom videos found. Check authentication and URL.")
            return 0

        logger.info(f"Found {len(loom_urls)} Loom videos")

        failures = dispatch_downloads(loom_urls, cookies_file, args.output)

        elapsed_time = time.time() - start_time
        if failures:
            logger.error(
                f"Download process completed with {failures} of {len(loom_urls)} "
                f"videos failing in {elapsed_time:.2f} seconds"
            )
            return 1

        logger.info(f"Download process completed in {elapsed_time:.2f} seconds")
        return 0

    except SkoolLoomError as e:
        logger.error(f"Error scraping: {e}")
        return 1
    except KeyboardInterrupt:
        logger.warning("Download interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unhandled exception: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
