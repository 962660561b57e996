"""
Playwright browser installer

Checks whether Playwright's Chromium build is present and installs it on
request, so `frameclock verify --install` can prepare a fresh machine.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

# Browser to install (chromium is the only engine frameclock drives)
BROWSER_TYPE = "chromium"


def get_playwright_browsers_path() -> Path:
    """Directory where Playwright keeps downloaded browser builds"""
    override = os.environ.get("PLAYWRIGHT_BROWSERS_PATH")
    if override:
        return Path(override)

    if sys.platform == "win32":
        cache_root = os.environ.get("LOCALAPPDATA") or Path.home() / "AppData" / "Local"
    elif sys.platform == "darwin":
        cache_root = Path.home() / "Library" / "Caches"
    else:
        cache_root = os.environ.get("XDG_CACHE_HOME") or Path.home() / ".cache"
    return Path(cache_root) / "ms-playwright"


def is_browser_installed() -> bool:
    """
    Check if Playwright Chromium browser is installed.

    Returns:
        True if a chromium-* build directory exists, False otherwise
    """
    browsers_path = get_playwright_browsers_path()

    if not browsers_path.exists():
        logger.info(f"Playwright browsers directory not found: {browsers_path}")
        return False

    chromium_dirs = list(browsers_path.glob("chromium-*"))
    if not chromium_dirs:
        logger.info("No Chromium browser found in Playwright cache")
        return False

    logger.info(f"Found Chromium browser at: {chromium_dirs[0]}")
    return True


async def install_browser() -> bool:
    """
    Install Playwright Chromium browser.

    Returns:
        True if installation successful, False otherwise
    """
    playwright_cmd = [sys.executable, "-m", "playwright", "install", BROWSER_TYPE]
    logger.info(f"Running: {' '.join(playwright_cmd)}")

    try:
        process = await asyncio.create_subprocess_exec(
            *playwright_cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await process.communicate()
    except OSError as e:
        logger.error(f"Browser installation error: {e}")
        return False

    if process.returncode == 0:
        logger.info("Playwright Chromium browser installed successfully")
        return True

    error_msg = stderr.decode() if stderr else stdout.decode()
    logger.error(f"Browser installation failed: {error_msg}")
    return False


async def ensure_browser_installed() -> bool:
    """
    Ensure Playwright browser is installed, installing if necessary.

    Returns:
        True if browser is ready to use, False if installation failed
    """
    if is_browser_installed():
        logger.info("Playwright browser already installed")
        return True

    logger.info("Playwright browser not found, initiating installation...")
    return await install_browser()
