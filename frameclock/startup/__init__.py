"""
Startup checks

Verifies the external tools a capture relies on are present.
"""

from frameclock.startup.playwright_installer import (
    ensure_browser_installed,
    get_playwright_browsers_path,
    is_browser_installed,
)

__all__ = [
    "ensure_browser_installed",
    "get_playwright_browsers_path",
    "is_browser_installed",
]
