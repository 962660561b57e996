"""
Browser automation with Playwright

Provides the rendering engine the capture session photographs.
"""

from frameclock.browser.manager import BrowserManager
from frameclock.browser.page_clock import PageClock

__all__ = ["BrowserManager", "PageClock"]
