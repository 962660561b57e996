"""
Page clock - frame target backed by an instrumented browser page

Drives the page-side timer registry installed by the instrumentation script.
Every call crosses into the page and waits for it to finish before
returning, so no two steps ever overlap.
"""

import logging
from pathlib import Path

from frameclock.browser.manager import BrowserManager
from frameclock.clock.instrumentation import (
    ADVANCE_EXPRESSION,
    FIRE_DUE_EXPRESSION,
    INSTALLED_EXPRESSION,
    PENDING_EXPRESSION,
    build_instrumentation_script,
)
from frameclock.clock.timers import StepReport
from frameclock.core.exceptions import FrameclockError

logger = logging.getLogger(__name__)


class PageClock:
    """
    FrameTarget for a Playwright page

    install() must be awaited before navigation so the interception script
    runs ahead of the page's own startup code.
    """

    def __init__(self, browser: BrowserManager, framerate: float):
        self.browser = browser
        self.framerate = framerate

    async def install(self) -> None:
        """Register the timer interception script for every new document"""
        await self.browser.install_init_script(build_instrumentation_script(self.framerate))
        logger.info(f"Timer interception installed ({self.framerate} fps)")

    async def verify_installed(self) -> None:
        """
        Check the loaded document carries the interception layer

        Raises:
            FrameclockError: If the control object is missing
        """
        if not await self.browser.evaluate(INSTALLED_EXPRESSION):
            raise FrameclockError(
                "Timer interception is not active in the loaded page",
                component="Clock",
                recovery_hint="Install the instrumentation before navigating",
            )

    async def advance_to(self, frame: int, time_ms: float) -> None:
        await self.browser.evaluate(ADVANCE_EXPRESSION, [frame, time_ms])

    async def fire_due(self, frame: int) -> StepReport:
        result = await self.browser.evaluate(FIRE_DUE_EXPRESSION, frame)
        return StepReport(
            frame=result["frame"],
            fired=result["fired"],
            errors=list(result["errors"]),
        )

    async def pending(self) -> dict:
        """Counts of pending page timers and the page's view of the clock"""
        return await self.browser.evaluate(PENDING_EXPRESSION)

    async def capture(self, path: Path) -> None:
        await self.browser.screenshot(path)
