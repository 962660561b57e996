"""
Capture session

Orchestrates one end-to-end render: prepare the output directory, load the
page with timer interception installed, step every frame, then hand the
sequence to the encoder. Only the encoding step is allowed to fail softly.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from playwright.async_api import Error as PlaywrightError

from frameclock.browser.manager import BrowserManager
from frameclock.browser.page_clock import PageClock
from frameclock.capture.driver import FrameDriver
from frameclock.capture.encoder import FfmpegEncoder
from frameclock.capture.output import (
    frame_pattern,
    missing_frames,
    prepare_output_dir,
    read_frame_size,
)
from frameclock.core.config import CaptureConfig
from frameclock.core.exceptions import BrowserError, EncodingError
from frameclock.core.interfaces import FrameEncoder

logger = logging.getLogger(__name__)


@dataclass
class CaptureResult:
    """What a finished session left on disk"""

    frames: list[Path]
    video_path: Path | None = None
    encode_warning: str | None = None
    callback_errors: int = 0


class CaptureSession:
    """
    Render a URL into numbered frames and, when possible, a video

    Example:
        config = CaptureConfig(url="https://example.com", length=2, framerate=10)
        result = await CaptureSession(config).run()
    """

    def __init__(
        self,
        config: CaptureConfig,
        browser_factory: Callable[[], BrowserManager] | None = None,
        encoder: FrameEncoder | None = None,
        on_progress: Callable[[int], None] | None = None,
    ):
        self.config = config
        self.browser_factory = browser_factory or self._default_browser
        self.encoder = encoder or FfmpegEncoder()
        self.on_progress = on_progress
        self.driver: FrameDriver | None = None

    def _default_browser(self) -> BrowserManager:
        return BrowserManager(
            headless=self.config.headless,
            width=self.config.width,
            height=self.config.height,
            scale=self.config.scale,
        )

    async def run(self) -> CaptureResult:
        """
        Run the whole session

        Returns:
            CaptureResult with frame paths and the optional video

        Raises:
            NavigationError: If the page cannot be loaded
            CaptureError: If a frame cannot be captured
        """
        config = self.config
        prepare_output_dir(config.output_dir)

        logger.info("Please wait, loading page...")
        browser = self.browser_factory()
        try:
            await browser.start()
            page_clock = PageClock(browser, config.framerate)
            await page_clock.install()
            await browser.navigate(config.url)
            await page_clock.verify_installed()

            await browser.hide_scrollbars()
            if config.settle_ms:
                await asyncio.sleep(config.settle_ms / 1000)
            logger.debug(f"Page timers before frame 0: {await page_clock.pending()}")

            self.driver = FrameDriver(
                page_clock,
                total_frames=config.total_frames,
                framerate=config.framerate,
                output_dir=config.output_dir,
                frame_pause_ms=config.frame_pause_ms,
                on_progress=self.on_progress,
            )
            frames = await self.driver.run()
        except PlaywrightError as e:
            raise BrowserError(
                f"Page stopped responding during setup: {e.message}",
                recovery_hint="Re-run with --verbose to see the page console output",
            ) from e
        finally:
            await browser.stop()

        result = CaptureResult(frames=frames, callback_errors=self.driver.callback_errors)
        self.encode(result)
        return result

    def encode(self, result: CaptureResult) -> None:
        """Encode the frames into a video; problems only produce a warning"""
        config = self.config

        if not self.encoder.is_available():
            result.encode_warning = "ffmpeg is not installed, video will not be made from frames"
            logger.warning(result.encode_warning)
            return

        gaps = missing_frames(config.output_dir, config.total_frames)
        if gaps:
            result.encode_warning = f"{len(gaps)} frame(s) missing on disk (first: {gaps[0]}), not encoding"
            logger.warning(result.encode_warning)
            return

        width, height = config.video_width, config.video_height
        if result.frames:
            actual = read_frame_size(result.frames[0])
            if actual != (width, height):
                logger.warning(
                    f"Frames are {actual[0]}x{actual[1]}, expected {width}x{height}; "
                    "encoding at captured size"
                )
                width, height = actual

        logger.info("ffmpeg is installed, trying to make video...")
        try:
            result.video_path = self.encoder.encode(
                config.output_dir,
                frame_pattern(config.total_frames),
                config.framerate,
                width,
                height,
                config.video_path,
            )
        except EncodingError as e:
            result.encode_warning = str(e)
            logger.warning(f"Video encoding failed: {e}")
