"""
Frame driver

Steps a FrameTarget through every frame of a capture session: advance the
virtual clock, fire due timers, photograph the result. Frames are processed
strictly one at a time and in order.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum
from pathlib import Path

from frameclock.capture.output import frame_filename
from frameclock.clock.timers import StepReport
from frameclock.clock.virtual_clock import frame_to_ms
from frameclock.core.exceptions import CaptureError, FrameclockError
from frameclock.core.interfaces import FrameTarget

logger = logging.getLogger(__name__)


class DriverState(str, Enum):
    """Lifecycle of a frame driver"""

    IDLE = "idle"
    STEPPING = "stepping"
    FINISHED = "finished"
    FAILED = "failed"


class FrameDriver:
    """
    Deterministic frame-by-frame capture loop

    Example:
        driver = FrameDriver(target, total_frames=20, framerate=10, output_dir=Path("frames"))
        frames = await driver.run()
    """

    def __init__(
        self,
        target: FrameTarget,
        total_frames: int,
        framerate: float,
        output_dir: Path,
        frame_pause_ms: int = 0,
        on_progress: Callable[[int], None] | None = None,
    ):
        """
        Initialize frame driver

        Args:
            target: Page or simulation to step
            total_frames: Number of frames to capture
            framerate: Frames per simulated second
            output_dir: Existing directory receiving one PNG per frame
            frame_pause_ms: Real-time pause after each capture
            on_progress: Called with the frame index after each capture
        """
        self.target = target
        self.total_frames = total_frames
        self.framerate = framerate
        self.output_dir = output_dir
        self.frame_pause_ms = frame_pause_ms
        self.on_progress = on_progress

        self.state = DriverState.IDLE
        self.frames: list[Path] = []
        self.callbacks_fired = 0
        self.callback_errors = 0

    async def run(self) -> list[Path]:
        """
        Capture every frame in [0, total_frames)

        Returns:
            Frame paths, indexed by frame number

        Raises:
            CaptureError: If any frame could not be captured
            RuntimeError: If the driver already ran
        """
        if self.state is not DriverState.IDLE:
            raise RuntimeError(f"Driver cannot run from state '{self.state.value}'")

        self.state = DriverState.STEPPING
        logger.info(f"Rendering {self.total_frames} frames at {self.framerate} fps")

        try:
            for frame in range(self.total_frames):
                await self.step(frame)
                if self.frame_pause_ms and frame < self.total_frames - 1:
                    await asyncio.sleep(self.frame_pause_ms / 1000)
        except Exception:
            self.state = DriverState.FAILED
            raise

        self.state = DriverState.FINISHED
        logger.info(
            f"Captured {len(self.frames)} frames "
            f"({self.callbacks_fired} callbacks, {self.callback_errors} errors)"
        )
        return self.frames

    async def step(self, frame: int) -> StepReport:
        """
        Produce exactly one frame

        Raises:
            ClockError: If frame is out of order
            CaptureError: If the target stops responding or the capture fails
        """
        try:
            await self.target.advance_to(frame, frame_to_ms(frame, self.framerate))
            report = await self.target.fire_due(frame)
        except FrameclockError:
            raise
        except Exception as e:
            raise CaptureError(frame, reason=f"target stopped responding: {e}") from e

        self.callbacks_fired += report.fired
        for error in report.errors:
            self.callback_errors += 1
            logger.warning(f"Callback error at frame {frame}: {error}")

        path = self.output_dir / frame_filename(frame, self.total_frames)
        try:
            await self.target.capture(path)
        except Exception as e:
            raise CaptureError(frame, reason=str(e)) from e
        self.frames.append(path)

        if self.on_progress:
            self.on_progress(frame)
        return report
