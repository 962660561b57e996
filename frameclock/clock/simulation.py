"""
In-process frame target

SimulatedTarget lets Python animation code be captured with the same frame
driver as a browser page: callbacks are scheduled through VirtualTimers and
draw onto a Pillow canvas, which is saved once per frame.
"""

import logging
from pathlib import Path

from PIL import Image, ImageDraw

from frameclock.clock.timers import StepReport, VirtualTimers

logger = logging.getLogger(__name__)


class SimulatedTarget:
    """
    FrameTarget backed by VirtualTimers and an RGB canvas

    Example:
        target = SimulatedTarget(framerate=30, size=(320, 240))

        def tick():
            x = target.timers.performance_now() / 10
            target.draw.ellipse((x, 100, x + 20, 120), fill="white")
            target.timers.request_animation_frame(tick)

        target.timers.request_animation_frame(tick)
        await FrameDriver(target, total_frames=90, framerate=30, output_dir=out).run()
    """

    def __init__(
        self,
        framerate: float,
        size: tuple[int, int] = (720, 720),
        background: str = "black",
        timers: VirtualTimers | None = None,
    ):
        self.timers = timers or VirtualTimers(framerate)
        self.canvas = Image.new("RGB", size, background)
        self.draw = ImageDraw.Draw(self.canvas)
        self.captured: list[Path] = []

    async def advance_to(self, frame: int, time_ms: float) -> None:
        self.timers.clock.advance_to(frame, time_ms)

    async def fire_due(self, frame: int) -> StepReport:
        return self.timers.run_due(frame)

    async def capture(self, path: Path) -> None:
        self.canvas.save(path, format="PNG")
        self.captured.append(path)
