"""
Core interfaces and protocols

Defines the seams between the frame driver and whatever hosts the
virtual timers (an instrumented browser page or an in-process simulation).
"""

from pathlib import Path
from typing import Protocol

from frameclock.clock.timers import StepReport


class FrameTarget(Protocol):
    """Protocol for anything the frame driver can step and photograph"""

    async def advance_to(self, frame: int, time_ms: float) -> None:
        """Move the virtual clock to the given frame and time"""
        ...

    async def fire_due(self, frame: int) -> StepReport:
        """
        Run every timer callback due at this frame

        Returns:
            StepReport with the number of callbacks fired and their errors
        """
        ...

    async def capture(self, path: Path) -> None:
        """Persist a still image of the current visual state to path"""
        ...


class FrameEncoder(Protocol):
    """Protocol for still-image sequence encoders"""

    def is_available(self) -> bool:
        """Whether the encoder can run on this machine"""
        ...

    def encode(
        self,
        frames_dir: Path,
        pattern: str,
        framerate: float,
        width: int,
        height: int,
        output_path: Path,
    ) -> Path:
        """Assemble the numbered frames in frames_dir into output_path"""
        ...
