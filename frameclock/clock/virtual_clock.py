"""
Virtual clock

Holds the simulated "now" observed by captured code. Time only moves when
the frame driver steps it; wall-clock time never leaks in.
"""

import logging
import math

from frameclock.core.exceptions import ClockError

logger = logging.getLogger(__name__)

# Products like 2 * (1000 / 60) * 60 / 1000 land a hair above an integer
_FRAME_EPSILON = 1e-9


def frame_to_ms(frame: int, framerate: float) -> float:
    """Simulated time at the start of a frame"""
    return frame * 1000 / framerate


def ms_to_frame(ms: float, framerate: float) -> int:
    """
    First frame whose start time is at or after ms

    Args:
        ms: Simulated time in milliseconds
        framerate: Frames per second

    Returns:
        ceil(ms * framerate / 1000), never negative
    """
    exact = ms * framerate / 1000
    nearest = round(exact)
    if abs(exact - nearest) < _FRAME_EPSILON:
        return max(0, nearest)
    return max(0, math.ceil(exact))


class VirtualClock:
    """
    Frame-indexed simulated clock

    Example:
        clock = VirtualClock(framerate=60)
        clock.advance_to(0, 0.0)
        clock.advance_to(1, frame_to_ms(1, 60))
        clock.now()  # 16.666...
    """

    def __init__(self, framerate: float):
        if framerate <= 0:
            raise ClockError(f"Framerate must be positive, got {framerate}")
        self.framerate = framerate
        self.current_frame = 0
        self.current_time_ms = 0.0
        self._stepped = False

    def now(self) -> float:
        """Replacement for a monotonic clock read"""
        return self.current_time_ms

    def advance_to(self, frame: int, time_ms: float) -> None:
        """
        Move to the next frame

        Frames are visited once each, in order: the first call must target
        the current frame (0), every later call current_frame + 1.

        Raises:
            ClockError: On a skipped or repeated frame, or time going backwards
        """
        expected = self.current_frame + 1 if self._stepped else self.current_frame
        if frame != expected:
            raise ClockError(f"Expected frame {expected}, got {frame}")
        if time_ms < self.current_time_ms:
            raise ClockError(
                f"Time cannot go backwards ({time_ms}ms < {self.current_time_ms}ms)"
            )

        self.current_frame = frame
        self.current_time_ms = time_ms
        self._stepped = True

    def set_time(self, time_ms: float) -> None:
        """Move simulated time within the current frame (setup only)"""
        if time_ms < self.current_time_ms:
            raise ClockError(
                f"Time cannot go backwards ({time_ms}ms < {self.current_time_ms}ms)"
            )
        self.current_time_ms = time_ms

    def frame_for(self, ms: float) -> int:
        return ms_to_frame(ms, self.framerate)

    def __repr__(self) -> str:
        return f"VirtualClock(frame={self.current_frame}, time_ms={self.current_time_ms:.3f})"
