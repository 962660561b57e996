"""
frameclock

Renders time-driven web animations into frame-exact image sequences by
replacing the page's timers with a virtual, frame-stepped clock.
"""

__version__ = "1.0.0"
__license__ = "MIT"

from frameclock.capture.driver import FrameDriver
from frameclock.capture.session import CaptureResult, CaptureSession
from frameclock.clock.simulation import SimulatedTarget
from frameclock.clock.timers import VirtualTimers
from frameclock.core.config import CaptureConfig

__all__ = [
    "CaptureConfig",
    "CaptureResult",
    "CaptureSession",
    "FrameDriver",
    "SimulatedTarget",
    "VirtualTimers",
]
