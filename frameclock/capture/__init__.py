"""
Frame capture

Drives a frame target through a capture session and encodes the result.
"""

from frameclock.capture.driver import DriverState, FrameDriver
from frameclock.capture.encoder import FfmpegEncoder
from frameclock.capture.session import CaptureResult, CaptureSession

__all__ = [
    "CaptureResult",
    "CaptureSession",
    "DriverState",
    "FfmpegEncoder",
    "FrameDriver",
]
