"""
Virtual clock and timer interception

Provides the frame-stepped replacement for wall-clock time and the timer
families captured code relies on.
"""

from frameclock.clock.instrumentation import build_instrumentation_script
from frameclock.clock.registry import IntervalEntry, TimerEntry, TimerRegistry
from frameclock.clock.simulation import SimulatedTarget
from frameclock.clock.timers import StepReport, VirtualTimers
from frameclock.clock.virtual_clock import VirtualClock, frame_to_ms, ms_to_frame

__all__ = [
    "IntervalEntry",
    "SimulatedTarget",
    "StepReport",
    "TimerEntry",
    "TimerRegistry",
    "VirtualClock",
    "VirtualTimers",
    "build_instrumentation_script",
    "frame_to_ms",
    "ms_to_frame",
]
