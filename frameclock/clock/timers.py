"""
In-process timer interception

VirtualTimers mirrors the browser timer API (setTimeout, setInterval,
requestAnimationFrame, performance.now) on top of a VirtualClock and a
TimerRegistry, so Python-side animation code can be stepped exactly like an
instrumented page.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from frameclock.clock.registry import TimerRegistry
from frameclock.clock.virtual_clock import VirtualClock

logger = logging.getLogger(__name__)


@dataclass
class StepReport:
    """Outcome of firing the callbacks due at one frame"""

    frame: int
    fired: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class VirtualTimers:
    """
    Browser-style timer functions routed through the virtual clock

    Example:
        timers = VirtualTimers(framerate=10)
        timers.set_interval(tick, 500)
        timers.clock.advance_to(0, 0.0)
        timers.run_due(0)
    """

    def __init__(self, framerate: float, clock: VirtualClock | None = None):
        self.clock = clock or VirtualClock(framerate)
        self.registry = TimerRegistry(self.clock)
        self._firing: set[int] = set()

    def performance_now(self) -> float:
        return self.clock.now()

    def set_timeout(self, callback: Callable[..., Any], delay: Any = 0, *args: Any) -> int:
        return self.registry.schedule_once(callback, delay, args)

    def request_animation_frame(self, callback: Callable[..., Any]) -> int:
        return self.registry.schedule_next_frame(callback)

    def set_interval(self, callback: Callable[..., Any], delay: Any = 0, *args: Any) -> int:
        return self.registry.schedule_repeating(callback, delay, args)

    def cancel(self, timer_id: Any) -> None:
        """Shared cancellation path for all three timer families"""
        try:
            self._firing.discard(timer_id)
        except TypeError:
            return
        self.registry.cancel(timer_id)

    clear_timeout = cancel
    cancel_animation_frame = cancel
    clear_interval = cancel

    def run_due(self, frame: int) -> StepReport:
        """
        Fire every callback due at frame

        The due set is snapshotted before anything runs. A callback that
        raises is logged and recorded; the remaining callbacks still run.

        Args:
            frame: Frame the clock currently points at

        Returns:
            StepReport for this frame
        """
        due = self.registry.drain_due(frame)
        self._firing = {entry.id for entry in due}
        report = StepReport(frame=frame)

        try:
            for entry in due:
                # cancelled by an earlier callback of this step
                if entry.id not in self._firing:
                    continue
                report.fired += 1
                try:
                    entry.callback(*entry.args)
                except Exception as e:
                    message = f"{type(e).__name__}: {e}"
                    logger.warning(f"Timer {entry.id} raised at frame {frame}: {message}")
                    report.errors.append(message)
        finally:
            self._firing = set()

        return report
