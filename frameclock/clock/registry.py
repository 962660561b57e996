"""
Timer registry

Pending one-shot and repeating callbacks, keyed by a single id counter so
cancellation never needs to know which family a handle came from.
"""

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count
from typing import Any

from frameclock.clock.virtual_clock import VirtualClock

logger = logging.getLogger(__name__)


@dataclass
class TimerEntry:
    """One-shot entry (delay timer or next-frame callback)"""

    id: int
    due_frame: int
    callback: Callable[..., Any]
    args: tuple = field(default_factory=tuple)


@dataclass
class IntervalEntry:
    """Repeating entry, re-armed after every firing"""

    id: int
    next_due_frame: int
    period_ms: float
    callback: Callable[..., Any]
    args: tuple = field(default_factory=tuple)


def normalize_delay(delay: Any) -> float:
    """Missing, negative or non-numeric delays behave like 0"""
    try:
        value = float(delay)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value) or value < 0:
        return 0.0
    return value


class TimerRegistry:
    """
    Pending timer callbacks, resolved frame by frame

    Entries registered while a drained snapshot is being executed are never
    part of that snapshot; the earliest they can fire is the next drain.

    Example:
        clock = VirtualClock(framerate=60)
        registry = TimerRegistry(clock)
        handle = registry.schedule_once(print, 20, ("hello",))
        registry.drain_due(2)  # -> [TimerEntry(id=handle, due_frame=2, ...)]
    """

    def __init__(self, clock: VirtualClock):
        self.clock = clock
        self._ids = count(1)
        # dicts keep insertion order, which is the firing order
        self._once: dict[int, TimerEntry] = {}
        self._repeating: dict[int, IntervalEntry] = {}

    def schedule_once(
        self, callback: Callable[..., Any], delay_ms: Any = 0, args: tuple = ()
    ) -> int:
        """
        Register a callback to run once after delay_ms of simulated time

        Returns:
            Handle usable with cancel()
        """
        due = self.clock.frame_for(self.clock.now() + normalize_delay(delay_ms))
        entry = TimerEntry(id=next(self._ids), due_frame=due, callback=callback, args=tuple(args))
        self._once[entry.id] = entry
        logger.debug(f"Scheduled timeout {entry.id} for frame {due}")
        return entry.id

    def schedule_next_frame(self, callback: Callable[..., Any], args: tuple = ()) -> int:
        """Register a callback for the very next rendered frame"""
        entry = TimerEntry(
            id=next(self._ids),
            due_frame=self.clock.current_frame + 1,
            callback=callback,
            args=tuple(args),
        )
        self._once[entry.id] = entry
        logger.debug(f"Scheduled animation frame {entry.id} for frame {entry.due_frame}")
        return entry.id

    def schedule_repeating(
        self, callback: Callable[..., Any], delay_ms: Any = 0, args: tuple = ()
    ) -> int:
        """Register a callback that fires every delay_ms until cancelled"""
        period = normalize_delay(delay_ms)
        entry = IntervalEntry(
            id=next(self._ids),
            next_due_frame=self.clock.frame_for(self.clock.now() + period),
            period_ms=period,
            callback=callback,
            args=tuple(args),
        )
        self._repeating[entry.id] = entry
        logger.debug(f"Scheduled interval {entry.id} every {period}ms from frame {entry.next_due_frame}")
        return entry.id

    def cancel(self, timer_id: Any) -> None:
        """Remove an entry; unknown or already-fired handles are ignored"""
        try:
            if self._once.pop(timer_id, None) is None:
                self._repeating.pop(timer_id, None)
        except TypeError:
            # unhashable values were never issued as handles
            return

    def is_pending(self, timer_id: int) -> bool:
        return timer_id in self._once or timer_id in self._repeating

    def drain_due(self, frame: int) -> list[TimerEntry | IntervalEntry]:
        """
        Snapshot everything due at this frame

        Due one-shot entries are removed; due repeating entries stay and are
        re-armed from the current clock value. One-shot entries come first,
        each family in registration order.

        Args:
            frame: Frame being rendered

        Returns:
            Entries to fire, in firing order
        """
        due_once = [entry for entry in self._once.values() if entry.due_frame <= frame]
        for entry in due_once:
            del self._once[entry.id]

        due_repeating = [
            entry for entry in self._repeating.values() if entry.next_due_frame <= frame
        ]
        now = self.clock.now()
        for entry in due_repeating:
            entry.next_due_frame = max(frame + 1, self.clock.frame_for(now + entry.period_ms))

        return [*due_once, *due_repeating]

    @property
    def pending_count(self) -> dict[str, int]:
        return {"once": len(self._once), "repeating": len(self._repeating)}

    def __len__(self) -> int:
        return len(self._once) + len(self._repeating)
