# Copyright (c) 2025 Luc Vincent. All Rights Reserved.
"""
Tick sources for driving clocks.
A tick source invokes a callback roughly every interval until unsubscribed.
"""

import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickHandle:
    """Opaque identifier of an active subscription."""
    id: int


class TickSource(ABC):
    """Periodic scheduling primitive."""

    @abstractmethod
    def subscribe(self, callback: Callable[[], None], interval_ms: int) -> TickHandle:
        """Invoke callback every interval_ms until unsubscribed."""

    @abstractmethod
    def unsubscribe(self, handle: TickHandle) -> None:
        """Cancel a subscription. Unknown handles are ignored."""

    @property
    @abstractmethod
    def active(self) -> int:
        """Number of live subscriptions."""


@dataclass
class _Subscription:
    callback: Callable[[], None]
    interval: float
    due: float


class LoopTickSource(TickSource):
    """
    Cooperative tick source driven from an event loop.

    Nothing happens until pump() is called; each call fires every
    subscription whose due time has passed. Used by the pygame main loop so
    all clock work stays on one thread.
    """

    def __init__(self, clock_fn: Callable[[], float] = time.monotonic):
        """
        Args:
            clock_fn: Monotonic time source in seconds.
        """
        self._clock_fn = clock_fn
        self._subscriptions: Dict[int, _Subscription] = {}
        self._ids = itertools.count(1)

    def subscribe(self, callback: Callable[[], None], interval_ms: int) -> TickHandle:
        interval = interval_ms / 1000.0
        handle = TickHandle(next(self._ids))
        self._subscriptions[handle.id] = _Subscription(
            callback=callback,
            interval=interval,
            due=self._clock_fn() + interval,
        )
        logger.debug(f"Tick subscription {handle.id} added ({interval_ms}ms)")
        return handle

    def unsubscribe(self, handle: TickHandle) -> None:
        if self._subscriptions.pop(handle.id, None) is not None:
            logger.debug(f"Tick subscription {handle.id} removed")

    @property
    def active(self) -> int:
        return len(self._subscriptions)

    def pump(self) -> int:
        """
        Fire all due subscriptions.

        A subscription that fell behind (e.g., after a stall) fires once and
        is rescheduled one interval from now rather than replaying missed
        ticks.

        Returns:
            Number of callbacks invoked.
        """
        now = self._clock_fn()
        fired = 0

        for sub_id, sub in list(self._subscriptions.items()):
            # A callback may have unsubscribed a later entry
            if sub_id not in self._subscriptions or now < sub.due:
                continue

            sub.due += sub.interval
            if sub.due <= now:
                sub.due = now + sub.interval

            try:
                sub.callback()
            except Exception as e:
                logger.error(f"Tick callback {sub_id} failed: {e}")
            fired += 1

        return fired

    def time_until_next(self) -> Optional[float]:
        """Seconds until the earliest due subscription, or None if idle."""
        if not self._subscriptions:
            return None
        earliest = min(sub.due for sub in self._subscriptions.values())
        return max(0.0, earliest - self._clock_fn())


class ThreadedTickSource(TickSource):
    """
    Tick source running each subscription on its own daemon thread.

    Suitable when no event loop is available, and the default for clocks
    built without a tick source. Callbacks run on the worker thread; clock
    options are guarded by the option store's lock, but the display surface
    receives calls from both the worker and whichever thread sets options.
    """

    def __init__(self):
        self._threads: Dict[int, threading.Thread] = {}
        self._stop_events: Dict[int, threading.Event] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def subscribe(self, callback: Callable[[], None], interval_ms: int) -> TickHandle:
        interval = interval_ms / 1000.0
        handle = TickHandle(next(self._ids))
        stop_event = threading.Event()

        def tick_loop():
            while not stop_event.wait(interval):
                try:
                    callback()
                except Exception as e:
                    logger.error(f"Tick callback {handle.id} failed: {e}")

        thread = threading.Thread(
            target=tick_loop,
            name=f"worldclock-tick-{handle.id}",
            daemon=True,
        )
        with self._lock:
            self._threads[handle.id] = thread
            self._stop_events[handle.id] = stop_event
        thread.start()
        logger.debug(f"Tick thread {handle.id} started ({interval_ms}ms)")
        return handle

    def unsubscribe(self, handle: TickHandle) -> None:
        with self._lock:
            thread = self._threads.pop(handle.id, None)
            stop_event = self._stop_events.pop(handle.id, None)

        if thread is None:
            return

        stop_event.set()
        if thread is not threading.current_thread():
            thread.join(timeout=2.0)
        logger.debug(f"Tick thread {handle.id} stopped")

    @property
    def active(self) -> int:
        with self._lock:
            return len(self._threads)
