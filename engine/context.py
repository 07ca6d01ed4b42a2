"""
Cancellation token and deadline shared by everything one collection cycle starts.

The context is passed explicitly to every fetch and every emission. Connectors
read it from worker threads between pages, so cancellation is backed by a
``threading.Event`` rather than loop-bound state.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from engine.exceptions import CollectionError, CycleCancelled, DeadlineExceeded

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CycleContext:
    def __init__(self, timeout: timedelta, clock: Clock = utcnow):
        self.started_at = clock()
        self.timeout = timeout
        self._deadline = time.monotonic() + timeout.total_seconds()
        self._cancelled = threading.Event()
        self._reason: Optional[str] = None

    def remaining(self) -> float:
        return max(0.0, self._deadline - time.monotonic())

    def expired(self) -> bool:
        return time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self._cancelled.is_set() or self.expired()

    def cancel(self, reason: str = "cycle resolved") -> None:
        if not self._cancelled.is_set():
            self._reason = reason
            self._cancelled.set()

    def err(self) -> Optional[CollectionError]:
        if self._cancelled.is_set():
            return CycleCancelled(self._reason or "cancelled")
        if self.expired():
            return DeadlineExceeded(f"deadline of {self.timeout.total_seconds():g}s exceeded")
        return None

    def cutoff(self, staleness_window: timedelta) -> datetime:
        return self.started_at - staleness_window
