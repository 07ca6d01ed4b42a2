"""
Enumerations for liveness verdicts and collection cycle phases

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from enum import Enum


class Status(str, Enum):
    up = "up"
    down = "down"

    def gauge_value(self) -> float:
        return 1.0 if self is Status.up else 0.0


class Liveness(str, Enum):
    fresh = "fresh"
    stale = "stale"
    # no stream in the group carries the instance id at all
    missing = "missing"

    @property
    def status(self) -> Status:
        return Status.up if self is Liveness.fresh else Status.down


class CyclePhase(str, Enum):
    idle = "idle"
    fetching_inputs = "fetching_inputs"
    fetching_streams = "fetching_streams"
    correlating = "correlating"
    done = "done"
    failed = "failed"
