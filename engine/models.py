"""
Cycle-scoped data model: instances, log groups, log streams and verdicts.

Every object here is created during one collection cycle, never mutated, and
dropped once the cycle returns.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple

from engine.enums import Liveness, Status


@dataclass(frozen=True)
class Instance:
    instance_id: str


@dataclass(frozen=True)
class LogGroup:
    arn: str
    name: str


@dataclass(frozen=True)
class LogStream:
    name: str
    last_event_timestamp: Optional[datetime] = None

    @classmethod
    def from_epoch_millis(cls, name: str, millis: Optional[int]) -> LogStream:
        # CloudWatch reports lastEventTimestamp in milliseconds since the epoch, UTC
        if millis is None:
            return cls(name=name)
        ts = datetime.fromtimestamp(int(millis) / 1000.0, tz=timezone.utc)
        return cls(name=name, last_event_timestamp=ts)


@dataclass(frozen=True)
class LogGroupStreams:
    group: LogGroup
    streams: Tuple[LogStream, ...] = ()


@dataclass(frozen=True)
class CorrelationResult:
    instance_id: str
    group: str
    liveness: Liveness

    @property
    def status(self) -> Status:
        return self.liveness.status


@dataclass(frozen=True)
class MetricSample:
    """A single gauge value ready for exposition.

    Attributes:
        name: Fully qualified metric name (e.g. cwlogstream_up).
        value: The gauge value.
        labels: Label name to value, in descriptor order.
    """

    name: str
    value: float
    labels: Dict[str, str] = field(default_factory=dict)
