"""
Correlation of running instances with the log streams of a log group.

A stream belongs to an instance when the instance id extracted from the
stream name is exactly that instance id. Among an instance's streams the one
with the newest last event decides whether the instance is still sending.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import Iterable, List, Optional

from config import INSTANCE_ID_PATTERN
from engine.enums import Liveness, Status
from engine.models import CorrelationResult, LogGroupStreams, LogStream

log = logging.getLogger(__name__)

_INSTANCE_ID_RE = re.compile(INSTANCE_ID_PATTERN)


def extract_instance_id(stream_name: str) -> Optional[str]:
    match = _INSTANCE_ID_RE.search(stream_name or "")
    return match.group(0) if match else None


def _streams_for(streams: Iterable[LogStream], instance_id: str) -> List[LogStream]:
    return [s for s in streams if extract_instance_id(s.name) == instance_id]


def matches(streams: Iterable[LogStream], instance_id: str) -> bool:
    return any(extract_instance_id(s.name) == instance_id for s in streams)


def _recency_key(stream: LogStream) -> tuple:
    ts = stream.last_event_timestamp
    return (ts is not None, ts.timestamp() if ts is not None else 0.0)


def representative(streams: Iterable[LogStream], instance_id: str) -> LogStream:
    """Return the most recently active stream whose extracted id is ``instance_id``.

    Ties keep the first stream in input order. Raises ``LookupError`` when no
    stream matches; callers are expected to check :func:`matches` first.
    """
    candidates = _streams_for(streams, instance_id)
    if not candidates:
        raise LookupError(f"no log stream for instance_id={instance_id}")
    return max(candidates, key=_recency_key)


def verdict(stream: LogStream, cutoff: datetime) -> Status:
    ts = stream.last_event_timestamp
    if ts is None or ts < cutoff:
        return Status.down
    return Status.up


def correlate(instance_id: str, group_streams: LogGroupStreams, cutoff: datetime) -> CorrelationResult:
    group = group_streams.group.name
    if not matches(group_streams.streams, instance_id):
        log.debug("No log stream found with instance_id=%s in group=%s", instance_id, group)
        return CorrelationResult(instance_id=instance_id, group=group, liveness=Liveness.missing)

    stream = representative(group_streams.streams, instance_id)
    status = verdict(stream, cutoff)
    log.debug(
        "instance_id=%s group=%s stream=%s last_event=%s cutoff=%s status=%s",
        instance_id, group, stream.name, stream.last_event_timestamp, cutoff, status.value,
    )
    liveness = Liveness.fresh if status is Status.up else Liveness.stale
    return CorrelationResult(instance_id=instance_id, group=group, liveness=liveness)
