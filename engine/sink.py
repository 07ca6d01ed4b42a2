"""
Cancellation-aware delivery of samples to a caller-owned channel.

The caller creates one :class:`MetricChannel` per scrape and closes it as soon
as ``collect`` returns. Workers that overran the cycle deadline may still be
running at that point; :func:`send` refuses to write once the cycle context is
done so that such late writes surface as :class:`SendAfterCancellation`
instead of landing in a scrape that has already been served.

The check and the write are two separate steps. A channel closed by another
thread between them still raises :class:`ChannelClosed` from ``write``.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import logging
from typing import Callable

from engine.context import CycleContext
from engine.exceptions import ChannelClosed, SendAfterCancellation
from engine.models import MetricSample

log = logging.getLogger(__name__)

Receiver = Callable[[MetricSample], None]


class MetricChannel:
    def __init__(self, receiver: Receiver):
        self._receiver = receiver
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, sample: MetricSample) -> None:
        if self._closed:
            raise ChannelClosed(f"write of {sample.name} on closed channel")
        self._receiver(sample)

    def close(self) -> None:
        self._closed = True


def send(ctx: CycleContext, channel: MetricChannel, sample: MetricSample) -> None:
    if ctx.done:
        log.error(
            "Tried to send a metric after collection context has finished, metric: %s %s",
            sample.name, sample.labels,
        )
        raise SendAfterCancellation(str(ctx.err()))
    channel.write(sample)
