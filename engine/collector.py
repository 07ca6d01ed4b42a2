"""
Collection cycle: fetch instances and log groups, correlate them per group and emit gauges.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from datasources.base import InstanceGatherer, LogGatherer
from datasources.exceptions import DataSourceError
from engine.context import Clock, CycleContext, utcnow
from engine.correlation import correlate
from engine.enums import CyclePhase
from engine.exceptions import DeadlineExceeded, SendAfterCancellation
from engine.metrics import SENDING, UP, MetricDesc, sending_sample, up_sample
from engine.models import Instance, LogGroup, LogGroupStreams
from engine.sink import MetricChannel, send

log = logging.getLogger(__name__)


class Exporter:
    """Collects ``cwlogstream_sending`` and ``cwlogstream_up`` once per scrape.

    Only one cycle runs at a time; a second :meth:`collect` waits for the
    first to finish. Every cycle gets its own :class:`CycleContext` whose
    deadline bounds all fetches, and whose start time fixes the staleness
    cutoff for every verdict of that cycle.
    """

    def __init__(
        self,
        instances: InstanceGatherer,
        logs: LogGatherer,
        *,
        tag_filter: str,
        log_stream_timeout: timedelta,
        collect_timeout: timedelta = timedelta(seconds=10),
        max_parallel_stream_fetches: int = 8,
        clock: Clock = utcnow,
    ):
        self._instances = instances
        self._logs = logs
        self.tag_filter = tag_filter
        self.log_stream_timeout = log_stream_timeout
        self.collect_timeout = collect_timeout
        self.max_parallel_stream_fetches = max(1, int(max_parallel_stream_fetches))
        self._clock = clock
        self._lock = asyncio.Lock()
        self.phase = CyclePhase.idle
        self.last_error: Optional[str] = None

    def describe(self) -> Tuple[MetricDesc, ...]:
        return (UP, SENDING)

    async def collect(self, channel: MetricChannel) -> bool:
        async with self._lock:
            ctx = CycleContext(self.collect_timeout, clock=self._clock)
            try:
                healthy = await self._run_cycle(ctx, channel)
            finally:
                # late workers must not write once the caller owns the channel again
                ctx.cancel()
            channel.write(up_sample(healthy))
            return healthy

    async def _run_cycle(self, ctx: CycleContext, channel: MetricChannel) -> bool:
        cutoff = ctx.cutoff(self.log_stream_timeout)
        log.debug("Collection cycle started at %s, last event cutoff %s", ctx.started_at, cutoff)
        self.phase = CyclePhase.fetching_inputs
        try:
            instances, groups = await self._fetch_inputs(ctx)
            self.phase = CyclePhase.fetching_streams
            await self._collect_groups(ctx, channel, instances, groups, cutoff)
            # every sample may have been written and still have finished past the deadline
            err = ctx.err()
            if err is not None:
                raise err
        except DeadlineExceeded as exc:
            log.error(
                "Error collecting metrics: Timeout making calls, waited for %s without response",
                self.collect_timeout,
            )
            return self._fail(exc)
        except DataSourceError as exc:
            log.error("Error collecting metrics: %s", exc)
            return self._fail(exc)
        except Exception as exc:
            log.exception("Unexpected error collecting metrics")
            return self._fail(exc)

        self.phase = CyclePhase.done
        self.last_error = None
        return True

    def _fail(self, exc: Exception) -> bool:
        self.phase = CyclePhase.failed
        self.last_error = str(exc) or type(exc).__name__
        return False

    async def _fetch_inputs(self, ctx: CycleContext) -> Tuple[List[str], List[LogGroup]]:
        instances_task = asyncio.create_task(
            self._instances.get_instances(ctx, self.tag_filter), name="get_instances"
        )
        groups_task = asyncio.create_task(self._logs.get_log_groups(ctx), name="get_log_groups")
        await _join(ctx, [instances_task, groups_task])

        instances: Sequence[Instance] = instances_task.result()
        groups: List[LogGroup] = list(groups_task.result())
        instance_ids = list(dict.fromkeys(i.instance_id for i in instances))
        log.debug("Fetched %d instance(s) and %d log group(s)", len(instance_ids), len(groups))
        return instance_ids, groups

    async def _collect_groups(
        self,
        ctx: CycleContext,
        channel: MetricChannel,
        instance_ids: List[str],
        groups: List[LogGroup],
        cutoff: datetime,
    ) -> None:
        if not groups:
            log.debug("No log groups to collect")
            return

        sem = asyncio.Semaphore(self.max_parallel_stream_fetches)
        outstanding = len(groups)

        async def _group(group: LogGroup) -> None:
            nonlocal outstanding
            async with sem:
                group_streams = await self._logs.get_log_streams(ctx, group)
            outstanding -= 1
            if outstanding == 0:
                # groups fetched earlier were already emitted while later fetches were in flight
                self.phase = CyclePhase.correlating
            self._emit_group(ctx, channel, group_streams, instance_ids, cutoff)

        tasks = [asyncio.create_task(_group(g), name=f"log_streams:{g.name}") for g in groups]
        await _join(ctx, tasks)

    def _emit_group(
        self,
        ctx: CycleContext,
        channel: MetricChannel,
        group_streams: LogGroupStreams,
        instance_ids: List[str],
        cutoff: datetime,
    ) -> None:
        for instance_id in instance_ids:
            result = correlate(instance_id, group_streams, cutoff)
            try:
                send(ctx, channel, sending_sample(result))
            except SendAfterCancellation:
                err = ctx.err()
                if isinstance(err, DeadlineExceeded):
                    # the deadline passed mid-group, the cycle has not resolved yet
                    raise err
                log.debug("Dropping samples for group=%s, cycle already resolved", group_streams.group.name)
                return


async def _join(ctx: CycleContext, tasks: List[asyncio.Task]) -> None:
    """Wait for every task; on the first failure or on deadline cancel the rest and raise."""
    finished: List[asyncio.Task] = []
    for t in tasks:
        t.add_done_callback(finished.append)
    try:
        _, pending = await asyncio.wait(
            tasks, timeout=ctx.remaining(), return_when=asyncio.FIRST_EXCEPTION
        )
    except asyncio.CancelledError:
        ctx.cancel("collect cancelled")
        await _abandon(tasks)
        raise

    # completion order, so the reported failure is the one that happened first
    ordered = finished + [t for t in tasks if t.done() and t not in finished]
    failed = [t for t in ordered if not t.cancelled() and t.exception() is not None]
    if not failed and not pending:
        return

    timeout_err = ctx.err() or DeadlineExceeded("deadline exceeded")
    ctx.cancel(f"{failed[0].get_name()} failed" if failed else "deadline exceeded")
    await _abandon(pending)
    if failed:
        raise failed[0].exception()
    raise timeout_err


async def _abandon(tasks) -> None:
    for t in tasks:
        t.cancel()
    # results that arrive after cancellation are discarded here
    await asyncio.gather(*tasks, return_exceptions=True)
