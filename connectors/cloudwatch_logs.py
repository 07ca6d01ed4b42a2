# connectors/cloudwatch_logs.py

import asyncio
import logging
from typing import Any, List, Optional

from config import STREAM_MAX_PAGES, STREAM_PAGE_SIZE
from datasources.base import LogGatherer
from datasources.helpers import check_context, create_client, translate_errors
from engine.context import CycleContext
from engine.models import LogGroup, LogGroupStreams, LogStream

log = logging.getLogger(__name__)

SOURCE = "cloudwatch logs"


class CloudWatchLogsConnector(LogGatherer):
    def __init__(
        self,
        region: str,
        log_group_prefix: str = "",
        timeout: int = 5,
        client: Optional[Any] = None,
    ):
        self.region = region
        self.log_group_prefix = log_group_prefix
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = create_client("logs", self.region, self.timeout)
        return self._client

    async def get_log_groups(self, ctx: CycleContext) -> List[LogGroup]:
        return await asyncio.to_thread(self._describe_log_groups, ctx)

    async def get_log_streams(self, ctx: CycleContext, group: LogGroup) -> LogGroupStreams:
        return await asyncio.to_thread(self._describe_log_streams, ctx, group)

    def _describe_log_groups(self, ctx: CycleContext) -> List[LogGroup]:
        params = {}
        if self.log_group_prefix:
            params["logGroupNamePrefix"] = self.log_group_prefix

        groups: List[LogGroup] = []
        with translate_errors(SOURCE):
            for page in self.client.get_paginator("describe_log_groups").paginate(**params):
                check_context(ctx, SOURCE)
                for item in page.get("logGroups", []):
                    groups.append(LogGroup(arn=item.get("arn", ""), name=item["logGroupName"]))
        return groups

    def _describe_log_streams(self, ctx: CycleContext, group: LogGroup) -> LogGroupStreams:
        streams: List[LogStream] = []
        with translate_errors(SOURCE):
            pages = self.client.get_paginator("describe_log_streams").paginate(
                logGroupName=group.name,
                orderBy="LastEventTime",
                descending=True,
                PaginationConfig={"PageSize": STREAM_PAGE_SIZE},
            )
            # newest streams come first, so the page budget keeps every active emitter
            for page_no, page in enumerate(pages, start=1):
                check_context(ctx, SOURCE)
                for item in page.get("logStreams", []):
                    streams.append(
                        LogStream.from_epoch_millis(item["logStreamName"], item.get("lastEventTimestamp"))
                    )
                if page_no >= STREAM_MAX_PAGES:
                    break
        log.debug("group=%s returned %d stream(s)", group.name, len(streams))
        return LogGroupStreams(group=group, streams=tuple(streams))
