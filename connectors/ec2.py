# connectors/ec2.py

import asyncio
import logging
from typing import Any, List, Optional

from config import INSTANCE_STATE_RUNNING
from datasources.base import InstanceGatherer
from datasources.helpers import (
    check_context,
    create_client,
    instance_filters,
    parse_tag_filter,
    translate_errors,
)
from engine.context import CycleContext
from engine.models import Instance

log = logging.getLogger(__name__)

SOURCE = "ec2"


class Ec2Connector(InstanceGatherer):
    def __init__(self, region: str, timeout: int = 5, client: Optional[Any] = None):
        self.region = region
        self.timeout = timeout
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = create_client("ec2", self.region, self.timeout)
        return self._client

    async def get_instances(self, ctx: CycleContext, tag_filter: str) -> List[Instance]:
        filters = instance_filters(parse_tag_filter(tag_filter), INSTANCE_STATE_RUNNING)
        return await asyncio.to_thread(self._describe_instances, ctx, filters)

    def _describe_instances(self, ctx: CycleContext, filters: List[dict]) -> List[Instance]:
        instances: List[Instance] = []
        with translate_errors(SOURCE):
            pages = self.client.get_paginator("describe_instances").paginate(Filters=filters)
            for page in pages:
                check_context(ctx, SOURCE)
                for reservation in page.get("Reservations", []):
                    for item in reservation.get("Instances", []):
                        instance_id = item.get("InstanceId")
                        if instance_id:
                            instances.append(Instance(instance_id=instance_id))
        log.debug("ec2 returned %d running instance(s) for filters=%s", len(instances), filters)
        return instances
