"""
Gatherer interfaces consumed by the collection engine.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from engine.context import CycleContext
from engine.models import Instance, LogGroup, LogGroupStreams


class InstanceGatherer(ABC):
    @abstractmethod
    async def get_instances(self, ctx: CycleContext, tag_filter: str) -> List[Instance]:
        """Return every running instance matching ``tag_filter`` (``key:value,...``)."""

    async def aclose(self) -> None:
        return None


class LogGatherer(ABC):
    @abstractmethod
    async def get_log_groups(self, ctx: CycleContext) -> List[LogGroup]: ...

    @abstractmethod
    async def get_log_streams(self, ctx: CycleContext, group: LogGroup) -> LogGroupStreams:
        """Return ``group`` with its most recently active streams, newest first."""

    async def aclose(self) -> None:
        return None
