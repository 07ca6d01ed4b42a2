"""
Provider bundling the instance inventory and log aggregation connectors for one region.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from datasources.base import InstanceGatherer, LogGatherer
from .data_config import DataSourceSettings
from .factory import DataSourceFactory

class DataSourceProvider:
    def __init__(self, settings: DataSourceSettings):
        self.settings = settings
        self.instances: InstanceGatherer = DataSourceFactory.create_instances(settings)
        self.logs: LogGatherer = DataSourceFactory.create_logs(settings)

    async def aclose(self) -> None:
        await self.instances.aclose()
        await self.logs.aclose()
