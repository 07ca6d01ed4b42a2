"""
Factory for creating data source connectors based on configuration.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from connectors.cloudwatch_logs import CloudWatchLogsConnector
from connectors.ec2 import Ec2Connector


class DataSourceFactory:

    @staticmethod
    def create_instances(config):
        from config import DATASOURCE_BACKEND_AWS
        if config.backend == DATASOURCE_BACKEND_AWS:
            return Ec2Connector(config.aws_region, timeout=config.connector_timeout)
        raise ValueError("Unsupported instances backend")

    @staticmethod
    def create_logs(config):
        from config import DATASOURCE_BACKEND_AWS
        if config.backend == DATASOURCE_BACKEND_AWS:
            return CloudWatchLogsConnector(
                config.aws_region,
                log_group_prefix=config.log_group_prefix,
                timeout=config.connector_timeout,
            )
        raise ValueError("Unsupported logs backend")
