"""
Settings for the instance inventory and log aggregation data sources.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings
from config import (
    DATASOURCE_BACKEND_AWS,
    CWLOGSTREAM_BACKEND,
    CWLOGSTREAM_AWS_REGION,
    CWLOGSTREAM_LOG_GROUP_PREFIX,
    CWLOGSTREAM_CONNECTOR_TIMEOUT,
)

class DataSourceSettings(BaseSettings):
    backend: str = CWLOGSTREAM_BACKEND
    aws_region: str = CWLOGSTREAM_AWS_REGION
    log_group_prefix: str = CWLOGSTREAM_LOG_GROUP_PREFIX
    connector_timeout: int = CWLOGSTREAM_CONNECTOR_TIMEOUT

    @field_validator("backend", mode="before")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        value = str(v or "").strip().lower()
        if value not in {DATASOURCE_BACKEND_AWS}:
            raise ValueError(f"Unsupported datasource backend: {value!r}")
        return value

    @field_validator("aws_region", "log_group_prefix", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return str(v or "").strip()

    @field_validator("connector_timeout")
    @classmethod
    def positive_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("connector_timeout must be positive")
        return v

    model_config = {"env_prefix": "CWLOGSTREAM_", "extra": "ignore"}
