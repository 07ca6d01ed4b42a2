"""
Constants and configuration for the CloudWatch log stream exporter.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

import os
import re
from datetime import timedelta
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings


NAMESPACE = "cwlogstream"

DATASOURCE_BACKEND_AWS = "aws"

CWLOGSTREAM_BACKEND = os.getenv("CWLOGSTREAM_BACKEND", DATASOURCE_BACKEND_AWS).lower()
CWLOGSTREAM_AWS_REGION = os.getenv("CWLOGSTREAM_AWS_REGION", os.getenv("AWS_REGION", ""))
CWLOGSTREAM_LOG_GROUP_PREFIX = os.getenv("CWLOGSTREAM_LOG_GROUP_PREFIX", "")
CWLOGSTREAM_EC2_TAG_FILTER = os.getenv("CWLOGSTREAM_EC2_TAG_FILTER", "Env:dev")
CWLOGSTREAM_CONNECTOR_TIMEOUT = int(os.getenv("CWLOGSTREAM_CONNECTOR_TIMEOUT", "5"))

# CloudWatch Logs DescribeLogStreams budget: streams are ordered by last event
# time, so three pages of fifty cover every active emitter of a typical fleet.
STREAM_PAGE_SIZE = 50
STREAM_MAX_PAGES = 3

INSTANCE_ID_PATTERN = r"i-[a-z0-9]{8,17}"
INSTANCE_STATE_RUNNING = "running"

METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_DURATION_PART_RE = re.compile(r"(\d+(?:\.\d+)?)(ms|h|m|s)")
_DURATION_UNITS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_duration(value: Any) -> timedelta:
    """Parse ``90m``, ``1h30m``, ``45s``, ``500ms`` or a number of seconds."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, (int, float)):
        return timedelta(seconds=float(value))

    text = str(value or "").strip().lower()
    if not text:
        raise ValueError("empty duration")
    try:
        return timedelta(seconds=float(text))
    except ValueError:
        pass

    pos = 0
    seconds = 0.0
    for match in _DURATION_PART_RE.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos != len(text) or pos == 0:
        raise ValueError(f"invalid duration: {value!r}")
    return timedelta(seconds=seconds)


class Settings(BaseSettings):
    aws_region: str = CWLOGSTREAM_AWS_REGION
    log_group_prefix: str = CWLOGSTREAM_LOG_GROUP_PREFIX
    ec2_tag_filter: str = CWLOGSTREAM_EC2_TAG_FILTER

    # a stream whose last event predates now - log_stream_timeout is stale
    log_stream_timeout: timedelta = timedelta(minutes=60)
    # deadline for one whole collection cycle
    collect_timeout: timedelta = timedelta(seconds=10)
    max_parallel_stream_fetches: int = 8
    connector_timeout: int = CWLOGSTREAM_CONNECTOR_TIMEOUT

    listen_address: str = ":9520"
    metrics_path: str = "/metrics"
    debug: bool = False

    # build metadata reported through cwlogstream_build_info
    version: str = os.getenv("CWLOGSTREAM_VERSION", "0.1.0")
    branch: str = ""
    revision: str = ""

    @field_validator("log_stream_timeout", "collect_timeout", mode="before")
    @classmethod
    def coerce_duration(cls, v: Any) -> timedelta:
        duration = parse_duration(v)
        if duration <= timedelta(0):
            raise ValueError("duration must be positive")
        return duration

    @field_validator("metrics_path", mode="before")
    @classmethod
    def normalize_metrics_path(cls, v: str) -> str:
        value = str(v or "").strip()
        if not value.startswith("/"):
            value = f"/{value}"
        return value

    @field_validator("max_parallel_stream_fetches")
    @classmethod
    def at_least_one(cls, v: int) -> int:
        return max(1, int(v))

    def listen_host_port(self) -> tuple[str, int]:
        host, _, port = self.listen_address.rpartition(":")
        if not port.isdigit():
            raise ValueError(f"invalid listen address: {self.listen_address!r}")
        return host or "0.0.0.0", int(port)

    model_config = {
        "env_prefix": "CWLOGSTREAM_",
        "extra": "ignore",
    }


settings = Settings()
