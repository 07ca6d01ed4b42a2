"""
Shared helper functions for the AWS data source connectors.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List

import boto3
from botocore.config import Config
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from datasources.exceptions import DataSourceUnavailable, InvalidQuery, QueryTimeout
from engine.context import CycleContext


def parse_tag_filter(tag_filter: str) -> Dict[str, str]:
    """Parse ``Env:dev,Team:core`` into ``{"Env": "dev", "Team": "core"}``.

    An empty string yields no filters. Values may themselves contain ``:``.
    """
    tags: Dict[str, str] = {}
    for pair in (tag_filter or "").split(","):
        pair = pair.strip()
        if not pair:
            continue
        name, sep, value = pair.partition(":")
        if not sep or not name.strip():
            raise InvalidQuery(f"invalid ec2 tag filter {pair!r}, expected key:value", source="ec2")
        tags[name.strip()] = value.strip()
    return tags


def instance_filters(tags: Dict[str, str], state: str) -> List[Dict[str, Any]]:
    filters: List[Dict[str, Any]] = [{"Name": "instance-state-name", "Values": [state]}]
    for name, value in tags.items():
        filters.append({"Name": f"tag:{name}", "Values": [value]})
    return filters


def create_client(service: str, region: str, timeout: int) -> Any:
    # one attempt per call: a failed fetch fails the cycle, the next scrape tries again
    cfg = Config(
        connect_timeout=timeout,
        read_timeout=timeout,
        retries={"total_max_attempts": 1, "mode": "standard"},
    )
    return boto3.session.Session().client(service, region_name=region, config=cfg)


def check_context(ctx: CycleContext, source: str) -> None:
    if ctx.done:
        raise QueryTimeout(f"{source} pagination abandoned: {ctx.err()}", source=source)


@contextmanager
def translate_errors(source: str) -> Iterator[None]:
    try:
        yield
    except ClientError as e:
        err = e.response.get("Error", {})
        raise InvalidQuery(
            f"{source} request failed [{err.get('Code', 'Unknown')}]: {err.get('Message', '')}",
            source=source,
        ) from e
    except (ConnectTimeoutError, ReadTimeoutError) as e:
        raise QueryTimeout(f"{source} request timed out", source=source) from e
    except EndpointConnectionError as e:
        raise DataSourceUnavailable(f"Cannot reach {source} at {e.kwargs.get('endpoint_url', '')}", source=source) from e
    except BotoCoreError as e:
        raise DataSourceUnavailable(f"{source} request failed: {e}", source=source) from e
