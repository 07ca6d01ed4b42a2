"""
Tests for the EC2 and CloudWatch Logs connectors against stubbed botocore clients.
"""

from __future__ import annotations

from datetime import timedelta

import boto3
import pytest
from botocore.stub import Stubber

from connectors.cloudwatch_logs import CloudWatchLogsConnector
from connectors.ec2 import Ec2Connector
from datasources.exceptions import DataSourceUnavailable, InvalidQuery, QueryTimeout
from engine.context import CycleContext
from engine.models import Instance, LogGroup
from fakes import NOW, fixed_clock

REGION = "us-east-1"
GROUP = LogGroup(arn="arn:aws:logs:us-east-1:123456789012:log-group:app", name="app")


def _client(service):
    return boto3.client(
        service,
        region_name=REGION,
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


def _ctx():
    return CycleContext(timedelta(seconds=10), clock=fixed_clock)


def _millis(minutes_ago):
    return int((NOW - timedelta(minutes=minutes_ago)).timestamp() * 1000)


RUNNING_DEV = [
    {"Name": "instance-state-name", "Values": ["running"]},
    {"Name": "tag:Env", "Values": ["dev"]},
    {"Name": "tag:Team", "Values": ["core"]},
]


def _reservation(*ids):
    return {"Instances": [{"InstanceId": i} for i in ids]}


@pytest.mark.asyncio
async def test_ec2_follows_pagination_with_tag_filters():
    client = _client("ec2")
    with Stubber(client) as stub:
        stub.add_response(
            "describe_instances",
            {"Reservations": [_reservation("i-0123abcd", "i-0456efgh")], "NextToken": "page2"},
            {"Filters": RUNNING_DEV},
        )
        stub.add_response(
            "describe_instances",
            {"Reservations": [_reservation("i-0789aaaa")]},
            {"Filters": RUNNING_DEV, "NextToken": "page2"},
        )
        connector = Ec2Connector(REGION, client=client)
        instances = await connector.get_instances(_ctx(), "Env:dev, Team:core")
        stub.assert_no_pending_responses()

    assert instances == [
        Instance("i-0123abcd"),
        Instance("i-0456efgh"),
        Instance("i-0789aaaa"),
    ]


@pytest.mark.asyncio
async def test_ec2_client_error_becomes_invalid_query():
    client = _client("ec2")
    with Stubber(client) as stub:
        stub.add_client_error(
            "describe_instances",
            service_error_code="UnauthorizedOperation",
            service_message="You are not authorized",
        )
        connector = Ec2Connector(REGION, client=client)
        with pytest.raises(InvalidQuery) as exc_info:
            await connector.get_instances(_ctx(), "Env:dev")

    assert "UnauthorizedOperation" in str(exc_info.value)
    assert exc_info.value.source == "ec2"


@pytest.mark.asyncio
async def test_ec2_malformed_tag_filter_fails_before_calling_aws():
    client = _client("ec2")
    with Stubber(client) as stub:
        connector = Ec2Connector(REGION, client=client)
        with pytest.raises(InvalidQuery):
            await connector.get_instances(_ctx(), "Env")
        stub.assert_no_pending_responses()


@pytest.mark.asyncio
async def test_ec2_stops_paginating_once_cycle_is_done():
    client = _client("ec2")
    ctx = _ctx()
    ctx.cancel("deadline")
    with Stubber(client) as stub:
        stub.add_response(
            "describe_instances",
            {"Reservations": [_reservation("i-0123abcd")], "NextToken": "page2"},
            {"Filters": RUNNING_DEV[:2]},
        )
        connector = Ec2Connector(REGION, client=client)
        with pytest.raises(QueryTimeout):
            await connector.get_instances(ctx, "Env:dev")


@pytest.mark.asyncio
async def test_log_groups_use_prefix_and_paginate():
    client = _client("logs")
    with Stubber(client) as stub:
        stub.add_response(
            "describe_log_groups",
            {"logGroups": [{"logGroupName": "/app/web", "arn": "arn:web"}], "nextToken": "n"},
            {"logGroupNamePrefix": "/app"},
        )
        stub.add_response(
            "describe_log_groups",
            {"logGroups": [{"logGroupName": "/app/worker", "arn": "arn:worker"}]},
            {"logGroupNamePrefix": "/app", "nextToken": "n"},
        )
        connector = CloudWatchLogsConnector(REGION, log_group_prefix="/app", client=client)
        groups = await connector.get_log_groups(_ctx())
        stub.assert_no_pending_responses()

    assert groups == [LogGroup("arn:web", "/app/web"), LogGroup("arn:worker", "/app/worker")]


@pytest.mark.asyncio
async def test_log_groups_without_prefix_lists_all():
    client = _client("logs")
    with Stubber(client) as stub:
        stub.add_response("describe_log_groups", {"logGroups": []}, {})
        connector = CloudWatchLogsConnector(REGION, client=client)
        assert await connector.get_log_groups(_ctx()) == []


def _streams_page(prefix, count, token=None):
    page = {
        "logStreams": [
            {"logStreamName": f"{prefix}/i-{n:08d}", "lastEventTimestamp": _millis(n)}
            for n in range(count)
        ]
    }
    if token:
        page["nextToken"] = token
    return page


STREAM_PARAMS = {"logGroupName": "app", "orderBy": "LastEventTime", "descending": True, "limit": 50}


@pytest.mark.asyncio
async def test_log_streams_read_at_most_three_pages():
    client = _client("logs")
    with Stubber(client) as stub:
        stub.add_response("describe_log_streams", _streams_page("p1", 50, "t1"), STREAM_PARAMS)
        stub.add_response(
            "describe_log_streams", _streams_page("p2", 50, "t2"), {**STREAM_PARAMS, "nextToken": "t1"}
        )
        stub.add_response(
            "describe_log_streams", _streams_page("p3", 50, "t3"), {**STREAM_PARAMS, "nextToken": "t2"}
        )
        connector = CloudWatchLogsConnector(REGION, client=client)
        result = await connector.get_log_streams(_ctx(), GROUP)
        stub.assert_no_pending_responses()

    assert result.group == GROUP
    assert len(result.streams) == 150
    assert result.streams[0].name == "p1/i-00000000"
    assert result.streams[0].last_event_timestamp == NOW


@pytest.mark.asyncio
async def test_log_streams_without_timestamp():
    client = _client("logs")
    with Stubber(client) as stub:
        stub.add_response(
            "describe_log_streams",
            {"logStreams": [{"logStreamName": "app/i-0123abcd"}]},
            STREAM_PARAMS,
        )
        connector = CloudWatchLogsConnector(REGION, client=client)
        result = await connector.get_log_streams(_ctx(), GROUP)

    assert result.streams[0].last_event_timestamp is None


@pytest.mark.asyncio
async def test_log_streams_service_error():
    client = _client("logs")
    with Stubber(client) as stub:
        stub.add_client_error(
            "describe_log_streams",
            service_error_code="ResourceNotFoundException",
            service_message="The specified log group does not exist.",
        )
        connector = CloudWatchLogsConnector(REGION, client=client)
        with pytest.raises(InvalidQuery) as exc_info:
            await connector.get_log_streams(_ctx(), GROUP)

    assert exc_info.value.source == "cloudwatch logs"
    assert not isinstance(exc_info.value, DataSourceUnavailable)
