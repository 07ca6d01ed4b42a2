"""
HTTP surface tests: scrape endpoint, landing page, health and command line parsing.
"""

from __future__ import annotations

from datetime import timedelta

import httpx
import pytest

import main as app_main
from config import METRICS_CONTENT_TYPE, Settings
from datasources.exceptions import DataSourceUnavailable
from engine.collector import Exporter
from fakes import FakeInstances, FakeLogs, fixed_clock, stream


def _exporter(instances, logs):
    return Exporter(
        instances,
        logs,
        tag_filter="Env:dev",
        log_stream_timeout=timedelta(minutes=60),
        clock=fixed_clock,
    )


def _client(app):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_metrics_endpoint_serves_prometheus_text():
    exporter = _exporter(
        FakeInstances(["i-0123abcd"]),
        FakeLogs({"app": [stream("app/i-0123abcd/std.log", 2)]}),
    )
    app = app_main.create_app(Settings(aws_region="us-east-1", version="9.9.9"), exporter)

    async with _client(app) as client:
        response = await client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"] == METRICS_CONTENT_TYPE
    body = response.text
    assert 'cwlogstream_sending{instance_id="i-0123abcd",group="app"} 1' in body
    assert "cwlogstream_up 1" in body
    assert 'cwlogstream_build_info{version="9.9.9",branch="",revision=""} 1' in body
    assert "# TYPE cwlogstream_up gauge" in body


@pytest.mark.asyncio
async def test_metrics_endpoint_reports_failed_cycle():
    exporter = _exporter(
        FakeInstances(error=DataSourceUnavailable("no route to host")),
        FakeLogs({"app": []}),
    )
    app = app_main.create_app(Settings(aws_region="us-east-1"), exporter)

    async with _client(app) as client:
        response = await client.get("/metrics")
        health = await client.get("/health")

    assert response.status_code == 200
    assert "cwlogstream_up 0" in response.text
    assert "cwlogstream_sending" not in response.text
    assert health.json() == {"status": "ok", "phase": "failed", "last_error": "no route to host"}


@pytest.mark.asyncio
async def test_custom_metrics_path_and_landing_page():
    exporter = _exporter(FakeInstances(), FakeLogs())
    app = app_main.create_app(Settings(aws_region="us-east-1", metrics_path="/probe"), exporter)

    async with _client(app) as client:
        landing = await client.get("/")
        probe = await client.get("/probe")
        default = await client.get("/metrics")

    assert "href='/probe'" in landing.text
    assert probe.status_code == 200
    assert default.status_code == 404


def test_parse_args_overrides_settings():
    cfg = app_main.parse_args(
        [
            "--aws.region", "eu-west-1",
            "--aws.log-stream-timeout", "90m",
            "--aws.ec2-tag-filter", "Env:prod",
            "--web.listen-address", ":9000",
            "--debug",
        ],
        Settings(),
    )
    assert cfg.aws_region == "eu-west-1"
    assert cfg.log_stream_timeout == timedelta(minutes=90)
    assert cfg.ec2_tag_filter == "Env:prod"
    assert cfg.listen_host_port() == ("0.0.0.0", 9000)
    assert cfg.debug is True


def test_parse_args_requires_region():
    with pytest.raises(SystemExit):
        app_main.parse_args([], Settings(aws_region=""))


def test_parse_args_rejects_positional_arguments():
    with pytest.raises(SystemExit):
        app_main.parse_args(["--aws.region", "us-east-1", "extra"], Settings())


@pytest.mark.asyncio
async def test_routes_unavailable_before_startup():
    app = app_main.create_app(Settings(aws_region="us-east-1"))

    async with _client(app) as client:
        health = await client.get("/health")
        metrics = await client.get("/metrics")

    assert health.status_code == 503
    assert metrics.status_code == 503
