"""
Entry point for the CloudWatch log stream exporter.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import uvicorn
from fastapi import FastAPI

from api.routes import create_router
from config import Settings, settings
from datasources.data_config import DataSourceSettings
from datasources.provider import DataSourceProvider
from engine.collector import Exporter
from engine.metrics import build_info_sample

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    stream=sys.stdout,
)
log = logging.getLogger(__name__)


def build_exporter(cfg: Settings, provider: DataSourceProvider) -> Exporter:
    return Exporter(
        provider.instances,
        provider.logs,
        tag_filter=cfg.ec2_tag_filter,
        log_stream_timeout=cfg.log_stream_timeout,
        collect_timeout=cfg.collect_timeout,
        max_parallel_stream_fetches=cfg.max_parallel_stream_fetches,
    )


def create_app(cfg: Settings, exporter: Optional[Exporter] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        provider: Optional[DataSourceProvider] = None
        if getattr(app.state, "exporter", None) is None:
            provider = DataSourceProvider(
                DataSourceSettings(
                    aws_region=cfg.aws_region,
                    log_group_prefix=cfg.log_group_prefix,
                    connector_timeout=cfg.connector_timeout,
                )
            )
            app.state.exporter = build_exporter(cfg, provider)
        log.info(
            "Exporter ready: region=%s log_group_prefix=%r ec2_tag_filter=%r log_stream_timeout=%s",
            cfg.aws_region, cfg.log_group_prefix, cfg.ec2_tag_filter, cfg.log_stream_timeout,
        )
        try:
            yield
        finally:
            if provider is not None:
                await provider.aclose()

    app = FastAPI(
        title="AWS CloudWatch Log Stream Exporter",
        description="Reports whether each running EC2 instance is still shipping logs to CloudWatch.",
        version=cfg.version,
        lifespan=lifespan,
    )
    app.state.exporter = exporter
    app.include_router(
        create_router(cfg.metrics_path, build_info_sample(cfg.version, cfg.branch, cfg.revision))
    )
    return app


def parse_args(argv: List[str], base: Settings) -> Settings:
    parser = argparse.ArgumentParser(description="AWS CloudWatch log stream exporter")
    parser.add_argument("--web.listen-address", dest="listen_address", default=base.listen_address,
                        help="Address to listen on")
    parser.add_argument("--aws.region", dest="aws_region", default=base.aws_region,
                        help="The AWS region to get metrics from")
    parser.add_argument("--web.telemetry-path", dest="metrics_path", default=base.metrics_path,
                        help="The path where metrics will be exposed")
    parser.add_argument("--aws.log-group-prefix", dest="log_group_prefix", default=base.log_group_prefix,
                        help="AWS logs group prefix")
    parser.add_argument("--aws.log-stream-timeout", dest="log_stream_timeout", default=base.log_stream_timeout,
                        help="Timeout for when to consider an AWS log stream dead (e.g. 60m)")
    parser.add_argument("--aws.ec2-tag-filter", dest="ec2_tag_filter", default=base.ec2_tag_filter,
                        help="AWS EC2 tag filter (key:value[,key:value])")
    parser.add_argument("--debug", action="store_true", default=base.debug,
                        help="Run exporter in debug mode")
    args = parser.parse_args(argv)

    cfg = Settings(**{**base.model_dump(), **vars(args)})
    if not cfg.aws_region:
        parser.error("An aws region is required")
    return cfg


def main(argv: Optional[List[str]] = None) -> None:
    log.info("Starting AWS Log Stream exporter...")
    cfg = parse_args(sys.argv[1:] if argv is None else argv, settings)
    if cfg.debug or os.getenv("DEBUG"):
        logging.getLogger().setLevel(logging.DEBUG)

    host, port = cfg.listen_host_port()
    log.info("Listening on %s", cfg.listen_address)
    uvicorn.run(
        create_app(cfg),
        host=host,
        port=port,
        log_level="debug" if cfg.debug else "info",
        access_log=False,
    )


if __name__ == "__main__":
    main()
