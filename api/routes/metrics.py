"""
Prometheus scrape endpoint and the landing page pointing at it.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from typing import List

from fastapi import APIRouter, Depends, Response
from fastapi.responses import HTMLResponse

from api.exposition import encode_metrics
from api.routes.common import get_exporter
from api.routes.exception import handle_exceptions
from config import METRICS_CONTENT_TYPE
from engine.collector import Exporter
from engine.metrics import BUILD_INFO
from engine.models import MetricSample
from engine.sink import MetricChannel

_LANDING_PAGE = """<html>
<head><title>AWS CloudWatch Log Stream (cwlogstream) Exporter</title></head>
<body>
<h1>AWS Log Stream Exporter</h1>
<p><a href='{metrics_path}'>Metrics</a></p>
</body>
</html>"""


def create_metrics_router(metrics_path: str, build_info: MetricSample) -> APIRouter:
    router = APIRouter(tags=["Metrics"])

    @router.get(metrics_path)
    @handle_exceptions
    async def metrics(exporter: Exporter = Depends(get_exporter)) -> Response:
        samples: List[MetricSample] = []
        channel = MetricChannel(samples.append)
        try:
            await exporter.collect(channel)
        finally:
            channel.close()
        samples.append(build_info)
        body = encode_metrics(samples, exporter.describe() + (BUILD_INFO,))
        return Response(content=body, media_type=METRICS_CONTENT_TYPE)

    @router.get("/", response_class=HTMLResponse)
    @handle_exceptions
    def landing() -> str:
        return _LANDING_PAGE.format(metrics_path=metrics_path)

    return router
