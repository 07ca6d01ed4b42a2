"""
Routes initialization for the exporter HTTP surface.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health import router as health_router
from api.routes.metrics import create_metrics_router
from engine.models import MetricSample


def create_router(metrics_path: str, build_info: MetricSample) -> APIRouter:
    router = APIRouter()
    router.include_router(health_router)
    router.include_router(create_metrics_router(metrics_path, build_info))
    return router


__all__ = ["create_router"]
