"""
Health check route reporting the outcome of the most recent collection cycle.

Copyright (c) 2026 Stefan Kumarasinghe
Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from fastapi import APIRouter, Depends

from api.responses import HealthStatus
from api.routes.common import get_exporter
from api.routes.exception import handle_exceptions
from engine.collector import Exporter

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthStatus)
@handle_exceptions
async def health(exporter: Exporter = Depends(get_exporter)) -> HealthStatus:
    return HealthStatus(phase=exporter.phase, last_error=exporter.last_error)
