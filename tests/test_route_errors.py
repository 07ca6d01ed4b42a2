"""
Tests for route error translation.
"""

from __future__ import annotations

import pytest
from fastapi import HTTPException

from api.routes.exception import handle_exceptions
from datasources.exceptions import QueryTimeout


@pytest.mark.asyncio
async def test_data_source_failure_maps_to_bad_gateway():
    @handle_exceptions
    async def route():
        raise QueryTimeout("ec2 request timed out", source="ec2")

    with pytest.raises(HTTPException) as exc_info:
        await route()
    assert exc_info.value.status_code == 502
    assert exc_info.value.detail == "ec2 request timed out"


def test_unexpected_error_maps_to_internal_error():
    @handle_exceptions
    def route():
        raise RuntimeError("boom")

    with pytest.raises(HTTPException) as exc_info:
        route()
    assert exc_info.value.status_code == 500
    assert exc_info.value.detail == "boom"


def test_http_exception_passes_through():
    @handle_exceptions
    def route():
        raise HTTPException(status_code=503, detail="exporter not initialised")

    with pytest.raises(HTTPException) as exc_info:
        route()
    assert exc_info.value.status_code == 503
