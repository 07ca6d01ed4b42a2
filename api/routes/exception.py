"""
Error translation for exporter routes.

Failures reaching a route are logged once and surfaced as HTTP errors: a
failed AWS fetch becomes ``502``, anything else ``500``. ``HTTPException``
passes through untouched.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from fastapi import HTTPException

from datasources.exceptions import DataSourceError

log = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def to_http_error(route: str, exc: Exception) -> HTTPException:
    if isinstance(exc, DataSourceError):
        log.error("%s: %s unavailable: %s", route, exc.source or "data source", exc)
        return HTTPException(status_code=502, detail=str(exc))
    log.exception("%s failed", route)
    return HTTPException(status_code=500, detail=str(exc) or type(exc).__name__)


def handle_exceptions(func: F) -> F:
    if inspect.iscoroutinefunction(func):
        @wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as exc:
                raise to_http_error(func.__name__, exc) from exc

        return cast(F, async_wrapper)

    @wraps(func)
    def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except HTTPException:
            raise
        except Exception as exc:
            raise to_http_error(func.__name__, exc) from exc

    return cast(F, sync_wrapper)
