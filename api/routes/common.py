"""
Shared utilities and dependencies for API route modules.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from engine.collector import Exporter


def get_exporter(request: Request) -> Exporter:
    exporter = getattr(request.app.state, "exporter", None)
    if exporter is None:
        raise HTTPException(status_code=503, detail="exporter not initialised")
    return exporter
