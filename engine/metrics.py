"""
Descriptors for every metric the exporter exposes, and helpers that turn values into samples.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from config import NAMESPACE
from engine.models import CorrelationResult, MetricSample


@dataclass(frozen=True)
class MetricDesc:
    name: str
    help: str
    labels: Tuple[str, ...] = ()
    type: str = "gauge"


def _fq_name(name: str) -> str:
    return f"{NAMESPACE}_{name}"


UP = MetricDesc(
    name=_fq_name("up"),
    help="Checks if the exporter is up/online.",
)

SENDING = MetricDesc(
    name=_fq_name("sending"),
    help="Checks if AWS CloudWatch logs are being sent by AWS instance ID and log group",
    labels=("instance_id", "group"),
)

BUILD_INFO = MetricDesc(
    name=_fq_name("build_info"),
    help="A metric with a constant '1' value labeled by version, branch and revision of the exporter.",
    labels=("version", "branch", "revision"),
)

def gauge(desc: MetricDesc, value: float, *label_values: str) -> MetricSample:
    if len(label_values) != len(desc.labels):
        raise ValueError(
            f"{desc.name} expects {len(desc.labels)} label value(s), got {len(label_values)}"
        )
    return MetricSample(
        name=desc.name,
        value=float(value),
        labels=dict(zip(desc.labels, label_values)),
    )


def up_sample(healthy: bool) -> MetricSample:
    return gauge(UP, 1.0 if healthy else 0.0)


def sending_sample(result: CorrelationResult) -> MetricSample:
    return gauge(SENDING, result.status.gauge_value(), result.instance_id, result.group)


def build_info_sample(version: str, branch: str = "", revision: str = "") -> MetricSample:
    return gauge(BUILD_INFO, 1.0, version, branch, revision)
