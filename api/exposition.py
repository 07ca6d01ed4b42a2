"""
Prometheus text exposition (format 0.0.4) for the samples of one scrape.

Samples are grouped by metric family, families are written in descriptor
order, and each family gets its ``# HELP`` and ``# TYPE`` header once.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Sequence

from engine.metrics import MetricDesc
from engine.models import MetricSample


def _escape_help(text: str) -> str:
    return text.replace("\\", "\\\\").replace("\n", "\\n")


def _escape_label(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


def _format_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == int(value):
        return str(int(value))
    return repr(value)


def format_sample(sample: MetricSample) -> str:
    if not sample.labels:
        return f"{sample.name} {_format_value(sample.value)}"
    labels = ",".join(f'{k}="{_escape_label(str(v))}"' for k, v in sample.labels.items())
    return f"{sample.name}{{{labels}}} {_format_value(sample.value)}"


def encode_metrics(samples: Iterable[MetricSample], descriptors: Sequence[MetricDesc]) -> str:
    families: Dict[str, List[MetricSample]] = {}
    for sample in samples:
        families.setdefault(sample.name, []).append(sample)

    lines: List[str] = []
    known = {d.name: d for d in descriptors}
    ordered = [d.name for d in descriptors if d.name in families]
    ordered.extend(name for name in families if name not in known)

    for name in ordered:
        desc = known.get(name)
        if desc is not None:
            lines.append(f"# HELP {name} {_escape_help(desc.help)}")
            lines.append(f"# TYPE {name} {desc.type}")
        lines.extend(format_sample(s) for s in families[name])

    return "\n".join(lines) + "\n" if lines else ""
