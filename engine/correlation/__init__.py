"""
Correlation of instances with log streams to decide whether each instance is still sending logs.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.correlation.streams import (
    correlate,
    extract_instance_id,
    matches,
    representative,
    verdict,
)

__all__ = ["correlate", "extract_instance_id", "matches", "representative", "verdict"]
