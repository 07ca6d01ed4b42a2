"""
Test cases for enums used by the collection engine, validating verdict statuses, liveness reasons and cycle phases.

Copyright (c) 2026 Stefan Kumarasinghe

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at http://www.apache.org/licenses/LICENSE-2.0
"""

from engine.enums import CyclePhase, Liveness, Status


def test_status_gauge_value():
    assert Status.up.gauge_value() == 1.0
    assert Status.down.gauge_value() == 0.0


def test_liveness_maps_to_status():
    assert Liveness.fresh.status == Status.up
    assert Liveness.stale.status == Status.down
    assert Liveness.missing.status == Status.down


def test_cycle_phase_values():
    assert list(CyclePhase) == [
        CyclePhase.idle,
        CyclePhase.fetching_inputs,
        CyclePhase.fetching_streams,
        CyclePhase.correlating,
        CyclePhase.done,
        CyclePhase.failed,
    ]
    assert CyclePhase.failed.value == "failed"
