"""Shared fixtures: in-memory gateways standing in for the external pipelines."""

import asyncio
import io

import numpy as np
import pytest
from PIL import Image

from auto_adjust import (
    AdjustmentKind,
    AdjustmentRecord,
    AutoAdjustmentsGroup,
    AutoComputeGateway,
    ComputeResult,
    GroupConfig,
    RenderGateway,
)

# A and B are within the threshold, C is far away
FEATURES = {
    "A": [0.0, 0.0],
    "B": [0.1, 0.0],
    "C": [5.0, 5.0],
}

# Straighten is the only auto-computed kind in most tests
ROTATIONS = {
    "A": {"rotation": 1.0},
    "B": {"rotation": 2.0},
    "C": {"rotation": 3.0},
}


class InFlightTracker:
    """Counts concurrent gateway calls, optionally shared between gateways."""

    def __init__(self):
        self.current = 0
        self.peak = 0

    def enter(self):
        self.current += 1
        self.peak = max(self.peak, self.current)

    def exit(self):
        self.current -= 1


class FakeGateway(AutoComputeGateway):
    """Auto-compute pipeline answering from per-entry fixtures."""

    def __init__(self, features=None, computed=None, failures=(), delay=0.0, tracker=None):
        self.features = dict(features or {})
        self.computed = dict(computed or {})
        self.failures = set(failures)
        self.delay = delay
        self.tracker = tracker or InFlightTracker()
        self.calls = []
        self.kinds_seen = []

    async def compute_features(self, entry, kinds):
        self.calls.append(entry.id)
        self.kinds_seen.append(kinds)
        self.tracker.enter()
        try:
            await asyncio.sleep(self.delay)
            if entry.id in self.failures:
                raise RuntimeError(f"decoder rejected {entry.id}")
            features = self.features.get(entry.id)
            return ComputeResult(
                adjustments=AdjustmentRecord.from_dict(self.computed.get(entry.id, {})),
                features=None if features is None else np.array(features, dtype=float),
            )
        finally:
            self.tracker.exit()


class FakeRenderer(RenderGateway):
    """Renders a small PNG whose colour encodes the exposure."""

    def __init__(self):
        self.rendered = []

    async def render(self, source, adjustments):
        self.rendered.append((source, adjustments))
        level = int(128 + 100 * (adjustments.exposure or 0.0))
        buffer = io.BytesIO()
        Image.new('RGB', (32, 24), (level, level, level)).save(buffer, format='PNG')
        return buffer.getvalue()


@pytest.fixture
def make_gateway():
    """Factory for FakeGateway instances."""
    return FakeGateway


@pytest.fixture
def tracker():
    return InFlightTracker()


@pytest.fixture
def renderer():
    return FakeRenderer()


@pytest.fixture
def scenario_config():
    """Straighten is auto-computed; A and B cluster together at tau=0.5."""
    return GroupConfig(kinds={AdjustmentKind.STRAIGHTEN}, similarity_threshold=0.5)


@pytest.fixture
def run_group():
    """Coroutine factory: build a group, resume it and wait until it drains."""

    async def _run(gateway, entries, config, **kwargs):
        group = AutoAdjustmentsGroup(gateway, entries, config, **kwargs)
        await group.resume()
        await asyncio.wait_for(group.wait_until_completed(), timeout=5)
        return group

    return _run
