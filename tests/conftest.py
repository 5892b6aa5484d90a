"""Shared fixtures for the stroke & align tests."""

import numpy as np
import pytest

from strokealign.core.scene import DRAW_PLANE_TAG, HitResult, TargetObject
from strokealign.core.stroke import StrokeCapture


class ScriptedHitTest:
    """
    Hit test stub mapping screen (x, y) to world (x, 0, y).

    Positions listed in *misses* return None; positions in *tags* hit a
    surface with that tag instead of the draw plane.
    """

    def __init__(self, misses=(), tags=None):
        self.misses = {tuple(m) for m in misses}
        self.tags = dict(tags or {})
        self.calls = []

    def __call__(self, screen_position):
        key = tuple(screen_position)
        self.calls.append(key)
        if key in self.misses:
            return None
        x, y = key
        return HitResult(
            point=np.array([float(x), 0.0, float(y)]),
            tag=self.tags.get(key, DRAW_PLANE_TAG),
            distance=1.0,
        )


class RecordingPolyline:
    """Polyline renderer stub that remembers what it was given."""

    def __init__(self):
        self.history = []
        self.dispose_count = 0

    def set_points(self, points):
        self.history.append(np.array(points))

    def dispose(self):
        self.dispose_count += 1


@pytest.fixture
def hit_test():
    return ScriptedHitTest()


@pytest.fixture
def capture(hit_test):
    return StrokeCapture(hit_test)


@pytest.fixture
def two_targets():
    return [
        TargetObject("first", (0.0, 0.0, 0.0), up=(0.0, 1.0, 0.0)),
        TargetObject("second", (5.0, 0.0, 0.0), up=(0.0, 1.0, 0.0)),
    ]


@pytest.fixture
def make_capture():
    """Factory: StrokeCapture over a ScriptedHitTest with misses / tags."""
    def _make(misses=(), tags=None, renderer_factory=None):
        return StrokeCapture(ScriptedHitTest(misses, tags),
                             renderer_factory=renderer_factory)
    return _make


@pytest.fixture
def polyline_factory():
    """Factory that remembers every RecordingPolyline it created."""
    created = []

    def _factory():
        line = RecordingPolyline()
        created.append(line)
        return line

    _factory.created = created
    return _factory
