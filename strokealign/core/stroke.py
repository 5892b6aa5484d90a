"""
Stroke capture: turns pointer positions into world-space stroke points.

Every begin/extend runs a screen-space hit test. Only hits on the drawable
plane that are not the world origin are accepted; anything else is
silently ignored for that event.
"""

import logging
import numpy as np
from typing import Callable, List, Optional, Sequence
from dataclasses import dataclass, field

from .geometry import as_vec3, is_origin, lerp
from .scene import DRAW_PLANE_TAG, HitResult

logger = logging.getLogger(__name__)

HitTest = Callable[[Sequence[float]], Optional[HitResult]]


@dataclass
class StrokeSession:
    """Raw stroke points for the current (or last finished) stroke."""
    points: List[np.ndarray] = field(default_factory=list)
    active: bool = False

    def restart(self, first_point: np.ndarray):
        self.points = [first_point]
        self.active = True

    def append(self, point: np.ndarray):
        self.points.append(point)

    @property
    def point_count(self) -> int:
        return len(self.points)

    def frozen_points(self) -> np.ndarray:
        """
        Read-only Nx3 copy of the stroke.

        Raises:
            RuntimeError: if the stroke is still being drawn
        """
        if self.active:
            raise RuntimeError("Stroke session is still active")
        frozen = np.array(self.points, dtype=np.float64).reshape(-1, 3)
        frozen.setflags(write=False)
        return frozen


class LiveCurveVisual:
    """
    Smoothed preview polyline of the stroke being drawn.

    Holds one more point than the stroke (the first hit is doubled) and
    pushes the full point list to an optional renderer after each change.
    Renderers need ``set_points(points)`` and ``dispose()``.
    """

    def __init__(self, start_point: np.ndarray, renderer=None):
        self._positions: List[np.ndarray] = [start_point.copy(), start_point.copy()]
        self._index = 1
        self._renderer = renderer
        self.disposed = False
        self._push()

    def __len__(self) -> int:
        return len(self._positions)

    @property
    def points(self) -> np.ndarray:
        return np.array(self._positions)

    def extend(self, hit_point: np.ndarray, blend: float = 0.5):
        """
        Grow by one slot set to the blend of the previous point and the hit.

        A slot already allocated past the new one receives the raw hit as
        a temporary tip.
        """
        self._index += 1
        while len(self._positions) < self._index + 1:
            self._positions.append(hit_point.copy())

        previous = self._positions[self._index - 1]
        self._positions[self._index] = lerp(previous, hit_point, blend)

        if self._index + 1 < len(self._positions):
            self._positions[self._index + 1] = hit_point.copy()
        self._push()

    def dispose(self):
        if self.disposed:
            return
        self.disposed = True
        if self._renderer is not None:
            self._renderer.dispose()

    def _push(self):
        if self._renderer is not None:
            self._renderer.set_points(self.points)


class StrokeCapture:
    """
    Captures one stroke at a time from begin / extend / end calls.

    Args:
        hit_test: Callable mapping a screen position to a HitResult or None
        drawable_tag: Surface tag strokes may be drawn on
        blend: Midpoint blend factor for the preview polyline
        renderer_factory: Zero-arg callable returning a polyline renderer
            for each new stroke (optional)
    """

    def __init__(
        self,
        hit_test: HitTest,
        drawable_tag: str = DRAW_PLANE_TAG,
        blend: float = 0.5,
        renderer_factory: Optional[Callable[[], object]] = None,
    ):
        self.hit_test = hit_test
        self.drawable_tag = drawable_tag
        self.blend = blend
        self.renderer_factory = renderer_factory
        self.session = StrokeSession()
        self.visual: Optional[LiveCurveVisual] = None

    @property
    def is_drawing(self) -> bool:
        return self.session.active

    def _resolve(self, screen_position: Sequence[float]) -> Optional[np.ndarray]:
        """World point for *screen_position*, or None if it is not drawable."""
        hit = self.hit_test(screen_position)
        if hit is None:
            logger.debug("No hit at %s", tuple(screen_position))
            return None
        if hit.tag != self.drawable_tag:
            logger.debug("Hit %r surface at %s, ignoring", hit.tag,
                         tuple(screen_position))
            return None
        point = as_vec3(hit.point)
        # Origin doubles as "no hit"
        if is_origin(point):
            logger.debug("Hit at world origin treated as a miss")
            return None
        return point

    def begin(self, screen_position: Sequence[float]) -> bool:
        """Start a new stroke. Returns True if the stroke started."""
        point = self._resolve(screen_position)
        if point is None:
            return False

        # A stroke that never ended still owns its visual
        self.discard_visual()
        renderer = self.renderer_factory() if self.renderer_factory else None
        self.visual = LiveCurveVisual(point, renderer)
        self.session.restart(point)
        logger.debug("Stroke started at %s", point)
        return True

    def extend(self, screen_position: Sequence[float]) -> bool:
        """Add a point to the active stroke. Returns True if one was added."""
        if not self.session.active or self.visual is None:
            return False
        point = self._resolve(screen_position)
        if point is None:
            return False

        self.visual.extend(point, self.blend)
        self.session.append(point)
        return True

    def end(self) -> np.ndarray:
        """Freeze the stroke and return its raw points (Nx3, read-only)."""
        self.session.active = False
        points = self.session.frozen_points()
        logger.debug("Stroke ended with %d points", len(points))
        return points

    def discard_visual(self):
        """Drop the preview polyline. Safe to call repeatedly."""
        if self.visual is not None:
            self.visual.dispose()
            self.visual = None
