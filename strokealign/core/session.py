"""
Assembled drawing session: scene, camera, capture, repositioning,
rendering and motion recording wired together.
"""

import logging
import numpy as np
from typing import Callable, Iterable, List, Optional, Sequence

from .controller import DrawingController, FixedStepClock, PointerEvent, PointerPhase
from .renderer import MotionRecorder, SceneRenderer
from .reposition import PositionUpdate, Repositioner
from .scene import (
    DRAW_PLANE_TAG,
    Camera,
    Scene,
    SurfaceHitTester,
    TargetObject,
    build_demo_scene,
)
from .stroke import StrokeCapture, StrokeSession

logger = logging.getLogger(__name__)


class DrawingSession:
    """
    One camera, one scene, one set of targets.

    Pointer events are queued with ``pointer()`` and consumed by the next
    ``step()``, mirroring a frame loop. Tick deltas come from *clock*
    (anything with a ``delta()`` method) unless ``step()`` is given one.
    """

    def __init__(
        self,
        camera: Camera,
        scene: Scene,
        targets: Sequence[TargetObject],
        drawable_tag: str = DRAW_PLANE_TAG,
        blend: float = 0.5,
        line_width: int = 3,
        clock: Optional[FixedStepClock] = None,
    ):
        self.camera = camera
        self.scene = scene
        self.clock = clock if clock is not None else FixedStepClock()
        self.targets: List[TargetObject] = list(targets)
        self.home_positions = [t.position for t in self.targets]

        self.renderer = SceneRenderer(camera, scene, line_width=line_width)
        self.capture = StrokeCapture(
            SurfaceHitTester(camera, scene),
            drawable_tag=drawable_tag,
            blend=blend,
            renderer_factory=self.renderer.new_polyline,
        )
        self.repositioner = Repositioner(self.targets)
        self.controller = DrawingController(self.capture, self.repositioner)
        self.recorder = MotionRecorder()
        self._pending: List[PointerEvent] = []

    @classmethod
    def from_config(cls, scene_cfg, capture_cfg,
                    clock: Optional[FixedStepClock] = None) -> "DrawingSession":
        """Build the demo scene from SceneConfig / CaptureConfig values."""
        camera = Camera(
            position=scene_cfg.camera_position,
            target=scene_cfg.camera_target,
            fov_deg=scene_cfg.fov_deg,
            width=scene_cfg.image_width,
            height=scene_cfg.image_height,
        )
        scene, targets = build_demo_scene(
            scene_cfg.plane_size, scene_cfg.targets, scene_cfg.wall_distance)
        return cls(camera, scene, targets,
                   drawable_tag=capture_cfg.drawable_tag,
                   blend=capture_cfg.blend,
                   line_width=capture_cfg.line_width,
                   clock=clock)

    # ── Input ───────────────────────────────────────────────────────────

    def pointer(self, phase: PointerPhase, x: float, y: float, pointer_id: int = 0):
        """Queue a pointer event for the next step."""
        self._pending.append(PointerEvent(phase, (float(x), float(y)), pointer_id))

    @property
    def is_drawing(self) -> bool:
        return self.capture.is_drawing

    @property
    def is_animating(self) -> bool:
        return self.repositioner.is_running

    @property
    def stroke_points(self) -> np.ndarray:
        """Raw points of the current or last stroke (Nx3)."""
        return np.array(self.capture.session.points, dtype=np.float64).reshape(-1, 3)

    @property
    def preview_points(self) -> np.ndarray:
        visual = self.capture.visual
        return visual.points if visual is not None else np.zeros((0, 3))

    # ── Frame loop ──────────────────────────────────────────────────────

    def step(self, delta_time: Optional[float] = None,
             events: Iterable[PointerEvent] = ()) -> List[PositionUpdate]:
        """Run one frame with the queued events plus *events*."""
        if delta_time is None:
            delta_time = self.clock.delta()
        queued, self._pending = self._pending + list(events), []
        updates = self.controller.tick(delta_time, queued)
        if updates:
            self.recorder.record(self.controller.tick_count, updates)
        return updates

    def run_until_idle(
        self,
        max_ticks: int = 10_000,
        on_frame: Optional[Callable[[int], None]] = None,
    ) -> int:
        """
        Step with the session clock until no animation is running.

        Returns:
            Number of ticks run
        """
        ticks = 0
        while self.repositioner.is_running and ticks < max_ticks:
            self.step()
            ticks += 1
            if on_frame is not None:
                on_frame(ticks)
        if self.repositioner.is_running:
            logger.warning("Animation still running after %d ticks", ticks)
        return ticks

    def render(self, caption: Optional[str] = None, show_stroke: bool = False) -> np.ndarray:
        """BGR frame of the current state, with recorded trails."""
        stroke = self.stroke_points if show_stroke and not self.is_drawing else None
        return self.renderer.render_frame(
            self.targets, trails=self.recorder.paths(),
            stroke_points=stroke, caption=caption)

    def reset(self):
        """Put targets back home and forget recorded motion."""
        self.capture.discard_visual()
        self.capture.session = StrokeSession()
        self.repositioner = Repositioner(self.targets)
        self.controller = DrawingController(self.capture, self.repositioner)
        for target, home in zip(self.targets, self.home_positions):
            target.position = home
        self.recorder.clear()
        self._pending = []
        logger.info("Session reset")
