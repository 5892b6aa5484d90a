"""Core modules for stroke capture, curve evaluation and repositioning."""

from .scene import Camera, Scene, SurfaceHitTester, TargetObject
from .stroke import StrokeCapture
from .reposition import Repositioner, RepositionTask
from .controller import DrawingController, FixedStepClock, PointerEvent, PointerPhase
from .renderer import MotionRecorder, SceneRenderer
from .session import DrawingSession

__all__ = [
    "Camera",
    "Scene",
    "SurfaceHitTester",
    "TargetObject",
    "StrokeCapture",
    "Repositioner",
    "RepositionTask",
    "DrawingController",
    "FixedStepClock",
    "PointerEvent",
    "PointerPhase",
    "MotionRecorder",
    "SceneRenderer",
    "DrawingSession",
]
