"""
Stroke & Align - draw a stroke over a 3D scene and slide objects onto it.
"""

from .core import (
    DrawingController,
    Repositioner,
    SceneRenderer,
    StrokeCapture,
    SurfaceHitTester,
)
from .core.geometry import bezier_point, project_on_plane

__version__ = "1.0.0"
__all__ = [
    "DrawingController",
    "Repositioner",
    "SceneRenderer",
    "StrokeCapture",
    "SurfaceHitTester",
    "bezier_point",
    "project_on_plane",
]
