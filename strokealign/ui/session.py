"""
Per-browser session state.

Isolates all mutable state between concurrent Gradio users.
"""

import os
from typing import List, Optional

import numpy as np

from ..core.controller import FixedStepClock
from ..core.session import DrawingSession


class UserSession:
    """Per-browser session state. Each visitor gets their own instance."""

    def __init__(self, session_id: str, output_dir: str, exports_dir: str,
                 scene_cfg, capture_cfg, animation_cfg):
        self.session_id = session_id
        self.output_dir = output_dir
        self.exports_dir = exports_dir
        self.animation_cfg = animation_cfg

        self.drawing = DrawingSession.from_config(
            scene_cfg, capture_cfg, clock=FixedStepClock(animation_cfg.fixed_step))
        self.frames: List[np.ndarray] = []
        self.last_stroke: Optional[np.ndarray] = None
        self.strokes_completed = 0

        for d in [output_dir, exports_dir]:
            os.makedirs(d, exist_ok=True)
