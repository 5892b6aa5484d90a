"""
Shared UI helper functions.
"""

import cv2
import gradio as gr
import numpy as np

from ..utils.drawing import blank_canvas, draw_text


def create_placeholder_image(text: str = "Loading scene...",
                             width: int = 640, height: int = 480) -> np.ndarray:
    """Create a dark placeholder image with centered text."""
    img = blank_canvas(width, height)
    draw_text(img, text, (80, height // 2), (200, 200, 200), 1.0, 2)
    return img


def to_rgb(frame_bgr: np.ndarray) -> np.ndarray:
    return cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)


def get_scene_image(session, caption: str = None) -> np.ndarray:
    """Current scene as RGB for display."""
    return to_rgb(session.drawing.render(caption, show_stroke=True))


def get_stroke_summary(session) -> str:
    """Human-readable summary of the stroke and target positions."""
    drawing = session.drawing
    capture = drawing.capture
    state = "drawing" if capture.is_drawing else "idle"
    lines = [
        f"Stroke: {capture.session.point_count} pts ({state})",
        f"Preview: {len(drawing.preview_points)} pts",
        f"Strokes completed: {session.strokes_completed}",
        "",
    ]
    for target in drawing.targets:
        x, y, z = target.position
        lines.append(f"  {target.name}: ({x:.2f}, {y:.2f}, {z:.2f})")
    return "\n".join(lines)


def frame_slider_update(session) -> dict:
    """Slider range matching the recorded animation frames, reset to 0."""
    return gr.update(maximum=max(len(session.frames) - 1, 1), value=0)
