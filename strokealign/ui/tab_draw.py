"""
Draw tab handlers (Tab 1).

Clicks on the scene image act as pointer samples: the first click begins
a stroke, later clicks extend it, and Release ends it and plays the
repositioning animation.
"""

import logging

import gradio as gr

from ..core.controller import PointerPhase
from . import helpers

logger = logging.getLogger(__name__)


class DrawHandlers:
    """Handlers for the Draw tab."""

    def __init__(self, app):
        self.app = app

    def on_scene_click(self, session_id, evt: gr.SelectData):
        """Begin or extend the stroke at the clicked pixel."""
        s, session_id = self.app._get_session(session_id)
        x, y = evt.index
        drawing = s.drawing

        if drawing.is_drawing:
            before = drawing.capture.session.point_count
            drawing.pointer(PointerPhase.MOVED, x, y)
            drawing.step()
            if drawing.capture.session.point_count > before:
                status = f"Extended stroke at ({x:.0f}, {y:.0f})"
            else:
                status = f"({x:.0f}, {y:.0f}) is not on the draw plane"
        else:
            drawing.pointer(PointerPhase.BEGAN, x, y)
            drawing.step()
            if drawing.is_drawing:
                status = f"Stroke started at ({x:.0f}, {y:.0f})"
            else:
                status = f"({x:.0f}, {y:.0f}) is not on the draw plane"

        return (helpers.get_scene_image(s), status,
                helpers.get_stroke_summary(s), session_id)

    def on_release(self, session_id, progress=gr.Progress()):
        """End the stroke and run the animation to completion."""
        s, session_id = self.app._get_session(session_id)
        drawing = s.drawing
        if not drawing.is_drawing:
            return (helpers.get_scene_image(s), "No stroke in progress",
                    helpers.get_stroke_summary(s), session_id, gr.update())

        drawing.pointer(PointerPhase.ENDED, 0, 0)
        drawing.step()
        s.last_stroke = drawing.stroke_points
        s.strokes_completed += 1

        if not drawing.is_animating:
            status = (f"Stroke ended with {len(s.last_stroke)} point(s); "
                      "need at least 2 to move targets")
            return (helpers.get_scene_image(s), status,
                    helpers.get_stroke_summary(s), session_id, gr.update())

        s.frames = [drawing.render("Released", show_stroke=True)]
        expected = max(1, int(round(1.0 / drawing.clock.delta())))

        def on_frame(tick):
            s.frames.append(drawing.render(f"Animating: tick {tick}",
                                           show_stroke=True))
            if tick % 5 == 0:
                progress(min(tick / expected, 1.0), desc=f"Tick {tick}")

        ticks = drawing.run_until_idle(on_frame=on_frame)
        progress(1.0, desc="Done")
        logger.info("Session %s: animation finished in %d ticks",
                    s.session_id, ticks)
        return (helpers.get_scene_image(s, "Done"),
                f"Moved {len(drawing.targets)} targets in {ticks} ticks",
                helpers.get_stroke_summary(s), session_id,
                helpers.frame_slider_update(s))

    def on_reset(self, session_id):
        """Restore the scene to its initial layout."""
        s, session_id = self.app._get_session(session_id)
        s.drawing.reset()
        s.frames = []
        s.last_stroke = None
        return (helpers.get_scene_image(s), "Scene reset",
                helpers.get_stroke_summary(s), session_id,
                helpers.frame_slider_update(s))
