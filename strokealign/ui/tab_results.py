"""
Results tab handlers (Tab 2): plot, data export and video export.
"""

import os
import logging

import gradio as gr

from . import helpers

logger = logging.getLogger(__name__)


class ResultsHandlers:
    """Handlers for the Results tab."""

    def __init__(self, app):
        self.app = app

    def on_plot(self, session_id):
        """Top-down plot of the last stroke and target paths."""
        s, session_id = self.app._get_session(session_id)
        if s.last_stroke is None or len(s.last_stroke) == 0:
            return None, "Draw and release a stroke first", session_id

        output_path = os.path.join(s.output_dir, "paths.png")
        img = s.drawing.renderer.plot_paths(
            s.last_stroke, s.drawing.recorder, output_path)
        if img is None:
            return None, "Nothing to plot", session_id
        return img, f"Saved: {output_path}", session_id

    def on_export(self, session_id):
        """Write stroke and motion data to JSON / CSV."""
        s, session_id = self.app._get_session(session_id)
        if s.last_stroke is None:
            return "Draw and release a stroke first", session_id

        try:
            msg = s.drawing.renderer.export_data(
                s.last_stroke, s.drawing.recorder,
                os.path.join(s.exports_dir, "motion.json"),
                os.path.join(s.exports_dir, "motion.csv"))
        except OSError as e:
            logger.warning("Export failed for session %s: %s", s.session_id, e)
            return f"Export failed: {e}", session_id
        return msg, session_id

    def on_generate_video(self, fps, session_id, progress=gr.Progress()):
        """Generate an MP4 of the last animation."""
        s, session_id = self.app._get_session(session_id)
        if not s.frames:
            return None, "No frames. Release a stroke first.", session_id

        progress(0.1, desc="Writing video...")
        output_path = os.path.join(s.exports_dir, "stroke_align.mp4")
        ok, msg = s.drawing.renderer.write_video(s.frames, output_path, fps)
        progress(1.0, desc="Done")
        if not ok:
            return None, msg, session_id
        return output_path, msg, session_id

    def on_preview_frame(self, index, session_id):
        """Show a single recorded animation frame."""
        s, session_id = self.app._get_session(session_id)
        if not s.frames:
            return helpers.create_placeholder_image("No frames yet"), session_id
        idx = min(max(int(index), 0), len(s.frames) - 1)
        return helpers.to_rgb(s.frames[idx]), session_id
