"""
Gradio Web UI for Stroke & Align.

This is the main orchestrator that:
  - Composes per-tab handler objects (draw, results)
  - Manages per-browser sessions
  - Defines the Gradio layout and event bindings
"""

import os
import logging
import secrets
from typing import Optional, Tuple

import gradio as gr

from .session import UserSession
from . import helpers
from .tab_draw import DrawHandlers
from .tab_results import ResultsHandlers

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════════
#  AppUI: thin coordinator
# ════════════════════════════════════════════════════════════════════════

class AppUI:
    """
    Gradio-based web interface for drawing strokes and repositioning
    targets.

    All per-browser mutable state lives in UserSession objects keyed by a
    random session id held in gr.State.
    """

    def __init__(self, output_dir: str, exports_dir: str, scene_cfg,
                 capture_cfg, animation_cfg):
        self.output_dir = output_dir
        self.exports_dir = exports_dir
        self.scene_cfg = scene_cfg
        self.capture_cfg = capture_cfg
        self.animation_cfg = animation_cfg
        self._sessions: dict[str, UserSession] = {}

        for d in [output_dir, exports_dir]:
            os.makedirs(d, exist_ok=True)

        # Per-tab handler groups
        self.draw = DrawHandlers(self)
        self.results = ResultsHandlers(self)

    # ── Session management ──────────────────────────────────────────────

    def _get_session(self, session_id: Optional[str]) -> Tuple[UserSession, str]:
        """Get or create the session for *session_id*."""
        if not session_id or session_id not in self._sessions:
            session_id = session_id or secrets.token_hex(8)
            self._sessions[session_id] = UserSession(
                session_id=session_id,
                output_dir=os.path.join(self.output_dir, session_id),
                exports_dir=os.path.join(self.exports_dir, session_id),
                scene_cfg=self.scene_cfg,
                capture_cfg=self.capture_cfg,
                animation_cfg=self.animation_cfg,
            )
            logger.info("Created session: %s", session_id)
        return self._sessions[session_id], session_id

    def _initial_view(self, session_id):
        s, session_id = self._get_session(session_id)
        return (helpers.get_scene_image(s), "Click the ground to draw",
                helpers.get_stroke_summary(s), session_id)


# ════════════════════════════════════════════════════════════════════════
#  create_app: Gradio layout + event wiring
# ════════════════════════════════════════════════════════════════════════

def create_app(
    output_dir: str,
    exports_dir: str,
    scene_cfg,
    capture_cfg,
    animation_cfg,
) -> gr.Blocks:
    """Create and return the complete Gradio application."""
    ui = AppUI(output_dir, exports_dir, scene_cfg, capture_cfg, animation_cfg)

    with gr.Blocks(title="Stroke & Align") as app:
        session_id = gr.State(value=None)

        gr.Markdown("# Stroke & Align")

        with gr.Tabs():

            # ==================== Tab 1: Draw ===========================
            with gr.TabItem("1. Draw"):
                gr.Markdown(
                    "**Draw a stroke on the ground plane**\n\n"
                    "1. Click the green ground area to start a stroke\n"
                    "2. Keep clicking to extend it (clicks on the wall or "
                    "on targets are ignored)\n"
                    "3. Click *Release* to finish: targets slide onto the "
                    "curve through your stroke"
                )

                with gr.Row():
                    with gr.Column(scale=3):
                        scene_img = gr.Image(
                            value=helpers.create_placeholder_image(
                                "Loading scene...",
                                scene_cfg.image_width, scene_cfg.image_height,
                            ),
                            label="Scene (click to draw)",
                            interactive=True,
                        )
                        with gr.Row():
                            release_btn = gr.Button("Release",
                                                    variant="primary")
                            reset_btn = gr.Button("Reset Scene",
                                                  variant="stop")

                    with gr.Column(scale=1):
                        draw_status = gr.Textbox(label="Status")
                        stroke_info = gr.Textbox(label="Stroke & Targets",
                                                 lines=10)

            # ==================== Tab 2: Results ========================
            with gr.TabItem("2. Results"):
                gr.Markdown(
                    "**Inspect and export the last animation**"
                )
                with gr.Row():
                    plot_btn = gr.Button("Plot Paths", variant="primary")
                    export_btn = gr.Button("Save Data (JSON/CSV)")
                results_status = gr.Textbox(label="Result", lines=4)
                plot_img = gr.Image(label="Top View", height=450)

                with gr.Row():
                    frame_slider = gr.Slider(0, 1, 0, step=1,
                                             label="Animation frame")
                frame_img = gr.Image(label="Frame", height=350)

                gr.Markdown("**Export Video**")
                with gr.Row():
                    video_fps = gr.Slider(10, 60, animation_cfg.video_fps,
                                          step=5, label="FPS")
                    video_btn = gr.Button("Generate Video")
                video_out = gr.Video(label="Output Video")

        # ─────────────── Event wiring ───────────────────────────────────
        draw_outputs = [scene_img, draw_status, stroke_info, session_id]

        app.load(ui._initial_view, inputs=[session_id], outputs=draw_outputs)
        scene_img.select(ui.draw.on_scene_click, inputs=[session_id],
                         outputs=draw_outputs)
        release_btn.click(ui.draw.on_release, inputs=[session_id],
                          outputs=draw_outputs + [frame_slider])
        reset_btn.click(ui.draw.on_reset, inputs=[session_id],
                        outputs=draw_outputs + [frame_slider])

        plot_btn.click(ui.results.on_plot, inputs=[session_id],
                       outputs=[plot_img, results_status, session_id])
        export_btn.click(ui.results.on_export, inputs=[session_id],
                         outputs=[results_status, session_id])
        frame_slider.change(ui.results.on_preview_frame,
                            inputs=[frame_slider, session_id],
                            outputs=[frame_img, session_id])
        video_btn.click(ui.results.on_generate_video,
                        inputs=[video_fps, session_id],
                        outputs=[video_out, results_status, session_id])

    return app
