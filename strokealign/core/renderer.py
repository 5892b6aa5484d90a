"""
Rendering, plotting and export for drawing sessions.

Samples recorded by MotionRecorder are rows of:
    0: tick
    1: x
    2: y
    3: z
"""

import os
import csv
import json
import logging
import cv2
import numpy as np
from typing import Dict, List, Optional, Sequence, Tuple
from dataclasses import dataclass

from ..utils.drawing import blank_canvas, draw_circle, draw_polygon, draw_text
from .geometry import sample_bezier
from .reposition import PositionUpdate
from .scene import DRAW_PLANE_TAG, Camera, Scene, TargetObject

logger = logging.getLogger(__name__)


def visible_runs(screen: np.ndarray, visible: np.ndarray) -> List[np.ndarray]:
    """
    Split projected points into runs of consecutive visible points.

    A point behind the camera ends the current run, so points on either
    side of it are never joined.
    """
    runs = []
    current: List[np.ndarray] = []
    for point, ok in zip(screen, visible):
        if ok:
            current.append(point)
        elif current:
            runs.append(np.array(current))
            current = []
    if current:
        runs.append(np.array(current))
    return runs


class CanvasPolyline:
    """Polyline renderer: holds the world points drawn by SceneRenderer."""

    def __init__(self):
        self.points = np.zeros((0, 3))
        self.disposed = False

    def set_points(self, points: np.ndarray):
        if self.disposed:
            return
        self.points = np.array(points, dtype=np.float64).reshape(-1, 3)

    def dispose(self):
        self.disposed = True
        self.points = np.zeros((0, 3))


@dataclass
class MotionStats:
    """Summary of one target's recorded motion."""
    name: str
    num_samples: int
    start: Tuple[float, float, float]
    end: Tuple[float, float, float]
    distance: float


class MotionRecorder:
    """Collects per-target position samples, keyed by target name."""

    def __init__(self):
        self.samples: Dict[str, List[Tuple[int, float, float, float]]] = {}

    def record(self, tick: int, updates: Sequence[PositionUpdate]):
        """
        Add one sample per target written during *tick*. When overlapping
        animations write the same target, the last write is kept.
        """
        latest: Dict[str, np.ndarray] = {}
        for target, position in updates:
            latest[target.name] = position
        for name, position in latest.items():
            self._add(tick, name, position)

    def _add(self, tick: int, name: str, position: np.ndarray):
        x, y, z = (float(v) for v in position)
        self.samples.setdefault(name, []).append((tick, x, y, z))

    def clear(self):
        self.samples = {}

    def paths(self) -> Dict[str, np.ndarray]:
        """{name: Nx4 array} for targets with at least one sample."""
        return {name: np.array(rows) for name, rows in self.samples.items() if rows}

    def get_stats(self) -> Dict[str, MotionStats]:
        stats = {}
        for name, data in self.paths().items():
            xyz = data[:, 1:4]
            if len(xyz) > 1:
                distance = float(np.linalg.norm(np.diff(xyz, axis=0), axis=1).sum())
            else:
                distance = 0.0
            stats[name] = MotionStats(
                name=name,
                num_samples=len(data),
                start=tuple(float(v) for v in xyz[0]),
                end=tuple(float(v) for v in xyz[-1]),
                distance=distance,
            )
        return stats


class SceneRenderer:
    """
    Draws the scene from the camera's point of view and produces plots
    and data exports.
    """

    PLANE_COLOR = (90, 160, 90)     # BGR
    SURFACE_COLOR = (120, 120, 120)
    STROKE_COLOR = (0, 200, 255)
    WHITE = (255, 255, 255)

    COLORS_BGR = [
        (70, 57, 230), (157, 123, 69), (143, 157, 42),
        (74, 196, 233), (229, 93, 155), (97, 162, 244)
    ]

    def __init__(self, camera: Camera, scene: Scene, line_width: int = 3):
        self.camera = camera
        self.scene = scene
        self.line_width = line_width
        self._polylines: List[CanvasPolyline] = []

    # ── Live polylines ──────────────────────────────────────────────────

    def new_polyline(self) -> CanvasPolyline:
        """Create a polyline that is drawn until disposed."""
        line = CanvasPolyline()
        self._polylines.append(line)
        return line

    @property
    def live_polylines(self) -> List[CanvasPolyline]:
        self._polylines = [p for p in self._polylines if not p.disposed]
        return list(self._polylines)

    # ── Frame rendering ─────────────────────────────────────────────────

    def _draw_path(self, canvas: np.ndarray, points: np.ndarray, color,
                   thickness: int, closed: bool = False):
        """Project and draw a world-space path, breaking it behind the camera."""
        points = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        if len(points) < 2:
            return
        screen, visible = self.camera.world_to_screen(points)
        if closed and visible.all():
            draw_polygon(canvas, screen, color, thickness)
            return
        for run in visible_runs(screen, visible):
            draw_polygon(canvas, run, color, thickness, closed=False)

    def _color(self, index: int):
        return self.COLORS_BGR[index % len(self.COLORS_BGR)]

    def render_frame(
        self,
        targets: Sequence[TargetObject],
        trails: Optional[Dict[str, np.ndarray]] = None,
        stroke_points: Optional[np.ndarray] = None,
        caption: Optional[str] = None,
    ) -> np.ndarray:
        """
        Render one BGR frame.

        Args:
            targets: Objects drawn as discs at their current position
            trails: {name: Nx4 recorded samples} drawn as fading paths
            stroke_points: Finished stroke to overlay (Nx3)
            caption: Text drawn in the top-left corner
        """
        canvas = blank_canvas(self.camera.width, self.camera.height)

        for plane in self.scene.planes:
            color = self.PLANE_COLOR if plane.tag == DRAW_PLANE_TAG else self.SURFACE_COLOR
            self._draw_path(canvas, plane.corners(), color, 2, closed=True)

        if stroke_points is not None:
            self._draw_path(canvas, stroke_points, self.STROKE_COLOR, 1)

        for line in self.live_polylines:
            self._draw_path(canvas, line.points, self.STROKE_COLOR, self.line_width)

        for idx, target in enumerate(targets):
            color = self._color(idx)
            if trails and target.name in trails:
                self._draw_path(canvas, trails[target.name][:, 1:4], color, 1)
            self._draw_target(canvas, target, color)

        if caption:
            draw_text(canvas, caption, (10, 25), self.WHITE, 0.6, 1, shadow=True)
        return canvas

    def _draw_target(self, canvas: np.ndarray, target: TargetObject, color):
        center = target.position
        rim = center + self.camera.up * target.radius
        screen, visible = self.camera.world_to_screen(np.array([center, rim]))
        if not visible.all():
            return
        radius = int(round(np.linalg.norm(screen[1] - screen[0])))
        draw_circle(canvas, screen[0], radius, color, -1, self.WHITE, 1)
        draw_text(canvas, target.name,
                  (int(screen[0][0]) + radius + 4, int(screen[0][1]) + 4),
                  self.WHITE, 0.45, 1)

    @staticmethod
    def write_video(frames: Sequence[np.ndarray], output_path: str,
                    fps: float = 30.0) -> Tuple[bool, str]:
        """Write BGR frames to an MP4 file."""
        if not frames:
            return False, "No frames to write"
        h, w = frames[0].shape[:2]
        out = cv2.VideoWriter(
            output_path, cv2.VideoWriter_fourcc(*'mp4v'), fps, (w, h)
        )
        if not out.isOpened():
            logger.warning("Cannot open video writer for %s", output_path)
            return False, f"Cannot write video: {output_path}"

        written = 0
        for frame in frames:
            if frame.shape[:2] != (h, w):
                frame = cv2.resize(frame, (w, h))
            out.write(frame)
            written += 1
        out.release()
        return True, f"{written} frames @ {fps:g}fps"

    # ── Matplotlib plot ─────────────────────────────────────────────────

    def plot_paths(
        self,
        stroke_points: np.ndarray,
        recorder: MotionRecorder,
        output_path: str,
    ) -> Optional[np.ndarray]:
        """
        Top-down (X/Z) plot of the stroke, its Bézier curve and the paths
        the targets travelled. Returns the saved image as an RGB array.
        """
        import matplotlib
        matplotlib.use('Agg')
        import matplotlib.pyplot as plt
        from PIL import Image

        stroke = np.asarray(stroke_points, dtype=np.float64).reshape(-1, 3)
        if len(stroke) == 0:
            return None

        fig, ax = plt.subplots(figsize=(10, 8), facecolor='#1a1a2e')
        ax.set_facecolor('#16213e')

        ax.plot(stroke[:, 0], stroke[:, 2], color='#e9c46a', linewidth=1,
                marker='.', markersize=3, alpha=0.7, label='Stroke points')
        if len(stroke) > 1:
            curve = sample_bezier(stroke, 100)
            ax.plot(curve[:, 0], curve[:, 2], color='#e63946', linewidth=2,
                    label='Bézier curve')

        palette = ['#457b9d', '#2a9d8f', '#9b5de5', '#f4a261', '#e76f51']
        for idx, (name, data) in enumerate(recorder.paths().items()):
            color = palette[idx % len(palette)]
            ax.plot(data[:, 1], data[:, 3], color=color, linewidth=1.5,
                    label=name)
            ax.scatter(data[0, 1], data[0, 3], s=60, c='white', marker='o',
                       edgecolors=color, linewidths=2, zorder=5)
            ax.scatter(data[-1, 1], data[-1, 3], s=60, c=color, marker='s',
                       edgecolors='white', linewidths=1.5, zorder=5)

        ax.set_aspect('equal')
        ax.autoscale()
        ax.grid(True, alpha=0.2, linestyle='--')
        ax.tick_params(colors='white')
        ax.set_xlabel('X', color='white', fontsize=11)
        ax.set_ylabel('Z', color='white', fontsize=11)
        ax.set_title('Stroke & Target Paths (top view)', color='white',
                     fontsize=14, fontweight='bold')
        ax.legend(loc='upper right', fontsize=8, framealpha=0.5)

        plt.tight_layout()
        plt.savefig(output_path, dpi=120,
                    facecolor=fig.get_facecolor(), bbox_inches='tight')
        plt.close(fig)
        return np.array(Image.open(output_path))

    # ── Data export ─────────────────────────────────────────────────────

    def export_data(
        self,
        stroke_points: np.ndarray,
        recorder: MotionRecorder,
        json_path: str,
        csv_path: str,
    ) -> str:
        """Export the stroke and recorded target motion to JSON and CSV."""
        stroke = np.asarray(stroke_points, dtype=np.float64).reshape(-1, 3)
        stats = recorder.get_stats()

        rows: List[dict] = []
        objects: Dict[str, dict] = {}
        for name, samples in recorder.samples.items():
            points = [
                {"tick": tick, "target": name, "x": x, "y": y, "z": z}
                for tick, x, y, z in samples
            ]
            rows.extend(points)
            objects[name] = {
                "target": name,
                "num_samples": len(points),
                "distance": stats[name].distance if name in stats else 0.0,
                "samples": points,
            }

        for path in (json_path, csv_path):
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)

        with open(json_path, 'w') as f:
            json.dump({
                "metadata": {
                    "num_targets": len(objects),
                    "num_stroke_points": len(stroke),
                    "total_samples": len(rows),
                    "image_width": self.camera.width,
                    "image_height": self.camera.height,
                },
                "stroke": stroke.tolist(),
                "targets": objects,
            }, f, indent=2)

        with open(csv_path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=["tick", "target", "x", "y", "z"])
            writer.writeheader()
            writer.writerows(rows)

        lines = [f"JSON: {json_path}", f"CSV: {csv_path}",
                 f"Total: {len(rows)} samples"]
        for name, st in stats.items():
            lines.append(f"{name}: {st.num_samples} samples, {st.distance:.2f} units")
        return "\n".join(lines)
