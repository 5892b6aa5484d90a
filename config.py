"""
Configuration settings for the Stroke & Align system.
"""

import os
from dataclasses import dataclass, field
from typing import List, Tuple

# Base paths
ROOT_DIR = os.path.dirname(os.path.abspath(__file__))
CACHE_DIR = os.path.join(ROOT_DIR, "cache")


@dataclass
class PathConfig:
    """File and directory paths."""
    frames_dir: str = os.path.join(CACHE_DIR, "frames")
    output_dir: str = os.path.join(CACHE_DIR, "output")
    exports_dir: str = os.path.join(CACHE_DIR, "exports")

    def ensure_dirs(self):
        """Create all directories if they don't exist."""
        for path in [self.frames_dir, self.output_dir, self.exports_dir]:
            os.makedirs(path, exist_ok=True)


@dataclass
class CaptureConfig:
    """Stroke capture settings."""
    drawable_tag: str = "DrawPlane"
    blend: float = 0.5  # midpoint smoothing of the preview line
    line_width: int = 3  # pixels


@dataclass
class AnimationConfig:
    """Tick pacing for scripted runs and exports."""
    fixed_step: float = 1.0 / 30.0  # seconds per tick
    video_fps: int = 30


@dataclass
class SceneConfig:
    """Camera and demo scene layout."""
    image_width: int = 800
    image_height: int = 600
    camera_position: Tuple[float, float, float] = (0.0, 9.0, -9.0)
    camera_target: Tuple[float, float, float] = (0.0, 0.0, 0.5)
    fov_deg: float = 55.0
    plane_size: Tuple[float, float] = (12.0, 10.0)  # x, z
    wall_distance: float = 5.5
    targets: List[Tuple[str, Tuple[float, float, float], Tuple[float, float, float]]] = field(
        default_factory=lambda: [
            ("A", (-4.0, 0.4, -3.0), (0.0, 1.0, 0.0)),
            ("B", (-1.5, 0.4, -3.5), (0.0, 1.0, 0.0)),
            ("C", (1.5, 1.2, -3.5), (0.0, 1.0, 0.0)),
            ("D", (4.0, 0.8, -3.0), (0.3, 1.0, 0.0)),
        ]
    )


@dataclass
class UIConfig:
    """Gradio UI settings."""
    server_name: str = "0.0.0.0"
    server_port: int = 7860
    share: bool = False


@dataclass
class Config:
    """Main configuration container."""
    paths: PathConfig = field(default_factory=PathConfig)
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    animation: AnimationConfig = field(default_factory=AnimationConfig)
    scene: SceneConfig = field(default_factory=SceneConfig)
    ui: UIConfig = field(default_factory=UIConfig)

    def __post_init__(self):
        self.paths.ensure_dirs()


# Default configuration instance
config = Config()
