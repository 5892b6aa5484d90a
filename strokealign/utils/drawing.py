"""
Drawing utilities for visualization.
"""

import cv2
import numpy as np
from typing import Tuple, List, Optional, Union

Color = Union[Tuple[int, int, int], Tuple[int, int, int, int]]
Point = Tuple[int, int]


def draw_circle(
    img: np.ndarray,
    center: Tuple[float, float],
    radius: int,
    color: Color,
    thickness: int = -1,
    outline: Optional[Color] = None,
    outline_thickness: int = 2
) -> None:
    """Draw circle with optional outline."""
    pt = (int(round(center[0])), int(round(center[1])))
    cv2.circle(img, pt, max(1, radius), color, thickness, cv2.LINE_AA)
    if outline:
        cv2.circle(img, pt, max(1, radius) + outline_thickness, outline,
                   outline_thickness, cv2.LINE_AA)


def draw_polygon(
    img: np.ndarray,
    points: Union[np.ndarray, List[Tuple[float, float]]],
    color: Color,
    thickness: int = 2,
    closed: bool = True
) -> None:
    """Draw polygon (or open polyline) from points."""
    pts = np.round(np.asarray(points, dtype=np.float64)).astype(np.int32)
    if len(pts) < 2:
        return
    cv2.polylines(img, [pts.reshape(-1, 1, 2)], closed, color, thickness,
                  cv2.LINE_AA)


def draw_text(
    img: np.ndarray,
    text: str,
    position: Tuple[int, int],
    color: Color = (255, 255, 255),
    scale: float = 0.6,
    thickness: int = 2,
    shadow: bool = False
) -> None:
    """Draw text with optional shadow."""
    font = cv2.FONT_HERSHEY_SIMPLEX
    if shadow:
        cv2.putText(img, text, (position[0]+1, position[1]+1), font, scale, (0, 0, 0), thickness+1, cv2.LINE_AA)
    cv2.putText(img, text, position, font, scale, color, thickness, cv2.LINE_AA)


def blank_canvas(width: int, height: int, shade: int = 40) -> np.ndarray:
    """Uniform grey HxWx3 uint8 image."""
    return np.full((height, width, 3), shade, dtype=np.uint8)
