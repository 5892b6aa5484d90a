"""
Vector helpers for stroke capture and curve evaluation.

Points and directions are float64 numpy arrays of shape (3,).
"""

import numpy as np
from typing import Sequence, Union

Vec3Like = Union[np.ndarray, Sequence[float]]

ORIGIN = np.zeros(3)

# Squared-distance tolerance used when comparing points for equality
POINT_EPSILON_SQ = 1e-10


def as_vec3(value: Vec3Like) -> np.ndarray:
    """Copy *value* into a float64 (3,) array."""
    vec = np.array(value, dtype=np.float64).reshape(-1)
    if vec.shape != (3,):
        raise ValueError(f"Expected a 3D vector, got shape {vec.shape}")
    return vec


def normalize(value: Vec3Like) -> np.ndarray:
    """Unit vector along *value* (zero vector stays zero)."""
    vec = as_vec3(value)
    norm = np.linalg.norm(vec)
    if norm < 1e-12:
        return vec
    return vec / norm


def points_equal(a: Vec3Like, b: Vec3Like) -> bool:
    diff = as_vec3(a) - as_vec3(b)
    return float(np.dot(diff, diff)) < POINT_EPSILON_SQ


def is_origin(point: Vec3Like) -> bool:
    """True if *point* sits on the world origin (the "no hit" sentinel)."""
    return points_equal(point, ORIGIN)


def lerp(a: Vec3Like, b: Vec3Like, t: float) -> np.ndarray:
    """Unclamped linear blend between *a* and *b*."""
    a = as_vec3(a)
    return a + (as_vec3(b) - a) * t


def project_on_plane(vector: Vec3Like, normal: Vec3Like) -> np.ndarray:
    """
    Remove the component of *vector* along *normal*.

    The normal does not need to be unit length. A zero normal leaves the
    vector unchanged.
    """
    vector = as_vec3(vector)
    normal = as_vec3(normal)
    sq_mag = float(np.dot(normal, normal))
    if sq_mag < 1e-12:
        return vector
    return vector - normal * (float(np.dot(vector, normal)) / sq_mag)


def bezier_point(t: float, points: Sequence[Vec3Like]) -> np.ndarray:
    """
    Evaluate the Bézier curve defined by *points* at parameter *t*.

    De Casteljau reduction: each round blends every adjacent pair at *t*,
    collapsing n points into n-1, until one point is left. Runs in place
    on a scratch copy so long strokes do not recurse.

    Args:
        t: Curve parameter, normally in [0, 1]
        points: Control points, at least one

    Returns:
        (3,) array on the curve
    """
    scratch = np.array(points, dtype=np.float64).reshape(-1, 3)
    n = len(scratch)
    if n == 0:
        raise ValueError("Bezier curve needs at least one control point")

    while n > 1:
        scratch[:n - 1] += (scratch[1:n] - scratch[:n - 1]) * t
        n -= 1
    return scratch[0].copy()


def sample_bezier(points: Sequence[Vec3Like], num_samples: int = 64) -> np.ndarray:
    """Evaluate the curve at *num_samples* evenly spaced parameters (Nx3)."""
    if num_samples < 2:
        raise ValueError("num_samples must be at least 2")
    ts = np.linspace(0.0, 1.0, num_samples)
    return np.array([bezier_point(t, points) for t in ts])


def curve_parameters(count: int) -> np.ndarray:
    """
    Curve parameter per target object, spread by index: t_i = i / (k - 1).

    A single target is pinned to t = 0; no targets gives an empty array.
    """
    if count <= 0:
        return np.zeros(0)
    if count == 1:
        return np.zeros(1)
    return np.arange(count, dtype=np.float64) / (count - 1)
