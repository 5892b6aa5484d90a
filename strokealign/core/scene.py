"""
Scene collaborators consumed by stroke capture and repositioning.

A pinhole camera turns screen coordinates into rays, a scene of tagged
surfaces answers ray casts, and target objects expose the position / up
vector the repositioner drives.
"""

import logging
import math
import numpy as np
from typing import List, Optional, Sequence, Tuple
from dataclasses import dataclass, field

from .geometry import Vec3Like, as_vec3, normalize

logger = logging.getLogger(__name__)

DRAW_PLANE_TAG = "DrawPlane"
TARGET_TAG = "Target"


@dataclass
class Ray:
    """Half-line starting at *origin* along unit *direction*."""
    origin: np.ndarray
    direction: np.ndarray

    def point_at(self, distance: float) -> np.ndarray:
        return self.origin + self.direction * distance


@dataclass
class HitResult:
    """Nearest surface hit along a ray."""
    point: np.ndarray
    tag: str
    distance: float
    surface: object = field(default=None, repr=False)


class Camera:
    """
    Pinhole camera.

    Screen coordinates are image pixels: origin top-left, x right, y down.
    """

    def __init__(
        self,
        position: Vec3Like,
        target: Vec3Like,
        up: Vec3Like = (0.0, 1.0, 0.0),
        fov_deg: float = 60.0,
        width: int = 640,
        height: int = 480,
    ):
        self.position = as_vec3(position)
        self.width = width
        self.height = height
        self.fov_deg = fov_deg

        self.forward = normalize(as_vec3(target) - self.position)
        self.right = normalize(np.cross(as_vec3(up), self.forward))
        if not np.any(self.right):
            raise ValueError("Camera up vector is parallel to view direction")
        self.up = np.cross(self.forward, self.right)

        self._tan_half = math.tan(math.radians(fov_deg) / 2.0)
        self._aspect = width / float(height)

    def screen_point_to_ray(self, x: float, y: float) -> Ray:
        """Ray from the camera through image pixel (x, y)."""
        ndc_x = (2.0 * x / self.width - 1.0) * self._aspect * self._tan_half
        ndc_y = (1.0 - 2.0 * y / self.height) * self._tan_half
        direction = self.forward + self.right * ndc_x + self.up * ndc_y
        return Ray(self.position.copy(), normalize(direction))

    def world_to_screen(
        self, points: np.ndarray, near: float = 1e-3
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Project world points into image pixels.

        Args:
            points: Nx3 world coordinates

        Returns:
            (Nx2 pixel coordinates, N boolean mask of points in front of
            the camera)
        """
        pts = np.asarray(points, dtype=np.float64).reshape(-1, 3)
        rel = pts - self.position
        depth = rel @ self.forward
        visible = depth > near
        safe_depth = np.where(visible, depth, 1.0)

        xc = (rel @ self.right) / (safe_depth * self._tan_half * self._aspect)
        yc = (rel @ self.up) / (safe_depth * self._tan_half)
        screen = np.column_stack([
            (xc + 1.0) * self.width / 2.0,
            (1.0 - yc) * self.height / 2.0,
        ])
        return screen, visible


class PlaneSurface:
    """
    Tagged rectangle (or infinite plane when extents are None).

    Args:
        center: Point on the plane
        normal: Plane normal
        axis_u: In-plane direction of the first extent
        half_extents: (half size along u, half size along v) or None
        tag: Surface category used by stroke validation
    """

    def __init__(
        self,
        center: Vec3Like,
        normal: Vec3Like,
        axis_u: Vec3Like,
        half_extents: Optional[Tuple[float, float]] = None,
        tag: str = DRAW_PLANE_TAG,
        name: str = "plane",
    ):
        self.center = as_vec3(center)
        self.normal = normalize(normal)
        self.axis_u = normalize(axis_u)
        self.axis_v = np.cross(self.normal, self.axis_u)
        self.half_extents = half_extents
        self.tag = tag
        self.name = name

    def intersect(self, ray: Ray) -> Optional[float]:
        """Distance along *ray* to the surface, or None."""
        denom = float(np.dot(self.normal, ray.direction))
        if abs(denom) < 1e-9:
            return None
        distance = float(np.dot(self.normal, self.center - ray.origin)) / denom
        if distance < 0:
            return None
        if self.half_extents is not None:
            local = ray.point_at(distance) - self.center
            half_u, half_v = self.half_extents
            if abs(np.dot(local, self.axis_u)) > half_u:
                return None
            if abs(np.dot(local, self.axis_v)) > half_v:
                return None
        return distance

    def corners(self) -> np.ndarray:
        """4x3 outline of a bounded plane (empty for infinite planes)."""
        if self.half_extents is None:
            return np.zeros((0, 3))
        hu, hv = self.half_extents
        u, v = self.axis_u * hu, self.axis_v * hv
        c = self.center
        return np.array([c - u - v, c + u - v, c + u + v, c - u + v])


class TargetObject:
    """Movable entity with a position and a fixed local "up" direction."""

    def __init__(
        self,
        name: str,
        position: Vec3Like,
        up: Vec3Like = (0.0, 1.0, 0.0),
        radius: float = 0.4,
    ):
        self.name = name
        self._position = as_vec3(position)
        self._up = normalize(up)
        if not np.any(self._up):
            raise ValueError(f"Target {name!r} needs a non-zero up vector")
        self.radius = radius

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    @position.setter
    def position(self, value: Vec3Like):
        self._position = as_vec3(value)

    @property
    def up(self) -> np.ndarray:
        return self._up.copy()

    def __repr__(self) -> str:
        x, y, z = self._position
        return f"TargetObject({self.name!r}, ({x:.3f}, {y:.3f}, {z:.3f}))"


class TargetCollider:
    """Sphere collider that follows a target object's current position."""

    def __init__(self, target: TargetObject, tag: str = TARGET_TAG):
        self.target = target
        self.tag = tag
        self.name = target.name

    def intersect(self, ray: Ray) -> Optional[float]:
        oc = ray.origin - self.target.position
        b = float(np.dot(oc, ray.direction))
        c = float(np.dot(oc, oc)) - self.target.radius ** 2
        disc = b * b - c
        if disc < 0:
            return None
        root = math.sqrt(disc)
        for distance in (-b - root, -b + root):
            if distance >= 0:
                return distance
        return None


class Scene:
    """Collection of ray-castable surfaces."""

    def __init__(self):
        self.surfaces: List[object] = []

    def add(self, surface):
        self.surfaces.append(surface)
        return surface

    def add_target(self, target: TargetObject) -> TargetCollider:
        return self.add(TargetCollider(target))

    @property
    def planes(self) -> List[PlaneSurface]:
        return [s for s in self.surfaces if isinstance(s, PlaneSurface)]

    def raycast(self, ray: Ray, max_distance: float = math.inf) -> Optional[HitResult]:
        """Nearest hit along *ray*, or None when nothing is struck."""
        best: Optional[HitResult] = None
        for surface in self.surfaces:
            distance = surface.intersect(ray)
            if distance is None or distance > max_distance:
                continue
            if best is None or distance < best.distance:
                best = HitResult(
                    point=ray.point_at(distance),
                    tag=surface.tag,
                    distance=distance,
                    surface=surface,
                )
        return best


class SurfaceHitTester:
    """
    Screen-space hit test bound to an explicit camera and scene.

    Calling the tester with a screen position returns the nearest
    HitResult, or None on a miss.
    """

    def __init__(self, camera: Camera, scene: Scene):
        self.camera = camera
        self.scene = scene

    def __call__(self, screen_position: Sequence[float]) -> Optional[HitResult]:
        x, y = screen_position
        return self.scene.raycast(self.camera.screen_point_to_ray(x, y))


def build_demo_scene(
    plane_size: Tuple[float, float],
    targets: Sequence[Tuple[str, Sequence[float], Sequence[float]]],
    wall_distance: Optional[float] = None,
) -> Tuple[Scene, List[TargetObject]]:
    """
    Ground draw plane (y = 0) with target spheres and an optional
    untagged back wall.

    Args:
        plane_size: (width along x, depth along z) of the draw plane
        targets: [(name, position, up), ...]
        wall_distance: z of a vertical "Wall" surface behind the plane

    Returns:
        (scene, target objects)
    """
    scene = Scene()
    width, depth = plane_size
    scene.add(PlaneSurface(
        center=(0.0, 0.0, 0.0),
        normal=(0.0, 1.0, 0.0),
        axis_u=(1.0, 0.0, 0.0),
        half_extents=(width / 2.0, depth / 2.0),
        tag=DRAW_PLANE_TAG,
        name="ground",
    ))
    if wall_distance is not None:
        scene.add(PlaneSurface(
            center=(0.0, width / 4.0, wall_distance),
            normal=(0.0, 0.0, -1.0),
            axis_u=(1.0, 0.0, 0.0),
            half_extents=(width / 2.0, width / 4.0),
            tag="Wall",
            name="wall",
        ))

    objects = []
    for name, position, up in targets:
        target = TargetObject(name, position, up)
        scene.add_target(target)
        objects.append(target)

    logger.info("Built scene: %d surfaces, %d targets",
                len(scene.surfaces), len(objects))
    return scene, objects
