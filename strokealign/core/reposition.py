"""
Curve-driven repositioning of target objects.

Each target gets its own point on the Bézier curve through the stroke
points (spread by index, not arc length). Over MOVE_DURATION the target
slides from its start position toward that point, with the displacement
flattened onto the plane orthogonal to the target's up vector.
"""

import logging
import numpy as np
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from .geometry import bezier_point, curve_parameters, project_on_plane
from .scene import TargetObject

logger = logging.getLogger(__name__)

MOVE_DURATION = 1.0

PositionUpdate = Tuple[TargetObject, np.ndarray]


class TaskPhase(Enum):
    RUNNING = "running"
    FINISHED = "finished"


class RepositionTask:
    """
    One animation run over a frozen stroke.

    The start positions are snapshotted at construction and never
    re-sampled. Progress is written once on start (0.0) and after every
    tick; the tick that reaches the duration writes exactly 1.0.
    """

    def __init__(self, stroke_points: np.ndarray, targets: Sequence[TargetObject],
                 task_id: int = 0):
        points = np.array(stroke_points, dtype=np.float64).reshape(-1, 3)
        if len(points) < 2:
            raise ValueError("Repositioning needs at least 2 stroke points")
        if not targets:
            raise ValueError("Repositioning needs at least one target")
        points.setflags(write=False)

        self.task_id = task_id
        self.stroke_points = points
        self.targets: List[TargetObject] = list(targets)
        self.initial_positions: Tuple[np.ndarray, ...] = tuple(
            self._frozen(t.position) for t in self.targets)
        self.curve_params = curve_parameters(len(self.targets))
        # Constant for the task's lifetime, so evaluated once
        self.curve_points: Tuple[np.ndarray, ...] = tuple(
            self._frozen(bezier_point(t, points)) for t in self.curve_params)

        self.duration = MOVE_DURATION
        self.elapsed = 0.0
        self.phase = TaskPhase.RUNNING

    @staticmethod
    def _frozen(vec: np.ndarray) -> np.ndarray:
        vec = np.array(vec, dtype=np.float64)
        vec.setflags(write=False)
        return vec

    @property
    def finished(self) -> bool:
        return self.phase is TaskPhase.FINISHED

    @property
    def progress(self) -> float:
        return min(self.elapsed / self.duration, 1.0)

    def target_position(self, index: int, progress: float) -> np.ndarray:
        """Position of target *index* at animation *progress* in [0, 1]."""
        start = self.initial_positions[index]
        relative = self.curve_points[index] - start
        projected = project_on_plane(relative, self.targets[index].up)
        return start + projected * progress

    def final_positions(self) -> List[np.ndarray]:
        return [self.target_position(i, 1.0) for i in range(len(self.targets))]

    def apply(self) -> List[PositionUpdate]:
        """Write every target's position for the current progress."""
        progress = self.progress
        updates = []
        for i, target in enumerate(self.targets):
            position = self.target_position(i, progress)
            target.position = position
            updates.append((target, position))
        return updates

    def tick(self, delta_time: float) -> List[PositionUpdate]:
        """Advance by *delta_time* and write positions. No-op once finished."""
        if self.finished:
            return []
        self.elapsed += delta_time
        updates = self.apply()
        if self.elapsed >= self.duration:
            self.phase = TaskPhase.FINISHED
            logger.info("Reposition task %d finished (%d targets)",
                        self.task_id, len(self.targets))
        return updates


class Repositioner:
    """
    Starts and advances reposition tasks for a registered target list.

    Overlapping tasks are allowed. They are ticked in start order, so on
    each tick the most recently started task writes last and wins.
    """

    def __init__(self, targets: Optional[Sequence[TargetObject]] = None):
        self.targets: List[TargetObject] = list(targets or [])
        self._tasks: List[RepositionTask] = []
        self._next_id = 1

    def register(self, target: TargetObject):
        if target not in self.targets:
            self.targets.append(target)

    def unregister(self, target: TargetObject) -> bool:
        if target in self.targets:
            self.targets.remove(target)
            return True
        return False

    @property
    def tasks(self) -> List[RepositionTask]:
        return list(self._tasks)

    @property
    def is_running(self) -> bool:
        return bool(self._tasks)

    def start(self, stroke_points: np.ndarray) -> Optional[RepositionTask]:
        """
        Begin moving the registered targets along *stroke_points*.

        Returns the new task, or None when there are fewer than 2 points or
        no targets (nothing is touched in that case).
        """
        count = len(stroke_points)
        if count < 2 or not self.targets:
            logger.info("Skipping repositioning: %d stroke points, %d targets",
                        count, len(self.targets))
            return None

        task = RepositionTask(stroke_points, self.targets, task_id=self._next_id)
        self._next_id += 1
        task.apply()
        self._tasks.append(task)
        logger.info("Reposition task %d started: %d points, %d targets",
                    task.task_id, count, len(task.targets))
        return task

    def tick(self, delta_time: float) -> List[PositionUpdate]:
        """Advance all running tasks, dropping the ones that finish."""
        updates: List[PositionUpdate] = []
        for task in self._tasks:
            updates.extend(task.tick(delta_time))
        self._tasks = [t for t in self._tasks if not t.finished]
        return updates
