"""
Tick-driven glue between pointer input, stroke capture and repositioning.
"""

import logging
from enum import Enum
from typing import Iterable, List, Optional, Tuple
from dataclasses import dataclass

from .stroke import StrokeCapture
from .reposition import PositionUpdate, RepositionTask, Repositioner

logger = logging.getLogger(__name__)


class PointerPhase(Enum):
    BEGAN = "began"
    MOVED = "moved"
    STATIONARY = "stationary"
    ENDED = "ended"
    CANCELED = "canceled"


@dataclass(frozen=True)
class PointerEvent:
    """One pointer sample in screen pixels."""
    phase: PointerPhase
    position: Tuple[float, float]
    pointer_id: int = 0


class DrawingController:
    """
    Routes pointer events to stroke capture and starts repositioning on
    release.

    Only the first pointer to begin is followed; other pointers are ignored
    until it ends.
    """

    def __init__(self, capture: StrokeCapture, repositioner: Repositioner):
        self.capture = capture
        self.repositioner = repositioner
        self._pointer_id: Optional[int] = None
        self.tick_count = 0
        self.last_task: Optional[RepositionTask] = None

    def handle(self, event: PointerEvent) -> Optional[RepositionTask]:
        """Process one event. Returns the task started by a release, if any."""
        if self._pointer_id is None:
            if event.phase is not PointerPhase.BEGAN:
                return None
            self._pointer_id = event.pointer_id
        elif event.pointer_id != self._pointer_id:
            return None

        if event.phase is PointerPhase.BEGAN:
            self.capture.begin(event.position)
        elif event.phase is PointerPhase.MOVED:
            if self.capture.is_drawing:
                self.capture.extend(event.position)
        elif event.phase is PointerPhase.ENDED:
            self._pointer_id = None
            return self._release()
        return None

    def _release(self) -> Optional[RepositionTask]:
        task = None
        if self.capture.is_drawing:
            points = self.capture.end()
            task = self.repositioner.start(points)
            if task is not None:
                self.last_task = task
        self.capture.discard_visual()
        return task

    def tick(self, delta_time: float,
             events: Iterable[PointerEvent] = ()) -> List[PositionUpdate]:
        """
        Run one frame: advance running animations by *delta_time*, then
        process this frame's pointer events in order.

        Returns every position written this frame, including the start
        positions of a task started by a release.
        """
        self.tick_count += 1
        updates = self.repositioner.tick(delta_time)
        for event in events:
            task = self.handle(event)
            if task is not None:
                updates.extend(zip(task.targets, task.initial_positions))
        return updates


class FixedStepClock:
    """Time source returning the same delta every tick."""

    def __init__(self, step: float = 1.0 / 30.0):
        if step <= 0:
            raise ValueError("Clock step must be positive")
        self.step = step

    def delta(self) -> float:
        return self.step
