"""Tests for pointer routing and the tick loop."""

import pytest
from numpy.testing import assert_allclose

from strokealign.core.controller import (
    DrawingController,
    FixedStepClock,
    PointerEvent,
    PointerPhase,
)
from strokealign.core.reposition import Repositioner


def began(x, y, pid=0):
    return PointerEvent(PointerPhase.BEGAN, (x, y), pid)


def moved(x, y, pid=0):
    return PointerEvent(PointerPhase.MOVED, (x, y), pid)


def ended(x=0, y=0, pid=0):
    return PointerEvent(PointerPhase.ENDED, (x, y), pid)


@pytest.fixture
def controller(capture, two_targets):
    return DrawingController(capture, Repositioner(two_targets))


def test_full_stroke_starts_task_and_discards_visual(controller, two_targets):
    controller.tick(0.1, [began(1, 1)])
    controller.tick(0.1, [moved(2, 1)])
    controller.tick(0.1, [moved(3, 1)])
    assert controller.capture.visual is not None

    controller.tick(0.1, [ended()])
    assert controller.capture.visual is None
    assert not controller.capture.is_drawing
    assert controller.repositioner.is_running
    assert controller.last_task is not None
    assert controller.last_task.stroke_points.shape == (3, 3)


def test_animation_runs_to_completion(controller, two_targets):
    controller.tick(0.1, [began(1, 1), moved(3, 1)])
    controller.tick(0.1, [ended()])
    task = controller.last_task
    for _ in range(20):
        controller.tick(0.1)
    assert task.finished
    assert not controller.repositioner.is_running
    assert_allclose(two_targets[0].position, task.final_positions()[0])
    assert_allclose(two_targets[1].position, [3.0, 0.0, 1.0])


def test_single_point_stroke_does_not_animate(controller, two_targets):
    controller.tick(0.1, [began(1, 1)])
    task = controller.handle(ended())
    assert task is None
    assert not controller.repositioner.is_running
    assert controller.capture.visual is None
    assert_allclose(two_targets[1].position, [5.0, 0.0, 0.0])


def test_release_after_rejected_begin_does_not_replay_old_stroke(
        make_capture, two_targets):
    capture = make_capture(tags={(9, 9): "Other"})
    controller = DrawingController(capture, Repositioner(two_targets))
    controller.tick(0.1, [began(1, 1), moved(2, 2), ended()])
    for _ in range(20):
        controller.tick(0.1)
    first = controller.last_task

    controller.tick(0.1, [began(9, 9)])
    assert controller.handle(ended()) is None
    assert controller.last_task is first
    assert not controller.repositioner.is_running


def test_move_before_begin_is_ignored(controller):
    controller.handle(moved(2, 2))
    assert controller.capture.session.point_count == 0


def test_second_pointer_is_ignored(controller):
    controller.handle(began(1, 1, pid=0))
    controller.handle(began(5, 5, pid=1))
    controller.handle(moved(6, 6, pid=1))
    controller.handle(ended(pid=1))
    assert controller.capture.is_drawing
    assert controller.capture.session.point_count == 1

    controller.handle(moved(2, 2, pid=0))
    assert controller.capture.session.point_count == 2


def test_new_pointer_accepted_after_release(controller):
    controller.handle(began(1, 1, pid=3))
    controller.handle(ended(pid=3))
    controller.handle(began(4, 4, pid=7))
    assert controller.capture.is_drawing


def test_stationary_and_canceled_are_ignored(controller):
    controller.handle(began(1, 1))
    controller.handle(PointerEvent(PointerPhase.STATIONARY, (8, 8)))
    controller.handle(PointerEvent(PointerPhase.CANCELED, (8, 8)))
    assert controller.capture.is_drawing
    assert controller.capture.session.point_count == 1


def test_tick_advances_existing_tasks_before_new_events(controller, two_targets):
    controller.tick(0.1, [began(1, 1), moved(3, 1)])
    controller.tick(0.5, [ended()])
    # Task started during this tick: only its start write has happened
    assert controller.last_task.elapsed == 0.0
    controller.tick(0.5)
    assert controller.last_task.elapsed == 0.5


def test_release_tick_reports_start_positions(controller, two_targets):
    controller.tick(0.1, [began(1, 1), moved(3, 1)])
    updates = controller.tick(0.1, [ended()])
    assert [t.name for t, _ in updates] == ["first", "second"]
    assert_allclose(updates[1][1], [5.0, 0.0, 0.0])


def test_new_stroke_while_animating_overlaps(controller):
    controller.tick(0.1, [began(1, 1), moved(3, 1)])
    controller.tick(0.1, [ended()])
    controller.tick(0.1, [began(2, 2), moved(4, 4)])
    controller.tick(0.1, [ended()])
    assert len(controller.repositioner.tasks) == 2


def test_tick_count_increments(controller):
    controller.tick(0.1)
    controller.tick(0.1)
    assert controller.tick_count == 2


def test_fixed_step_clock():
    clock = FixedStepClock(0.02)
    assert clock.delta() == 0.02
    assert clock.delta() == 0.02
    with pytest.raises(ValueError):
        FixedStepClock(0)
