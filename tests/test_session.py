"""End-to-end tests for an assembled drawing session."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from config import CaptureConfig, SceneConfig
from strokealign.core.controller import FixedStepClock, PointerPhase
from strokealign.core.scene import DRAW_PLANE_TAG, Camera, build_demo_scene
from strokealign.core.session import DrawingSession


@pytest.fixture
def session():
    return DrawingSession.from_config(SceneConfig(), CaptureConfig(),
                                      clock=FixedStepClock(1.0 / 30.0))


def draw(session, world_points, dt=1.0 / 30.0):
    screen, visible = session.camera.world_to_screen(np.asarray(world_points))
    assert visible.all()
    phases = [PointerPhase.BEGAN] + [PointerPhase.MOVED] * (len(screen) - 1)
    for phase, (x, y) in zip(phases, screen):
        session.pointer(phase, x, y)
        session.step(dt)
    session.pointer(PointerPhase.ENDED, *screen[-1])
    session.step(dt)


def arc(n=12):
    xs = np.linspace(-3.0, 3.0, n)
    return np.column_stack([xs, np.zeros(n), 1.0 + 0.2 * (9.0 - xs ** 2)])


def test_from_config_builds_targets(session):
    assert [t.name for t in session.targets] == ["A", "B", "C", "D"]
    assert session.camera.width == 800
    assert not session.is_drawing
    assert not session.is_animating


def test_preview_exists_only_while_drawing(session):
    screen, _ = session.camera.world_to_screen(arc(3))
    session.pointer(PointerPhase.BEGAN, *screen[0])
    session.step(0.1)
    session.pointer(PointerPhase.MOVED, *screen[1])
    session.step(0.1)
    assert session.is_drawing
    assert len(session.preview_points) == 3
    assert len(session.renderer.live_polylines) == 1

    session.pointer(PointerPhase.ENDED, *screen[1])
    session.step(0.1)
    assert len(session.preview_points) == 0
    assert session.renderer.live_polylines == []


def test_stroke_lands_on_draw_plane(session):
    points = arc()
    draw(session, points)
    assert_allclose(session.stroke_points, points, atol=1e-6)


def test_full_stroke_moves_targets_onto_curve(session):
    initial = [t.position for t in session.targets]
    draw(session, arc())
    task = session.controller.last_task
    assert task is not None

    ticks = session.run_until_idle()
    assert ticks > 0
    assert not session.is_animating
    for target, start, final in zip(session.targets, initial, task.final_positions()):
        assert_allclose(target.position, final, atol=1e-9)
        # Motion stays in the plane perpendicular to each target's up vector
        assert abs(np.dot(target.position - start, target.up)) < 1e-9

    stats = session.recorder.get_stats()
    assert set(stats) == {"A", "B", "C", "D"}
    assert all(s.num_samples > 1 for s in stats.values())


def test_run_until_idle_reports_frames(session):
    draw(session, arc(6))
    seen = []
    ticks = session.run_until_idle(on_frame=seen.append)
    assert seen == list(range(1, ticks + 1))


def test_render_produces_frame(session):
    draw(session, arc(6))
    frame = session.render(caption="done", show_stroke=True)
    assert frame.shape == (600, 800, 3)


def test_reset_restores_home_positions(session):
    home = [t.position for t in session.targets]
    draw(session, arc())
    session.run_until_idle()
    session.reset()

    for target, pos in zip(session.targets, home):
        assert_allclose(target.position, pos)
    assert session.recorder.paths() == {}
    assert len(session.stroke_points) == 0
    assert not session.is_animating


def test_session_clock_paces_the_animation():
    session = DrawingSession.from_config(SceneConfig(), CaptureConfig(),
                                         clock=FixedStepClock(0.25))
    draw(session, arc(6))
    assert session.run_until_idle() == 4


def test_recorder_follows_written_positions(session):
    initial = {t.name: t.position for t in session.targets}
    draw(session, arc())
    task = session.controller.last_task
    session.run_until_idle()

    paths = session.recorder.paths()
    finals = dict(zip((t.name for t in task.targets), task.final_positions()))
    for name, data in paths.items():
        assert_allclose(data[0, 1:4], initial[name])
        assert_allclose(data[-1, 1:4], finals[name], atol=1e-9)
        # One sample per tick
        assert len(np.unique(data[:, 0])) == len(data)


def test_default_drawable_tag_is_the_draw_plane():
    scene, targets = build_demo_scene((8.0, 8.0), [("A", (0.0, 0.5, -2.0), (0.0, 1.0, 0.0))])
    camera = Camera(position=(0.0, 6.0, -6.0), target=(0.0, 0.0, 1.0))
    session = DrawingSession(camera, scene, targets)
    assert session.capture.drawable_tag == DRAW_PLANE_TAG
    assert session.clock.delta() == pytest.approx(1.0 / 30.0)
