"""Tests for Bézier evaluation and vector helpers."""

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

from strokealign.core.geometry import (
    as_vec3,
    bezier_point,
    curve_parameters,
    is_origin,
    lerp,
    project_on_plane,
    sample_bezier,
)

CONTROL = [(0.0, 0.0, 0.0), (1.0, 2.0, 0.5), (3.0, -1.0, 2.0), (4.0, 0.0, -1.0)]


@pytest.mark.parametrize("t", [0.0, 0.3, 0.5, 1.0, 1.7])
def test_bezier_single_point_is_constant(t):
    assert_array_equal(bezier_point(t, [(2.0, -3.0, 4.5)]), [2.0, -3.0, 4.5])


def test_bezier_endpoints():
    assert_array_equal(bezier_point(0.0, CONTROL), CONTROL[0])
    assert_allclose(bezier_point(1.0, CONTROL), CONTROL[-1], atol=1e-12)


@pytest.mark.parametrize("t", [0.0, 0.25, 0.6, 1.0])
def test_bezier_translation_invariant(t):
    offset = np.array([10.0, -4.0, 2.5])
    shifted = [np.array(p) + offset for p in CONTROL]
    assert_allclose(bezier_point(t, shifted), bezier_point(t, CONTROL) + offset,
                    atol=1e-9)


def test_bezier_two_points_is_lerp():
    a, b = (0.0, 0.0, 0.0), (2.0, 4.0, -2.0)
    assert_allclose(bezier_point(0.25, [a, b]), [0.5, 1.0, -0.5])


def test_bezier_matches_cubic_bernstein_form():
    p = np.array(CONTROL)
    t = 0.4
    s = 1.0 - t
    expected = s**3 * p[0] + 3 * s**2 * t * p[1] + 3 * s * t**2 * p[2] + t**3 * p[3]
    assert_allclose(bezier_point(t, CONTROL), expected, atol=1e-12)


def test_bezier_does_not_modify_input():
    points = np.array(CONTROL)
    before = points.copy()
    bezier_point(0.5, points)
    assert_array_equal(points, before)


def test_bezier_long_stroke_does_not_recurse():
    points = np.column_stack([np.arange(5000.0), np.zeros(5000), np.zeros(5000)])
    assert_allclose(bezier_point(0.5, points)[0], 2499.5, atol=1e-6)


def test_bezier_rejects_empty():
    with pytest.raises(ValueError):
        bezier_point(0.5, [])


def test_sample_bezier_shape_and_ends():
    samples = sample_bezier(CONTROL, 10)
    assert samples.shape == (10, 3)
    assert_allclose(samples[0], CONTROL[0])
    assert_allclose(samples[-1], CONTROL[-1], atol=1e-12)


def test_curve_parameters_spread_by_index():
    assert_allclose(curve_parameters(5), [0.0, 0.25, 0.5, 0.75, 1.0])
    assert curve_parameters(2).tolist() == [0.0, 1.0]


def test_curve_parameters_single_target_pinned_to_start():
    assert curve_parameters(1).tolist() == [0.0]


def test_curve_parameters_empty():
    assert len(curve_parameters(0)) == 0


def test_project_on_plane_removes_normal_component():
    result = project_on_plane((3.0, 4.0, -2.0), (0.0, 1.0, 0.0))
    assert_allclose(result, [3.0, 0.0, -2.0])


def test_project_on_plane_accepts_unnormalized_normal():
    result = project_on_plane((1.0, 1.0, 1.0), (0.0, 0.0, 5.0))
    assert_allclose(result, [1.0, 1.0, 0.0])


def test_project_on_plane_result_is_orthogonal():
    normal = np.array([0.3, 1.0, -0.2])
    result = project_on_plane((2.0, -1.0, 4.0), normal)
    assert abs(np.dot(result, normal)) < 1e-12


def test_project_on_plane_zero_normal_is_identity():
    assert_allclose(project_on_plane((1.0, 2.0, 3.0), (0.0, 0.0, 0.0)), [1.0, 2.0, 3.0])


def test_lerp_midpoint():
    assert_allclose(lerp((0.0, 0.0, 0.0), (2.0, 2.0, 2.0), 0.5), [1.0, 1.0, 1.0])


def test_is_origin_uses_tolerance():
    assert is_origin((0.0, 0.0, 0.0))
    assert is_origin((1e-7, 0.0, 0.0))
    assert not is_origin((1e-3, 0.0, 0.0))


def test_as_vec3_rejects_wrong_shape():
    with pytest.raises(ValueError):
        as_vec3((1.0, 2.0))
