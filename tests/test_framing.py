"""
Unit tests for logo_teaser.framing.

Tests:
- Distance derivation on wide and tall viewports
- Re-centering on the bounding-box center
- Idempotence of repeated fits
- Degenerate and empty geometry
"""

import math

import numpy as np
import pytest

from logo_teaser.framing import fit_camera_to_object, fit_distance
from logo_teaser.scene import Group, Mesh, PerspectiveCamera, Scene, compute_world_bounding_box


def _camera(width: int, height: int, fov: float = 35.0) -> PerspectiveCamera:
    camera = PerspectiveCamera(fov=fov, aspect=width / height)
    camera.update_projection_matrix()
    return camera


class TestFitDistance:
    """Tests for the distance formula."""

    def test_full_hd_scenario(self, make_box):
        """1920x1080, 2x2x2 box, 35 degrees, margin 1.18."""
        scene = Scene()
        cube = make_box()
        scene.add(cube)
        camera = _camera(1920, 1080)

        result = fit_camera_to_object(camera, cube, 1.18)

        fit_height = 1.0 / math.tan(math.radians(35.0) / 2)
        fit_width = fit_height / (1920 / 1080)
        expected = 1.18 * max(fit_height, fit_width)

        assert camera.position[2] == pytest.approx(expected)
        assert camera.position[0] == 0.0
        assert camera.position[1] == 0.0
        assert camera.near == pytest.approx(expected / 100)
        assert camera.far == pytest.approx(expected * 100)
        assert result.distance == pytest.approx(expected)
        assert np.allclose(camera.target, [0.0, 0.0, 0.0])

    def test_height_limited_on_wide_viewport(self, make_box):
        """On a wide viewport the half extent touches the vertical frustum edge."""
        cube = make_box(size=(3.0, 1.0, 1.0))
        camera = _camera(1920, 1080)
        margin = 1.25

        result = fit_camera_to_object(camera, cube, margin)

        half_angle = math.atan((result.max_size / 2) / (result.distance / margin))
        assert half_angle == pytest.approx(math.radians(camera.fov) / 2)

    def test_width_limited_on_tall_viewport(self, make_box):
        """On a tall viewport the half extent touches the horizontal frustum edge."""
        cube = make_box(size=(1.0, 3.0, 1.0))
        camera = _camera(1080, 1920)
        margin = 1.2

        result = fit_camera_to_object(camera, cube, margin)

        tan_half_hfov = camera.aspect * math.tan(math.radians(camera.fov) / 2)
        assert (result.max_size / 2) / (result.distance / margin) == pytest.approx(tan_half_hfov)

    def test_tall_viewport_pushes_camera_back(self, make_box):
        wide = fit_camera_to_object(_camera(1920, 1080), make_box())
        tall = fit_camera_to_object(_camera(1080, 1920), make_box())
        assert tall.distance > wide.distance

    def test_margin_scales_linearly(self):
        d1 = fit_distance(2.0, 35.0, 1.5, 1.0)
        d2 = fit_distance(2.0, 35.0, 1.5, 2.0)
        assert d2 == pytest.approx(2 * d1)

    def test_zero_aspect_treated_as_square(self):
        assert fit_distance(2.0, 35.0, 0.0, 1.0) == pytest.approx(fit_distance(2.0, 35.0, 1.0, 1.0))

    def test_margin_below_one_rejected(self, make_box):
        with pytest.raises(ValueError):
            fit_camera_to_object(_camera(800, 600), make_box(), 0.9)


class TestRecentering:
    """Tests for moving the object onto its visual centroid."""

    def test_offset_box_recentered(self, make_box):
        box = make_box(size=(4.0, 2.0, 1.0), center=(10.0, 5.0, -3.0))
        scene = Scene()
        scene.add(box)

        result = fit_camera_to_object(_camera(800, 600), box)

        assert np.allclose(result.center, [10.0, 5.0, -3.0])
        assert np.allclose(box.position, [-10.0, -5.0, 3.0])
        assert np.allclose(compute_world_bounding_box(box).center, [0.0, 0.0, 0.0], atol=1e-9)

    def test_recentered_under_rotated_rig(self, make_box):
        """The centroid lands on the rig origin even when the rig is rotated."""
        scene = Scene()
        rig = Group(name="rig")
        rig.rotation.set(math.pi / 2, math.pi, 0.0)
        scene.add(rig)
        box = make_box(size=(4.0, 2.0, 1.0), center=(10.0, 5.0, -3.0))
        rig.add(box)

        fit_camera_to_object(_camera(800, 600), box)

        assert np.allclose(compute_world_bounding_box(box).center, [0.0, 0.0, 0.0], atol=1e-9)

    def test_nested_meshes_use_union(self, make_box):
        group = Group(name="logo")
        group.add(make_box(size=(1.0, 1.0, 1.0), center=(-2.0, 0.0, 0.0)))
        group.add(make_box(size=(1.0, 1.0, 1.0), center=(4.0, 0.0, 0.0)))

        result = fit_camera_to_object(_camera(800, 600), group)

        assert result.max_size == pytest.approx(7.0)
        assert np.allclose(result.center, [1.0, 0.0, 0.0])


class TestIdempotence:
    """Repeated fits on an unchanged object and viewport."""

    def test_same_distance_twice(self, make_box):
        box = make_box(size=(4.0, 2.0, 1.0), center=(10.0, 5.0, -3.0))
        camera = _camera(1920, 1080)

        first = fit_camera_to_object(camera, box)
        position_after_first = box.position.copy()
        second = fit_camera_to_object(camera, box)

        assert second.distance == pytest.approx(first.distance)
        assert second.near == pytest.approx(first.near)
        assert second.far == pytest.approx(first.far)
        assert np.allclose(box.position, position_after_first)
        assert np.allclose(second.center, [0.0, 0.0, 0.0], atol=1e-9)

    def test_same_distance_twice_under_rig(self, make_box):
        rig = Group(name="rig")
        rig.rotation.set(math.pi / 2, math.pi, 0.0)
        box = make_box(size=(4.0, 2.0, 1.0), center=(1.0, 2.0, 3.0))
        rig.add(box)
        camera = _camera(1280, 720)

        first = fit_camera_to_object(camera, box)
        second = fit_camera_to_object(camera, box)

        assert second.distance == pytest.approx(first.distance)
        assert np.allclose(camera.position, [0.0, 0.0, first.distance])


class TestDegenerateGeometry:
    """Zero-volume and empty objects must not crash the fit."""

    def test_single_point_mesh(self):
        point = Mesh(np.array([[1.0, 1.0, 1.0]] * 3), np.array([[0, 1, 2]]), name="point")
        camera = _camera(800, 600)

        result = fit_camera_to_object(camera, point)

        assert result.degenerate
        assert result.distance == pytest.approx(5.0)
        assert camera.position[2] == pytest.approx(5.0)
        assert camera.near > 0.0
        assert camera.far > camera.near

    def test_empty_group(self):
        camera = _camera(800, 600)
        result = fit_camera_to_object(camera, Group(name="empty"))

        assert result.degenerate
        assert result.distance == pytest.approx(5.0)
        assert camera.near == pytest.approx(0.05)
        assert np.allclose(camera.position[:2], [0.0, 0.0])

    def test_flat_mesh_is_not_degenerate(self, make_box):
        """A plane has zero depth but a usable largest extent."""
        flat = make_box(size=(2.0, 2.0, 0.0))
        result = fit_camera_to_object(_camera(800, 600), flat)

        assert not result.degenerate
        assert result.max_size == pytest.approx(2.0)
