"""Tests for bounded plane surfaces."""
import numpy as np
import pytest

from tracking_geometry import PlaneSurface, RectangleBounds, RigidTransform


class TestShapeQueries:

    def test_normal_and_center(self, tilted_transform, square_bounds):
        surface = PlaneSurface(tilted_transform, square_bounds)
        np.testing.assert_allclose(surface.center(), tilted_transform.translation)
        np.testing.assert_allclose(surface.normal(), tilted_transform.matrix[:3, 2])
        assert np.linalg.norm(surface.normal()) == pytest.approx(1.0)

    def test_requires_bounds(self, identity):
        with pytest.raises(ValueError, match="bounds"):
            PlaneSurface(identity, None)

    def test_rejects_raw_matrix(self, square_bounds):
        with pytest.raises(ValueError, match="RigidTransform"):
            PlaneSurface(np.eye(4), square_bounds)

    def test_local_global_roundtrip(self, tilted_transform, square_bounds):
        surface = PlaneSurface(tilted_transform, square_bounds)
        point = surface.local_to_global((1.5, -2.0))
        np.testing.assert_allclose(surface.global_to_local(point), [1.5, -2.0, 0.0], atol=1e-12)


class TestOnSurface:

    def test_point_on_surface(self, tilted_transform, square_bounds):
        surface = PlaneSurface(tilted_transform, square_bounds)
        assert surface.is_on_surface(surface.local_to_global((4.0, 4.0)))

    def test_point_off_plane(self, square_bounds, identity):
        surface = PlaneSurface(identity, square_bounds)
        assert not surface.is_on_surface([0.0, 0.0, 0.01])
        assert surface.is_on_surface([0.0, 0.0, 0.01], tolerance=0.1)

    def test_point_outside_bounds(self, square_bounds, identity):
        surface = PlaneSurface(identity, square_bounds)
        assert not surface.is_on_surface([6.0, 0.0, 0.0])
        assert surface.is_on_surface([6.0, 0.0, 0.0], bound_check=False)

    def test_signed_distance(self, square_bounds):
        surface = PlaneSurface(RigidTransform.from_translation([0, 0, 2.0]), square_bounds)
        assert surface.signed_distance([0.0, 0.0, 5.0]) == pytest.approx(3.0)
        assert surface.signed_distance([0.0, 0.0, 0.0]) == pytest.approx(-2.0)


class TestIntersection:

    def test_straight_hit(self, square_bounds):
        surface = PlaneSurface(RigidTransform.from_translation([0, 0, 3.0]), square_bounds)
        hit = surface.intersection_estimate([1.0, 1.0, 0.0], [0.0, 0.0, 2.0])
        assert hit.valid
        assert hit.surface is surface
        assert hit.path_length == pytest.approx(3.0)
        np.testing.assert_allclose(hit.point, [1.0, 1.0, 3.0])

    def test_hit_behind_has_negative_path(self, square_bounds, identity):
        surface = PlaneSurface(identity, square_bounds)
        hit = surface.intersection_estimate([0.0, 0.0, 1.0], [0.0, 0.0, 1.0])
        assert hit.path_length == pytest.approx(-1.0)

    def test_hit_outside_bounds_is_invalid(self, square_bounds, identity):
        surface = PlaneSurface(identity, square_bounds)
        hit = surface.intersection_estimate([20.0, 0.0, -1.0], [0.0, 0.0, 1.0])
        assert not hit.valid
        unchecked = surface.intersection_estimate(
            [20.0, 0.0, -1.0], [0.0, 0.0, 1.0], bound_check=False,
        )
        assert unchecked.valid

    def test_parallel_direction(self, square_bounds, identity):
        surface = PlaneSurface(identity, square_bounds)
        assert surface.intersection_estimate([0, 0, 1.0], [1.0, 0.0, 0.0]) is None

    def test_zero_direction(self, square_bounds, identity):
        surface = PlaneSurface(identity, square_bounds)
        with pytest.raises(ValueError):
            surface.intersection_estimate([0, 0, 1.0], [0.0, 0.0, 0.0])


class TestMesh:

    def test_flat_mesh(self, square_bounds, identity):
        mesh = PlaneSurface(identity, square_bounds).to_mesh()
        assert len(mesh.faces) == 2
        assert mesh.area == pytest.approx(100.0)

    def test_slab_mesh_is_closed(self, tilted_transform):
        surface = PlaneSurface(tilted_transform, RectangleBounds(2.0, 3.0))
        mesh = surface.to_mesh(thickness=0.5)
        assert mesh.is_watertight
        assert mesh.volume == pytest.approx(4.0 * 6.0 * 0.5)
        np.testing.assert_allclose(mesh.vertices.mean(axis=0), surface.center(), atol=1e-9)
