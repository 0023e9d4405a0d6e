"""
Bounded plane surfaces anchored in the global frame.

A PlaneSurface combines a RigidTransform (placement, owned) with PlanarBounds
(shape, shared). Local z is the surface normal; local (x, y) is where the
bounds live.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Sequence

import numpy as np
import trimesh

from tracking_geometry.bounds import PlanarBounds
from tracking_geometry.config import DEFAULT_NAVIGATION_CONFIG
from tracking_geometry.transforms import RigidTransform

if TYPE_CHECKING:
    from tracking_geometry.layers import Layer


@dataclass(frozen=True)
class SurfaceIntersection:
    """Straight-line intersection of a trajectory with a surface."""
    surface: "PlaneSurface"
    point: np.ndarray        # (3,) global intersection point
    path_length: float       # signed distance along the unit direction
    valid: bool              # False when the point falls outside the bounds


class PlaneSurface:
    """A plane bounded by ``bounds`` and placed by ``transform``."""

    def __init__(self, transform: RigidTransform, bounds: PlanarBounds):
        if bounds is None:
            raise ValueError("PlaneSurface requires bounds")
        if not isinstance(bounds, PlanarBounds):
            raise ValueError(f"Expected PlanarBounds, got {type(bounds).__name__}")
        if not isinstance(transform, RigidTransform):
            raise ValueError(f"Expected RigidTransform, got {type(transform).__name__}")
        self._transform = transform
        self._bounds = bounds
        self._associated_layer: Optional["Layer"] = None

    # ─── Shape queries ───────────────────────────────────────────────────

    def transform(self) -> RigidTransform:
        return self._transform

    def bounds(self) -> PlanarBounds:
        return self._bounds

    def center(self) -> np.ndarray:
        return self._transform.translation

    def normal(self) -> np.ndarray:
        return self._transform.matrix[:3, 2].copy()

    def global_to_local(self, point: Sequence[float]) -> np.ndarray:
        """Local (x, y, z) of a global point; z is the distance along the normal."""
        return self._transform.to_local(point)

    def local_to_global(self, local_xy: Sequence[float]) -> np.ndarray:
        return self._transform.to_global((float(local_xy[0]), float(local_xy[1]), 0.0))

    def signed_distance(self, point: Sequence[float]) -> float:
        return float(self.global_to_local(point)[2])

    def is_on_surface(
        self,
        point: Sequence[float],
        tolerance: Optional[float] = None,
        bound_check: bool = True,
    ) -> bool:
        """Whether ``point`` lies on the plane and, with ``bound_check``, inside the bounds."""
        if tolerance is None:
            tolerance = DEFAULT_NAVIGATION_CONFIG.on_surface_tolerance
        local = self.global_to_local(point)
        if abs(float(local[2])) > tolerance:
            return False
        if not bound_check:
            return True
        return self._bounds.inside(local[:2], tolerance)

    def intersection_estimate(
        self,
        position: Sequence[float],
        direction: Sequence[float],
        bound_check: bool = True,
        tolerance: Optional[float] = None,
    ) -> Optional[SurfaceIntersection]:
        """Intersect the straight line ``position + s * direction`` with this plane.

        Returns None when the direction is parallel to the plane.
        """
        if tolerance is None:
            tolerance = DEFAULT_NAVIGATION_CONFIG.on_surface_tolerance
        p = np.asarray(position, dtype=float)
        d = np.asarray(direction, dtype=float)
        d_norm = np.linalg.norm(d)
        if d_norm < 1e-12:
            raise ValueError("Direction cannot be zero")
        d = d / d_norm

        n = self.normal()
        denom = float(n @ d)
        if abs(denom) < 1e-12:
            return None
        path = float(n @ (self.center() - p)) / denom
        hit = p + path * d
        valid = True
        if bound_check:
            valid = self._bounds.inside(self.global_to_local(hit)[:2], tolerance)
        return SurfaceIntersection(surface=self, point=hit, path_length=path, valid=valid)

    # ─── Layer association ───────────────────────────────────────────────

    @property
    def associated_layer(self) -> Optional["Layer"]:
        return self._associated_layer

    def associate_layer(self, layer: "Layer") -> None:
        if self._associated_layer is not None and self._associated_layer is not layer:
            raise ValueError("Surface is already associated with another layer")
        self._associated_layer = layer

    # ─── Inspection ──────────────────────────────────────────────────────

    def to_mesh(self, thickness: float = 0.0) -> trimesh.Trimesh:
        """Triangle mesh of the bounded plane, extruded symmetrically when ``thickness`` > 0."""
        outline = self._bounds.vertices()
        k = len(outline)
        if thickness <= 0.0:
            local = np.column_stack([outline, np.zeros(k)])
            faces = [[0, i, i + 1] for i in range(1, k - 1)]
        else:
            half = thickness / 2.0
            bottom = np.column_stack([outline, np.full(k, -half)])
            top = np.column_stack([outline, np.full(k, half)])
            local = np.vstack([bottom, top])
            faces = []
            for i in range(1, k - 1):
                faces.append([0, i + 1, i])              # bottom, facing -z
                faces.append([k, k + i, k + i + 1])      # top, facing +z
            for i in range(k):
                j = (i + 1) % k
                faces.append([i, j, k + j])
                faces.append([i, k + j, k + i])
        vertices = np.array([self._transform.to_global(v) for v in local])
        return trimesh.Trimesh(vertices=vertices, faces=np.asarray(faces), process=False)

    def __repr__(self) -> str:
        return f"PlaneSurface({self._transform!r}, {self._bounds!r})"
