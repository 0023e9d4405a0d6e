"""
Approach descriptors: the small candidate set of surfaces used to step onto a
layer during track extrapolation.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from tracking_geometry.config import DEFAULT_NAVIGATION_CONFIG, NavigationConfig
from tracking_geometry.surfaces import PlaneSurface, SurfaceIntersection

if TYPE_CHECKING:
    from tracking_geometry.layers import Layer

logger = logging.getLogger(__name__)


class ApproachDescriptor:
    """Candidate approach surfaces for one layer.

    Args:
        surfaces: Candidate surfaces, in registration order.
        derived: True when the owning layer built this descriptor from its own
            geometry rather than receiving it from the caller.
    """

    def __init__(self, surfaces: Iterable[PlaneSurface], derived: bool = False):
        items = tuple(surfaces)
        if not items:
            raise ValueError("ApproachDescriptor needs at least one candidate surface")
        for i, surface in enumerate(items):
            if not isinstance(surface, PlaneSurface):
                raise ValueError(
                    f"Approach candidate {i} is {type(surface).__name__}, expected PlaneSurface"
                )
        self._surfaces: Tuple[PlaneSurface, ...] = items
        self._derived = bool(derived)
        self._layer: Optional["Layer"] = None

    @property
    def derived(self) -> bool:
        return self._derived

    @property
    def layer(self) -> Optional["Layer"]:
        return self._layer

    def contained_surfaces(self) -> Tuple[PlaneSurface, ...]:
        return self._surfaces

    def check_can_register(self, layer: "Layer") -> None:
        """Raise ValueError if this descriptor or a candidate belongs to another layer."""
        if self._layer is not None and self._layer is not layer:
            raise ValueError("Approach descriptor is already registered to another layer")
        for surface in self._surfaces:
            owner = surface.associated_layer
            if owner is not None and owner is not layer:
                raise ValueError("Approach candidate is already associated with another layer")

    def register_layer(self, layer: "Layer") -> None:
        """Bind this descriptor and its candidates to ``layer``."""
        self.check_can_register(layer)
        for surface in self._surfaces:
            surface.associate_layer(layer)
        self._layer = layer

    def approach_surface(
        self,
        position: Sequence[float],
        direction: Sequence[float],
        config: Optional[NavigationConfig] = None,
    ) -> Optional[SurfaceIntersection]:
        """Nearest candidate ahead of ``position`` along ``direction``.

        Candidates behind the position (beyond the on-surface tolerance) and,
        with ``config.bound_check``, hits outside the bounds are skipped.
        Equidistant candidates resolve to the layer's own surface when
        ``config.prefer_layer_surface`` is set, otherwise to the earliest
        registered one.
        """
        if config is None:
            config = DEFAULT_NAVIGATION_CONFIG

        own_surface = None
        if self._layer is not None:
            own_surface = self._layer.surface_representation()

        hits: List[SurfaceIntersection] = []
        for surface in self._surfaces:
            hit = surface.intersection_estimate(
                position, direction,
                bound_check=config.bound_check,
                tolerance=config.on_surface_tolerance,
            )
            if hit is None or not hit.valid:
                continue
            if hit.path_length < -config.on_surface_tolerance:
                continue
            hits.append(hit)

        if not hits:
            return None

        best = hits[0]
        for hit in hits[1:]:
            delta = hit.path_length - best.path_length
            if delta < -config.tie_tolerance:
                best = hit
            elif (
                abs(delta) <= config.tie_tolerance
                and config.prefer_layer_surface
                and hit.surface is own_surface
            ):
                best = hit

        logger.debug(
            "Approach surface at path %.4g (%d of %d candidates reachable)",
            best.path_length, len(hits), len(self._surfaces),
        )
        return best

    def __len__(self) -> int:
        return len(self._surfaces)

    def __repr__(self) -> str:
        kind = "derived" if self._derived else "provided"
        return f"ApproachDescriptor({len(self._surfaces)} surfaces, {kind})"
