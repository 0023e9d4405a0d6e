"""Ordered container of the sensitive surfaces embedded in a layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Iterator, Optional, Sequence, Tuple

from tracking_geometry.config import DEFAULT_NAVIGATION_CONFIG
from tracking_geometry.surfaces import PlaneSurface

if TYPE_CHECKING:
    from tracking_geometry.layers import Layer


class SensitiveSurfaceArray:
    """Fixed, ordered set of sensitive surfaces owned by exactly one layer."""

    def __init__(self, surfaces: Iterable[PlaneSurface]):
        items = tuple(surfaces)
        for i, surface in enumerate(items):
            if not isinstance(surface, PlaneSurface):
                raise ValueError(
                    f"Sensitive element {i} is {type(surface).__name__}, expected PlaneSurface"
                )
        self._surfaces: Tuple[PlaneSurface, ...] = items
        self._owner: Optional["Layer"] = None

    @property
    def surfaces(self) -> Tuple[PlaneSurface, ...]:
        return self._surfaces

    @property
    def owner(self) -> Optional["Layer"]:
        return self._owner

    def attach(self, layer: "Layer") -> None:
        """Hand the array to ``layer``; an array belongs to a single layer."""
        if self._owner is not None and self._owner is not layer:
            raise ValueError("Sensitive surface array is already owned by another layer")
        self._owner = layer

    def surface_at(
        self,
        position: Sequence[float],
        tolerance: Optional[float] = None,
    ) -> Optional[PlaneSurface]:
        """First sensitive surface that contains ``position``, if any."""
        if tolerance is None:
            tolerance = DEFAULT_NAVIGATION_CONFIG.on_surface_tolerance
        for surface in self._surfaces:
            if surface.is_on_surface(position, tolerance):
                return surface
        return None

    def __len__(self) -> int:
        return len(self._surfaces)

    def __iter__(self) -> Iterator[PlaneSurface]:
        return iter(self._surfaces)

    def __repr__(self) -> str:
        return f"SensitiveSurfaceArray({len(self._surfaces)} surfaces)"
