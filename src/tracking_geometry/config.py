"""Navigation tolerances and tie-break policy for layer approach queries."""

from __future__ import annotations

from dataclasses import dataclass

ON_SURFACE_TOLERANCE_MM = 1e-4
TIE_TOLERANCE_MM = 1e-9


@dataclass(frozen=True)
class NavigationConfig:
    """Tolerances used when testing points against surfaces and picking approach surfaces."""

    on_surface_tolerance: float = ON_SURFACE_TOLERANCE_MM
    tie_tolerance: float = TIE_TOLERANCE_MM
    prefer_layer_surface: bool = True  # equidistant candidates resolve to the layer's own surface
    bound_check: bool = True

    def __post_init__(self) -> None:
        if self.on_surface_tolerance < 0.0:
            raise ValueError(
                f"on_surface_tolerance must be >= 0, got {self.on_surface_tolerance}"
            )
        if self.tie_tolerance < 0.0:
            raise ValueError(f"tie_tolerance must be >= 0, got {self.tie_tolerance}")


DEFAULT_NAVIGATION_CONFIG = NavigationConfig()
