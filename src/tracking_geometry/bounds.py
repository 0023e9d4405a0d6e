"""
Planar boundary shapes in a surface's local (x, y) frame.

Bounds are immutable once built and are the one sub-object that several layers
and surfaces may share by reference. Each shape keeps a Shapely polygon built
at construction time; containment and area queries go through it.
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

import numpy as np
from shapely.geometry import Point, Polygon


class PlanarBounds(ABC):
    """Abstract bounded region of a plane, expressed in local coordinates."""

    def __init__(self) -> None:
        self._polygon = Polygon(self._corner_points())

    @abstractmethod
    def _corner_points(self) -> List[Tuple[float, float]]:
        """Counter-clockwise outline vertices (not closed)."""

    @abstractmethod
    def parameters(self) -> Tuple[float, ...]:
        """Shape parameters, in constructor order."""

    @property
    def polygon(self) -> Polygon:
        return self._polygon

    @property
    def area(self) -> float:
        return float(self._polygon.area)

    def is_valid(self) -> bool:
        return (
            all(math.isfinite(p) and p > 0.0 for p in self.parameters())
            and self._polygon.is_valid
            and not self._polygon.is_empty
        )

    def inside(self, local_xy: Sequence[float], tolerance: float = 0.0) -> bool:
        """Whether a local (x, y) point lies inside or on the boundary."""
        point = Point(float(local_xy[0]), float(local_xy[1]))
        if tolerance > 0.0:
            return bool(self._polygon.buffer(tolerance, join_style="mitre").covers(point))
        return bool(self._polygon.covers(point))

    def vertices(self) -> np.ndarray:
        return np.asarray(self._corner_points(), dtype=float)

    def bounding_box(self) -> Tuple[float, float, float, float]:
        min_x, min_y, max_x, max_y = self._polygon.bounds
        return (float(min_x), float(min_y), float(max_x), float(max_y))

    def __setattr__(self, name, value):
        if hasattr(self, "_polygon"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        super().__setattr__(name, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PlanarBounds):
            return NotImplemented
        return type(self) is type(other) and self.parameters() == other.parameters()

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.parameters()))

    def __repr__(self) -> str:
        params = ", ".join(f"{p:g}" for p in self.parameters())
        return f"{type(self).__name__}({params})"


def _require_positive(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value <= 0.0:
        raise ValueError(f"{name} must be finite and > 0, got {value}")
    return value


class RectangleBounds(PlanarBounds):
    """Axis-aligned rectangle centred on the local origin."""

    def __init__(self, half_x: float, half_y: float):
        self.half_x = _require_positive("half_x", half_x)
        self.half_y = _require_positive("half_y", half_y)
        super().__init__()

    def _corner_points(self) -> List[Tuple[float, float]]:
        hx, hy = self.half_x, self.half_y
        return [(-hx, -hy), (hx, -hy), (hx, hy), (-hx, hy)]

    def parameters(self) -> Tuple[float, ...]:
        return (self.half_x, self.half_y)


class TrapezoidBounds(PlanarBounds):
    """Symmetric trapezoid: ``min_half_x`` at -half_y, ``max_half_x`` at +half_y."""

    def __init__(self, min_half_x: float, max_half_x: float, half_y: float):
        self.min_half_x = _require_positive("min_half_x", min_half_x)
        self.max_half_x = _require_positive("max_half_x", max_half_x)
        self.half_y = _require_positive("half_y", half_y)
        super().__init__()

    def _corner_points(self) -> List[Tuple[float, float]]:
        return [
            (-self.min_half_x, -self.half_y),
            (self.min_half_x, -self.half_y),
            (self.max_half_x, self.half_y),
            (-self.max_half_x, self.half_y),
        ]

    def parameters(self) -> Tuple[float, ...]:
        return (self.min_half_x, self.max_half_x, self.half_y)
