"""Public API for planar tracking layers and their approach surfaces."""

from tracking_geometry.approach import ApproachDescriptor
from tracking_geometry.bounds import PlanarBounds, RectangleBounds, TrapezoidBounds
from tracking_geometry.config import DEFAULT_NAVIGATION_CONFIG, NavigationConfig
from tracking_geometry.layers import Layer, LayerType, PlaneLayer
from tracking_geometry.surface_array import SensitiveSurfaceArray
from tracking_geometry.surfaces import PlaneSurface, SurfaceIntersection
from tracking_geometry.transforms import RigidTransform

__all__ = [
    "ApproachDescriptor",
    "DEFAULT_NAVIGATION_CONFIG",
    "Layer",
    "LayerType",
    "NavigationConfig",
    "PlanarBounds",
    "PlaneLayer",
    "PlaneSurface",
    "RectangleBounds",
    "RigidTransform",
    "SensitiveSurfaceArray",
    "SurfaceIntersection",
    "TrapezoidBounds",
]
