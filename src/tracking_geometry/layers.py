"""
Tracking layers: a navigable slab of detector described by a surface plus
tracking-role data.

The role data (thickness, sensitive surfaces, approach descriptor, layer
type) lives on Layer. The shape lives on a PlaneSurface that a PlaneLayer
owns and hands out through ``surface_representation()``; shape queries on the
layer delegate to that surface. Layers are built only by their factories,
are read-only once built, and are repositioned only through
``clone_with_shift()``, which builds a new layer.
"""
from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np
import trimesh

from tracking_geometry.approach import ApproachDescriptor
from tracking_geometry.bounds import PlanarBounds
from tracking_geometry.config import DEFAULT_NAVIGATION_CONFIG
from tracking_geometry.surface_array import SensitiveSurfaceArray
from tracking_geometry.surfaces import PlaneSurface
from tracking_geometry.transforms import RigidTransform

logger = logging.getLogger(__name__)


class LayerType(Enum):
    """Role of a layer during track reconstruction."""
    ACTIVE = "active"
    PASSIVE = "passive"
    NAVIGATION = "navigation"


class Layer(ABC):
    """Tracking-role data attached to a representing surface.

    Subclasses own the surface and must call ``_seal()`` once construction is
    complete; after that every attribute assignment raises AttributeError.
    """

    def __init__(
        self,
        surface_array: Optional[SensitiveSurfaceArray],
        thickness: float,
        layer_type: LayerType,
    ):
        thickness = float(thickness)
        if not math.isfinite(thickness) or thickness < 0.0:
            raise ValueError(f"Layer thickness must be finite and >= 0, got {thickness}")
        if not isinstance(layer_type, LayerType):
            raise ValueError(f"Expected LayerType, got {layer_type!r}")
        if surface_array is not None:
            if not isinstance(surface_array, SensitiveSurfaceArray):
                raise ValueError(
                    f"Expected SensitiveSurfaceArray, got {type(surface_array).__name__}"
                )
            if surface_array.owner is not None:
                raise ValueError("Sensitive surface array is already owned by another layer")
            surface_array.attach(self)

        self._thickness = thickness
        self._layer_type = layer_type
        self._surface_array = surface_array
        self._approach_descriptor: Optional[ApproachDescriptor] = None

    def _seal(self) -> None:
        self._sealed = True

    def __setattr__(self, name, value):
        if getattr(self, "_sealed", False):
            raise AttributeError(f"{type(self).__name__} is read-only once built")
        super().__setattr__(name, value)

    def __copy__(self):
        raise TypeError(f"{type(self).__name__} cannot be copied; use clone_with_shift()")

    def __deepcopy__(self, memo):
        raise TypeError(f"{type(self).__name__} cannot be copied; use clone_with_shift()")

    # ─── Role data ───────────────────────────────────────────────────────

    @property
    def thickness(self) -> float:
        return self._thickness

    @property
    def layer_type(self) -> LayerType:
        return self._layer_type

    @property
    def surface_array(self) -> Optional[SensitiveSurfaceArray]:
        return self._surface_array

    def sensitive_surfaces(self) -> Tuple[PlaneSurface, ...]:
        if self._surface_array is None:
            return ()
        return self._surface_array.surfaces

    @property
    def approach_descriptor(self) -> ApproachDescriptor:
        return self._approach_descriptor

    # ─── Shape hooks ─────────────────────────────────────────────────────

    @abstractmethod
    def surface_representation(self) -> PlaneSurface:
        """The surface this layer is, for extrapolation code."""

    @abstractmethod
    def clone_with_shift(self, shift: RigidTransform) -> "Layer":
        """New layer repositioned by ``shift``; the only way to move a layer."""

    # ─── Navigation helpers ──────────────────────────────────────────────

    def is_on_layer(
        self,
        position: Sequence[float],
        tolerance: Optional[float] = None,
    ) -> bool:
        """Whether ``position`` lies inside the layer's bounds and material slab."""
        if tolerance is None:
            tolerance = DEFAULT_NAVIGATION_CONFIG.on_surface_tolerance
        surface = self.surface_representation()
        local = surface.global_to_local(position)
        if abs(float(local[2])) > self._thickness / 2.0 + tolerance:
            return False
        return surface.bounds().inside(local[:2], tolerance)

    def resolve(self, resolve_sensitive: bool = False, resolve_passive: bool = False) -> bool:
        """Whether navigation has to stop on this layer for the requested resolution."""
        if resolve_passive:
            return True
        return resolve_sensitive and self._surface_array is not None

    def to_mesh(self) -> trimesh.Trimesh:
        return self.surface_representation().to_mesh(self._thickness)


_FACTORY_KEY = object()


class PlaneLayer(Layer):
    """A planar layer: a bounded plane with thickness, used for tracking.

    Build with ``PlaneLayer.create(...)``; move with ``clone_with_shift(...)``.
    """

    def __init__(
        self,
        factory_key: object,
        surface: PlaneSurface,
        surface_array: Optional[SensitiveSurfaceArray],
        thickness: float,
        approach_descriptor: Optional[ApproachDescriptor],
        layer_type: LayerType,
    ):
        if factory_key is not _FACTORY_KEY:
            raise TypeError("PlaneLayer is built with PlaneLayer.create() or clone_with_shift()")
        if approach_descriptor is not None:
            if not isinstance(approach_descriptor, ApproachDescriptor):
                raise ValueError(
                    f"Expected ApproachDescriptor, got {type(approach_descriptor).__name__}"
                )
            # every ownership check runs before the surface array is attached
            approach_descriptor.check_can_register(self)
        super().__init__(surface_array, thickness, layer_type)
        self._surface = surface
        surface.associate_layer(self)

        if approach_descriptor is None:
            self._build_approach_descriptor()
        else:
            approach_descriptor.register_layer(self)
            self._approach_descriptor = approach_descriptor

        logger.debug(
            "Built %s plane layer at %s, thickness %.4g, %d sensitive surfaces, %s approach descriptor",
            layer_type.value,
            np.round(surface.center(), 6).tolist(),
            self._thickness,
            len(self.sensitive_surfaces()),
            "derived" if self._approach_descriptor.derived else "provided",
        )
        self._seal()

    # ─── Factories ───────────────────────────────────────────────────────

    @classmethod
    def create(
        cls,
        transform: Optional[RigidTransform],
        bounds: PlanarBounds,
        surface_array: Optional[SensitiveSurfaceArray] = None,
        thickness: float = 0.0,
        approach_descriptor: Optional[ApproachDescriptor] = None,
        layer_type: LayerType = LayerType.ACTIVE,
    ) -> "PlaneLayer":
        """Build a plane layer.

        Args:
            transform: Placement of the layer in the global frame; None means identity.
            bounds: Planar bounds giving the layer dimensions; shared, never copied.
            surface_array: Sensitive surfaces embedded in the layer, if any.
            thickness: Extent along the normal, finite and >= 0.
            approach_descriptor: Approach surfaces to use as-is; derived when None.
            layer_type: Layer classification.

        Returns:
            A fully built PlaneLayer that owns its transform, surface array and
            approach descriptor.
        """
        if bounds is None:
            raise ValueError("PlaneLayer requires bounds")
        if transform is None:
            transform = RigidTransform.identity()
        elif not isinstance(transform, RigidTransform):
            raise ValueError(f"Expected RigidTransform, got {type(transform).__name__}")
        # the layer keeps a transform of its own, never the caller's instance
        surface = PlaneSurface(RigidTransform(transform.matrix), bounds)
        return cls(
            _FACTORY_KEY, surface, surface_array, thickness, approach_descriptor, layer_type,
        )

    @classmethod
    def create_shifted(cls, layer: "PlaneLayer", shift: RigidTransform) -> "PlaneLayer":
        """Build a copy of ``layer`` placed by ``shift`` applied after its transform.

        Bounds are shared with ``layer``; thickness and layer type are copied.
        Sensitive surfaces are not carried over, and the approach descriptor
        is always rebuilt for the new placement.
        """
        if not isinstance(layer, PlaneLayer):
            raise ValueError(f"Expected PlaneLayer, got {type(layer).__name__}")
        if not isinstance(shift, RigidTransform):
            raise ValueError(f"Expected RigidTransform, got {type(shift).__name__}")
        surface = PlaneSurface(layer.transform().compose(shift), layer.bounds())
        return cls(_FACTORY_KEY, surface, None, layer.thickness, None, layer.layer_type)

    def clone_with_shift(self, shift: RigidTransform) -> "PlaneLayer":
        return PlaneLayer.create_shifted(self, shift)

    # ─── Surface capability ──────────────────────────────────────────────

    def surface_representation(self) -> PlaneSurface:
        return self._surface

    def transform(self) -> RigidTransform:
        return self._surface.transform()

    def bounds(self) -> PlanarBounds:
        return self._surface.bounds()

    def center(self) -> np.ndarray:
        return self._surface.center()

    def normal(self) -> np.ndarray:
        return self._surface.normal()

    def is_on_surface(
        self,
        point: Sequence[float],
        tolerance: Optional[float] = None,
        bound_check: bool = True,
    ) -> bool:
        return self._surface.is_on_surface(point, tolerance, bound_check)

    # ─── Internals ───────────────────────────────────────────────────────

    def _build_approach_descriptor(self) -> None:
        """Entry and exit faces of the slab at -/+ thickness/2, plus the layer surface."""
        half = self._thickness / 2.0
        placement = self._surface.transform()
        bounds = self._surface.bounds()
        entry = PlaneSurface(placement.shifted_local((0.0, 0.0, -half)), bounds)
        exit_ = PlaneSurface(placement.shifted_local((0.0, 0.0, half)), bounds)
        descriptor = ApproachDescriptor([entry, exit_, self._surface], derived=True)
        descriptor.register_layer(self)
        self._approach_descriptor = descriptor

    def __repr__(self) -> str:
        return (
            f"PlaneLayer({self._layer_type.value}, {self.bounds()!r}, "
            f"thickness={self._thickness:g}, {self.transform()!r})"
        )
