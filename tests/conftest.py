"""
Shared test fixtures for plane-layer geometry tests.
"""
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tracking_geometry import (
    LayerType,
    PlaneLayer,
    PlaneSurface,
    RectangleBounds,
    RigidTransform,
    SensitiveSurfaceArray,
)


@pytest.fixture
def square_bounds():
    """A 10x10 square centred on the local origin."""
    return RectangleBounds(5.0, 5.0)


@pytest.fixture
def identity():
    return RigidTransform.identity()


@pytest.fixture
def thick_layer(identity, square_bounds):
    """Active 10x10 layer at the origin, 2 units thick, normal along +z."""
    return PlaneLayer.create(identity, square_bounds, thickness=2.0)


@pytest.fixture
def tilted_transform():
    """Placement rotated 30 degrees about x and moved to (1, 2, 3)."""
    rot = RigidTransform.from_rotation(np.radians(30.0), [1.0, 0.0, 0.0])
    return rot.compose(RigidTransform.from_translation([1.0, 2.0, 3.0]))


@pytest.fixture
def module_array():
    """Four 2x2 sensitive modules tiling the centre of a square layer."""
    module_bounds = RectangleBounds(1.0, 1.0)
    surfaces = [
        PlaneSurface(RigidTransform.from_translation([x, y, 0.0]), module_bounds)
        for x, y in [(-1.0, -1.0), (1.0, -1.0), (-1.0, 1.0), (1.0, 1.0)]
    ]
    return SensitiveSurfaceArray(surfaces)


@pytest.fixture
def passive_layer(square_bounds):
    return PlaneLayer.create(
        RigidTransform.from_translation([0.0, 0.0, 10.0]),
        square_bounds,
        thickness=0.5,
        layer_type=LayerType.PASSIVE,
    )
