#!/usr/bin/env python3
"""Build a plane layer from the command line and print its geometry as JSON."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from tracking_geometry import (
    LayerType,
    NavigationConfig,
    PlaneLayer,
    PlaneSurface,
    RectangleBounds,
    RigidTransform,
    TrapezoidBounds,
)

logger = logging.getLogger("describe_plane_layer")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Describe a planar tracking layer and its approach surfaces"
    )
    parser.add_argument(
        "--shape", choices=["rectangle", "trapezoid"], default="rectangle",
        help="Bounds shape",
    )
    parser.add_argument("--half-x", type=float, default=5.0, help="Rectangle half length in x")
    parser.add_argument("--half-y", type=float, default=5.0, help="Half length in y")
    parser.add_argument(
        "--min-half-x", type=float, default=3.0, help="Trapezoid half length at -y",
    )
    parser.add_argument(
        "--max-half-x", type=float, default=6.0, help="Trapezoid half length at +y",
    )
    parser.add_argument("--thickness", type=float, default=0.0, help="Layer thickness")
    parser.add_argument(
        "--center", type=float, nargs=3, default=[0.0, 0.0, 0.0],
        metavar=("X", "Y", "Z"), help="Layer centre",
    )
    parser.add_argument(
        "--normal", type=float, nargs=3, default=[0.0, 0.0, 1.0],
        metavar=("NX", "NY", "NZ"), help="Layer normal",
    )
    parser.add_argument(
        "--layer-type", choices=[t.value for t in LayerType], default=LayerType.ACTIVE.value,
    )
    parser.add_argument(
        "--shift", type=float, nargs=3, default=None,
        metavar=("DX", "DY", "DZ"), help="Also describe a clone translated by this shift",
    )
    parser.add_argument(
        "--probe", type=float, nargs=6, default=None,
        metavar=("PX", "PY", "PZ", "DX", "DY", "DZ"),
        help="Query the approach surface from a position along a direction",
    )
    parser.add_argument(
        "--no-tie-preference", action="store_true",
        help="Resolve equidistant approach surfaces by registration order",
    )
    parser.add_argument("--verbose", action="store_true")
    return parser


def _vec(values) -> List[float]:
    return [round(float(v), 9) for v in values]


def _surface_payload(surface: PlaneSurface, layer: PlaneLayer) -> Dict[str, object]:
    role = "layer" if surface is layer.surface_representation() else "approach"
    return {
        "role": role,
        "offset": round(-surface.signed_distance(layer.center()), 9) + 0.0,
        "center": _vec(surface.center()),
        "normal": _vec(surface.normal()),
    }


def describe_layer(layer: PlaneLayer, config: NavigationConfig, probe=None) -> Dict[str, object]:
    mesh = layer.to_mesh()
    descriptor = layer.approach_descriptor
    payload: Dict[str, object] = {
        "layer_type": layer.layer_type.value,
        "bounds": {
            "shape": type(layer.bounds()).__name__,
            "parameters": list(layer.bounds().parameters()),
            "area": layer.bounds().area,
        },
        "thickness": layer.thickness,
        "transform": [_vec(row) for row in layer.transform().matrix],
        "sensitive_surfaces": len(layer.sensitive_surfaces()),
        "approach_descriptor": {
            "derived": descriptor.derived,
            "surfaces": [
                _surface_payload(s, layer) for s in descriptor.contained_surfaces()
            ],
        },
        "mesh": {
            "faces": int(len(mesh.faces)),
            "volume": round(float(mesh.volume), 9),
        },
    }
    if probe is not None:
        hit = descriptor.approach_surface(probe[:3], probe[3:], config)
        if hit is None:
            payload["probe"] = None
        else:
            payload["probe"] = {
                "surface": _surface_payload(hit.surface, layer),
                "point": _vec(hit.point),
                "path_length": round(hit.path_length, 9),
            }
    return payload


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.shape == "rectangle":
            bounds = RectangleBounds(args.half_x, args.half_y)
        else:
            bounds = TrapezoidBounds(args.min_half_x, args.max_half_x, args.half_y)
        transform = RigidTransform.from_frame(args.center, args.normal)
        layer = PlaneLayer.create(
            transform,
            bounds,
            thickness=args.thickness,
            layer_type=LayerType(args.layer_type),
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    config = NavigationConfig(prefer_layer_surface=not args.no_tie_preference)
    try:
        output: Dict[str, object] = {"layer": describe_layer(layer, config, args.probe)}
        logger.info("Layer %s", layer)

        if args.shift is not None:
            clone = layer.clone_with_shift(RigidTransform.from_translation(args.shift))
            output["clone"] = describe_layer(clone, config, args.probe)
            logger.info("Clone %s", clone)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(json.dumps(output, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
