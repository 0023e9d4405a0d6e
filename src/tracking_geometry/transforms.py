"""
Rigid placement of local surface frames in the global detector frame.

A RigidTransform wraps a read-only 4x4 homogeneous matrix. All matrix algebra
goes through ``trimesh.transformations`` so composition, inversion and the
rigidity check follow one convention (column vectors, ``M @ p``).
"""
from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
from trimesh import transformations as tf


class RigidTransform:
    """Immutable rotation + translation mapping local coordinates to global ones."""

    __slots__ = ("_matrix",)

    def __init__(self, matrix: np.ndarray):
        m = np.array(matrix, dtype=float)
        if m.shape != (4, 4):
            raise ValueError(f"Transform matrix must have shape (4, 4), got {m.shape}")
        if not np.all(np.isfinite(m)):
            raise ValueError("Transform matrix contains non-finite values")
        if not tf.is_rigid(m, epsilon=1e-6):
            raise ValueError("Transform matrix is not a rigid-body transform")
        m.setflags(write=False)
        self._matrix = m

    # ─── Factories ───────────────────────────────────────────────────────

    @classmethod
    def identity(cls) -> "RigidTransform":
        return cls(tf.identity_matrix())

    @classmethod
    def from_translation(cls, translation: Sequence[float]) -> "RigidTransform":
        return cls(tf.translation_matrix(np.asarray(translation, dtype=float)))

    @classmethod
    def from_rotation(
        cls,
        angle: float,
        axis: Sequence[float],
        point: Optional[Sequence[float]] = None,
    ) -> "RigidTransform":
        """Rotation by ``angle`` radians about ``axis`` through ``point`` (origin by default)."""
        return cls(tf.rotation_matrix(angle, np.asarray(axis, dtype=float), point))

    @classmethod
    def from_frame(
        cls,
        origin: Sequence[float],
        normal: Sequence[float],
    ) -> "RigidTransform":
        """Place a local frame at ``origin`` with its z axis along ``normal``.

        The in-plane axes are picked from a fixed reference direction, so the
        same (origin, normal) pair always gives the same frame.
        """
        n = np.asarray(normal, dtype=float)
        norm = np.linalg.norm(n)
        if norm < 1e-12:
            raise ValueError("Frame normal cannot be zero")
        n = n / norm
        if abs(n[2]) < 0.9:
            ref = np.array([0.0, 0.0, 1.0])
        else:
            ref = np.array([1.0, 0.0, 0.0])
        u = np.cross(n, ref)
        u /= np.linalg.norm(u)
        v = np.cross(n, u)
        v /= np.linalg.norm(v)

        m = tf.identity_matrix()
        m[:3, 0] = u
        m[:3, 1] = v
        m[:3, 2] = n
        m[:3, 3] = np.asarray(origin, dtype=float)
        return cls(m)

    # ─── Queries ─────────────────────────────────────────────────────────

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def translation(self) -> np.ndarray:
        return self._matrix[:3, 3].copy()

    @property
    def rotation(self) -> np.ndarray:
        return self._matrix[:3, :3].copy()

    # ─── Algebra ─────────────────────────────────────────────────────────

    def compose(self, shift: "RigidTransform") -> "RigidTransform":
        """Return the placement obtained by applying ``shift`` after this one."""
        return RigidTransform(tf.concatenate_matrices(shift.matrix, self._matrix))

    def shifted_local(self, translation: Sequence[float]) -> "RigidTransform":
        """Return this placement moved by ``translation`` expressed in the local frame."""
        local = tf.translation_matrix(np.asarray(translation, dtype=float))
        return RigidTransform(tf.concatenate_matrices(self._matrix, local))

    def inverse(self) -> "RigidTransform":
        return RigidTransform(tf.inverse_matrix(self._matrix))

    def to_local(self, point: Sequence[float]) -> np.ndarray:
        p = np.asarray(point, dtype=float) - self._matrix[:3, 3]
        return self._matrix[:3, :3].T @ p

    def to_global(self, point: Sequence[float]) -> np.ndarray:
        return self._matrix[:3, :3] @ np.asarray(point, dtype=float) + self._matrix[:3, 3]

    def rotate_to_local(self, vector: Sequence[float]) -> np.ndarray:
        return self._matrix[:3, :3].T @ np.asarray(vector, dtype=float)

    def rotate_to_global(self, vector: Sequence[float]) -> np.ndarray:
        return self._matrix[:3, :3] @ np.asarray(vector, dtype=float)

    # ─── Comparison ──────────────────────────────────────────────────────

    def is_close(self, other: "RigidTransform", atol: float = 1e-9) -> bool:
        return bool(np.allclose(self._matrix, other.matrix, atol=atol, rtol=0.0))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RigidTransform):
            return NotImplemented
        return bool(np.array_equal(self._matrix, other.matrix))

    def __hash__(self) -> int:
        # adding 0.0 folds -0.0 into 0.0 so equal matrices hash alike
        return hash((self._matrix + 0.0).tobytes())

    def __repr__(self) -> str:
        t = self._matrix[:3, 3]
        return f"RigidTransform(translation=({t[0]:.4g}, {t[1]:.4g}, {t[2]:.4g}))"

