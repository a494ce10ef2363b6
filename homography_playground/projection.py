"""
3x3 homogeneous matrices for the elementary 2D transforms, and the fold that
turns a chain of descriptors into one net homography

composition order:
    H = M_n @ ... @ M_2 @ M_1
so the first descriptor in the chain is the first one applied to a point.

rotation is about the coordinate origin (top-left pixel), not the image center.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from .config import INVERSE_RESIDUAL_TOLERANCE
from .errors import SingularTransformError


logger = logging.getLogger(__name__)


def identity() -> np.ndarray:
    return np.eye(3, dtype=np.float64)


def rotation(angle_degrees: float) -> np.ndarray:
    """Rotation about the origin, angle in degrees (counter-clockwise in math axes)."""
    t = np.deg2rad(angle_degrees)
    c, s = np.cos(t), np.sin(t)
    return np.array([
        [c,  -s,  0.0],
        [s,   c,  0.0],
        [0.0, 0.0, 1.0]
    ], dtype=np.float64)


def translation(tx: float, ty: float) -> np.ndarray:
    return np.array([
        [1.0, 0.0, tx],
        [0.0, 1.0, ty],
        [0.0, 0.0, 1.0]
    ], dtype=np.float64)


def scaling(sx: float, sy: float) -> np.ndarray:
    return np.array([
        [sx,  0.0, 0.0],
        [0.0, sy,  0.0],
        [0.0, 0.0, 1.0]
    ], dtype=np.float64)


def compose(chain: Iterable) -> np.ndarray:
    """
    Fold descriptors into one homography: acc = M_i @ acc, in chain order.

    Disabled descriptors are skipped. An empty chain gives the identity.
    No validation happens here; a zero scale yields a singular matrix that the
    warp deals with.
    """
    H = identity()
    for descriptor in chain:
        if not getattr(descriptor, "enabled", True):
            continue
        H = descriptor.to_matrix() @ H
    return H


def invert(H: np.ndarray) -> np.ndarray:
    """
    Inverse of a homography.

    Raises SingularTransformError when H is (numerically) singular or holds
    non-finite values. The test is on the inverse itself, not on det(H):
    a chain of tiny scales has a tiny determinant but an exact inverse.
    """
    H = np.asarray(H, dtype=np.float64)
    if H.shape != (3, 3):
        raise ValueError(f"expected a 3x3 matrix, got {H.shape}")
    if not np.all(np.isfinite(H)):
        raise SingularTransformError("matrix has non-finite entries")

    try:
        with np.errstate(all="ignore"):
            H_inv = np.linalg.inv(H)
            residual = np.abs(H_inv @ H - np.eye(3)).max()
    except np.linalg.LinAlgError as e:
        raise SingularTransformError(f"matrix is singular ({e})") from e

    if not np.all(np.isfinite(H_inv)) or not residual <= INVERSE_RESIDUAL_TOLERANCE:
        raise SingularTransformError(f"matrix is numerically singular (residual={residual:.3e})")
    return H_inv


def apply_to_points(H: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Map (N, 2) points through H, with the homogeneous division.
    Points that land at infinity come back as inf/nan.
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    points_h = np.hstack([points, np.ones((points.shape[0], 1))])
    mapped = (H @ points_h.T).T
    with np.errstate(divide="ignore", invalid="ignore"):
        return mapped[:, :2] / mapped[:, 2:3]


def format_matrix(H: np.ndarray, precision: int = 5) -> list[str]:
    """Three text rows for the matrix readout grid."""
    rows = []
    for i in range(3):
        rows.append("  ".join(f"{H[i, j]:.{precision}f}" for j in range(3)))
    return rows
