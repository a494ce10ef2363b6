"""
backward warping of a raster through a homography

for every destination pixel (dx, dy):
    (X, Y, Z) = inv(H) @ (dx, dy, 1)
    (sx, sy) = (X / Z, Y / Z)
the pixel gets the bilinear sample of the source at (sx, sy) when that point is
inside [0, w-1] x [0, h-1], and the fill color otherwise.

the destination always has the size of the source. a singular H yields a raster
that is entirely fill color.

everything is vectorised over the pixel grid with numpy; the output only
depends on the source samples and H.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .config import EDGE_TOLERANCE, FILL_COLOR
from .errors import SingularTransformError
from .projection import invert
from .raster import Raster


logger = logging.getLogger(__name__)


def _fill_array(fill: Sequence[int]) -> np.ndarray:
    fill = np.asarray(fill)
    if fill.shape != (4,) or np.any(fill < 0) or np.any(fill > 255):
        raise ValueError(f"fill color must be four values in [0, 255], got {fill.tolist()}")
    return fill.astype(np.uint8)


def sample_bilinear(source: Raster, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """
    Bilinear samples of source at continuous coordinates.

    xs, ys: arrays of the same shape, expected inside the sampling domain
    (values are clamped onto it). Returns uint8 of shape xs.shape + (4,).
    Integer coordinates give back the source pixel exactly.
    """
    w, h = source.width, source.height
    xs = np.clip(np.asarray(xs, dtype=np.float64), 0.0, w - 1)
    ys = np.clip(np.asarray(ys, dtype=np.float64), 0.0, h - 1)

    x0 = np.floor(xs).astype(np.intp)
    y0 = np.floor(ys).astype(np.intp)
    # on the last row/column the far neighbour has zero weight
    x1 = np.minimum(x0 + 1, w - 1)
    y1 = np.minimum(y0 + 1, h - 1)

    fx = (xs - x0)[..., None]
    fy = (ys - y0)[..., None]

    pix = source.pixels
    p00 = pix[y0, x0].astype(np.float64)
    p10 = pix[y0, x1].astype(np.float64)
    p01 = pix[y1, x0].astype(np.float64)
    p11 = pix[y1, x1].astype(np.float64)

    top = p00 * (1.0 - fx) + p10 * fx
    bottom = p01 * (1.0 - fx) + p11 * fx
    value = top * (1.0 - fy) + bottom * fy

    # round half up, values are non-negative
    return np.clip(np.floor(value + 0.5), 0, 255).astype(np.uint8)


def inverse_map(H_inv: np.ndarray, width: int, height: int) -> tuple[np.ndarray, np.ndarray]:
    """Source coordinates (sx, sy) of every destination pixel, each of shape (height, width)."""
    dx, dy = np.meshgrid(np.arange(width, dtype=np.float64), np.arange(height, dtype=np.float64))
    X = H_inv[0, 0] * dx + H_inv[0, 1] * dy + H_inv[0, 2]
    Y = H_inv[1, 0] * dx + H_inv[1, 1] * dy + H_inv[1, 2]
    Z = H_inv[2, 0] * dx + H_inv[2, 1] * dy + H_inv[2, 2]
    with np.errstate(divide="ignore", invalid="ignore"):
        return X / Z, Y / Z


def in_domain(sx: np.ndarray, sy: np.ndarray, width: int, height: int) -> np.ndarray:
    """Mask of coordinates that can be sampled bilinearly."""
    with np.errstate(invalid="ignore"):
        return (
            np.isfinite(sx) & np.isfinite(sy)
            & (sx >= -EDGE_TOLERANCE) & (sx <= width - 1 + EDGE_TOLERANCE)
            & (sy >= -EDGE_TOLERANCE) & (sy <= height - 1 + EDGE_TOLERANCE)
        )


def warp_inverse(source: Raster, H_inv, fill: Sequence[int] = FILL_COLOR) -> Raster:
    """
    Resample source with an already inverted homography (destination -> source).

    H_inv=None stands for a singular forward transform: the result is fill
    color only. The source is only read; the result never shares its buffer.
    """
    fill = _fill_array(fill)
    w, h = source.width, source.height

    out = np.empty((h, w, 4), dtype=np.uint8)
    out[:, :] = fill
    if w == 0 or h == 0 or H_inv is None:
        return Raster(w, h, out)

    sx, sy = inverse_map(np.asarray(H_inv, dtype=np.float64), w, h)
    valid = in_domain(sx, sy, w, h)
    if valid.any():
        out[valid] = sample_bilinear(source, sx[valid], sy[valid])

    return Raster(w, h, out)


def warp(source: Raster, H: np.ndarray, fill: Sequence[int] = FILL_COLOR) -> Raster:
    """Resample source through the homography H into a new raster of the same size."""
    try:
        H_inv = invert(H)
    except SingularTransformError as e:
        # called once per frame; the viewer reports state changes itself
        logger.debug("singular transform (%s), output is fill color only", e)
        H_inv = None
    return warp_inverse(source, H_inv, fill)
