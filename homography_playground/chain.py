"""
the chain of transform slots edited by the user

the controller owns the descriptors; the editing surface only calls the
mutation methods below. parameters are clamped to the slider ranges here, so a
scale can never reach zero through the editor.

there is no dirty tracking: current_matrix() recomposes on every call, which is
once per frame in the viewer. the chain is short and the warp dominates.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .config import ANGLE_RANGE, FILL_COLOR, SCALE_RANGE, SLOT_COUNT, TRANSLATE_RANGE
from .descriptor import TransformDescriptor, TransformKind
from .projection import compose
from .raster import Raster
from .warp import warp


logger = logging.getLogger(__name__)


def clamp(value: float, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return max(lo, min(hi, float(value)))


class ChainController:
    def __init__(self, length: int = SLOT_COUNT):
        if length < 0:
            raise ValueError(f"chain length must be >= 0, got {length}")
        self._slots = [TransformDescriptor.identity() for _ in range(length)]

    def __len__(self):
        return len(self._slots)

    def __getitem__(self, index: int) -> TransformDescriptor:
        # a copy, edits go through the controller
        return self._slot(index).copy()

    @property
    def descriptors(self) -> tuple[TransformDescriptor, ...]:
        return tuple(d.copy() for d in self._slots)

    def _slot(self, index: int) -> TransformDescriptor:
        if not 0 <= index < len(self._slots):
            raise IndexError(f"slot {index} out of range for a chain of {len(self._slots)}")
        return self._slots[index]

    def set_kind(self, index: int, kind: TransformKind) -> None:
        """Select a kind for the slot; its parameters reset even when the kind is unchanged."""
        slot = self._slot(index)
        slot.switch_kind(kind)
        logger.debug("slot %d -> %r", index, slot)

    def set_angle(self, index: int, angle_degrees: float) -> None:
        slot = self._slot(index)
        slot.set_angle(clamp(angle_degrees, ANGLE_RANGE))
        logger.debug("slot %d -> %r", index, slot)

    def set_translation(self, index: int, tx: float, ty: float) -> None:
        slot = self._slot(index)
        slot.set_translation(clamp(tx, TRANSLATE_RANGE), clamp(ty, TRANSLATE_RANGE))
        logger.debug("slot %d -> %r", index, slot)

    def set_scale(self, index: int, sx: float, sy: float) -> None:
        slot = self._slot(index)
        slot.set_scale(clamp(sx, SCALE_RANGE), clamp(sy, SCALE_RANGE))
        logger.debug("slot %d -> %r", index, slot)

    def set_enabled(self, index: int, enabled: bool) -> None:
        self._slot(index).enabled = bool(enabled)
        logger.debug("slot %d enabled=%s", index, enabled)

    def reset(self, index: int) -> None:
        """Put the slot back to an enabled identity."""
        slot = self._slot(index)
        slot.switch_kind(TransformKind.IDENTITY)
        slot.enabled = True

    def reset_all(self) -> None:
        for i in range(len(self._slots)):
            self.reset(i)

    def current_matrix(self) -> np.ndarray:
        return compose(self._slots)

    def render(self, source: Raster, fill: Sequence[int] = FILL_COLOR) -> Raster:
        """One frame: recompose the chain and warp the source with it."""
        return warp(source, self.current_matrix(), fill)
