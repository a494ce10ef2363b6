"""
one editable slot of the transform chain

a descriptor is a tagged variant: exactly one TransformKind is active and only
that kind's parameters exist. switching kind resets the parameters to the
defaults of the new kind:

    IDENTITY   -> ()
    ROTATE     -> angle_degrees = 0
    TRANSLATE  -> tx, ty = 0, 0
    SCALE      -> sx, sy = 1, 1

widgets never write the fields directly, they go through the setters.
"""

from __future__ import annotations

import enum

import numpy as np

from . import projection
from .errors import VariantMismatchError


class TransformKind(enum.Enum):
    IDENTITY = "I"
    ROTATE = "Rot"
    SCALE = "Scale"
    TRANSLATE = "Trans"

    @property
    def label(self) -> str:
        return self.value


DEFAULT_PARAMS = {
    TransformKind.IDENTITY: {},
    TransformKind.ROTATE: {"angle_degrees": 0.0},
    TransformKind.TRANSLATE: {"tx": 0.0, "ty": 0.0},
    TransformKind.SCALE: {"sx": 1.0, "sy": 1.0},
}


class TransformDescriptor:
    """An elementary transform (identity, rotation, translation or scale) and its parameters."""

    def __init__(self, kind: TransformKind = TransformKind.IDENTITY, enabled: bool = True, **params):
        self.kind = kind
        self.enabled = enabled
        self.params = dict(DEFAULT_PARAMS[kind])
        unknown = set(params) - set(self.params)
        if unknown:
            raise VariantMismatchError(f"{kind.name} has no parameters {sorted(unknown)}")
        for name, value in params.items():
            self.params[name] = float(value)

    # constructors named after the variants

    @classmethod
    def identity(cls) -> "TransformDescriptor":
        return cls(TransformKind.IDENTITY)

    @classmethod
    def rotate(cls, angle_degrees: float) -> "TransformDescriptor":
        return cls(TransformKind.ROTATE, angle_degrees=angle_degrees)

    @classmethod
    def translate(cls, tx: float, ty: float) -> "TransformDescriptor":
        return cls(TransformKind.TRANSLATE, tx=tx, ty=ty)

    @classmethod
    def scale(cls, sx: float, sy: float) -> "TransformDescriptor":
        return cls(TransformKind.SCALE, sx=sx, sy=sy)

    def __getattr__(self, name):
        # angle_degrees / tx / ty / sx / sy, only for the active kind
        params = self.__dict__.get("params", {})
        if name in params:
            return params[name]
        raise AttributeError(name)

    def __eq__(self, other):
        if not isinstance(other, TransformDescriptor):
            return NotImplemented
        return (self.kind, self.enabled, self.params) == (other.kind, other.enabled, other.params)

    def __repr__(self):
        parts = [f"{k}={v:g}" for k, v in self.params.items()]
        if not self.enabled:
            parts.append("disabled")
        return f"{self.kind.name.title()}({', '.join(parts)})"

    def copy(self) -> "TransformDescriptor":
        return TransformDescriptor(self.kind, self.enabled, **self.params)

    def switch_kind(self, kind: TransformKind) -> None:
        """Change variant; parameters go back to the new kind's defaults."""
        self.kind = kind
        self.params = dict(DEFAULT_PARAMS[kind])

    def _require(self, kind: TransformKind) -> None:
        if self.kind is not kind:
            raise VariantMismatchError(f"cannot set {kind.name} parameters on a {self.kind.name} transform")

    def set_angle(self, angle_degrees: float) -> None:
        self._require(TransformKind.ROTATE)
        self.params["angle_degrees"] = float(angle_degrees)

    def set_translation(self, tx: float, ty: float) -> None:
        self._require(TransformKind.TRANSLATE)
        self.params["tx"] = float(tx)
        self.params["ty"] = float(ty)

    def set_scale(self, sx: float, sy: float) -> None:
        self._require(TransformKind.SCALE)
        self.params["sx"] = float(sx)
        self.params["sy"] = float(sy)

    def to_matrix(self) -> np.ndarray:
        if self.kind is TransformKind.ROTATE:
            return projection.rotation(self.params["angle_degrees"])
        if self.kind is TransformKind.TRANSLATE:
            return projection.translation(self.params["tx"], self.params["ty"])
        if self.kind is TransformKind.SCALE:
            return projection.scaling(self.params["sx"], self.params["sy"])
        return projection.identity()
