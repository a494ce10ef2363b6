"""Compose elementary 2D transforms into a homography and backward-warp an image with it."""

from .chain import ChainController
from .config import FILL_COLOR
from .descriptor import TransformDescriptor, TransformKind
from .errors import ImageDecodeError, PlaygroundError, SingularTransformError, VariantMismatchError
from .projection import compose, invert
from .raster import Raster
from .warp import sample_bilinear, warp

__version__ = "0.1.0"

__all__ = [
    "ChainController",
    "FILL_COLOR",
    "ImageDecodeError",
    "PlaygroundError",
    "Raster",
    "SingularTransformError",
    "TransformDescriptor",
    "TransformKind",
    "VariantMismatchError",
    "compose",
    "invert",
    "sample_bilinear",
    "warp",
]
