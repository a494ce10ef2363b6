"""Exception hierarchy for the homography playground."""

from __future__ import annotations


class PlaygroundError(Exception):
    """Base class for all errors raised by the playground."""


class ImageDecodeError(PlaygroundError):
    """Raised when a source image cannot be read or decoded."""


class SingularTransformError(PlaygroundError):
    """Raised when a projective matrix has no inverse."""


class VariantMismatchError(PlaygroundError, TypeError):
    """Raised when a parameter setter does not match the active transform kind."""
