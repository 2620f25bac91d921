"""
Exceptions raised by the wall detection pipeline.
"""


class WallDetectionError(Exception):
    """Base class for wall detection failures."""


class InvalidInputError(WallDetectionError, ValueError):
    """The pixel buffer is empty or cannot be interpreted as an image."""
