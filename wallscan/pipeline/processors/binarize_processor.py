"""
BINARIZE processor - luminance threshold to a dark/light mask.

Accepts grayscale (H, W), RGB (H, W, 3) or RGBA (H, W, 4) arrays; alpha is
ignored. A boolean (H, W) array is taken as an already binarized mask with
True meaning dark.
"""

import time
from typing import Dict, Any

import numpy as np

from .base_processor import BaseProcessor
from .detection_constants import DARK_THRESHOLD, LUMINANCE_WEIGHTS
from ...errors import InvalidInputError
from ...models import PixelBuffer


def _as_image_array(pixels: Any) -> np.ndarray:
    if pixels is None:
        raise InvalidInputError("No pixel data supplied")
    try:
        image = np.asarray(pixels)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Pixel data is not a rectangular array: {e}") from e

    if image.dtype != bool and not np.issubdtype(image.dtype, np.number):
        raise InvalidInputError(f"Unsupported pixel dtype: {image.dtype}")
    if image.ndim == 3 and image.shape[2] == 1:
        image = image[:, :, 0]
    if image.ndim not in (2, 3):
        raise InvalidInputError(f"Expected a (H, W) or (H, W, C) array, got shape {image.shape}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidInputError(f"Pixel buffer has zero size: {image.shape[1]}x{image.shape[0]}")
    if image.ndim == 3 and image.shape[2] not in (3, 4):
        raise InvalidInputError(f"Unsupported channel count: {image.shape[2]}")
    if image.ndim == 3 and image.dtype == bool:
        raise InvalidInputError("Boolean masks must be 2-dimensional")
    return image


def luminance(image: np.ndarray) -> np.ndarray:
    """Per-pixel luminance 0.299R + 0.587G + 0.114B (grayscale passes through)."""
    if image.ndim == 2:
        return image.astype(np.float64)
    r_w, g_w, b_w = LUMINANCE_WEIGHTS
    rgb = image[:, :, :3].astype(np.float64)
    return r_w * rgb[:, :, 0] + g_w * rgb[:, :, 1] + b_w * rgb[:, :, 2]


def binarize(pixels: Any, threshold: float = DARK_THRESHOLD) -> PixelBuffer:
    """Convert raw pixels to a PixelBuffer. Raises InvalidInputError for empty or malformed input."""
    image = _as_image_array(pixels)
    if image.dtype == bool:
        return PixelBuffer(image)
    return PixelBuffer(luminance(image) < threshold)


class BinarizeProcessor(BaseProcessor):
    """BINARIZE: raw pixels -> immutable binary PixelBuffer."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting binarization")
        start_time = time.time()

        try:
            buffer = binarize(pipeline_data.get("pixels"), threshold=self.config.dark_threshold)
        except InvalidInputError as e:
            self.log_error("Rejected pixel input", error=str(e))
            raise
        dark_pixels = buffer.dark_pixel_count()

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            width=buffer.width,
            height=buffer.height,
            dark_pixels=dark_pixels,
        )
        self.log_info(
            "Binarization completed",
            width=buffer.width,
            height=buffer.height,
            dark_pixels=dark_pixels,
            duration_ms=duration_ms,
        )
        return {
            "buffer": buffer,
            "algorithm_config": {"dark_threshold": self.config.dark_threshold},
            "totals": {
                "width": buffer.width,
                "height": buffer.height,
                "dark_pixels": dark_pixels,
            },
        }
