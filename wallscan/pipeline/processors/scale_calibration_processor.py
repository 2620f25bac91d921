"""
CALIBRATE_SCALE processor - pixels per meter for the plan.

A known drawing scale label is used as given. Otherwise the scale is
estimated from the dark runs crossing the horizontal midline, assuming the
average run is a 0.25 m wall, and snapped to the nearest standard scale.
The estimate is an approximation and is flagged as such on ScaleInfo.
"""

import time
from typing import Dict, Any, List, Optional

from .base_processor import BaseProcessor
from .raster_utils import find_dark_runs
from ...config import DetectionConfig
from ...models import PixelBuffer, ScaleInfo


def sample_wall_thickness(buffer: PixelBuffer, config: DetectionConfig) -> List[int]:
    """Lengths of dark runs on row height // 2 that fall within the thickness window."""
    y = buffer.height // 2
    samples = []
    for start, end in find_dark_runs(buffer.row(y)):
        length = end - start
        if config.min_thickness_px <= length <= config.max_thickness_px:
            samples.append(length)
    return samples


def nearest_standard_scale(pixels_per_meter: float, standard_scales: Dict[str, float]) -> str:
    """Label whose pixels-per-meter is closest; ties go to the earlier table entry."""
    return min(standard_scales, key=lambda label: abs(standard_scales[label] - pixels_per_meter))


def calibrate(
    buffer: PixelBuffer,
    explicit_scale: Optional[str] = None,
    config: Optional[DetectionConfig] = None,
) -> ScaleInfo:
    config = config or DetectionConfig()
    table = config.standard_scales

    if explicit_scale is not None:
        label = explicit_scale.strip()
        if label in table:
            return ScaleInfo(ratio_label=label, pixels_per_meter=table[label], source="explicit")

    samples = sample_wall_thickness(buffer, config)
    if samples:
        mean_thickness = sum(samples) / len(samples)
        estimated_ppm = mean_thickness / config.assumed_wall_thickness_m
        label = nearest_standard_scale(estimated_ppm, table)
        return ScaleInfo(
            ratio_label=label,
            pixels_per_meter=table[label],
            source="estimated",
            sample_count=len(samples),
            mean_thickness_px=mean_thickness,
        )

    label = config.default_scale_label
    return ScaleInfo(ratio_label=label, pixels_per_meter=table[label], source="default")


class ScaleCalibrationProcessor(BaseProcessor):
    """CALIBRATE_SCALE: explicit label lookup or midline thickness estimate."""

    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        self.log_info("Starting scale calibration")
        start_time = time.time()

        buffer = pipeline_data["binarize_results"]["buffer"]
        requested = pipeline_data.get("scale_label")

        scale = calibrate(buffer, requested, self.config)
        if requested is not None and scale.source != "explicit":
            self.log_info(
                "Scale label not in standard table, using auto-calibration",
                requested_scale=requested,
            )

        duration_ms = self.elapsed_ms(start_time)
        self.update_metrics(
            duration_ms=duration_ms,
            scale=scale.ratio_label,
            pixels_per_meter=scale.pixels_per_meter,
            source=scale.source,
            sample_count=scale.sample_count,
        )
        self.log_info(
            "Scale calibration completed",
            scale=scale.ratio_label,
            pixels_per_meter=scale.pixels_per_meter,
            source=scale.source,
            sample_count=scale.sample_count,
            duration_ms=duration_ms,
        )
        return {
            "scale": scale,
            "algorithm_config": {
                "standard_scales": dict(self.config.standard_scales),
                "assumed_wall_thickness_m": self.config.assumed_wall_thickness_m,
                "default_scale_label": self.config.default_scale_label,
            },
            "totals": {"sample_count": scale.sample_count},
        }
