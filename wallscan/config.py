"""
Configuration settings for the wallscan worker.

Settings holds process-level options read from the environment (.env).
DetectionConfig is the immutable record of detection thresholds handed to
each pipeline run.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .pipeline.processors.detection_constants import (
    ASSUMED_WALL_THICKNESS_M,
    CONNECT_ENDPOINT_GAP_PX,
    DARK_THRESHOLD,
    DEFAULT_SCALE_LABEL,
    DRYWALL_MAX_THICKNESS_PX,
    EXTERIOR_MIN_THICKNESS_PX,
    INSULATED_MIN_THICKNESS_PX,
    LOAD_BEARING_MIN_THICKNESS_PX,
    MAX_THICKNESS_PX,
    MERGE_CROSS_AXIS_TOL_PX,
    MERGE_GAP_TOL_PX,
    MERGE_THICKNESS_TOL_PX,
    MIN_RUN_LENGTH_PX,
    MIN_THICKNESS_PX,
    PERIMETER_MARGIN_PX,
    SCAN_STEP_PX,
    STANDARD_SCALES,
)


class ClassificationThresholds(BaseModel):
    """Thickness policy (px) for wall type assignment."""

    model_config = ConfigDict(frozen=True)

    perimeter_margin_px: int = Field(default=PERIMETER_MARGIN_PX, ge=0)
    exterior_min_px: float = EXTERIOR_MIN_THICKNESS_PX
    insulated_min_px: float = INSULATED_MIN_THICKNESS_PX
    load_bearing_min_px: float = LOAD_BEARING_MIN_THICKNESS_PX
    drywall_max_px: float = DRYWALL_MAX_THICKNESS_PX


class DetectionConfig(BaseModel):
    """Immutable detection parameters for one pipeline run."""

    model_config = ConfigDict(frozen=True)

    # Binarization
    dark_threshold: float = DARK_THRESHOLD

    # Thickness window shared by calibration and scanning
    min_thickness_px: int = Field(default=MIN_THICKNESS_PX, ge=1)
    max_thickness_px: int = Field(default=MAX_THICKNESS_PX, ge=1)

    # Scale calibration
    standard_scales: Dict[str, float] = Field(default_factory=lambda: dict(STANDARD_SCALES))
    default_scale_label: str = DEFAULT_SCALE_LABEL
    assumed_wall_thickness_m: float = Field(default=ASSUMED_WALL_THICKNESS_M, gt=0)

    # Scanning
    min_run_length_px: int = Field(default=MIN_RUN_LENGTH_PX, ge=1)
    scan_step_px: int = Field(default=SCAN_STEP_PX, ge=1)
    require_elongation: bool = True

    # Merging
    merge_cross_axis_tol_px: float = MERGE_CROSS_AXIS_TOL_PX
    merge_thickness_tol_px: float = MERGE_THICKNESS_TOL_PX
    merge_gap_tol_px: float = MERGE_GAP_TOL_PX

    # Connection
    connect_endpoint_gap_px: float = Field(default=CONNECT_ENDPOINT_GAP_PX, ge=0)

    # Classification
    classification: ClassificationThresholds = Field(default_factory=ClassificationThresholds)

    @model_validator(mode="after")
    def _check_ranges(self) -> "DetectionConfig":
        if self.min_thickness_px > self.max_thickness_px:
            raise ValueError("min_thickness_px must not exceed max_thickness_px")
        if not self.standard_scales:
            raise ValueError("standard_scales must not be empty")
        if self.default_scale_label not in self.standard_scales:
            raise ValueError(
                f"default_scale_label {self.default_scale_label!r} is not in standard_scales"
            )
        if any(ppm <= 0 for ppm in self.standard_scales.values()):
            raise ValueError("standard_scales values must be positive")
        return self


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Redis
    redis_url: str = "redis://localhost:6379/0"

    # Logging
    log_level: str = "INFO"

    # Worker
    worker_concurrency: int = 4
    job_timeout: int = 600  # 10 minutes
    # Priorities the worker listens on, highest first (JSON list in the environment)
    worker_queues: List[str] = ["high", "default", "low"]
    default_scale_label: Optional[str] = None


# Global settings instance
settings = Settings()
