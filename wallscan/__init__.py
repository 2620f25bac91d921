"""
wallscan - raster floor plan wall extraction.

Finds the walls of a binarized floor plan, classifies them by construction
type and reports lengths and areas in meters for tender quantities.
"""

from .config import ClassificationThresholds, DetectionConfig
from .errors import InvalidInputError, WallDetectionError
from .models import (
    ClassifiedWall,
    ConnectedWall,
    MeasuredWall,
    Orientation,
    PixelBuffer,
    ScaleInfo,
    WallDetectionResult,
    WallSegment,
    WallTypeStatistics,
)
from .pipeline.pipeline_executor import PipelineExecutor, detect_walls, detect_walls_batch
from .wall_types import WALL_TYPE_CATALOG, WallType

__version__ = "0.1.0"

__all__ = [
    "ClassificationThresholds",
    "ClassifiedWall",
    "ConnectedWall",
    "DetectionConfig",
    "InvalidInputError",
    "MeasuredWall",
    "Orientation",
    "PipelineExecutor",
    "PixelBuffer",
    "ScaleInfo",
    "WALL_TYPE_CATALOG",
    "WallDetectionError",
    "WallDetectionResult",
    "WallSegment",
    "WallType",
    "WallTypeStatistics",
    "detect_walls",
    "detect_walls_batch",
]
