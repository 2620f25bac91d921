"""
Data model for the wall detection pipeline.

Every entity is created fresh per run. Pydantic models are frozen and the
binary mask is a read-only array, so later stages cannot alter what earlier
stages produced.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Tuple

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from .errors import InvalidInputError
from . import wall_types
from .wall_types import WallType

Point = Tuple[int, int]


class PixelBuffer:
    """Binary (dark/light) raster. Row-major: mask[y, x] is True for dark."""

    def __init__(self, mask: Any):
        mask = np.array(mask, dtype=bool)
        if mask.ndim != 2:
            raise InvalidInputError(f"Binary mask must be 2-dimensional, got {mask.ndim} dimensions")
        if mask.shape[0] == 0 or mask.shape[1] == 0:
            raise InvalidInputError(f"Pixel buffer has zero size: {mask.shape[1]}x{mask.shape[0]}")
        mask.setflags(write=False)
        self._mask = mask

    @property
    def width(self) -> int:
        return int(self._mask.shape[1])

    @property
    def height(self) -> int:
        return int(self._mask.shape[0])

    @property
    def mask(self) -> np.ndarray:
        return self._mask

    def is_dark(self, x: int, y: int) -> bool:
        """Out-of-bounds pixels count as light."""
        if 0 <= x < self.width and 0 <= y < self.height:
            return bool(self._mask[y, x])
        return False

    def sample(self, x: int, y: int) -> int:
        """Binarized luminance: 0 for dark, 255 for light."""
        return 0 if self.is_dark(x, y) else 255

    def row(self, y: int) -> np.ndarray:
        return self._mask[y, :]

    def dark_pixel_count(self) -> int:
        return int(np.count_nonzero(self._mask))

    def __repr__(self) -> str:
        return f"PixelBuffer(width={self.width}, height={self.height})"


class Orientation(str, Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class ScaleInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    ratio_label: str
    pixels_per_meter: float = Field(gt=0)
    source: Literal["explicit", "estimated", "default"] = "explicit"
    sample_count: int = Field(default=0, ge=0)
    mean_thickness_px: Optional[float] = None

    @computed_field
    @property
    def is_estimated(self) -> bool:
        """True when the scale is a heuristic guess rather than a given drawing scale."""
        return self.source != "explicit"


class WallSegment(BaseModel):
    """
    Straight run of dark pixels from one scan direction.

    For horizontal segments y1 == y2 is the top edge of the stroke and the
    stroke covers rows [y1, y1 + thickness_px). Vertical segments mirror this
    with x1 == x2 as the left edge. x2/y2 are exclusive run ends.

    thickness_px is only checked for sign here, since the accepted range
    belongs to DetectionConfig. SCAN_SEGMENTS emits thicknesses within
    [min_thickness_px, max_thickness_px], and MERGE_SEGMENTS averages two
    in-range values, so the range holds for every segment a run produces.
    """

    model_config = ConfigDict(frozen=True)

    orientation: Orientation
    x1: int
    y1: int
    x2: int
    y2: int
    thickness_px: float = Field(ge=0)

    @model_validator(mode="after")
    def _check_axis_alignment(self) -> "WallSegment":
        if self.orientation == Orientation.HORIZONTAL:
            if self.y1 != self.y2:
                raise ValueError("horizontal segment requires y1 == y2")
            if self.x2 < self.x1:
                raise ValueError("horizontal segment requires x1 <= x2")
        else:
            if self.x1 != self.x2:
                raise ValueError("vertical segment requires x1 == x2")
            if self.y2 < self.y1:
                raise ValueError("vertical segment requires y1 <= y2")
        return self

    @property
    def start(self) -> int:
        """Along-axis start coordinate."""
        return self.x1 if self.orientation == Orientation.HORIZONTAL else self.y1

    @property
    def end(self) -> int:
        """Along-axis end coordinate (exclusive)."""
        return self.x2 if self.orientation == Orientation.HORIZONTAL else self.y2

    @property
    def cross(self) -> int:
        """Cross-axis coordinate (row for horizontal, column for vertical)."""
        return self.y1 if self.orientation == Orientation.HORIZONTAL else self.x1

    @property
    def length_px(self) -> int:
        return self.end - self.start

    def endpoints(self) -> Tuple[Point, Point]:
        return (self.x1, self.y1), (self.x2, self.y2)

    def footprint(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the stroke including its thickness; right and bottom exclusive."""
        if self.orientation == Orientation.HORIZONTAL:
            return self.x1, self.y1, self.x2, self.y1 + self.thickness_px
        return self.x1, self.y1, self.x1 + self.thickness_px, self.y2


class ConnectedWall(BaseModel):
    model_config = ConfigDict(frozen=True)

    segments: Tuple[WallSegment, ...] = Field(min_length=1)

    def total_segment_length_px(self) -> int:
        return sum(segment.length_px for segment in self.segments)

    def mean_segment_thickness_px(self) -> float:
        return sum(segment.thickness_px for segment in self.segments) / len(self.segments)


class ClassifiedWall(ConnectedWall):
    wall_type: WallType
    avg_thickness_px: float = Field(ge=0)


class MeasuredWall(ClassifiedWall):
    length_px: float = Field(ge=0)
    length_meters: float = Field(ge=0)
    thickness_meters: float = Field(ge=0)
    area_square_meters: float = Field(ge=0)


class WallTypeStatistics(BaseModel):
    model_config = ConfigDict(frozen=True)

    wall_type: WallType
    count: int = Field(default=0, ge=0)
    total_length_meters: float = Field(default=0.0, ge=0)
    total_area_square_meters: float = Field(default=0.0, ge=0)
    avg_thickness_meters: float = Field(default=0.0, ge=0)

    @computed_field
    @property
    def display_name(self) -> str:
        return wall_types.display_name(self.wall_type)

    @computed_field
    @property
    def din_code(self) -> str:
        return wall_types.din_code(self.wall_type)


class WallDetectionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    scale: ScaleInfo
    walls: List[MeasuredWall] = Field(default_factory=list)
    statistics: Dict[WallType, WallTypeStatistics] = Field(default_factory=dict)
    image_width: int = Field(ge=1)
    image_height: int = Field(ge=1)
    processing_time_ms: int = Field(default=0, ge=0)
    step_metrics: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @computed_field
    @property
    def total_area_square_meters(self) -> float:
        return sum(stats.total_area_square_meters for stats in self.statistics.values())

    def to_export_dict(self) -> Dict[str, Any]:
        """Shape consumed by the tender report/export module."""
        return {
            "scale": {
                "scale": self.scale.ratio_label,
                "pixelsPerMeter": self.scale.pixels_per_meter,
                "estimated": self.scale.is_estimated,
            },
            "statistics": {
                wall_type.value: {
                    "name": stats.display_name,
                    "dinCode": stats.din_code,
                    "count": stats.count,
                    "totalLength": stats.total_length_meters,
                    "totalArea": stats.total_area_square_meters,
                    "avgThickness": stats.avg_thickness_meters,
                }
                for wall_type, stats in self.statistics.items()
            },
            "totalArea": self.total_area_square_meters,
            "wallCount": len(self.walls),
            "walls": [
                {
                    "type": wall.wall_type.value,
                    "lengthMeters": wall.length_meters,
                    "thicknessMeters": wall.thickness_meters,
                    "areaSquareMeters": wall.area_square_meters,
                }
                for wall in self.walls
            ],
        }
