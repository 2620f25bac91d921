"""
Pipeline executor for the 8-stage raster wall detection pipeline.
"""

import time
import uuid
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Dict, List, Optional, Sequence

import structlog

from ..config import DetectionConfig
from ..models import WallDetectionResult
from ..services.metrics_service import MetricsService
from .processors.binarize_processor import BinarizeProcessor
from .processors.scale_calibration_processor import ScaleCalibrationProcessor
from .processors.segment_scan_processor import SegmentScanProcessor
from .processors.segment_merge_processor import SegmentMergeProcessor
from .processors.wall_connect_processor import WallConnectProcessor
from .processors.wall_classify_processor import WallClassifyProcessor
from .processors.wall_measure_processor import WallMeasureProcessor
from .processors.statistics_processor import StatisticsProcessor

logger = structlog.get_logger()

# (step_name, step_order, total_steps, step_metrics)
ProgressCallback = Callable[[str, int, int, Dict[str, Any]], None]

class PipelineExecutor:
    """
    Executes the wall detection pipeline for one image at a time.

    The executor only holds the immutable config and an optional progress
    callback; processors and intermediate results are created per call, so
    one executor can serve several threads.
    """

    PIPELINE_STEPS = [
        ("BINARIZE", BinarizeProcessor),
        ("CALIBRATE_SCALE", ScaleCalibrationProcessor),
        ("SCAN_SEGMENTS", SegmentScanProcessor),
        ("MERGE_SEGMENTS", SegmentMergeProcessor),
        ("CONNECT_WALLS", WallConnectProcessor),
        ("CLASSIFY_WALLS", WallClassifyProcessor),
        ("MEASURE_WALLS", WallMeasureProcessor),
        ("AGGREGATE_STATISTICS", StatisticsProcessor),
    ]

    def __init__(self, config: Optional[DetectionConfig] = None,
                 progress_callback: Optional[ProgressCallback] = None):
        self.config = config or DetectionConfig()
        self.progress_callback = progress_callback

    def execute_pipeline(self, pixels: Any, scale_label: Optional[str] = None,
                         job_id: Optional[str] = None) -> WallDetectionResult:
        """
        Run every step in order on one image.

        Args:
            pixels: (H, W) grayscale, (H, W, 3|4) colour or (H, W) boolean array
            scale_label: drawing scale such as "1:100"; unknown labels fall back
                to auto-calibration
            job_id: correlation id for log records

        Returns:
            WallDetectionResult with scale, measured walls and per-type statistics

        Raises:
            InvalidInputError: pixels are empty or malformed (raised by BINARIZE
                before any other step runs)
        """
        job_id = job_id or str(uuid.uuid4())
        processors = {
            step_name: processor_class(job_id, self.config)
            for step_name, processor_class in self.PIPELINE_STEPS
        }
        metrics_service = MetricsService()

        logger.info(
            "Pipeline execution started",
            job_id=job_id,
            scale_label=scale_label,
        )
        start_time = time.time()

        pipeline_data: Dict[str, Any] = {
            'pixels': pixels,
            'scale_label': scale_label,
        }
        total_steps = len(self.PIPELINE_STEPS)

        for step_order, (step_name, _) in enumerate(self.PIPELINE_STEPS, 1):
            processor = processors[step_name]
            try:
                step_result = processor.process(pipeline_data)
            except Exception as e:
                logger.error(
                    "Pipeline step failed",
                    job_id=job_id,
                    step_name=step_name,
                    step_order=step_order,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            step_metrics = processor.get_metrics()
            metrics_service.record_step_metrics(step_name, step_metrics)
            logger.info(
                "Pipeline step completed",
                job_id=job_id,
                step_name=step_name,
                step_order=step_order,
                metrics=step_metrics,
            )
            if self.progress_callback is not None:
                self.progress_callback(step_name, step_order, total_steps, step_metrics)

            # Update pipeline data with step results
            pipeline_data[f'{step_name.lower()}_results'] = step_result

        buffer = pipeline_data['binarize_results']['buffer']
        result = WallDetectionResult(
            scale=pipeline_data['calibrate_scale_results']['scale'],
            walls=pipeline_data['measure_walls_results']['walls'],
            statistics=pipeline_data['aggregate_statistics_results']['statistics'],
            image_width=buffer.width,
            image_height=buffer.height,
            processing_time_ms=int((time.time() - start_time) * 1000),
            step_metrics=metrics_service.get_step_metrics(),
        )

        logger.info(
            "Pipeline execution completed",
            job_id=job_id,
            scale=result.scale.ratio_label,
            scale_estimated=result.scale.is_estimated,
            wall_count=len(result.walls),
            total_area_m2=round(result.total_area_square_meters, 3),
            duration_ms=result.processing_time_ms,
            steps_duration_ms=metrics_service.total_duration_ms(),
        )
        return result


def detect_walls(pixels: Any, scale_label: Optional[str] = None,
                 config: Optional[DetectionConfig] = None,
                 progress_callback: Optional[ProgressCallback] = None) -> WallDetectionResult:
    """Detect, classify and measure the walls of one plan image."""
    return PipelineExecutor(config, progress_callback).execute_pipeline(pixels, scale_label)


def detect_walls_batch(images: Sequence[Any], scale_label: Optional[str] = None,
                       config: Optional[DetectionConfig] = None,
                       max_workers: int = 4) -> List[WallDetectionResult]:
    """
    Run independent pipelines for several images in parallel.

    Results come back in input order. If any image fails, the remaining ones
    still finish and the first failure (by input order) is raised.
    """
    executor = PipelineExecutor(config)
    results: List[Optional[WallDetectionResult]] = [None] * len(images)
    errors: Dict[int, Exception] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        future_to_index = {
            pool.submit(executor.execute_pipeline, pixels, scale_label, f"batch-{index}"): index
            for index, pixels in enumerate(images)
        }
        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                results[index] = future.result()
            except Exception as e:
                errors[index] = e
                logger.error(
                    "Batch image failed",
                    image_index=index,
                    error=str(e),
                    error_type=type(e).__name__,
                )

    if errors:
        raise errors[min(errors)]
    return results
