"""
Job processor for executing the wall detection pipeline from the queue.
"""

import time
import uuid
from typing import Any, Dict, Optional

from rq import get_current_job
import structlog

from .config import DetectionConfig, settings
from .pipeline.pipeline_executor import PipelineExecutor
from .services.logging_service import LoggingService

logger = structlog.get_logger()

def process_job(pixels: Any, scale_label: Optional[str] = None,
                job_id: Optional[str] = None,
                config: Optional[DetectionConfig] = None) -> Dict[str, Any]:
    """
    Main job processing function called by the RQ worker.

    Args:
        pixels: decoded plan image (see PipelineExecutor.execute_pipeline)
        scale_label: drawing scale; defaults to settings.default_scale_label
        job_id: correlation id; defaults to the RQ job id when running in a worker

    Returns:
        JSON-ready result: the full detection result plus the report export shape
    """
    if job_id is None:
        current_job = get_current_job()
        job_id = current_job.id if current_job is not None else str(uuid.uuid4())
    if scale_label is None:
        scale_label = settings.default_scale_label

    logging_service = LoggingService()
    logging_service.log_job_event(job_id, "INFO", "Job processing started", scale_label=scale_label)
    start_time = time.time()

    try:
        executor = PipelineExecutor(config)
        result = executor.execute_pipeline(pixels, scale_label, job_id=job_id)
    except Exception as e:
        logging_service.log_job_event(
            job_id,
            "ERROR",
            "Job processing failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        raise

    payload = result.model_dump(mode="json")
    payload["export"] = result.to_export_dict()

    summary = {
        stats.wall_type.value: stats.count
        for stats in result.statistics.values()
        if stats.count
    }
    if result.scale.is_estimated:
        logging_service.log_job_event(
            job_id,
            "WARNING",
            "Scale was estimated from wall thickness; quantities are approximate",
            scale=result.scale.ratio_label,
            scale_source=result.scale.source,
        )
    logging_service.log_job_event(
        job_id,
        "INFO",
        "Job completed",
        summary=summary,
        wall_count=len(result.walls),
        duration_ms=int((time.time() - start_time) * 1000),
    )
    return payload
