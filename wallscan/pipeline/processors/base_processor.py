"""
Base processor class for pipeline steps.
"""

import time
from abc import ABC, abstractmethod
from typing import Dict, Any
import structlog

from ...config import DetectionConfig

logger = structlog.get_logger()

class BaseProcessor(ABC):
    """
    One pipeline step.

    process() reads earlier results from pipeline_data and returns a dict
    holding the step's outputs plus 'algorithm_config' and 'totals'.
    """

    def __init__(self, job_id: str, config: DetectionConfig):
        self.job_id = job_id
        self.config = config
        self.metrics: Dict[str, Any] = {}
        self.logger = logger.bind(job_id=job_id, processor=self.__class__.__name__)

    @abstractmethod
    def process(self, pipeline_data: Dict[str, Any]) -> Dict[str, Any]:
        """Process the pipeline data and return results."""

    def get_metrics(self) -> Dict[str, Any]:
        return self.metrics.copy()

    def log_info(self, message: str, **context):
        self.logger.info(message, **context)

    def log_error(self, message: str, **context):
        self.logger.error(message, **context)

    def update_metrics(self, **metrics):
        self.metrics.update(metrics)

    @staticmethod
    def elapsed_ms(start_time: float) -> int:
        """Milliseconds since start_time (a time.time() value)."""
        return int((time.time() - start_time) * 1000)
