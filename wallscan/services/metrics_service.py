"""
Metrics service for collecting per-step pipeline metrics of one run.
"""

from typing import Dict, Any

class MetricsService:
    """Service for collecting and summarizing step metrics."""

    def __init__(self):
        self.metrics_cache: Dict[str, Dict[str, Any]] = {}

    def record_step_metrics(self, step_name: str, metrics: Dict[str, Any]):
        """Record metrics for a pipeline step, merging with earlier entries."""
        existing_metrics = self.metrics_cache.setdefault(step_name, {})
        existing_metrics.update(metrics)

    def get_step_metrics(self) -> Dict[str, Dict[str, Any]]:
        return {step: dict(metrics) for step, metrics in self.metrics_cache.items()}

    def total_duration_ms(self) -> int:
        return sum(int(m.get("duration_ms", 0)) for m in self.metrics_cache.values())
