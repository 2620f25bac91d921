"""
Job service for queueing wall detection jobs on Redis.
"""

import uuid
from typing import Any, Optional

import redis
from rq import Queue
import structlog

from ..config import settings

logger = structlog.get_logger()

QUEUE_NAMES = {
    "high": "wallscan_high_priority",
    "default": "wallscan_jobs",
    "low": "wallscan_low_priority",
}

class JobService:
    """Service for job queuing and status lookup."""

    def __init__(self, redis_client: Optional[redis.Redis] = None):
        self.redis_client = redis_client or redis.from_url(settings.redis_url)
        self.queues = {
            priority: Queue(name, connection=self.redis_client)
            for priority, name in QUEUE_NAMES.items()
        }

    def enqueue_detection(self, pixels: Any, scale_label: Optional[str] = None,
                          priority: str = "default") -> str:
        """
        Enqueue one plan image for wall detection.

        Returns:
            RQ job ID
        """
        if priority not in self.queues:
            raise ValueError(f"Unknown priority {priority!r}; expected one of {sorted(self.queues)}")

        job_id = str(uuid.uuid4())
        try:
            rq_job = self.queues[priority].enqueue(
                'wallscan.job_processor.process_job',
                pixels,
                scale_label,
                job_timeout=settings.job_timeout,
                job_id=job_id
            )

            logger.info(
                "Job enqueued successfully",
                job_id=job_id,
                rq_job_id=rq_job.id,
                queue=QUEUE_NAMES[priority]
            )

            return rq_job.id

        except Exception as e:
            logger.error(
                "Failed to enqueue job",
                job_id=job_id,
                error=str(e)
            )
            raise

    def get_queue_info(self) -> dict:
        """Get the length of every queue."""
        return {queue.name: len(queue) for queue in self.queues.values()}

    def get_job_status(self, rq_job_id: str) -> Optional[dict]:
        """Get status and, once finished, the result of a queued job."""
        from rq.job import Job as RQJob
        from rq.exceptions import NoSuchJobError

        try:
            rq_job = RQJob.fetch(rq_job_id, connection=self.redis_client)
        except NoSuchJobError:
            return None

        status = rq_job.get_status()
        return {
            'id': rq_job.id,
            'status': status,
            'created_at': rq_job.created_at,
            'started_at': rq_job.started_at,
            'ended_at': rq_job.ended_at,
            'result': rq_job.return_value() if status == 'finished' else None,
        }
