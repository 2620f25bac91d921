"""
wallscan worker - RQ worker process.

Listens on the detection queues named by settings.worker_queues, highest
priority first, and runs wallscan.job_processor.process_job for each job.
"""

import os
from typing import List, Optional

import redis
from rq import Worker, Queue
import structlog

from wallscan.config import Settings, settings
from wallscan.services.job_service import QUEUE_NAMES
from wallscan.services.logging_service import configure_logging

logger = structlog.get_logger()


def worker_queue_names(worker_settings: Settings) -> List[str]:
    """Map configured priorities to queue names, rejecting unknown priorities."""
    unknown = [p for p in worker_settings.worker_queues if p not in QUEUE_NAMES]
    if unknown:
        raise ValueError(f"Unknown worker queue priorities {unknown}; expected {sorted(QUEUE_NAMES)}")
    if not worker_settings.worker_queues:
        raise ValueError("worker_queues must name at least one priority")
    return [QUEUE_NAMES[priority] for priority in worker_settings.worker_queues]


def build_worker(redis_connection, worker_settings: Optional[Settings] = None) -> Worker:
    """RQ worker bound to the configured queues."""
    worker_settings = worker_settings or settings
    queues = [
        Queue(name, connection=redis_connection)
        for name in worker_queue_names(worker_settings)
    ]
    worker = Worker(
        queues,
        connection=redis_connection,
        name=f"wallscan-worker-{os.getpid()}"
    )
    logger.info(
        "Worker created successfully",
        worker_name=worker.name,
        queues=[q.name for q in queues]
    )
    return worker


def main():
    """Main worker process."""
    configure_logging(settings.log_level)
    logger.info(
        "Starting wallscan worker",
        redis_url=settings.redis_url,
        queues=settings.worker_queues,
        concurrency=settings.worker_concurrency
    )

    worker = build_worker(redis.from_url(settings.redis_url))

    try:
        worker.work(with_scheduler=True)
    except KeyboardInterrupt:
        logger.info("Worker interrupted, shutting down gracefully")
    except Exception as e:
        logger.error("Worker error", error=str(e))
        raise
    finally:
        logger.info("Worker shutdown complete")


if __name__ == '__main__':
    main()
