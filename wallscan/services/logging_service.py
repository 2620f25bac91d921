"""
Structured logging setup shared by the worker and library callers.
"""

import logging
import sys
from typing import Optional

import structlog


def configure_logging(log_level: Optional[str] = None, json_output: bool = True):
    """Configure stdlib logging to stderr and structlog on top of it."""
    level = getattr(logging, (log_level or "INFO").upper(), logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stderr,
    )

    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class LoggingService:
    """Service for job-scoped structured logging."""

    def __init__(self):
        self.logger = structlog.get_logger()

    def log_job_event(self, job_id: str, level: str, message: str, **context):
        """Log a job-related event at the given level name."""
        log_context = {'job_id': job_id}
        log_context.update(context)

        level = level.upper()
        if level == 'ERROR':
            self.logger.error(message, **log_context)
        elif level == 'WARNING':
            self.logger.warning(message, **log_context)
        elif level == 'DEBUG':
            self.logger.debug(message, **log_context)
        else:
            self.logger.info(message, **log_context)
