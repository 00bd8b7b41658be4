"""
Logging configuration for the face app.

structlog renders everything, including records from the standard library
loggers used by Firebase, InsightFace and DeepFace. Context bound with
``bind_log_context`` or ``log_context`` is merged into every line, so all
lines of one recognition cycle share a ``cycle`` key and a CLI run carries
the camera and store it was started with.
"""
import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

import structlog
from structlog.stdlib import ProcessorFormatter

from faceapp.core.config import settings

# Third-party loggers that are only interesting when something goes wrong
NOISY_LOGGERS = ("google", "grpc", "urllib3", "tensorflow", "absl", "h5py", "insightface")


def _shared_processors(json_logs: bool) -> List[structlog.types.Processor]:
    processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
    return processors


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Route structlog and standard logging through one stdout handler.

    Args:
        level: Log level name, defaults to LOG_LEVEL
        json_logs: Render JSON lines instead of colored console output.
            Defaults to JSON outside the development environment.
    """
    level = (level or settings.LOG_LEVEL).upper()
    if json_logs is None:
        json_logs = settings.ENVIRONMENT != "development"

    shared = _shared_processors(json_logs)
    structlog.configure(
        processors=[*shared, ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=True)
    formatter = ProcessorFormatter(
        processors=[ProcessorFormatter.remove_processors_meta, renderer],
        # Standard library records get the same keys as structlog events
        foreign_pre_chain=shared,
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level, logging.INFO))

    logging.getLogger("uvicorn.access").disabled = True
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.get_logger(__name__).info(
        "Logging configured", environment=settings.ENVIRONMENT, level=level, json=json_logs
    )


def bind_log_context(**values: Any) -> None:
    """Attach key/value pairs to every following log line in this context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def log_context(**values: Any) -> Iterator[None]:
    """Attach key/value pairs to log lines emitted inside the block.

    Tasks created inside the block inherit the values.
    """
    with structlog.contextvars.bound_contextvars(**values):
        yield


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance compatible with standard logging.

    Args:
        name: Name for the logger, typically __name__
    """
    return structlog.get_logger(name)
