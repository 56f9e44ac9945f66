"""
Structured logging for DIDV.

Usage:
    from didv.utils.log import get_logger, setup_logging

    setup_logging(log_level="DEBUG")
    logger = get_logger(__name__)
    logger.info("identity_submitted", account=account)
"""

import logging
import sys
from typing import Any, Optional

import structlog

from ..config import DEFAULT_LOG_LEVEL, LOG_SERVICE_NAME


def _add_service_context(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Add service name to all log entries."""
    event_dict.setdefault("service", LOG_SERVICE_NAME)
    return event_dict


def setup_logging(log_level: str = DEFAULT_LOG_LEVEL, json_logs: bool = False) -> None:
    """
    Configure structlog on top of the stdlib root logger.
    
    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Render JSON lines instead of console output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_context,
    ]
    
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    
    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> "structlog.stdlib.BoundLogger":
    """
    Get a structured logger instance.
    
    Args:
        name: Logger name (typically __name__)
        
    Returns:
        Logger with key/value context binding
    """
    return structlog.stdlib.get_logger(name)
