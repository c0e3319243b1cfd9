"""
Structured logging built on structlog.
Provides JSON or console output and an audit logger for account and review events.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

import structlog
from structlog.stdlib import LoggerFactory


def _has_file_handler(logger: logging.Logger, log_path: Path) -> bool:
    """Check whether ``logger`` already writes to ``log_path``."""
    target = str(log_path.resolve())
    return any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == target
        for handler in logger.handlers
    )


def setup_logging(
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Union[str, Path]] = None,
    debug: bool = False
) -> None:
    """
    Set up structured logging.

    Safe to call once per application start: a log file already attached
    to the root logger is not attached again.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        log_file: Optional log file path
        debug: Add call-site information to every event
    """
    level = getattr(logging, log_level.upper())
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if debug:
        processors.append(structlog.processors.CallsiteParameterAdder())

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    if log_file:
        log_path = Path(log_file)
        root_logger = logging.getLogger()
        if not _has_file_handler(root_logger, log_path):
            log_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter('%(message)s'))
            root_logger.addHandler(file_handler)

    structlog.get_logger(__name__).info(
        "Logging system initialized",
        level=log_level,
        format=log_format,
        file=str(log_file) if log_file else None,
        debug=debug
    )


class AuditLogger:
    """
    Logger for account and review events.

    ``bind_context`` returns a new AuditLogger, so a module-level instance
    can be bound per request without sharing state between threads.
    Never pass passwords or tokens to it.
    """

    def __init__(self, name: str = "audit", logger=None):
        self.logger = logger if logger is not None else structlog.get_logger(name)

    def bind_context(self, **kwargs) -> 'AuditLogger':
        """Return an AuditLogger whose events carry ``kwargs`` (e.g. username, isbn)."""
        return AuditLogger(logger=self.logger.bind(**kwargs))

    def log_registration(self) -> None:
        self.logger.info("User registered")

    def log_login(self, success: bool) -> None:
        """Log a login attempt."""
        level = "info" if success else "warning"
        getattr(self.logger, level)("Login attempt", success=success)

    def log_auth_failure(self, reason: str) -> None:
        self.logger.warning("Authentication rejected", reason=reason)

    def log_review_saved(self, created: bool) -> None:
        """Log a review add or modify."""
        self.logger.info("Review saved", action="created" if created else "modified")

    def log_review_deleted(self) -> None:
        self.logger.info("Review deleted")
