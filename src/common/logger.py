"""
Centralized logging configuration for Resume Studio.

Provides contextual logging with artifact and request tagging so that the
two generation pipelines (resume, cover letter) can be told apart in logs.
Supports a debug_mode flag for verbose logging.
"""

import logging
import os
import sys
from typing import Optional


# Global debug mode flag - can be set via environment
_GLOBAL_DEBUG_MODE = os.getenv("DEBUG_MODE", "false").lower() == "true"


def set_global_debug_mode(enabled: bool) -> None:
    """Set global debug mode."""
    global _GLOBAL_DEBUG_MODE
    _GLOBAL_DEBUG_MODE = enabled


def is_debug_mode() -> bool:
    """Check if debug mode is enabled globally."""
    return _GLOBAL_DEBUG_MODE


class WorkflowLogger:
    """
    Logger wrapper that prefixes messages with artifact and request context.

    Example output: ``[resume] [req:3] Generation succeeded``

    Instances are cheap; ``bind()`` is called per generation request to tag
    every line that request logs.
    """

    def __init__(
        self,
        name: str,
        artifact: Optional[str] = None,
        request_token: Optional[int] = None,
        debug_mode: Optional[bool] = None
    ):
        self.logger = logging.getLogger(name)
        self.artifact = artifact
        self.request_token = request_token
        self._debug_mode = debug_mode if debug_mode is not None else is_debug_mode()
        if self._debug_mode:
            self.logger.setLevel(logging.DEBUG)

        tags = []
        if artifact:
            tags.append(f"[{artifact}]")
        if request_token is not None:
            tags.append(f"[req:{request_token}]")
        self._prefix = " ".join(tags)

    def bind(self, artifact: Optional[str] = None, request_token: Optional[int] = None) -> "WorkflowLogger":
        """Return a copy of this logger with extra context."""
        return WorkflowLogger(
            self.logger.name,
            artifact=artifact if artifact is not None else self.artifact,
            request_token=request_token if request_token is not None else self.request_token,
            debug_mode=self._debug_mode,
        )

    def _log(self, level: int, message: str, **kwargs) -> None:
        if self._prefix:
            message = f"{self._prefix} {message}"
        self.logger.log(level, message, **kwargs)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Log at ERROR with the active traceback attached."""
        kwargs.setdefault("exc_info", True)
        self._log(logging.ERROR, message, **kwargs)


def setup_logging(level: str = "INFO", format: str = "simple") -> None:
    """
    Configure global logging settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        format: Log format ("simple" or "json")
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Remove existing handlers
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format == "json":
        # JSON format for production (parseable by log aggregators)
        formatter = logging.Formatter(
            '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def get_logger(
    name: str,
    artifact: Optional[str] = None,
    request_token: Optional[int] = None,
    debug_mode: Optional[bool] = None
) -> WorkflowLogger:
    """Get a workflow logger, optionally pre-bound to an artifact and request."""
    return WorkflowLogger(name, artifact, request_token, debug_mode)
