"""
Centralized error handling for Resume Studio.

Defines the domain exceptions raised at each external boundary and the
helpers used to log-and-degrade where a failure must never block the
primary generation flow (history persistence, background tasks).
"""

import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

# Type variable for generic return types
T = TypeVar("T")


class ResumeStudioError(Exception):
    """Base class for errors that carry a user-facing message."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class GatewayError(ResumeStudioError):
    """A generation request failed (network, non-2xx, validation, empty result)."""


class ExtractionError(ResumeStudioError):
    """Text could not be extracted from an uploaded file."""


class ExportError(ResumeStudioError):
    """A result could not be rendered to PDF."""


class HistoryStoreError(ResumeStudioError):
    """A remote history operation failed."""


class EmptyCompletionError(Exception):
    """The completion provider returned no usable text."""


def safe_execute(
    func: Callable[..., T],
    *args,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    fallback: T = None,
    critical: bool = False,
    **kwargs,
) -> T:
    """
    Execute a function safely with error handling and logging.

    Returns:
        Function result or fallback value on error
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    try:
        return func(*args, **kwargs)
    except Exception as e:
        log_level = logging.ERROR if critical else logging.WARNING
        logger.log(
            log_level,
            f"[{operation_name}] Failed: {e}",
            exc_info=critical,
        )
        return fallback


async def safe_execute_async(
    func: Callable[..., Awaitable[T]],
    *args,
    operation_name: str = "operation",
    logger: Optional[logging.Logger] = None,
    fallback: Any = None,
    critical: bool = False,
    **kwargs,
) -> T:
    """
    Await a coroutine function safely with error handling and logging.

    Async counterpart of :func:`safe_execute`.

    Usage:
        docs = await safe_execute_async(
            repo.find_async,
            {"owner_id": user_id},
            operation_name="history list",
            logger=logger,
            fallback=None,
        )
    """
    if logger is None:
        logger = logging.getLogger(__name__)

    try:
        return await func(*args, **kwargs)
    except Exception as e:
        log_level = logging.ERROR if critical else logging.WARNING
        logger.log(
            log_level,
            f"[{operation_name}] Failed: {e}",
            exc_info=critical,
        )
        return fallback
