"""
Retry logic with exponential backoff for Slides and Drive API calls.
Uses tenacity library for robust retry handling.
"""

import inspect
from typing import Callable
from functools import wraps

from googleapiclient.errors import HttpError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception
)

from gslides_mcp.utils.logging_config import get_logger

logger = get_logger(__name__)

TRANSIENT_STATUSES = {429, 500, 502, 503, 504}


def is_transient_error(error: BaseException) -> bool:
    """
    Check whether a remote failure is worth retrying.

    Args:
        error: Exception raised by a remote call

    Returns:
        True for rate limiting and server-side HTTP failures
    """
    if isinstance(error, HttpError):
        return error.resp.status in TRANSIENT_STATUSES
    return False


def _log_retry(retry_state) -> None:
    logger.warning(
        f"Retrying {retry_state.fn.__name__} after transient error "
        f"(attempt {retry_state.attempt_number}): {retry_state.outcome.exception()}"
    )


def retry_on_transient_error(
    max_attempts: int = 3,
    initial_wait: float = 0.5,
    max_wait: float = 10.0,
    multiplier: float = 2.0
):
    """
    Decorator for retrying remote calls on rate limit and 5xx errors.

    Args:
        max_attempts: Maximum number of attempts
        initial_wait: Initial wait time in seconds
        max_wait: Maximum wait time in seconds
        multiplier: Exponential multiplier for wait time

    Returns:
        Decorated function
    """
    def decorator(func: Callable) -> Callable:
        policy = retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(
                multiplier=multiplier,
                min=initial_wait,
                max=max_wait
            ),
            retry=retry_if_exception(is_transient_error),
            before_sleep=_log_retry,
            reraise=True
        )

        @policy
        @wraps(func)
        async def async_wrapper(*args, **kwargs):
            return await func(*args, **kwargs)

        @policy
        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            return func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
