"""Retry utilities using tenacity."""
import logging

import aiohttp
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

logger = logging.getLogger(__name__)


def create_retry_decorator(max_attempts: int = 3, max_wait: float = 10):
    """Create a retry decorator for HTTP calls."""
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=1, max=max_wait),
        retry=retry_if_exception_type((
            aiohttp.ClientError,
            aiohttp.ServerTimeoutError,
            TimeoutError,
        )),
        before_sleep=lambda retry_state: logger.warning(
            "Retrying explanation request (attempt %d of %d)",
            retry_state.attempt_number,
            max_attempts,
        ),
        reraise=True,
    )
