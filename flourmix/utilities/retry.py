"""Retry helper for data acquisition from the catalog collaborator."""
import logging
import time
from functools import wraps
from typing import Callable, Tuple, Type

from flourmix.utilities.config import RETRY_ATTEMPTS, RETRY_BASE_DELAY, RETRY_MAX_DELAY
from flourmix.utilities.errors import DataAcquisitionError

logger = logging.getLogger(__name__)


def backoff_delay(attempt: int, base_delay: float = RETRY_BASE_DELAY,
                  max_delay: float = RETRY_MAX_DELAY) -> float:
    """Delay before retry number `attempt` (0-based): base * 2**attempt, capped."""
    return min(base_delay * (2 ** attempt), max_delay)


def retry_on_failure(max_attempts: int = RETRY_ATTEMPTS,
                     base_delay: float = RETRY_BASE_DELAY,
                     max_delay: float = RETRY_MAX_DELAY,
                     exceptions: Tuple[Type[BaseException], ...] = (OSError,),
                     sleep: Callable[[float], None] = time.sleep):
    """
    Retry decorator for loaders that may fail on transient I/O errors.

    Args:
        max_attempts: Maximum attempts (default 3)
        base_delay: Base delay in seconds for exponential backoff (default 1.0)
        max_delay: Upper bound for a single delay (default 8.0)
        exceptions: Exception types that trigger a retry
        sleep: Sleep function, replaceable in tests
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e

                    if attempt < max_attempts - 1:
                        delay = backoff_delay(attempt, base_delay, max_delay)
                        logger.warning(
                            "Data acquisition failed on attempt %d/%d (%s), retrying in %.1fs...",
                            attempt + 1,
                            max_attempts,
                            e,
                            delay,
                        )
                        sleep(delay)
                    else:
                        logger.error("All %d attempts failed for %s", max_attempts, func.__name__)

            raise DataAcquisitionError(
                f"{func.__name__} failed after {max_attempts} attempts"
            ) from last_exception

        return wrapper

    return decorator


__all__ = ['backoff_delay', 'retry_on_failure']
