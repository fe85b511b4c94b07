"""
Retry utilities for transient host failures.

Symbol oracle queries and file reads are host-mediated and can fail or report
"not ready" while the host is still warming up or while a file is being
written. These helpers retry such calls a bounded number of times with a short
delay between attempts.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar

T = TypeVar('T')
ResultPredicate = Callable[[Any], bool]

DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_INITIAL_WAIT = 0.1

logger = logging.getLogger('templex')


def linear_backoff(attempt: int, initial_wait: float = DEFAULT_INITIAL_WAIT, increment: float = 0.0) -> float:
    """
    Linear backoff strategy.

    Increases wait time linearly: initial_wait, initial_wait + increment, ...

    Args:
        attempt: The current attempt number (starting from 1)
        initial_wait: Initial wait time in seconds
        increment: Increment amount for each subsequent attempt

    Returns:
        The wait time in seconds
    """
    return initial_wait + (attempt - 1) * increment


def retry_if_text_contains(*markers: str) -> ResultPredicate:
    """
    Create a result predicate matching texts that contain any of ``markers``.

    Used for hover texts such as ``(loading...)`` that the oracle returns
    before its project model is ready.
    """
    def _predicate(result: Any) -> bool:
        return isinstance(result, str) and any(marker in result for marker in markers)

    return _predicate


async def retry_async(
    func: Callable[..., Awaitable[T]],
    *args: Any,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_wait: float = DEFAULT_INITIAL_WAIT,
    exceptions: Tuple[Type[Exception], ...] = (),
    retry_on_result: Optional[ResultPredicate] = None,
    **kwargs: Any
) -> T:
    """
    Await ``func(*args, **kwargs)`` and retry it on transient failures.

    A call is retried when it raises one of ``exceptions`` or when its result
    satisfies ``retry_on_result``. After the last attempt the last exception is
    re-raised, or the last result is returned as it is.

    Args:
        func: Coroutine function to call
        max_attempts: Total number of attempts (2 means "retry once")
        initial_wait: Delay in seconds before each retry
        exceptions: Exception types that trigger a retry
        retry_on_result: Predicate on the result that triggers a retry

    Returns:
        The result of the last attempt
    """
    name = getattr(func, '__qualname__', repr(func))
    attempt = 1
    while True:
        try:
            result = await func(*args, **kwargs)
        except exceptions as e:
            if attempt >= max_attempts:
                logger.debug(f"All {max_attempts} attempts failed for {name}: {e}")
                raise
            logger.debug(f"Attempt {attempt}/{max_attempts} failed for {name}: {e}")
        else:
            if retry_on_result is None or not retry_on_result(result) or attempt >= max_attempts:
                return result
            logger.debug(f"Attempt {attempt}/{max_attempts} of {name} returned a not-ready result")

        await asyncio.sleep(linear_backoff(attempt, initial_wait))
        attempt += 1
