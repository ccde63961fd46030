"""Retry with exponential backoff for flaky I/O."""
import asyncio
import inspect
from collections.abc import Awaitable, Callable
from logging import Logger


async def _call(fn: Callable[[], object], run_in_thread: bool) -> None:
    if run_in_thread:
        await asyncio.to_thread(fn)
        return
    result = fn()
    if inspect.isawaitable(result):
        await result


async def with_retry(
    fn: Callable[[], object] | Callable[[], Awaitable[object]],
    *,
    name: str,
    logger: Logger,
    max_retries: int = 3,
    initial_backoff_sec: float = 1.0,
    retryable_exceptions: tuple[type[Exception], ...] = (OSError,),
    run_in_thread: bool = False,
) -> bool:
    """Call ``fn`` until it succeeds or ``max_retries`` attempts are used up.

    The delay doubles after every failed attempt. Exceptions outside
    ``retryable_exceptions`` end the loop immediately. Errors are logged,
    never raised.

    Args:
        fn: Sync or async callable taking no arguments.
        name: Operation name used in log messages.
        logger: Logger to report failures on.
        max_retries: Total number of attempts.
        initial_backoff_sec: Delay after the first failure.
        retryable_exceptions: Exception types worth another attempt.
        run_in_thread: Run a blocking sync ``fn`` in the default executor.

    Returns:
        Whether the call eventually succeeded.
    """
    delay = initial_backoff_sec
    for attempt in range(1, max_retries + 1):
        try:
            await _call(fn, run_in_thread)
        except retryable_exceptions as e:
            if attempt == max_retries:
                logger.error(
                    "%s failed after %d attempts. Last error: %s",
                    name,
                    max_retries,
                    e,
                )
                return False
            logger.warning(
                "%s attempt %d/%d failed: %s. Retrying in %.1fs...",
                name,
                attempt,
                max_retries,
                e,
                delay,
            )
            await asyncio.sleep(delay)
            delay *= 2
        except Exception as e:
            logger.error("%s failed (non-retryable): %s", name, e)
            return False
        else:
            return True
    return False
