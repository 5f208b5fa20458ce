"""Log-and-degrade helpers for optional dependencies.

Gemini, YouTube and the cache database are all optional from the caller's
point of view: a failure is logged and the pipeline carries on with a
fallback value.
"""

from typing import Any, Awaitable, Callable

from wasfa.utils.logger import logger


def _log_error(operation_name: str, exception: Exception, log_level: str = "warning") -> None:
    msg = f"{operation_name}: {type(exception).__name__}: {exception}"
    if log_level == "debug":
        logger.debug(msg)
    elif log_level == "error":
        logger.error(msg)
    else:
        logger.warning(msg)


async def safe_execute_async(
    coro: Awaitable[Any],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
) -> Any:
    """Await coro, returning default_return if it raises.

    Args:
        coro: Awaitable to run.
        operation_name: Prefix of the log line (e.g. "Recipe cache lookup").
        log_level: "debug", "warning" or "error". Default: "warning".
        default_return: Value returned on failure.

    Example:
        entry = await safe_execute_async(cache.get(key), "Recipe cache lookup")
        # None on a database error, so the request continues as a cache miss
    """
    try:
        return await coro
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return


def safe_execute_sync(
    func: Callable[[], Any],
    operation_name: str,
    log_level: str = "warning",
    default_return: Any = None,
) -> Any:
    """Synchronous counterpart of safe_execute_async, used when releasing the cache engine."""
    try:
        return func()
    except Exception as e:
        _log_error(operation_name, e, log_level)
        return default_return
