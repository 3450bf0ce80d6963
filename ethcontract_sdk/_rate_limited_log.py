"""
Thread-safe rate-limited logging.

Receipt polling may hit the same node error on every attempt across many
concurrent waits; this keeps one copy per message per window.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

LOG_WINDOW_SECONDS = 60

_log_cache: TTLCache = TTLCache(maxsize=256, ttl=LOG_WINDOW_SECONDS)
_log_cache_lock = threading.RLock()


def rate_limited_log(
    message: str,
    level: str = "warning",
    logger_instance: Optional[logging.Logger] = None,
) -> bool:
    """
    Log a message unless the same message was logged within the window.

    Args:
        message: Message to log
        level: Log level name (debug, info, warning, error, critical)
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{level}:{message}"

    with _log_cache_lock:
        if key in _log_cache:
            return False
        log_method(message)
        _log_cache[key] = True
    return True


def reset_rate_limits() -> None:
    """Forget every suppressed message."""
    with _log_cache_lock:
        _log_cache.clear()
