"""
Performance Decorators (Observability).

Track latency per provider operation.
"""
import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable

logger = logging.getLogger(__name__)


def track_latency(port_name: str) -> Callable:
    """
    Decorator to track latency for provider operations.

    Args:
        port_name: Name of the port/adapter (e.g., "openai_llm", "deepgram_stt")

    Usage:
        @track_latency("elevenlabs_tts")
        async def synthesize(self, text, ...):
            ...

    Logs:
        [Metrics] elevenlabs_tts.synthesize=245.32ms
    """
    def decorator(func: Callable) -> Callable:
        operation = f"{port_name}.{func.__name__}"

        @wraps(func)
        async def async_wrapper(*args, **kwargs) -> Any:
            start_time = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.error(f"❌ [Metrics] {operation}={elapsed_ms:.2f}ms (FAILED: {type(e).__name__})")
                raise
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.info(f"📊 [Metrics] {operation}={elapsed_ms:.2f}ms")
            return result

        @wraps(func)
        def sync_wrapper(*args, **kwargs) -> Any:
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                elapsed_ms = (time.perf_counter() - start_time) * 1000
                logger.error(f"❌ [Metrics] {operation}={elapsed_ms:.2f}ms (FAILED: {type(e).__name__})")
                raise
            elapsed_ms = (time.perf_counter() - start_time) * 1000
            logger.info(f"📊 [Metrics] {operation}={elapsed_ms:.2f}ms")
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper
        return sync_wrapper

    return decorator
