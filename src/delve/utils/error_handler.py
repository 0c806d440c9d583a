"""Error handling helpers for the parts of a run that must not fail it"""
import time
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Optional, TypeVar

from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


class ErrorHandler:
    """Fallbacks and isolation for side channels (callbacks, sinks, lenient parsing)"""

    @staticmethod
    def handle_with_fallback(
        operation: Callable[[], T],
        fallback: T,
        error_msg: str,
        log_level: str = "error",
        **context: Any,
    ) -> T:
        """
        Execute operation, returning ``fallback`` if it raises.

        Args:
            operation: Zero-argument callable
            fallback: Value returned on error
            error_msg: structlog event name for the failure
            log_level: Log level for the failure
            **context: Extra fields for the log event

        Example:
            params = ErrorHandler.handle_with_fallback(
                lambda: json.loads(raw),
                fallback={},
                error_msg="agent_params_parse_failed",
                raw=raw[:200],
            )
        """
        try:
            return operation()
        except Exception as e:
            getattr(logger, log_level)(
                error_msg, error=str(e), error_type=type(e).__name__, **context
            )
            return fallback

    @staticmethod
    def ignore_errors(
        func: Callable[..., T],
        *args: Any,
        error_msg: str = "side_channel_failed",
        log_level: str = "warning",
    ) -> Optional[T]:
        """
        Call ``func(*args)``; any exception is logged and dropped.

        Only for observers of a run (stream callbacks, progress sinks):
        their failures never reach the research loop.

        Example:
            ErrorHandler.ignore_errors(sink.report, text, error_msg="progress_report_failed")
        """
        try:
            return func(*args)
        except Exception as e:
            getattr(logger, log_level)(
                error_msg,
                error=str(e),
                error_type=type(e).__name__,
                target=getattr(func, "__qualname__", repr(func)),
            )
            return None

    @staticmethod
    @contextmanager
    def log_duration(operation_name: str, log_level: str = "info") -> Iterator[dict[str, Any]]:
        """
        Time a block and log it as ``operation_timed``.

        Yields a dict; keys added to it inside the block are logged too.

        Example:
            with ErrorHandler.log_duration("delivery_assembly") as fields:
                document = assembler.render(report)
                fields["sections"] = len(report.sections)
        """
        fields: dict[str, Any] = {}
        start = time.perf_counter()
        try:
            yield fields
        finally:
            getattr(logger, log_level)(
                "operation_timed",
                operation=operation_name,
                duration_ms=round((time.perf_counter() - start) * 1000, 1),
                **fields,
            )
