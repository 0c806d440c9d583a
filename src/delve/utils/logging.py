"""
Structured logging for the delve orchestrator.

All components log through structlog with event-name messages
(``decision_received``, ``agent_output_stored``, ...) and keyword context.
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from ..models.enums import LogLevel

if TYPE_CHECKING:
    from ..core.config import DelveSettings


def setup_file_logging(
    log_file: Path, max_bytes: int = 10 * 1024 * 1024, backup_count: int = 5  # 10MB
) -> RotatingFileHandler:
    """Rotating handler for the JSON log file; its formatter is set by ``setup_logging``."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def setup_logging(settings: "DelveSettings | None" = None) -> None:
    """
    Configure structlog for a delve process.

    Events go to the console; with ``log_file`` set they are also written
    as JSON lines to a rotating file. Run-scoped fields bound with
    ``run_context`` are merged into every event.

    Args:
        settings: Settings to read the log configuration from (default: global settings)
    """
    if settings is None:
        from ..core.config import get_settings

        settings = get_settings()

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.log_file is not None:
        file_handler = setup_file_logging(
            log_file=settings.log_file,
            max_bytes=settings.log_max_bytes,
            backup_count=settings.log_backup_count,
        )
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.processors.JSONRenderer(),
                ],
            )
        )

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processors=[
                    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                    structlog.dev.ConsoleRenderer(),
                ],
            )
        )

        root_logger = logging.getLogger()
        root_logger.addHandler(file_handler)
        root_logger.addHandler(console_handler)
        root_logger.setLevel(getattr(logging, settings.log_level.value, logging.INFO))

        logger_factory = structlog.stdlib.LoggerFactory()
        processors = shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ]
    else:
        logger_factory = structlog.PrintLoggerFactory()  # type: ignore[assignment]
        processors = shared_processors + [
            (
                structlog.processors.JSONRenderer()
                if settings.log_level == LogLevel.DEBUG
                else structlog.dev.ConsoleRenderer()
            ),
        ]

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.value, logging.INFO)
        ),
        context_class=dict,
        logger_factory=logger_factory,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)


@contextmanager
def run_context(partition: str, **fields: Any) -> Iterator[None]:
    """
    Bind the run partition to every log event emitted inside the block.

    Tasks created inside inherit the binding, so fan-out sub-agents log
    with the partition of the run that started them.
    """
    with structlog.contextvars.bound_contextvars(partition=partition, **fields):
        yield


class ComponentLogger:
    """Step logging for one orchestration component, echoed on the rich console"""

    def __init__(self, component_name: str):
        self.logger = structlog.get_logger(component_name)
        self.component = component_name

    def _echo(self, message: str) -> None:
        from ..core.config import get_settings
        from .rich_logging import console

        if get_settings().enable_rich_console:
            console.console.print(message)

    def step_started(self, step: str, label: str, **context: Any) -> float:
        """Log the start of a step and return its start time."""
        self._echo(f"[cyan]▶[/cyan] [{self.component}] {label}")
        self.logger.info(f"{step}_started", component=self.component, label=label, **context)
        return time.perf_counter()

    def step_completed(self, step: str, label: str, started: float, **context: Any) -> None:
        duration_ms = (time.perf_counter() - started) * 1000
        self._echo(f"[green]✅[/green] [{self.component}] {label} ({duration_ms:.0f}ms)")
        self.logger.info(
            f"{step}_completed",
            component=self.component,
            label=label,
            duration_ms=round(duration_ms, 1),
            **context,
        )

    def step_failed(self, step: str, label: str, error: Exception, **context: Any) -> None:
        self._echo(f"[red]❌[/red] [{self.component}] {label}: {type(error).__name__}")
        self.logger.error(
            f"{step}_failed",
            component=self.component,
            label=label,
            error_type=type(error).__name__,
            error_message=str(error),
            exc_info=error,
            **context,
        )


# Component-specific loggers
orchestrator_logger = ComponentLogger("orchestrator")
executor_logger = ComponentLogger("executor")
