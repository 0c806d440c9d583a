"""
Progress reporting.

Status lines are fire-and-forget: a failing sink or a failing rephrasing
call is logged and never interrupts a run. A run never waits for
rephrasing: lines still pending when it ends are sent as written.
"""

import asyncio
from typing import Protocol, runtime_checkable

from ..utils.error_handler import ErrorHandler
from ..utils.logging import get_logger
from .client import LLMClient

logger = get_logger(__name__)

STATUS_INSTRUCTIONS = (
    "Rewrite the following progress note of a research assistant as one short, friendly "
    "status line for the user (at most 20 words). Reply with the status line only."
)


@runtime_checkable
class ProgressSink(Protocol):
    """Anything that can display a status line."""

    def report(self, text: str) -> None: ...


class ListProgressSink:
    """Collects status lines in memory."""

    def __init__(self):
        self.lines: list[str] = []

    def report(self, text: str) -> None:
        self.lines.append(text)


class ConsoleProgressSink:
    """Prints status lines on the rich console."""

    def report(self, text: str) -> None:
        from ..utils.rich_logging import console

        console.print_status(text)


class StatusReporter:
    """
    Forwards status lines to a progress sink, optionally rephrased by the model.

    Example:
        reporter = StatusReporter(ConsoleProgressSink())
        reporter.report("Working on Create research plan. Rationale: no plan yet")
        await reporter.drain()
    """

    def __init__(
        self,
        sink: ProgressSink,
        client: LLMClient | None = None,
        model: str | None = None,
        rephrase: bool = False,
    ):
        self.sink = sink
        self.client = client
        self.model = model
        self.rephrase = rephrase and client is not None
        self._pending: dict[asyncio.Task, str] = {}

    def report(self, text: str) -> None:
        """Send a status line without waiting for it."""
        if not self.rephrase:
            self._send(text)
            return

        try:
            task = asyncio.get_running_loop().create_task(self._rephrase_and_send(text))
        except RuntimeError:
            self._send(text)
            return
        self._pending[task] = text
        task.add_done_callback(lambda done: self._pending.pop(done, None))

    def _send(self, text: str) -> None:
        ErrorHandler.ignore_errors(self.sink.report, text, error_msg="progress_report_failed")

    async def _rephrase_and_send(self, text: str) -> None:
        status = text
        try:
            response = await self.client.complete(
                [
                    {"role": "system", "content": STATUS_INSTRUCTIONS},
                    {"role": "user", "content": text},
                ],
                model=self.model,
            )
            status = response.text.strip() or text
        except Exception as e:
            logger.warning("status_rephrase_failed", error=str(e), error_type=type(e).__name__)
        self._send(status)

    def flush(self) -> None:
        """Cancel pending rephrasing calls and send their lines as written."""
        pending, self._pending = self._pending, {}
        cancelled = [(task, text) for task, text in pending.items() if not task.done()]
        for task, text in cancelled:
            task.cancel()
            self._send(text)
        if cancelled:
            logger.debug("status_rephrase_cancelled", count=len(cancelled))

    async def drain(self) -> None:
        """Wait for pending rephrased statuses."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
