"""
Parallel dispatcher: fans one decision out to several sub-agent invocations.
"""

import asyncio
from collections import deque
from collections.abc import Callable
from typing import Any

from ..models.contracts import AgentDefinition, CompletionOptions, Decision, MemoryItem
from ..utils.error_handler import ErrorHandler
from ..utils.logging import get_logger
from .executor import SubAgentExecutor
from .reflection import ReflectionLog

logger = get_logger(__name__)


class ParallelDispatcher:
    """
    Runs one executor invocation per parameter set, at most ``max_concurrency`` at a time.

    ``status`` receives one "Completed: ..." line per dispatch. Errors it
    raises are logged and do not affect the results.

    Example:
        dispatcher = ParallelDispatcher(executor, max_concurrency=3, status=reporter.report)
        items = await dispatcher.dispatch(partition, agent, decision, params_list, 4, options)
    """

    def __init__(
        self,
        executor: SubAgentExecutor,
        max_concurrency: int = 3,
        status: Callable[[str], None] | None = None,
    ):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.executor = executor
        self.max_concurrency = max_concurrency
        self.status = status

    async def _run_one(
        self,
        partition: str,
        agent: AgentDefinition,
        params: dict[str, Any],
        iteration: int,
        label: str,
        options: CompletionOptions,
        reflections: ReflectionLog | None,
    ) -> MemoryItem | None:
        try:
            return await self.executor.run(
                partition, agent, params, iteration, label, options, reflections
            )
        except Exception as e:
            logger.error("agent_task_failed", action=label, error=str(e), error_type=type(e).__name__)
            return None

    async def dispatch(
        self,
        partition: str,
        agent: AgentDefinition,
        decision: Decision,
        params_list: list[dict[str, Any]],
        iteration: int,
        options: CompletionOptions,
        reflections: ReflectionLog | None = None,
    ) -> list[MemoryItem | None]:
        """
        Execute every parameter set and wait for all of them.

        With more than one set, task ``k`` (1-based) is labelled
        ``"<next_action> #k"`` and stored under iteration ``iteration + k - 1``.

        Returns:
            One result per parameter set, in input order
        """
        total = len(params_list)
        base_label = decision.label
        results: list[MemoryItem | None] = [None] * total

        if total > 1:
            logger.info("parallel_execution", tasks=total, max_concurrency=self.max_concurrency)

        pending = deque(enumerate(params_list))
        running: dict[asyncio.Task, int] = {}

        while pending or running:
            while pending and len(running) < self.max_concurrency:
                index, params = pending.popleft()
                label = f"{base_label} #{index + 1}" if total > 1 else base_label
                task = asyncio.create_task(
                    self._run_one(
                        partition, agent, params, iteration + index, label, options, reflections
                    )
                )
                running[task] = index

            done, _ = await asyncio.wait(running, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                results[running.pop(task)] = task.result()

        if self.status is not None:
            task_label = f"{base_label} ({total} tasks)" if total > 1 else base_label
            ErrorHandler.ignore_errors(
                self.status, f"Completed: {task_label}", error_msg="dispatch_status_failed"
            )

        return results
