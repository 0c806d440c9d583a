"""
Sub-agent executor: runs one sub-agent invocation and stores its output.

One invocation:
1. injects the ``_relevantMemory`` items into the agent instructions
2. renders the step prompt with the remaining parameters
3. calls the model with the step tools plus the partition's memory tool
4. optionally submits the output to the quality gate
5. stores the accepted output with its component metadata
"""

import json
from typing import Any

from pydantic import ValidationError

from ..llm.client import LLMClient
from ..llm.evaluator import QualityEvaluator
from ..llm.prompts import render_template, system_instructions
from ..models.contracts import (
    AgentDefinition,
    CompletionOptions,
    MemoryItem,
    SearchResultItem,
    StreamEvent,
    ToolAbortion,
)
from ..models.enums import AgentName, ComponentType, QualityReview, QualityVerdict
from ..utils.error_handler import ErrorHandler
from ..utils.logging import executor_logger, get_logger
from .catalog import SEARCH_TOOL_ID, component_type_for
from .memory import MemoryStore
from .reflection import ReflectionLog
from .tools import MemoryTool, ToolCatalog

logger = get_logger(__name__)

RELEVANT_MEMORY_KEY = "_relevantMemory"


def _section_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _citation(result: dict[str, Any]) -> SearchResultItem | None:
    """Build one citation from a search hit; missing or null fields become empty."""
    content = result.get("content")
    try:
        return SearchResultItem(
            title=str(result.get("title") or ""),
            url=str(result.get("url") or ""),
            content=None if content is None else str(content),
        )
    except ValidationError as e:
        logger.warning("search_result_skipped", error=str(e), result=str(result)[:200])
        return None


def _should_review(mode: QualityReview, component_type: ComponentType | None) -> bool:
    if mode == QualityReview.ALL:
        return True
    if mode == QualityReview.DELIVERABLE:
        return component_type is not None and component_type.is_deliverable
    return False


class SubAgentExecutor:
    """
    Executes sub-agents against one memory partition.

    Example:
        executor = SubAgentExecutor(client, store, tool_catalog, evaluator)
        item = await executor.run(
            partition, PLANNING_AGENT, {"userQuery": "...", "_relevantMemory": [request_id]},
            iteration=1, action_label="Create research plan", options=options,
            reflections=reflection_log,
        )
    """

    def __init__(
        self,
        client: LLMClient,
        store: MemoryStore,
        tools: ToolCatalog,
        evaluator: QualityEvaluator | None = None,
    ):
        self.client = client
        self.store = store
        self.tools = tools
        self.evaluator = evaluator

    def _relevant_context(self, partition: str, memory_ids: Any) -> str:
        if not isinstance(memory_ids, list) or not memory_ids:
            return ""
        items = [self.store.retrieve(partition, str(item_id)) for item_id in memory_ids]
        blocks = [f"{item.title}:\n{item.body}" for item in items if item is not None]
        logger.debug(
            "relevant_memory_injected",
            requested=len(memory_ids),
            found=len(blocks),
        )
        return "\n\n---\n\n".join(blocks)

    async def run(
        self,
        partition: str,
        agent: AgentDefinition,
        params: dict[str, Any],
        iteration: int,
        action_label: str,
        options: CompletionOptions,
        reflections: ReflectionLog | None = None,
    ) -> MemoryItem | None:
        """
        Run one sub-agent invocation.

        Args:
            partition: Memory partition of the run
            agent: Agent definition to execute
            params: Agent parameters, may include ``_relevantMemory``
            iteration: Iteration index used in the stored title
            action_label: Human-readable action, used by the quality gate
            options: Run options (model, quality review mode, callback)
            reflections: Run reflection log receiving failures and abortions

        Returns:
            The stored MemoryItem, or None when nothing was stored
        """
        reflections = reflections if reflections is not None else ReflectionLog()
        if not isinstance(params, dict):
            logger.warning("agent_params_not_an_object", agent=agent.name, params=str(params)[:200])
            params = {}

        relevant_context = self._relevant_context(partition, params.get(RELEVANT_MEMORY_KEY))
        clean_params = {k: v for k, v in params.items() if k != RELEVANT_MEMORY_KEY}

        instructions = agent.instructions
        if relevant_context:
            instructions += f"\n\n## Relevant Context from Memory:\n{relevant_context}"

        component_type = component_type_for(agent.name, clean_params)
        is_deliverable = component_type is not None and component_type.is_deliverable

        step = agent.steps[0]
        prompt = render_template(step.prompt, clean_params)
        messages = [
            {"role": "system", "content": system_instructions(instructions, no_markdown=not is_deliverable)},
            {"role": "user", "content": prompt},
        ]

        handles = [*self.tools.resolve(step.tools), MemoryTool(self.store, partition)]
        captured: list[SearchResultItem] = []

        def on_event(event: StreamEvent) -> None:
            if (
                agent.name == AgentName.SEARCH
                and event.type == "tool"
                and event.name == SEARCH_TOOL_ID
                and event.done
                and isinstance(event.result, dict)
                and isinstance(event.result.get("results"), list)
            ):
                for result in event.result["results"]:
                    citation = _citation(result) if isinstance(result, dict) else None
                    if citation is not None:
                        captured.append(citation)
            if event.type == "tool_abort":
                reflections.add_abortion(
                    ToolAbortion(name=event.name or "unknown", params=event.params or {}, reason=event.reason)
                )
            if options.callback is not None:
                ErrorHandler.ignore_errors(options.callback, event, error_msg="completion_callback_failed")

        started = executor_logger.step_started(
            "agent_execution", action_label, agent=agent.name, iteration=iteration
        )

        try:
            response = await self.client.complete(
                messages,
                model=options.model,
                response_schema=step.structured_output,
                tools=handles,
                callback=on_event,
            )
        except Exception as e:
            executor_logger.step_failed("agent_execution", action_label, e, agent=agent.name)
            return None

        output = response.text
        if not output.strip():
            logger.warning("agent_output_empty", agent=agent.name, action=action_label)
            return None

        if self.evaluator is not None and _should_review(options.quality_review, component_type):
            evaluation = await self.evaluator.evaluate(
                options.engine, options.model, action_label, prompt, output
            )
            if evaluation.quality == QualityVerdict.FAIL:
                reflections.add(
                    f'Action "{action_label}" failed quality check: {evaluation.feedback}. '
                    "Please retry with improvements."
                )
                logger.warning("agent_output_rejected", action=action_label, feedback=evaluation.feedback)
                return None

        title = f"#{iteration}. {agent.name}: {json.dumps(clean_params, ensure_ascii=False, separators=(',', ':'))}"
        extra: dict[str, Any] = {
            "agent_name": agent.name,
            "component_type": component_type.value if component_type else None,
            "section_number": _section_number(clean_params.get("sectionNumber")),
        }
        if captured:
            extra["search_results"] = [item.model_dump() for item in captured]

        item_id = self.store.store(partition, title, output, extra)
        logger.info("agent_output_stored", item_id=item_id, title=title[:120])
        executor_logger.step_completed(
            "agent_execution",
            action_label,
            started,
            agent=agent.name,
            item_id=item_id,
            component_type=extra["component_type"],
            search_results=len(captured),
        )
        return self.store.retrieve(partition, item_id)
