"""
Decision loop: the top-level research state machine.

Each iteration asks the decision model what to do next, dispatches the
chosen sub-agent (possibly fanned out), records the outcome and loops until
the model says "done", the iteration ceiling is hit, or the run is cancelled.
"""

import asyncio
import json
import uuid
from datetime import datetime
from typing import Any

from ..agents import DECISION_PROMPT, DEFAULT_AGENTS, MAIN_LOOP_INSTRUCTIONS
from ..exceptions import CANNOT_CONTINUE_MESSAGE, DecisionError
from ..llm.client import LLMClient
from ..llm.evaluator import QualityEvaluator
from ..llm.prompts import render_template, system_instructions
from ..llm.status import ListProgressSink, StatusReporter
from ..models.contracts import CompletionOptions, Decision, RunResult, StreamEvent
from ..models.enums import AgentName, ComponentType, DecisionStatus, RunOutcome
from ..utils.error_handler import ErrorHandler
from ..utils.logging import get_logger, orchestrator_logger, run_context
from .catalog import AgentCatalog
from .config import DelveSettings, get_settings
from .delivery import DeliveryAssembler
from .dispatcher import ParallelDispatcher
from .executor import SubAgentExecutor
from .memory import MemoryStore
from .reflection import ReflectionLog
from .tools import ToolCatalog

logger = get_logger(__name__)

REQUEST_TITLE = "User Request (Full Details)"
STARTING_STATUS = "Let me start analyzing and working on your research request."
COMPLETED_STATUS = "I have completed all tasks for your research request."
LIMIT_REACHED_NOTE = "I have reached the maximum number of iterations."
NO_MEMORY_TEXT = "No work completed yet"
NO_HISTORY_TEXT = "No previous iterations yet (this is the first decision)"
PLAN_HEADER = "\n\nRESEARCH PLAN (follow this structure):\n"


def parse_agent_params(raw: Any) -> list[dict[str, Any]]:
    """
    Normalize ``agentParamsJson`` into a list of parameter sets.

    Malformed JSON is logged and treated as an empty parameter set.
    """
    if raw is None or raw == "":
        parsed: Any = {}
    elif isinstance(raw, str):
        parsed = ErrorHandler.handle_with_fallback(
            lambda: json.loads(raw),
            fallback={},
            error_msg="agent_params_parse_failed",
            log_level="warning",
            raw=raw[:200],
        )
    else:
        parsed = raw

    if isinstance(parsed, list):
        return parsed
    return [parsed]


class DeepResearchLoop:
    """
    Orchestrates one research run.

    Example:
        client = LLMClient.from_settings(settings)
        loop = DeepResearchLoop(client, tools=tool_catalog)
        result = await loop.run("State of solid-state batteries in 2025")
        print(result.content)
    """

    def __init__(
        self,
        client: LLMClient,
        store: MemoryStore | None = None,
        catalog: AgentCatalog | None = None,
        tools: ToolCatalog | None = None,
        evaluator: QualityEvaluator | None = None,
        status: StatusReporter | None = None,
        settings: DelveSettings | None = None,
    ):
        self.settings = settings or get_settings()
        self.client = client
        self.store = store or MemoryStore()
        self.catalog = catalog or AgentCatalog(DEFAULT_AGENTS)
        self.tools = tools or ToolCatalog(default_timeout=self.settings.tool_timeout)
        self.evaluator = evaluator or QualityEvaluator(client, model=self.settings.evaluator_model)
        self.status = status or StatusReporter(ListProgressSink())
        self.executor = SubAgentExecutor(client, self.store, self.tools, self.evaluator)
        self.assembler = DeliveryAssembler()

    def _memory_text(self, partition: str) -> str:
        titles = self.store.list_titles(partition)
        if not titles:
            return NO_MEMORY_TEXT
        return "\n".join(f'- id: {entry.id}, title: "{entry.title}"' for entry in titles)

    def _find_plan(self, partition: str) -> str:
        for item in self.store.get_all(partition).values():
            if item.component_type == ComponentType.PLAN:
                return PLAN_HEADER + item.body
        return ""

    def _system_prompt(self, options: CompletionOptions) -> str:
        return render_template(
            system_instructions(MAIN_LOOP_INSTRUCTIONS, no_markdown=True),
            {
                "agentsList": self.catalog.describe(),
                "numSections": options.breadth,
                "numQueriesPerSection": options.depth,
                "maxSearchResults": options.search_results,
            },
        )

    async def _decide(self, system_prompt: str, prompt: str, options: CompletionOptions) -> Decision:
        def forward_usage(event: StreamEvent) -> None:
            if event.type == "usage" and options.callback is not None:
                options.callback(event)

        try:
            response = await self.client.complete(
                [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": prompt},
                ],
                model=options.decision_model or options.model,
                response_schema=Decision,
                callback=forward_usage,
            )
        except Exception as e:
            raise DecisionError(f"Decision model call failed: {e}") from e

        if not isinstance(response.content, Decision):
            raise DecisionError("Decision model returned no usable decision", raw_content=response.content)
        return response.content

    async def run(
        self,
        user_request: str,
        options: CompletionOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> RunResult:
        """
        Run the decision loop for one research request.

        Args:
            user_request: The research request
            options: Run options (defaults from settings)
            cancel_event: Checked at the top of every iteration

        Returns:
            RunResult with the outcome, the user-facing content and the statuses
        """
        options = options or self.settings.completion_options()
        partition = str(uuid.uuid4())
        with run_context(partition):
            return await self._run(partition, user_request, options, cancel_event)

    async def _run(
        self,
        partition: str,
        user_request: str,
        options: CompletionOptions,
        cancel_event: asyncio.Event | None,
    ) -> RunResult:
        reflections = ReflectionLog()
        result = RunResult(outcome=RunOutcome.SUCCESS)

        def report(text: str) -> None:
            result.statuses.append(text)
            self.status.report(text)

        dispatcher = ParallelDispatcher(self.executor, options.max_parallel_execution, status=report)
        started = orchestrator_logger.step_started("research_run", user_request[:100])

        try:
            report(STARTING_STATUS)
            request_id = self.store.store(partition, REQUEST_TITLE, user_request)
            logger.debug("request_stored", item_id=request_id)

            system_prompt = self._system_prompt(options)
            research_plan = ""
            history: list[str] = []
            iteration = 0
            done = False

            while not done and iteration < options.max_iterations:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info("run_cancelled", iteration=iteration)
                    result.outcome = RunOutcome.STOPPED
                    return result

                iteration += 1
                result.iterations = iteration

                prompt = render_template(
                    DECISION_PROMPT,
                    {
                        "userRequest": user_request,
                        "researchPlan": research_plan,
                        "iterationHistory": "\n".join(history) if history else NO_HISTORY_TEXT,
                        "memoryList": self._memory_text(partition),
                        "previousReflections": reflections.render_context(),
                    },
                )

                decision = await self._decide(system_prompt, prompt, options)
                logger.info(
                    "decision_received",
                    iteration=iteration,
                    status=str(decision.status),
                    action=decision.next_action,
                    agent=decision.agent_name,
                )

                if decision.status == DecisionStatus.DONE:
                    result.content = self._deliver(partition, decision, report)
                    done = True
                    break

                report(f"Working on {decision.label}. Rationale: {decision.reasoning}")

                agent = self.catalog.get(decision.agent_name)
                if agent is None:
                    logger.warning("unknown_agent", agent=decision.agent_name)
                    reflections.add(
                        f'Unknown agent "{decision.agent_name}" requested. '
                        f"Available agents: {', '.join(self.catalog.names())}"
                    )
                else:
                    params_list = parse_agent_params(decision.agent_params_json)
                    await dispatcher.dispatch(
                        partition, agent, decision, params_list, iteration, options, reflections
                    )

                history.append(
                    f"#{iteration}: {decision.next_action or decision.agent_name} (agent: {decision.agent_name})"
                )

                if decision.agent_name == AgentName.PLANNING and not research_plan:
                    research_plan = self._find_plan(partition)
                    if research_plan:
                        logger.info("research_plan_cached", iteration=iteration)

            if not done:
                logger.warning("max_iterations_reached", iterations=iteration)
                report(LIMIT_REACHED_NOTE)
                result.outcome = RunOutcome.LIMIT_REACHED
                result.content = LIMIT_REACHED_NOTE

            return result

        except DecisionError as e:
            orchestrator_logger.step_failed(
                "research_run", user_request[:100], e, iteration=result.iterations
            )
            result.outcome = RunOutcome.ERROR
            result.content = e.user_message
            return result

        except Exception as e:
            orchestrator_logger.step_failed(
                "research_run", user_request[:100], e, iteration=result.iterations
            )
            result.outcome = RunOutcome.ERROR
            result.content = CANNOT_CONTINUE_MESSAGE
            return result

        finally:
            self.store.clear(partition)
            self.status.flush()
            result.finished_at = datetime.now()
            if result.outcome != RunOutcome.ERROR:
                orchestrator_logger.step_completed(
                    "research_run",
                    user_request[:100],
                    started,
                    outcome=str(result.outcome),
                    iterations=result.iterations,
                )

    def _deliver(self, partition: str, decision: Decision, report: Any) -> str:
        parts: list[str] = []
        if decision.delivery_message:
            parts.append(decision.delivery_message)
        else:
            report(COMPLETED_STATUS)
        parts.append(self.assembler.assemble(self.store.get_all(partition).values()))
        return "\n\n".join(parts)
