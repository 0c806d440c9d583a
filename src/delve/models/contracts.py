"""
Pydantic models defining the contracts shared by all components.
"""

import json
from collections.abc import Callable
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .enums import (
    ComponentType,
    DecisionStatus,
    QualityReview,
    QualityVerdict,
    ReflectionType,
    RunOutcome,
)

# ============================================================================
# Memory Store Contracts
# ============================================================================


class SearchResultItem(BaseModel):
    """One citation captured from a search tool result."""

    title: str = ""
    url: str = ""
    content: str | None = None


class MemoryExtra(BaseModel):
    """Metadata recorded on memory items produced by sub-agents."""

    agent_name: str | None = None
    component_type: ComponentType | None = None
    section_number: float | None = None
    search_results: list[SearchResultItem] | None = None


class MemoryItem(BaseModel):
    """A stored artifact. Write-once: the store never mutates an item."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    body: str
    extra: dict[str, Any] = Field(default_factory=dict)

    def metadata(self) -> MemoryExtra:
        """Typed view over ``extra``; unknown keys are ignored."""
        return MemoryExtra.model_validate(self.extra)

    @property
    def component_type(self) -> ComponentType | None:
        value = self.extra.get("component_type")
        if value is None:
            return None
        try:
            return ComponentType(value)
        except ValueError:
            return None


class MemoryTitle(BaseModel):
    """Entry of the memory title index."""

    id: str
    title: str


# ============================================================================
# Agent Catalog Contracts
# ============================================================================


class AgentParameter(BaseModel):
    """Schema for a single agent parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: str = Field(..., description="string, integer, number, boolean, array, object")
    description: str
    required: bool = True
    default: Any = None
    enum: list[str] | None = None
    minimum: int | None = None


class AgentStep(BaseModel):
    """One prompt template bound to a tool set."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    prompt: str
    tools: tuple[str, ...] = ()
    structured_output: type[BaseModel] | None = None


class AgentDefinition(BaseModel):
    """Immutable sub-agent definition shared by all runs."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    instructions: str
    parameters: tuple[AgentParameter, ...] = ()
    steps: tuple[AgentStep, ...] = Field(..., min_length=1)

    def parameters_schema(self) -> list[dict[str, Any]]:
        """Parameter list as plain dicts, as shown to the decision model."""
        return [
            param.model_dump(exclude_none=True, exclude_defaults=False)
            for param in self.parameters
        ]


class ToolParameter(BaseModel):
    """Schema for a single tool parameter definition."""

    name: str = Field(..., description="Parameter name")
    type: str = Field(..., description="Parameter type (string, number, integer, boolean, object, array)")
    description: str = Field(..., description="Parameter description for LLM")
    required: bool = Field(default=True, description="Whether parameter is required")
    enum: list[str] | None = Field(default=None, description="Allowed values if enumerated")


# ============================================================================
# Decision Loop Contracts
# ============================================================================


class Decision(BaseModel):
    """Structured output of the decision model for one loop iteration."""

    model_config = ConfigDict(populate_by_name=True)

    status: DecisionStatus = Field(
        ..., description="Status: continue with work or done (complete)"
    )
    next_action: str | None = Field(
        default=None,
        alias="nextAction",
        description="Human-readable description of next action",
    )
    agent_name: str | None = Field(
        default=None,
        alias="agentName",
        description="Which research agent to call: planning, search, analysis, writer, title, or synthesis",
    )
    agent_params_json: str | dict[str, Any] | list[Any] | None = Field(
        default=None,
        alias="agentParamsJson",
        description=(
            "JSON string containing parameters to pass to the agent. Can include "
            "'_relevantMemory' field. Use an array of parameter objects for parallel execution. "
            'Example: {"userQuery":"...","_relevantMemory":["id1"]}'
        ),
    )
    reasoning: str = Field(..., description="Explanation of decision and current progress")
    estimated_remaining: int | None = Field(
        default=None,
        alias="estimatedRemaining",
        description="Estimated number of remaining actions (helps with progress tracking)",
    )
    delivery_message: str | None = Field(
        default=None,
        alias="deliveryMessage",
        description="Summary message when status='done'",
    )

    @property
    def label(self) -> str:
        """Human-readable action label used in statuses and history."""
        return self.next_action or self.agent_name or "action"


class Reflection(BaseModel):
    """Run-scoped note injected into every subsequent decision prompt."""

    type: ReflectionType
    message: str


class ToolAbortion(BaseModel):
    """A tool call that an external authority refused to execute."""

    name: str
    params: dict[str, Any] = Field(default_factory=dict)
    reason: str | None = None


# ============================================================================
# LLM Client Contracts
# ============================================================================


class StreamEvent(BaseModel):
    """Event forwarded to the completion callback while a model call runs."""

    type: Literal["content", "tool", "tool_abort", "usage"]
    name: str | None = None
    text: str | None = None
    params: dict[str, Any] | None = None
    result: Any = None
    reason: str | None = None
    done: bool = True
    usage: dict[str, int] | None = None


class LLMResponse(BaseModel):
    """Response from one (possibly multi-round) LLM completion."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: Any = Field(..., description="Response content (string or structured)")
    model: str = Field(..., description="Model that generated the response")
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: float = 0.0
    finish_reason: str | None = None
    tool_calls: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def text(self) -> str:
        if self.content is None:
            return ""
        if isinstance(self.content, BaseModel):
            return self.content.model_dump_json(by_alias=True)
        if isinstance(self.content, (dict, list)):
            return json.dumps(self.content)
        return str(self.content)


class Evaluation(BaseModel):
    """Quality verdict on one sub-agent output."""

    quality: QualityVerdict = Field(..., description="pass if the output is acceptable, fail otherwise")
    feedback: str = Field(default="", description="What is wrong and how to improve it")


# ============================================================================
# Run Contracts
# ============================================================================


class CompletionOptions(BaseModel):
    """Per-run options for the orchestrator and its sub-agents."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    model: str | None = Field(None, description="Model for sub-agents (LiteLLM format)")
    decision_model: str | None = Field(None, description="Model for the decision loop")
    quality_review: QualityReview = QualityReview.DELIVERABLE
    max_parallel_execution: int = Field(default=3, ge=1)
    max_iterations: int = Field(default=30, ge=1)
    breadth: int = Field(default=3, ge=1, description="Number of report sections")
    depth: int = Field(default=2, ge=1, description="Search queries per section")
    search_results: int = Field(default=8, ge=1, description="Results per search query")
    callback: Callable[[StreamEvent], None] | None = None

    @property
    def engine(self) -> str | None:
        """Provider prefix of the sub-agent model, if any."""
        if self.model and "/" in self.model:
            return self.model.split("/", 1)[0]
        return None


class RunResult(BaseModel):
    """Result of one orchestration run."""

    outcome: RunOutcome
    iterations: int = 0
    content: str = ""
    statuses: list[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: datetime | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome in (RunOutcome.SUCCESS, RunOutcome.LIMIT_REACHED)
