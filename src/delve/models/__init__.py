"""
Pydantic models and enums for the delve orchestrator.
"""

from .contracts import (
    AgentDefinition,
    AgentParameter,
    AgentStep,
    CompletionOptions,
    Decision,
    Evaluation,
    LLMResponse,
    MemoryExtra,
    MemoryItem,
    MemoryTitle,
    Reflection,
    RunResult,
    SearchResultItem,
    StreamEvent,
    ToolAbortion,
    ToolParameter,
)
from .enums import (
    AgentName,
    ComponentType,
    DecisionStatus,
    LogLevel,
    QualityReview,
    QualityVerdict,
    ReflectionType,
    RunOutcome,
)

__all__ = [
    "AgentDefinition",
    "AgentParameter",
    "AgentStep",
    "CompletionOptions",
    "Decision",
    "Evaluation",
    "LLMResponse",
    "MemoryExtra",
    "MemoryItem",
    "MemoryTitle",
    "Reflection",
    "RunResult",
    "SearchResultItem",
    "StreamEvent",
    "ToolAbortion",
    "ToolParameter",
    "AgentName",
    "ComponentType",
    "DecisionStatus",
    "LogLevel",
    "QualityReview",
    "QualityVerdict",
    "ReflectionType",
    "RunOutcome",
]
