"""Enums for type-safe settings and run records.

This module provides enum types for the configuration choices and the
tagged values that flow through an orchestration run, enabling IDE
autocomplete and preventing typos.
"""

from enum import Enum


class ComponentType(str, Enum):
    """Semantic role of a memory item in the final deliverable.

    Attributes:
        PLAN: Research plan produced by the planning agent
        SEARCH_RESULTS: Raw search output, may carry citations
        LEARNINGS: Key learnings extracted by the analysis agent
        SECTION: One numbered section of the report
        TITLE: Report title
        EXEC_SUMMARY: Executive summary
        CONCLUSION: Conclusion
    """
    PLAN = "plan"
    SEARCH_RESULTS = "search_results"
    LEARNINGS = "learnings"
    SECTION = "section"
    TITLE = "title"
    EXEC_SUMMARY = "exec_summary"
    CONCLUSION = "conclusion"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value

    @property
    def is_deliverable(self) -> bool:
        """Whether this component ends up verbatim in the user-facing report."""
        return self in DELIVERABLE_TYPES


class AgentName(str, Enum):
    """Names of the built-in research sub-agents."""
    PLANNING = "planning"
    SEARCH = "search"
    ANALYSIS = "analysis"
    WRITER = "writer"
    SYNTHESIS = "synthesis"
    TITLE = "title"

    def __str__(self) -> str:
        return self.value


DELIVERABLE_TYPES = frozenset(
    {
        ComponentType.SECTION,
        ComponentType.TITLE,
        ComponentType.EXEC_SUMMARY,
        ComponentType.CONCLUSION,
    }
)


class QualityReview(str, Enum):
    """Which sub-agent outputs go through the quality gate.

    Attributes:
        ALL: Review every output
        DELIVERABLE: Review only deliverable component types
        NONE: Never review
    """
    ALL = "all"
    DELIVERABLE = "deliverable"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class DecisionStatus(str, Enum):
    """Status of one decision-model reply."""
    CONTINUE = "continue"
    DONE = "done"

    def __str__(self) -> str:
        return self.value


class ReflectionType(str, Enum):
    """Kind of run-scoped reflection."""
    LEARNING = "learning"
    FAILURE = "failure"
    SUCCESS = "success"

    def __str__(self) -> str:
        return self.value


class QualityVerdict(str, Enum):
    """Verdict returned by the quality evaluator."""
    PASS = "pass"
    FAIL = "fail"

    def __str__(self) -> str:
        return self.value


class RunOutcome(str, Enum):
    """Final outcome of an orchestration run.

    Attributes:
        SUCCESS: A "done" decision was reached and the report delivered
        STOPPED: Cancellation was observed between iterations
        ERROR: The run could not continue (decision model failure or unexpected error)
        LIMIT_REACHED: The iteration ceiling was hit (partial result, not an error)
    """
    SUCCESS = "success"
    STOPPED = "stopped"
    ERROR = "error"
    LIMIT_REACHED = "limit_reached"

    def __str__(self) -> str:
        return self.value


class LogLevel(str, Enum):
    """Standard logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


# Export all enums
__all__ = [
    "ComponentType",
    "DELIVERABLE_TYPES",
    "QualityReview",
    "DecisionStatus",
    "ReflectionType",
    "QualityVerdict",
    "RunOutcome",
    "LogLevel",
]
