"""
Agent definitions: the research sub-agents and the coordinator prompts.
"""

from .main_loop import DECISION_PROMPT, MAIN_LOOP_INSTRUCTIONS
from .research import (
    ANALYSIS_AGENT,
    DEFAULT_AGENTS,
    PLANNING_AGENT,
    SEARCH_AGENT,
    SYNTHESIS_AGENT,
    TITLE_AGENT,
    WRITER_AGENT,
)

__all__ = [
    "DEFAULT_AGENTS",
    "PLANNING_AGENT",
    "SEARCH_AGENT",
    "ANALYSIS_AGENT",
    "WRITER_AGENT",
    "SYNTHESIS_AGENT",
    "TITLE_AGENT",
    "MAIN_LOOP_INSTRUCTIONS",
    "DECISION_PROMPT",
]
