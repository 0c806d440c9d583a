"""
delve - Agentic Deep-Research Orchestrator
Plan, search, analyze and write research reports with a decision loop over LLM sub-agents
"""

# Setup rich logging and tracebacks globally
from .utils.rich_logging import setup_rich_logging
setup_rich_logging()

from .core.orchestrator import DeepResearchLoop
from .core.config import DelveSettings
from .core.tools import ToolCatalog
from .llm.client import LLMClient
from .models.contracts import CompletionOptions, RunResult

__version__ = "0.1.0"

__all__ = [
    "DeepResearchLoop",
    "DelveSettings",
    "ToolCatalog",
    "LLMClient",
    "CompletionOptions",
    "RunResult",
]
