"""
Core orchestration components.
"""

from .catalog import AgentCatalog, component_type_for
from .config import DelveSettings, get_settings, reset_settings
from .delivery import DeliveryAssembler, Report
from .dispatcher import ParallelDispatcher
from .executor import SubAgentExecutor
from .memory import MemoryStore
from .orchestrator import DeepResearchLoop
from .reflection import ReflectionLog
from .tools import MEMORY_TOOL_ID, MemoryTool, MultiTool, SingleTool, ToolCatalog, ToolHandle

__all__ = [
    "AgentCatalog",
    "component_type_for",
    "DelveSettings",
    "get_settings",
    "reset_settings",
    "DeliveryAssembler",
    "Report",
    "ParallelDispatcher",
    "SubAgentExecutor",
    "MemoryStore",
    "DeepResearchLoop",
    "ReflectionLog",
    "MEMORY_TOOL_ID",
    "MemoryTool",
    "MultiTool",
    "SingleTool",
    "ToolCatalog",
    "ToolHandle",
]
