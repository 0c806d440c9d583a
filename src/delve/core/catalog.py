"""
Agent catalog: a read-only registry of sub-agent definitions.
"""

import json
from collections.abc import Iterable, Iterator
from typing import Any

from ..models.contracts import AgentDefinition
from ..models.enums import AgentName, ComponentType
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Tool whose ``{"results": [...]}`` payload carries the search agent's citations
SEARCH_TOOL_ID = "search_internet"

_COMPONENT_TYPES: dict[str, ComponentType] = {
    AgentName.PLANNING.value: ComponentType.PLAN,
    AgentName.SEARCH.value: ComponentType.SEARCH_RESULTS,
    AgentName.ANALYSIS.value: ComponentType.LEARNINGS,
    AgentName.WRITER.value: ComponentType.SECTION,
    AgentName.TITLE.value: ComponentType.TITLE,
}


def component_type_for(agent_name: str, params: dict[str, Any] | None = None) -> ComponentType | None:
    """
    Semantic role of an agent's output in the deliverable.

    The synthesis agent produces a conclusion or an executive summary
    depending on its ``outputType`` parameter.
    """
    if agent_name == AgentName.SYNTHESIS:
        if (params or {}).get("outputType") == "conclusion":
            return ComponentType.CONCLUSION
        return ComponentType.EXEC_SUMMARY
    return _COMPONENT_TYPES.get(agent_name)


class AgentCatalog:
    """
    Index of agent definitions by name.

    Example:
        catalog = AgentCatalog(DEFAULT_AGENTS)
        agent = catalog.get("planning")
        prompt_block = catalog.describe()
    """

    def __init__(self, definitions: Iterable[AgentDefinition]):
        self._agents: dict[str, AgentDefinition] = {}
        for definition in definitions:
            if definition.name in self._agents:
                raise ValueError(f"Agent '{definition.name}' is defined twice")
            self._agents[definition.name] = definition
        logger.debug("agent_catalog_built", agents=list(self._agents))

    def get(self, name: str | None) -> AgentDefinition | None:
        if name is None:
            return None
        return self._agents.get(name)

    def names(self) -> list[str]:
        return list(self._agents)

    def describe(self) -> str:
        """Agent list as shown to the decision model."""
        lines = []
        for agent in self._agents.values():
            lines.append(f"- {agent.name}: {agent.description}")
            lines.append(f"  parameters: {json.dumps(agent.parameters_schema())}")
        return "\n".join(lines) + "\n"

    def __iter__(self) -> Iterator[AgentDefinition]:
        return iter(self._agents.values())

    def __contains__(self, name: object) -> bool:
        return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)
