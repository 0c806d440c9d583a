"""
Run-scoped reflections and tool abortions.

Reflections are never written to memory. They are rendered into every
subsequent decision prompt so the decision model can adapt.
"""

import json

from ..models.contracts import Reflection, ToolAbortion
from ..models.enums import ReflectionType
from ..utils.logging import get_logger

logger = get_logger(__name__)


class ReflectionLog:
    """Append-only log of reflections and denied tool calls for one run."""

    def __init__(self):
        self._reflections: list[Reflection] = []
        self._abortions: list[ToolAbortion] = []

    def add(self, message: str, type: ReflectionType = ReflectionType.FAILURE) -> Reflection:
        reflection = Reflection(type=type, message=message)
        self._reflections.append(reflection)
        logger.info("reflection_recorded", reflection_type=str(type), message=message[:200])
        return reflection

    def add_abortion(self, abortion: ToolAbortion) -> None:
        self._abortions.append(abortion)
        logger.info("tool_abortion_recorded", tool=abortion.name, reason=abortion.reason)

    @property
    def reflections(self) -> list[Reflection]:
        return list(self._reflections)

    @property
    def abortions(self) -> list[ToolAbortion]:
        return list(self._abortions)

    def render_context(self) -> str:
        """
        Render reflections and abortions as decision-prompt context.

        Returns:
            The context block, or an empty string when there is nothing to say
        """
        parts: list[str] = []

        if self._abortions:
            lines = ["IMPORTANT - Tool Abortions:"]
            for abortion in self._abortions:
                lines.append(f"- Tool: {abortion.name}")
                lines.append(f"  Params: {json.dumps(abortion.params)}")
                lines.append(f"  Reason: {abortion.reason or 'User denied'}")
            lines.append("")
            lines.append("The user denied these tool calls. Choose one of the following:")
            lines.append("1. Use a different approach or a different tool")
            lines.append("2. Ask the user for clarification")
            lines.append("3. Finish with the information already gathered")
            lines.append("DO NOT retry the exact same tool - user already denied it.")
            parts.append("\n".join(lines))

        if self._reflections:
            lines = ["PREVIOUS LEARNINGS & FEEDBACK:"]
            for n, reflection in enumerate(self._reflections, 1):
                lines.append(f"{n}. {reflection.message}")
            parts.append("\n".join(lines))

        return "\n\n".join(parts)
