"""
Unit tests for the reflection log.
"""

from delve.core.reflection import ReflectionLog
from delve.models.contracts import ToolAbortion
from delve.models.enums import ReflectionType


class TestReflectionLog:
    def test_empty_context(self):
        assert ReflectionLog().render_context() == ""

    def test_reflections_numbered(self):
        log = ReflectionLog()
        log.add("first problem")
        log.add("it worked", type=ReflectionType.SUCCESS)

        context = log.render_context()

        assert context == "PREVIOUS LEARNINGS & FEEDBACK:\n1. first problem\n2. it worked"
        assert [r.type for r in log.reflections] == [ReflectionType.FAILURE, ReflectionType.SUCCESS]

    def test_abortions_block(self):
        log = ReflectionLog()
        log.add_abortion(ToolAbortion(name="run_python_code", params={"code": "rm"}, reason=None))

        context = log.render_context()

        assert context.startswith("IMPORTANT - Tool Abortions:")
        assert "- Tool: run_python_code" in context
        assert '  Params: {"code": "rm"}' in context
        assert "  Reason: User denied" in context
        assert "DO NOT retry the exact same tool - user already denied it." in context

    def test_abortions_precede_reflections(self):
        log = ReflectionLog()
        log.add("feedback")
        log.add_abortion(ToolAbortion(name="t", reason="policy"))

        context = log.render_context()

        assert context.index("IMPORTANT - Tool Abortions:") < context.index("PREVIOUS LEARNINGS & FEEDBACK:")
        assert "  Reason: policy" in context

    def test_accessors_return_copies(self):
        log = ReflectionLog()
        log.add("x")

        log.reflections.clear()
        log.abortions.append(ToolAbortion(name="t"))

        assert len(log.reflections) == 1
        assert log.abortions == []
