"""
Unit tests for the tool catalog, tool handles and the memory tool.
"""

import asyncio

import pytest

from delve.core.tools import (
    MEMORY_TOOL_ID,
    MemoryTool,
    MultiTool,
    SingleTool,
    ToolCatalog,
)
from delve.exceptions import ToolAbortedError, ToolExecutionError
from delve.models.contracts import ToolParameter
from delve.tools import create_extract_webpage_content_tool


class TestToolCatalog:
    """Tests for registration and resolution."""

    def test_register_tool_decorator(self):
        catalog = ToolCatalog()

        @catalog.register_tool(
            "echo", "Echo a message", [ToolParameter(name="message", type="string", description="Text")]
        )
        def echo(message: str) -> str:
            return message

        handle = catalog.get("echo")
        assert isinstance(handle, SingleTool)
        assert handle.kind == "single"
        assert "echo" in catalog
        assert catalog.list_tools() == ["echo"]
        # decorator returns the original function
        assert echo("hi") == "hi"

    def test_duplicate_registration_raises(self):
        catalog = ToolCatalog()
        catalog.register(SingleTool("t", "d", lambda: None))

        with pytest.raises(ValueError, match="already registered"):
            catalog.register(SingleTool("t", "d", lambda: None))

    def test_memory_tool_id_is_reserved(self):
        catalog = ToolCatalog()

        with pytest.raises(ValueError, match="reserved"):
            catalog.register(SingleTool(MEMORY_TOOL_ID, "d", lambda: None))

    def test_default_timeout_applied(self):
        catalog = ToolCatalog(default_timeout=5.0)
        handle = catalog.register(SingleTool("t", "d", lambda: None))

        assert handle.timeout == 5.0

    def test_resolve_skips_unknown_ids(self, tool_catalog):
        handles = tool_catalog.resolve(["search_internet", "does_not_exist"])

        assert [h.id for h in handles] == ["search_internet"]

    def test_resolve_never_returns_memory_tool(self, tool_catalog):
        handles = tool_catalog.resolve([MEMORY_TOOL_ID, "search_internet"])

        assert [h.id for h in handles] == ["search_internet"]

    def test_resolve_warns_for_unknown_but_not_memory(self, tool_catalog, mocker):
        mock_logger = mocker.patch("delve.core.tools.logger")

        tool_catalog.resolve([MEMORY_TOOL_ID, "nope"])

        mock_logger.warning.assert_called_once_with("tool_not_found", tool_id="nope")


class TestToolInvocation:
    """Tests for invoking tool handles."""

    @pytest.mark.asyncio
    async def test_invoke_sync_function(self):
        handle = SingleTool("add", "Add", lambda a, b: a + b)

        assert await handle.invoke("add", {"a": 2, "b": 3}) == 5

    @pytest.mark.asyncio
    async def test_invoke_async_function(self):
        async def greet(name: str) -> str:
            return f"hello {name}"

        handle = SingleTool("greet", "Greet", greet)

        assert await handle.invoke("greet", {"name": "ada"}) == "hello ada"

    @pytest.mark.asyncio
    async def test_errors_become_payloads(self):
        def broken():
            raise RuntimeError("boom")

        handle = SingleTool("broken", "Broken", broken)

        result = await handle.invoke("broken", {})

        assert result == {"error": "RuntimeError: boom"}

    @pytest.mark.asyncio
    async def test_reported_error_message_kept(self):
        def picky(path: str):
            raise ToolExecutionError(f"Cannot read '{path}'", tool_id="picky")

        handle = SingleTool("picky", "Picky", picky)

        result = await handle.invoke("picky", {"path": "/etc"})

        assert result == {"error": "Cannot read '/etc'"}

    @pytest.mark.asyncio
    async def test_unknown_function_payload(self):
        handle = SingleTool("t", "d", lambda: 1)

        result = await handle.invoke("other", {})

        assert "error" in result

    @pytest.mark.asyncio
    async def test_timeout_payload(self):
        async def slow():
            await asyncio.sleep(1)

        handle = SingleTool("slow", "Slow", slow, timeout=0.01)

        result = await handle.invoke("slow", {})

        assert "timeout" in result["error"]

    @pytest.mark.asyncio
    async def test_abort_propagates(self):
        def guarded(path: str):
            raise ToolAbortedError("guarded", {"path": path}, reason="not allowed")

        handle = SingleTool("guarded", "Guarded", guarded)

        with pytest.raises(ToolAbortedError) as exc_info:
            await handle.invoke("guarded", {"path": "/etc"})

        assert exc_info.value.reason == "not allowed"

    def test_single_tool_schema(self):
        handle = SingleTool(
            "search_internet",
            "Search the web",
            lambda query: None,
            [
                ToolParameter(name="query", type="string", description="Query"),
                ToolParameter(
                    name="mode", type="string", description="Mode", required=False, enum=["fast", "deep"]
                ),
            ],
        )

        spec = handle.functions()[0].to_openai()

        assert spec["type"] == "function"
        assert spec["function"]["name"] == "search_internet"
        params = spec["function"]["parameters"]
        assert params["required"] == ["query"]
        assert params["properties"]["mode"]["enum"] == ["fast", "deep"]


class TestMultiTool:
    """Tests for bundles of functions."""

    @pytest.mark.asyncio
    async def test_functions_and_invoke(self):
        server = MultiTool("files")

        @server.function("read_file", "Read a file")
        def read_file(path: str) -> str:
            return f"content of {path}"

        server.add_function("list_dir", "List a directory", lambda path: ["a", "b"])

        assert server.kind == "multi"
        assert [f.name for f in server.functions()] == ["read_file", "list_dir"]
        assert server.provides("read_file")
        assert not server.provides("files")
        assert await server.invoke("read_file", {"path": "x"}) == "content of x"

    def test_duplicate_function_raises(self):
        server = MultiTool("files")
        server.add_function("f", "d", lambda: None)

        with pytest.raises(ValueError):
            server.add_function("f", "d", lambda: None)


class TestMemoryTool:
    """Tests for the short-term-memory tool."""

    @pytest.mark.asyncio
    async def test_returns_item(self, memory_store, partition):
        item_id = memory_store.store(partition, "Plan", "the plan")
        tool = MemoryTool(memory_store, partition)

        result = await tool.invoke(MEMORY_TOOL_ID, {"id": item_id})

        assert result == {"title": "Plan", "body": "the plan"}

    @pytest.mark.asyncio
    async def test_unknown_id(self, memory_store, partition):
        tool = MemoryTool(memory_store, partition)

        result = await tool.invoke(MEMORY_TOOL_ID, {"id": "nope"})

        assert result == {"error": "No content found for 'nope'"}

    @pytest.mark.asyncio
    async def test_scoped_to_partition(self, memory_store):
        item_id = memory_store.store("other", "t", "b")
        tool = MemoryTool(memory_store, "mine")

        result = await tool.invoke(MEMORY_TOOL_ID, {"id": item_id})

        assert "error" in result


class TestExampleTools:
    """Tests for the simulated web tools."""

    @pytest.mark.asyncio
    async def test_extract_rejects_non_http_url(self):
        tool = create_extract_webpage_content_tool()

        result = await tool.invoke("extract_webpage_content", {"url": "file:///etc/passwd"})

        assert result == {"error": "Cannot extract content from 'file:///etc/passwd': not an http(s) URL"}

    @pytest.mark.asyncio
    async def test_extract_http_url(self):
        tool = create_extract_webpage_content_tool()

        result = await tool.invoke("extract_webpage_content", {"url": "https://example.org/a"})

        assert result["url"] == "https://example.org/a"
