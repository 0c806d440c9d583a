"""
Tool catalog and resolver.

Tools are registered once as tagged handles:

- ``SingleTool``: one function exposed under the tool id
- ``MultiTool``: a named bundle of several functions (e.g. a remote tool server)

Agent steps reference tools by id; ``ToolCatalog.resolve`` maps those ids to
handles. The short-term-memory tool is reserved: it is bound per partition by
the sub-agent executor and never looked up in the catalog.
"""

import asyncio
import inspect
import time
import traceback
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, ClassVar, Literal

from ..exceptions import ToolAbortedError, ToolExecutionError
from ..models.contracts import ToolParameter
from ..utils.logging import get_logger
from .memory import MemoryStore

MEMORY_TOOL_ID = "short_term_memory"

logger = get_logger(__name__)


def build_parameters_schema(parameters: Iterable[ToolParameter]) -> dict[str, Any]:
    """Convert tool parameters into a JSON schema object."""
    schema: dict[str, Any] = {"type": "object", "properties": {}, "required": []}

    for param in parameters:
        param_schema: dict[str, Any] = {
            "type": param.type,
            "description": param.description,
        }
        if param.enum:
            param_schema["enum"] = param.enum

        schema["properties"][param.name] = param_schema
        if param.required:
            schema["required"].append(param.name)

    return schema


@dataclass(frozen=True)
class ToolFunction:
    """One callable function as advertised to the model."""

    name: str
    description: str
    parameters: dict[str, Any] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )

    def to_openai(self) -> dict[str, Any]:
        """Function-calling schema in OpenAI format (accepted by LiteLLM)."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }


async def _call(func: Callable, args: dict[str, Any], timeout: float | None) -> Any:
    if inspect.iscoroutinefunction(func):
        coro = func(**args)
    else:
        coro = asyncio.to_thread(func, **args)
    if timeout is None:
        return await coro
    return await asyncio.wait_for(coro, timeout=timeout)


class _ToolHandle:
    """Shared invocation logic for tool handles."""

    kind: ClassVar[Literal["single", "multi"]]

    def __init__(self, tool_id: str, timeout: float | None = None):
        self.id = tool_id
        self.timeout = timeout

    def functions(self) -> list[ToolFunction]:
        raise NotImplementedError

    def _callable(self, name: str) -> Callable | None:
        raise NotImplementedError

    def provides(self, name: str) -> bool:
        return self._callable(name) is not None

    async def invoke(self, name: str, args: dict[str, Any] | None = None) -> Any:
        """
        Invoke one function of this tool.

        Errors are returned as ``{"error": ...}`` payloads so the model can
        react to them. A tool reports an expected failure by raising
        ``ToolExecutionError``; its message is returned as is. A
        ``ToolAbortedError`` propagates to the caller.

        Args:
            name: Function name
            args: Keyword arguments

        Returns:
            Tool result or error payload
        """
        func = self._callable(name)
        if func is None:
            return {"error": f"Tool '{self.id}' has no function '{name}'"}

        args = args or {}
        logger.info("executing_tool", tool_id=self.id, function=name, parameters=args)
        start_time = time.perf_counter()

        try:
            result = await _call(func, args, self.timeout)
        except ToolAbortedError:
            logger.warning("tool_call_aborted", tool_id=self.id, function=name)
            raise
        except asyncio.TimeoutError:
            logger.error("tool_execution_timeout", tool_id=self.id, function=name, timeout=self.timeout)
            return {"error": f"Tool execution exceeded {self.timeout}s timeout"}
        except ToolExecutionError as e:
            logger.warning("tool_reported_error", tool_id=self.id, function=name, error=e.message)
            return {"error": e.message}
        except Exception as e:
            error_msg = f"{type(e).__name__}: {str(e)}"
            logger.error(
                "tool_execution_failed",
                tool_id=self.id,
                function=name,
                error=error_msg,
                traceback=traceback.format_exc(),
            )
            return {"error": error_msg}

        logger.info(
            "tool_executed",
            tool_id=self.id,
            function=name,
            execution_time_ms=(time.perf_counter() - start_time) * 1000,
        )
        return result


class SingleTool(_ToolHandle):
    """A tool exposing exactly one function, named after the tool id."""

    kind = "single"

    def __init__(
        self,
        tool_id: str,
        description: str,
        func: Callable,
        parameters: Iterable[ToolParameter] = (),
        timeout: float | None = None,
    ):
        super().__init__(tool_id, timeout)
        self.description = description
        self.func = func
        self.parameters = list(parameters)

    def functions(self) -> list[ToolFunction]:
        return [
            ToolFunction(
                name=self.id,
                description=self.description,
                parameters=build_parameters_schema(self.parameters),
            )
        ]

    def _callable(self, name: str) -> Callable | None:
        return self.func if name == self.id else None


class MultiTool(_ToolHandle):
    """
    A named bundle of functions registered under a single tool id.

    Example:
        server = MultiTool("files")

        @server.function("read_file", "Read a text file", [ToolParameter(...)])
        def read_file(path: str) -> str:
            ...
    """

    kind = "multi"

    def __init__(self, tool_id: str, timeout: float | None = None):
        super().__init__(tool_id, timeout)
        self._functions: dict[str, tuple[ToolFunction, Callable]] = {}

    def add_function(
        self,
        name: str,
        description: str,
        func: Callable,
        parameters: Iterable[ToolParameter] = (),
    ) -> None:
        if name in self._functions:
            raise ValueError(f"Function '{name}' is already registered on tool '{self.id}'")
        spec = ToolFunction(name, description, build_parameters_schema(parameters))
        self._functions[name] = (spec, func)

    def function(
        self, name: str, description: str, parameters: Iterable[ToolParameter] = ()
    ) -> Callable:
        """Decorator form of add_function."""
        def decorator(func: Callable) -> Callable:
            self.add_function(name, description, func, parameters)
            return func
        return decorator

    def functions(self) -> list[ToolFunction]:
        return [spec for spec, _ in self._functions.values()]

    def _callable(self, name: str) -> Callable | None:
        entry = self._functions.get(name)
        return entry[1] if entry else None


ToolHandle = SingleTool | MultiTool


class MemoryTool(SingleTool):
    """Built-in short-term-memory access, scoped to one partition."""

    def __init__(self, store: MemoryStore, partition: str):
        self.store = store
        self.partition = partition
        super().__init__(
            MEMORY_TOOL_ID,
            "Retrieve information from short-term memory by id",
            self._retrieve,
            [ToolParameter(name="id", type="string", description="The id of the content to retrieve")],
        )

    def _retrieve(self, id: str) -> dict[str, Any]:
        item = self.store.retrieve(self.partition, id)
        if item is None:
            return {"error": f"No content found for '{id}'"}
        return {"title": item.title, "body": item.body}


class ToolCatalog:
    """
    Registry of available tools.

    Example:
        catalog = ToolCatalog()

        @catalog.register_tool("search_internet", "Search the web", [ToolParameter(...)])
        async def search_internet(query: str, maxResults: int = 8) -> dict:
            ...

        handles = catalog.resolve(["search_internet", "short_term_memory"])
    """

    def __init__(self, default_timeout: float | None = None):
        self._tools: dict[str, ToolHandle] = {}
        self.default_timeout = default_timeout

    def register(self, handle: ToolHandle) -> ToolHandle:
        """
        Register a tool handle.

        Raises:
            ValueError: If the id is already registered or reserved
        """
        if handle.id == MEMORY_TOOL_ID:
            raise ValueError(f"Tool id '{MEMORY_TOOL_ID}' is reserved")
        if handle.id in self._tools:
            raise ValueError(f"Tool '{handle.id}' is already registered")
        if handle.timeout is None:
            handle.timeout = self.default_timeout

        self._tools[handle.id] = handle
        logger.info(
            "tool_registered",
            tool_id=handle.id,
            kind=handle.kind,
            functions=[f.name for f in handle.functions()],
        )
        return handle

    def register_tool(
        self,
        tool_id: str,
        description: str,
        parameters: Iterable[ToolParameter] = (),
    ) -> Callable:
        """Decorator to register a plain (sync or async) function as a SingleTool."""
        def decorator(func: Callable) -> Callable:
            self.register(SingleTool(tool_id, description, func, parameters))
            return func
        return decorator

    def get(self, tool_id: str) -> ToolHandle | None:
        return self._tools.get(tool_id)

    def list_tools(self) -> list[str]:
        """Get list of registered tool ids."""
        return list(self._tools)

    def __contains__(self, tool_id: str) -> bool:
        return tool_id in self._tools

    def resolve(self, tool_ids: Iterable[str]) -> list[ToolHandle]:
        """
        Map tool ids to handles.

        Unknown ids are skipped with a warning; the reserved memory tool id is
        skipped silently since it is always bound separately.
        """
        handles: list[ToolHandle] = []
        for tool_id in tool_ids:
            handle = self._tools.get(tool_id)
            if handle is not None:
                handles.append(handle)
            elif tool_id != MEMORY_TOOL_ID:
                logger.warning("tool_not_found", tool_id=tool_id)
        return handles
