"""
LLM Client Wrapper - Unified async interface to LiteLLM.

Provides a consistent API for calling different LLM providers through LiteLLM,
with support for structured output, a tool-call loop, stream events, retries
and fallback models.
"""

import json
import time
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any

import litellm
from pydantic import BaseModel, ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import LLMError, ToolAbortedError
from ..models.contracts import LLMResponse, StreamEvent
from ..utils.error_handler import ErrorHandler
from ..utils.logging import get_logger
from .prompts import parse_json

if TYPE_CHECKING:
    from ..core.config import DelveSettings
    from ..core.tools import ToolHandle

logger = get_logger(__name__)

TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    TimeoutError,
    ConnectionError,
    litellm.exceptions.Timeout,
    litellm.exceptions.APIConnectionError,
    litellm.exceptions.RateLimitError,
    litellm.exceptions.ServiceUnavailableError,
)

StreamCallback = Callable[[StreamEvent], None]


def _emit(callback: StreamCallback | None, event: StreamEvent) -> None:
    if callback is None:
        return
    ErrorHandler.ignore_errors(callback, event, error_msg="stream_callback_failed")


def _tool_message_content(result: Any) -> str:
    if isinstance(result, str):
        return result
    return json.dumps(result, default=str)


class LLMClient:
    """
    Unified LLM client using LiteLLM for multi-provider support.

    Example:
        client = LLMClient(default_model="openai/gpt-4o-mini")

        response = await client.complete(
            messages=[{"role": "user", "content": "Hello"}],
            response_schema=Decision,
        )
    """

    def __init__(
        self,
        default_model: str = "openai/gpt-4o-mini",
        fallback_models: list[str] | None = None,
        max_retries: int = 3,
        timeout: int = 120,
        max_tool_rounds: int = 8,
    ):
        """
        Initialize LLM client.

        Args:
            default_model: Default model to use (LiteLLM format: "provider/model")
            fallback_models: List of fallback models if primary fails
            max_retries: Maximum attempts on transient failures
            timeout: Request timeout in seconds
            max_tool_rounds: Maximum tool-call rounds per completion
        """
        self.default_model = default_model
        self.fallback_models = fallback_models or []
        self.max_retries = max_retries
        self.timeout = timeout
        self.max_tool_rounds = max_tool_rounds

    @classmethod
    def from_settings(cls, settings: "DelveSettings") -> "LLMClient":
        return cls(
            default_model=settings.default_model,
            fallback_models=settings.fallback_model_list(),
            max_retries=settings.llm_max_retries,
            timeout=settings.llm_timeout,
            max_tool_rounds=settings.max_tool_rounds,
        )

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str | None = None,
        response_schema: type[BaseModel] | None = None,
        tools: Sequence["ToolHandle"] | None = None,
        callback: StreamCallback | None = None,
        temperature: float = 0.7,
    ) -> LLMResponse:
        """
        Call the model, running any tool calls it requests.

        Args:
            messages: Chat messages
            model: Optional model override
            response_schema: Optional Pydantic model for structured output
            tools: Tool handles the model may call
            callback: Receives StreamEvents (tool calls, abortions, usage, content)
            temperature: Sampling temperature

        Returns:
            LLMResponse; ``content`` is a model instance when a schema is given

        Raises:
            LLMError: If the primary model and every fallback fail
        """
        model = model or self.default_model
        candidates = [model]
        if model == self.default_model:
            candidates += [m for m in self.fallback_models if m != model]

        last_error: Exception | None = None
        for candidate in candidates:
            try:
                return await self._complete_with(
                    candidate, messages, response_schema, tools or (), callback, temperature
                )
            except Exception as e:
                last_error = e
                logger.warning(
                    "llm_completion_failed",
                    model=candidate,
                    error=str(e),
                    error_type=type(e).__name__,
                )

        if isinstance(last_error, LLMError):
            raise last_error
        raise LLMError(
            f"LLM completion failed: {last_error}",
            details={
                "model": model,
                "error_type": type(last_error).__name__,
                "fallbacks_tried": candidates[1:],
            },
            status_code=getattr(last_error, "status_code", None),
        ) from last_error

    async def _acompletion(self, **kwargs: Any) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        ):
            with attempt:
                return await litellm.acompletion(**kwargs)

    async def _complete_with(
        self,
        model: str,
        messages: list[dict[str, Any]],
        response_schema: type[BaseModel] | None,
        tools: Sequence["ToolHandle"],
        callback: StreamCallback | None,
        temperature: float,
    ) -> LLMResponse:
        start_time = time.perf_counter()
        conversation = list(messages)

        handles: dict[str, "ToolHandle"] = {}
        tool_specs: list[dict[str, Any]] = []
        for handle in tools:
            for function in handle.functions():
                handles[function.name] = handle
                tool_specs.append(function.to_openai())

        input_tokens = 0
        output_tokens = 0
        executed_calls: list[dict[str, Any]] = []

        for round_number in range(self.max_tool_rounds + 1):
            completion_kwargs: dict[str, Any] = {
                "model": model,
                "messages": conversation,
                "timeout": self.timeout,
                "temperature": temperature,
            }
            offer_tools = bool(tool_specs) and round_number < self.max_tool_rounds
            if offer_tools:
                completion_kwargs["tools"] = tool_specs
            if response_schema is not None:
                completion_kwargs["response_format"] = {
                    "type": "json_schema",
                    "json_schema": {
                        "name": response_schema.__name__,
                        "schema": response_schema.model_json_schema(),
                    },
                }

            response = await self._acompletion(**completion_kwargs)

            usage = getattr(response, "usage", None)
            if usage:
                input_tokens += usage.prompt_tokens or 0
                output_tokens += usage.completion_tokens or 0
                _emit(
                    callback,
                    StreamEvent(
                        type="usage",
                        usage={
                            "input_tokens": usage.prompt_tokens or 0,
                            "output_tokens": usage.completion_tokens or 0,
                        },
                    ),
                )

            choice = response.choices[0]
            message = choice.message
            tool_calls = getattr(message, "tool_calls", None)

            if tool_calls and offer_tools:
                conversation.append(
                    {
                        "role": "assistant",
                        "content": message.content,
                        "tool_calls": [
                            {
                                "id": tc.id,
                                "type": "function",
                                "function": {
                                    "name": tc.function.name,
                                    "arguments": tc.function.arguments,
                                },
                            }
                            for tc in tool_calls
                        ],
                    }
                )
                for tc in tool_calls:
                    result = await self._run_tool_call(tc, handles, callback)
                    executed_calls.append({"id": tc.id, "name": tc.function.name, "result": result})
                    conversation.append(
                        {
                            "role": "tool",
                            "tool_call_id": tc.id,
                            "name": tc.function.name,
                            "content": _tool_message_content(result),
                        }
                    )
                continue

            content = message.content or ""
            _emit(callback, StreamEvent(type="content", text=content))

            parsed: Any = content
            if response_schema is not None:
                try:
                    parsed = response_schema.model_validate(parse_json(content))
                except (ValueError, ValidationError) as e:
                    raise LLMError(
                        f"Failed to parse response into {response_schema.__name__}: {e}",
                        details={"raw_content": content[:500], "model": model},
                    ) from e

            latency_ms = (time.perf_counter() - start_time) * 1000
            logger.debug(
                "llm_completion_finished",
                model=model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                latency_ms=round(latency_ms, 1),
                tool_calls=len(executed_calls),
            )
            return LLMResponse(
                content=parsed,
                model=model,
                input_tokens=input_tokens,
                output_tokens=output_tokens,
                latency_ms=latency_ms,
                finish_reason=choice.finish_reason,
                tool_calls=executed_calls,
            )

        raise LLMError("Tool-call loop ended without a final answer", details={"model": model})

    async def _run_tool_call(
        self,
        tool_call: Any,
        handles: dict[str, "ToolHandle"],
        callback: StreamCallback | None,
    ) -> Any:
        name = tool_call.function.name
        try:
            args = json.loads(tool_call.function.arguments or "{}")
        except json.JSONDecodeError:
            logger.warning("tool_arguments_invalid", tool=name, arguments=tool_call.function.arguments)
            args = {}

        _emit(callback, StreamEvent(type="tool", name=name, params=args, done=False))

        handle = handles.get(name)
        if handle is None:
            result: Any = {"error": f"Unknown tool '{name}'"}
        else:
            try:
                result = await handle.invoke(name, args)
            except ToolAbortedError as e:
                _emit(
                    callback,
                    StreamEvent(type="tool_abort", name=name, params=e.params or args, reason=e.reason),
                )
                return {"error": f"Tool call '{name}' was denied: {e.reason or 'User denied'}"}

        _emit(callback, StreamEvent(type="tool", name=name, params=args, result=result, done=True))
        return result
