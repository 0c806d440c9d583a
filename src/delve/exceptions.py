"""Exception classes with rich context"""

from datetime import datetime
from typing import Any

CANNOT_CONTINUE_MESSAGE = "I am sorry, I could not continue with your request."


class DelveError(Exception):
    """Base exception with context and metadata"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        recoverable: bool = False,
        user_message: str | None = None,
    ):
        """
        Initialize exception with context.

        Args:
            message: Technical error message for logs
            details: Additional context (dict for structured logging)
            recoverable: Whether the run can continue past this error
            user_message: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.user_message = user_message or message
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        parts = [self.message]

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({details_str})")

        if self.recoverable:
            parts.append("[recoverable]")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
            "user_message": self.user_message,
            "timestamp": self.timestamp.isoformat(),
        }


class LLMError(DelveError):
    """LLM API errors"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
    ):
        if status_code == 429:
            user_message = "API rate limit exceeded. Please try again in a moment."
        elif status_code == 401:
            user_message = "API authentication failed. Please check your API key."
        elif status_code == 503:
            user_message = "Service temporarily unavailable. Please try again."
        else:
            user_message = "An error occurred while calling the LLM API."

        super().__init__(
            message=message,
            details=details or {},
            recoverable=status_code == 429,
            user_message=user_message,
        )
        self.status_code = status_code


class DecisionError(DelveError):
    """The decision model failed or its reply is not a usable Decision.

    Always fatal to the run.
    """

    def __init__(self, message: str, raw_content: Any = None, details: dict[str, Any] | None = None):
        details = details or {}
        if raw_content is not None:
            details["raw_content"] = str(raw_content)[:500]

        super().__init__(
            message=message,
            details=details,
            recoverable=False,
            user_message=CANNOT_CONTINUE_MESSAGE,
        )
        self.raw_content = raw_content


class ToolExecutionError(DelveError):
    """Tool execution errors"""

    def __init__(
        self,
        message: str,
        tool_id: str,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["tool_id"] = tool_id

        super().__init__(
            message=message,
            details=details,
            recoverable=True,
            user_message=f"Tool '{tool_id}' execution failed.",
        )
        self.tool_id = tool_id


class ToolAbortedError(DelveError):
    """A tool call was denied by an external authority (e.g. a human approval gate)."""

    def __init__(self, tool_name: str, params: dict[str, Any] | None = None, reason: str | None = None):
        super().__init__(
            message=f"Tool '{tool_name}' was denied",
            details={"tool_name": tool_name, "reason": reason},
            recoverable=True,
            user_message=f"Execution of '{tool_name}' was blocked.",
        )
        self.tool_name = tool_name
        self.params = params or {}
        self.reason = reason


class ConfigurationError(DelveError):
    """Configuration validation errors"""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(
            message=message,
            details=details,
            recoverable=False,
            user_message=f"Configuration error: {message}",
        )
        self.field = field
        self.value = value
