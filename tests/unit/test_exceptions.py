"""
Unit tests for the exception hierarchy.
"""

from delve.exceptions import (
    ConfigurationError,
    DecisionError,
    DelveError,
    LLMError,
    ToolAbortedError,
    ToolExecutionError,
)


def test_base_error_str_and_dict():
    error = DelveError("boom", details={"a": 1}, recoverable=True)

    assert str(error) == "boom (a=1) [recoverable]"
    data = error.to_dict()
    assert data["error_type"] == "DelveError"
    assert data["user_message"] == "boom"


def test_llm_error_user_messages():
    assert LLMError("x", status_code=429).recoverable
    assert "rate limit" in LLMError("x", status_code=429).user_message
    assert "authentication" in LLMError("x", status_code=401).user_message
    assert not LLMError("x").recoverable


def test_decision_error_is_fatal():
    error = DecisionError("bad reply", raw_content="x" * 600)

    assert not error.recoverable
    assert len(error.details["raw_content"]) == 500
    assert error.user_message == "I am sorry, I could not continue with your request."


def test_tool_errors():
    aborted = ToolAbortedError("run_python_code", {"code": "1"}, reason="denied")
    failed = ToolExecutionError("failed", tool_id="search_internet")

    assert aborted.params == {"code": "1"}
    assert aborted.reason == "denied"
    assert isinstance(aborted, DelveError)
    assert failed.details["tool_id"] == "search_internet"


def test_configuration_error():
    error = ConfigurationError("bad value", field="breadth", value=0)

    assert error.details == {"field": "breadth", "value": 0}
    assert error.user_message == "Configuration error: bad value"
