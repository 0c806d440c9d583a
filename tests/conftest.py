"""
Pytest configuration and shared fixtures.
"""

import os

import pytest

from delve.agents import DEFAULT_AGENTS
from delve.core.catalog import AgentCatalog
from delve.core.config import DelveSettings, reset_settings
from delve.core.memory import MemoryStore
from delve.core.tools import ToolCatalog
from delve.llm.status import ListProgressSink, StatusReporter
from delve.models.contracts import CompletionOptions
from delve.models.enums import QualityVerdict

from tests.fakes import StubEvaluator


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from DELVE_* variables and the global settings cache."""
    for key in list(os.environ):
        if key.startswith("DELVE_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("DELVE_ENABLE_RICH_CONSOLE", "false")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def settings():
    return DelveSettings(enable_rich_console=False)


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def partition():
    return "test-partition"


@pytest.fixture
def agent_catalog():
    return AgentCatalog(DEFAULT_AGENTS)


@pytest.fixture
def tool_catalog():
    """ToolCatalog with a simulated search tool."""
    catalog = ToolCatalog()

    @catalog.register_tool("search_internet", "Search the web")
    def search_internet(query: str, maxResults: int = 8) -> dict:
        return {
            "results": [
                {"title": f"{query} {i}", "url": f"https://example.com/{i}", "content": "text"}
                for i in range(2)
            ]
        }

    return catalog


@pytest.fixture
def options():
    return CompletionOptions(model="openai/gpt-4o-mini")


@pytest.fixture
def progress_sink():
    return ListProgressSink()


@pytest.fixture
def status_reporter(progress_sink):
    return StatusReporter(progress_sink)


@pytest.fixture
def passing_evaluator():
    return StubEvaluator(QualityVerdict.PASS)


@pytest.fixture
def failing_evaluator():
    return StubEvaluator(QualityVerdict.FAIL, feedback="Too shallow")


@pytest.fixture
def mock_litellm_response(mocker):
    """Mock LiteLLM API response"""
    mock_response = mocker.Mock()
    mock_response.choices = [mocker.Mock()]
    mock_response.choices[0].message.content = "Mocked response"
    mock_response.choices[0].message.tool_calls = None
    mock_response.choices[0].finish_reason = "stop"
    mock_response.usage.prompt_tokens = 1000
    mock_response.usage.completion_tokens = 50
    return mock_response
