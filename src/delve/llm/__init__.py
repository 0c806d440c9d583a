"""
LLM integration: LiteLLM client, quality evaluator, status reporting and prompt helpers.
"""

from .client import LLMClient
from .evaluator import QualityEvaluator
from .prompts import parse_json, render_template, system_instructions
from .status import ConsoleProgressSink, ListProgressSink, ProgressSink, StatusReporter

__all__ = [
    "LLMClient",
    "QualityEvaluator",
    "StatusReporter",
    "ProgressSink",
    "ListProgressSink",
    "ConsoleProgressSink",
    "render_template",
    "system_instructions",
    "parse_json",
]
