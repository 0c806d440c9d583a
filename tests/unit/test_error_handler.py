"""
Unit tests for error handling and logging helpers.
"""

import asyncio

import pytest
import structlog

from delve.utils.error_handler import ErrorHandler
from delve.utils.logging import run_context


def test_fallback_on_error():
    assert ErrorHandler.handle_with_fallback(lambda: 1 / 0, fallback=-1, error_msg="division_failed") == -1
    assert ErrorHandler.handle_with_fallback(lambda: 2, fallback=-1, error_msg="unused") == 2


def test_ignore_errors_passes_arguments():
    seen = []

    assert ErrorHandler.ignore_errors(seen.append, "status") is None
    assert seen == ["status"]


def test_ignore_errors_swallows():
    def broken(text):
        raise RuntimeError(text)

    assert ErrorHandler.ignore_errors(broken, "boom", error_msg="sink_failed") is None


def test_log_duration_reraises():
    with pytest.raises(ValueError):
        with ErrorHandler.log_duration("failing_block") as fields:
            fields["step"] = 1
            raise ValueError("inside")


@pytest.mark.asyncio
async def test_run_context_reaches_child_tasks():
    async def child():
        return structlog.contextvars.get_contextvars().get("partition")

    with run_context("p-1"):
        inside = await asyncio.create_task(child())

    assert inside == "p-1"
    assert "partition" not in structlog.contextvars.get_contextvars()
