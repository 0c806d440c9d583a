"""
Basic usage example for delve.

Runs one research request end to end: plan -> search -> write -> deliver.
Requires an API key for the configured model (e.g. OPENAI_API_KEY).
"""

import asyncio

from delve import CompletionOptions, DeepResearchLoop, LLMClient, ToolCatalog
from delve.core.config import get_settings
from delve.llm.status import ConsoleProgressSink, StatusReporter
from delve.models.contracts import StreamEvent
from delve.tools import register_example_tools


def on_event(event: StreamEvent) -> None:
    """Print tool activity as it happens."""
    if event.type == "tool" and not event.done:
        print(f"  🔧 {event.name}({event.params})")
    elif event.type == "tool_abort":
        print(f"  ⛔ {event.name} denied: {event.reason or 'User denied'}")


async def main():
    print("🚀 delve - Agentic Deep Research Demo\n")

    settings = get_settings()
    client = LLMClient.from_settings(settings)

    # ========================================================================
    # Tools: simulated web search so the demo needs no search API
    # ========================================================================
    tools = ToolCatalog(default_timeout=settings.tool_timeout)
    register_example_tools(tools)
    print(f"📋 Registered tools: {', '.join(tools.list_tools())}")

    # ========================================================================
    # Run the decision loop
    # ========================================================================
    loop = DeepResearchLoop(
        client,
        tools=tools,
        status=StatusReporter(ConsoleProgressSink()),
        settings=settings,
    )
    options = settings.completion_options(breadth=2, depth=1, max_iterations=15)
    options = CompletionOptions(**{**options.model_dump(), "callback": on_event})

    result = await loop.run("What are the practical applications of quantum computing today?", options)

    # ========================================================================
    # Summary
    # ========================================================================
    print("\n" + "=" * 50)
    print("📊 SUMMARY")
    print("=" * 50)
    print(f"Outcome: {result.outcome}")
    print(f"Iterations: {result.iterations}")
    print(f"Status updates: {len(result.statuses)}")

    print("\n📄 Report:")
    print("-" * 50)
    print(result.content)


if __name__ == "__main__":
    asyncio.run(main())
