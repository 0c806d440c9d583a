"""
Command-line interface for delve.

Provides commands for running research, inspecting agents and managing configuration.
"""

import asyncio
import signal
import sys
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.table import Table

from . import __version__
from .exceptions import ConfigurationError
from .models.contracts import RunResult
from .models.enums import QualityReview, RunOutcome
from .utils.rich_logging import console as delve_console

app = typer.Typer(
    name="delve",
    help="Agentic deep-research orchestrator",
    add_completion=False,
)

console = delve_console.console


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]delve[/bold cyan] version {__version__}")
    console.print("Agentic deep-research orchestrator")


@app.command()
def run(
    query: str = typer.Argument(..., help="Research request"),
    model: Optional[str] = typer.Option(None, "--model", help="Override the sub-agent model"),
    decision_model: Optional[str] = typer.Option(
        None, "--decision-model", help="Override the decision-loop model"
    ),
    breadth: Optional[int] = typer.Option(None, "--breadth", min=1, help="Number of report sections"),
    depth: Optional[int] = typer.Option(None, "--depth", min=1, help="Search queries per section"),
    max_iterations: Optional[int] = typer.Option(
        None, "--max-iterations", min=1, help="Iteration ceiling of the decision loop"
    ),
    parallel: Optional[int] = typer.Option(
        None, "--parallel", min=1, help="Maximum concurrent sub-agent invocations"
    ),
    quality_review: Optional[QualityReview] = typer.Option(
        None, "--quality-review", help="Quality gate mode"
    ),
    example_tools: bool = typer.Option(
        False, "--example-tools", help="Register the simulated web tools"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write the final report to this file"
    ),
):
    """
    Run a research request and print the report.

    Press Ctrl-C once to stop after the current iteration.
    """
    from .core.config import get_settings
    from .core.orchestrator import DeepResearchLoop
    from .core.tools import ToolCatalog
    from .llm.client import LLMClient
    from .llm.status import ConsoleProgressSink, StatusReporter
    from .tools import register_example_tools
    from .utils.logging import setup_logging

    settings = get_settings()
    setup_logging(settings)

    if settings.enable_rich_console:
        delve_console.print_banner()
        delve_console.print_config_summary(settings)

    client = LLMClient.from_settings(settings)
    tools = ToolCatalog(default_timeout=settings.tool_timeout)
    if example_tools:
        register_example_tools(tools)

    status = StatusReporter(
        ConsoleProgressSink(),
        client=client,
        model=settings.default_model,
        rephrase=settings.llm_status_updates,
    )
    loop = DeepResearchLoop(client, tools=tools, status=status, settings=settings)

    try:
        options = settings.completion_options(
            model=model,
            decision_model=decision_model,
            breadth=breadth,
            depth=depth,
            max_iterations=max_iterations,
            max_parallel_execution=parallel,
            quality_review=quality_review,
        )
    except ValidationError as e:
        delve_console.print_error(f"Invalid options: {e}")
        sys.exit(2)

    async def _run() -> RunResult:
        cancel_event = asyncio.Event()
        try:
            asyncio.get_running_loop().add_signal_handler(signal.SIGINT, cancel_event.set)
        except NotImplementedError:
            pass
        return await loop.run(query, options, cancel_event)

    result = asyncio.run(_run())

    if result.content:
        delve_console.print_report(result.content)
    delve_console.print_run_summary(result)

    if output is not None and result.content:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.content, encoding="utf-8")
        delve_console.print_success(f"Report written to {output}")

    if result.outcome == RunOutcome.ERROR:
        sys.exit(1)


@app.command()
def agents():
    """List the research agents available to the decision loop."""
    from .agents import DEFAULT_AGENTS
    from .core.catalog import AgentCatalog

    delve_console.print_agents(AgentCatalog(DEFAULT_AGENTS))


# Configuration management subcommand group
config_app = typer.Typer(help="Configuration management commands")
app.add_typer(config_app, name="config")


@config_app.command("export")
def config_export(
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path (default: .delve/config.yaml)"
    ),
    only_changed: bool = typer.Option(
        False, "--only-changed", help="Write only values that differ from the defaults"
    ),
):
    """Export current configuration to YAML file."""
    from .core.config import get_settings
    from .utils.config_export import export_config

    try:
        output_path = export_config(get_settings(), output, only_changed=only_changed)
        console.print(f"[bold green]✓[/bold green] Configuration exported to: {output_path}")
    except OSError as e:
        console.print(f"[bold red]✗[/bold red] Export failed: {e}")
        sys.exit(1)


@config_app.command("load")
def config_load(
    config_file: Path = typer.Argument(..., help="Path to configuration YAML file"),
):
    """
    Load and validate configuration from YAML file.

    To actually use this config, set it as your environment or .env file.
    """
    from .utils.config_export import import_config

    try:
        settings = import_config(config_file)
    except FileNotFoundError as e:
        console.print(f"[bold red]✗[/bold red] {e}")
        sys.exit(1)
    except ConfigurationError as e:
        console.print(f"[bold red]✗[/bold red] {e.user_message}")
        sys.exit(1)
    except yaml.YAMLError as e:
        console.print(f"[bold red]✗[/bold red] Invalid configuration file: {e}")
        sys.exit(1)

    console.print(f"[bold green]✓[/bold green] Configuration loaded from: {config_file}")
    delve_console.print_config_summary(settings)


@config_app.command("show")
def config_show():
    """Display current configuration settings."""
    from .core.config import get_settings

    try:
        settings = get_settings()
    except ValidationError as e:
        console.print(f"[bold red]✗[/bold red] Failed to load config: {e}")
        sys.exit(1)

    table = Table(title="Active Settings")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="yellow")

    for key, value in sorted(settings.model_dump(exclude_none=True).items()):
        table.add_row(key, str(value))

    console.print(table)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
