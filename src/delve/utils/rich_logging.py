"""Console output with the Rich library"""

from typing import TYPE_CHECKING, Optional

import structlog
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme
from rich.traceback import install as install_rich_traceback

if TYPE_CHECKING:
    from ..core.catalog import AgentCatalog
    from ..core.config import DelveSettings
    from ..models.contracts import RunResult

DELVE_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "status": "magenta",
        "agent": "blue",
        "metric": "magenta",
    }
)


class DelveConsole:
    """Singleton console with delve branding and theme"""

    _instance: Optional["DelveConsole"] = None

    def __new__(cls) -> "DelveConsole":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "initialized"):
            self.console = Console(theme=DELVE_THEME)
            self.initialized = True

    def print_banner(self):
        """Print startup banner"""
        self.console.print(
            Panel.fit(
                "[bold cyan]delve[/bold cyan] - Agentic Research Orchestrator\n"
                "[dim]Plan • Search • Analyze • Write[/dim]",
                border_style="cyan",
            )
        )

    def print_config_summary(self, settings: "DelveSettings"):
        """Print settings summary table"""
        table = Table(title="Configuration", show_header=False, border_style="cyan")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="yellow")

        table.add_row("Model", settings.default_model)
        table.add_row("Decision Model", settings.decision_model or settings.default_model)
        table.add_row("Max Iterations", str(settings.max_iterations))
        table.add_row("Max Parallel", str(settings.max_parallel_execution))
        table.add_row("Quality Review", str(settings.quality_review))
        table.add_row(
            "Report Shape",
            f"{settings.breadth} sections × {settings.depth} queries × {settings.search_results} results",
        )
        if settings.fallback_models:
            table.add_row("Fallback Models", f"{len(settings.fallback_model_list())} configured")

        self.console.print(table)

    def print_agents(self, catalog: "AgentCatalog"):
        """Print the agent catalog as a table"""
        table = Table(title="Agents", show_header=True, border_style="cyan")
        table.add_column("Name", style="agent", no_wrap=True)
        table.add_column("Tools", style="yellow")
        table.add_column("Parameters", style="dim")
        table.add_column("Description")

        for agent in catalog:
            tools = ", ".join(agent.steps[0].tools) or "-"
            params = ", ".join(
                p.name if p.required else f"[{p.name}]" for p in agent.parameters
            )
            table.add_row(agent.name, tools, params, agent.description)

        self.console.print(table)

    def print_run_summary(self, result: "RunResult"):
        """Print outcome of a run"""
        table = Table(title="Run Summary", show_header=False, border_style="cyan")
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="yellow")

        style = "success" if result.succeeded else "error"
        table.add_row("Outcome", f"[{style}]{result.outcome}[/{style}]")
        table.add_row("Iterations", str(result.iterations))
        table.add_row("Status Updates", str(len(result.statuses)))
        if result.finished_at is not None:
            elapsed = (result.finished_at - result.started_at).total_seconds()
            table.add_row("Elapsed", f"{elapsed:.1f}s")

        self.console.print(table)

    def print_report(self, content: str):
        """Render the delivered report as markdown"""
        self.console.print(Markdown(content))

    def print_status(self, message: str):
        """Print a progress status line"""
        self.console.print(f"[status]…[/status] {message}")

    def print_success(self, message: str):
        self.console.print(f"[success]✓[/success] {message}")

    def print_error(self, message: str):
        self.console.print(f"[error]✗[/error] {message}")

    def print_warning(self, message: str):
        self.console.print(f"[warning]⚠[/warning] {message}")


# Global console instance
console = DelveConsole()


def setup_rich_logging() -> None:
    """
    Setup Rich traceback formatting for better error messages.

    Note: structlog configuration is handled separately in utils/logging.py.
    """
    install_rich_traceback(
        show_locals=False,
        width=120,
        extra_lines=3,
        theme="monokai",
        word_wrap=False,
        suppress=[structlog],
    )
