"""Tools command - List and inspect available tools."""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from wordplay.api.cli.logging_config import configure_logging
from wordplay.application.factory import AgentFactory
from wordplay.core.domain.agent import WordPlayAgent

app = typer.Typer(help="Tool management")
console = Console()


def _load_agent(ctx: typer.Context) -> WordPlayAgent:
    global_opts = ctx.obj or {}
    configure_logging(global_opts.get("debug", False))
    return asyncio.run(AgentFactory().create_agent(profile=global_opts.get("profile", "dev")))


@app.command("list")
def list_tools(ctx: typer.Context):
    """List available tools."""
    agent = _load_agent(ctx)

    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Parameters", style="dim")

    for name, description, parameters in agent.registry.list():
        table.add_row(name, description, ", ".join(parameters) or "-")

    console.print(table)


@app.command("inspect")
def inspect_tool(
    ctx: typer.Context,
    tool_name: str = typer.Argument(..., help="Tool name to inspect"),
):
    """Inspect tool details and parameters."""
    agent = _load_agent(ctx)

    if tool_name not in agent.registry:
        console.print(f"[red]Tool '{tool_name}' not found[/red]")
        raise typer.Exit(1)
    tool = agent.registry.get(tool_name)

    console.print(f"\n[bold cyan]{tool.name}[/bold cyan]")
    console.print(f"{tool.description}\n")

    console.print("[bold]Parameters:[/bold]")
    console.print_json(data=tool.parameters_schema)
