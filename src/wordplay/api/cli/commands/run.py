"""Run command - Send natural-language requests to the agent."""

import asyncio
import json
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from wordplay.api.cli.logging_config import configure_logging
from wordplay.application.executor import AgentExecutor

app = typer.Typer(help="Run agent requests")
console = Console()


@app.command("request")
def run_request(
    ctx: typer.Context,
    request: str = typer.Argument(..., help="What you want the agent to do"),
    autonomy: Optional[str] = typer.Option(
        None, "--autonomy", "-a", help="conservative, moderate or aggressive (default: profile setting)"
    ),
    profile: Optional[str] = typer.Option(
        None, "--profile", "-p", help="Configuration profile (overrides global --profile)"
    ),
    text: Optional[str] = typer.Option(
        None, "--text", "-t", help="Editor content to work on"
    ),
    max_seconds: Optional[float] = typer.Option(
        None, "--max-seconds", help="Wall-clock budget for this request"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw response as JSON"),
    debug: Optional[bool] = typer.Option(
        None, "--debug", help="Enable debug output (overrides global --debug)"
    ),
):
    """Execute one request through the autonomous loop.

    Examples:
        wordplay run request "Research the history of the printing press"

        wordplay run request "Make this more formal" --text "hey, thanks for the help"

        wordplay --debug run request "Analyze my writing style" -t "..." -a conservative
    """
    global_opts = ctx.obj or {}
    profile = profile or global_opts.get("profile", "dev")
    debug = debug if debug is not None else global_opts.get("debug", False)
    configure_logging(debug)

    context_update = None
    if text is not None:
        context_update = {
            "current_document": {"id": None, "title": "CLI document", "content": text},
            "editor_state": {"title": "CLI document", "content": text},
        }

    executor = AgentExecutor(profile=profile)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task("[>] Working...", total=None)
        response = asyncio.run(
            executor.handle(
                user_id=1,
                request=request,
                context_update=context_update,
                autonomy_level=autonomy,
                max_execution_seconds=max_seconds,
            )
        )

    if as_json:
        console.print_json(json.dumps(response.to_dict(), default=str))
        return

    console.print(Panel(Markdown(response.narrative), title="WordPlay", border_style="blue"))

    if response.tools_executed:
        table = Table(title="Tools Executed")
        table.add_column("Tool", style="cyan")
        table.add_column("Status")
        table.add_column("Message", style="white")
        table.add_column("Time (ms)", justify="right")
        for entry in response.tools_executed:
            status = "[green]ok[/green]" if entry["success"] else "[red]failed[/red]"
            table.add_row(
                entry["tool"],
                status,
                str(entry.get("message") or ""),
                f"{entry['execution_time_ms']:.0f}",
            )
        console.print(table)

    details = response.execution_details
    console.print(
        f"[dim]{details.successful_tools}/{details.tools_executed} tools succeeded "
        f"({details.success_rate:.0%}), stop reason: "
        f"{response.autonomous_execution.get('stop_reason', 'n/a')}[/dim]"
    )

    if response.suggested_actions:
        console.print("\n[bold]Suggested next steps:[/bold]")
        for action in response.suggested_actions:
            console.print(f"  - {action}")

    plan = response.continuous_operation_plan
    if plan is not None:
        console.print(f"\n[bold]Next phase:[/bold] {plan.next_phase} - {plan.description}")
