"""WordPlay CLI entry point."""

import typer
from rich.console import Console

from wordplay.api.cli.commands import run, tools
from wordplay.application.config import DEFAULT_PROFILE

app = typer.Typer(
    name="wordplay",
    help="WordPlay - Autonomous writing assistant agent",
    add_completion=True,
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(run.app, name="run", help="Run agent requests")
app.add_typer(tools.app, name="tools", help="Tool management")


@app.callback()
def main(
    ctx: typer.Context,
    profile: str = typer.Option(DEFAULT_PROFILE, "--profile", "-p", help="Configuration profile"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """WordPlay Agent CLI."""
    ctx.obj = {"profile": profile, "debug": debug}


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8070, "--port", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Start the HTTP API server."""
    import uvicorn

    console.print(f"[bold blue]WordPlay API[/bold blue] on http://{host}:{port}/docs")
    uvicorn.run("wordplay.api.server:app", host=host, port=port, reload=reload)


@app.command()
def version():
    """Show WordPlay version."""
    from wordplay import __version__

    console.print(f"[bold blue]WordPlay[/bold blue] version [cyan]{__version__}[/cyan]")


if __name__ == "__main__":
    app()
