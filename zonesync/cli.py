"""CLI entry point for zonesync."""

from pathlib import Path

import typer
from rich.console import Console

from zonesync import __version__
from zonesync.commands import zone
from zonesync.config import DEFAULT_CREDENTIALS_FILE, CLIOptions
from zonesync.log import configure_logging

app = typer.Typer(
    name="zonesync",
    help="Manage OVH DNS zones via YAML configuration.",
    no_args_is_help=True,
)
console = Console()


@app.command()
def version() -> None:
    """Show the zonesync version."""
    console.print(f"zonesync v{__version__}")


@app.callback()
def main(
    ctx: typer.Context,
    credentials: Path = typer.Option(
        Path(DEFAULT_CREDENTIALS_FILE),
        "--credentials",
        "-c",
        envvar="OVH_CREDENTIALS_PATH",
        help="OVH credentials file",
    ),
    log_level: str = typer.Option(
        "INFO", "--log-level", envvar="ZONESYNC_LOG_LEVEL", help="Log level"
    ),
) -> None:
    """zonesync - export and apply OVH DNS zones from YAML files."""
    configure_logging(log_level)
    ctx.obj = CLIOptions(credentials_path=credentials)


# Zone commands live at the root level
app.command(name="export")(zone.export)
app.command(name="apply")(zone.apply)
app.command(name="list")(zone.list_records)

if __name__ == "__main__":
    app()
