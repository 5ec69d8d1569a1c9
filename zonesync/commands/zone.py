"""Zone export, apply and listing commands."""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from zonesync.config import (
    CLIOptions,
    SyncSettings,
    load_credentials,
    load_zone,
    save_zone,
)
from zonesync.errors import ConfigError, ProviderError, ZoneSyncError
from zonesync.exporter import export_zone
from zonesync.models import to_desired
from zonesync.sync import SyncResult, Syncer

console = Console()

OUTPUT_FORMATS = ("yaml", "json")


def _credentials_path(ctx: typer.Context) -> Path | None:
    options = ctx.obj if isinstance(ctx.obj, CLIOptions) else CLIOptions()
    return options.credentials_path


def get_dns_provider(credentials_path: Path | None = None):
    """Get the OVH provider for the configured credentials."""
    from zonesync.providers.dns import OVHProvider

    try:
        credentials = load_credentials(credentials_path)
    except ConfigError as e:
        console.print(f"[red]✗[/red] Failed to load credentials: {e}")
        raise typer.Exit(1)

    return OVHProvider(
        application_key=credentials.application_key,
        application_secret=credentials.application_secret,
        consumer_key=credentials.consumer_key,
        endpoint=credentials.endpoint,
        timeout=credentials.timeout,
    )


def print_result(result: SyncResult, dry_run: bool = False) -> None:
    """Print the changes of a sync run and a count summary."""
    if result.has_changes():
        table = Table(title="Planned changes" if dry_run else "Applied changes")
        table.add_column("Action")
        table.add_column("Name")
        table.add_column("Type")
        table.add_column("Target")
        table.add_column("TTL")

        rows = [("[green]create[/green]", record) for record in result.created]
        rows += [("[yellow]update[/yellow]", record) for record in result.updated]
        rows += [("[red]delete[/red]", to_desired(remote)) for remote in result.deleted]

        for action, record in rows:
            table.add_row(
                action,
                record.name or "@",
                record.type,
                escape(record.target),
                str(record.ttl),
            )

        console.print(table)

    console.print(f"Summary: {result.summary()}")
    for error in result.errors:
        console.print(f"  [red]-[/red] {escape(str(error))}")


def export(
    ctx: typer.Context,
    domain: str = typer.Option(
        ..., "--domain", "-d", envvar="OVH_DOMAIN", help="Domain to export"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Output file (default: {domain}.yaml)"
    ),
    fmt: str = typer.Option("yaml", "--format", help="Output format: yaml or json"),
) -> None:
    """Export the DNS records of a domain to a zone file."""
    if fmt not in OUTPUT_FORMATS:
        console.print(f"[red]✗[/red] Unknown format: {fmt} (expected yaml or json)")
        raise typer.Exit(1)

    provider = get_dns_provider(_credentials_path(ctx))

    try:
        zone = export_zone(domain, provider)
    except ZoneSyncError as e:
        console.print(f"[red]✗[/red] Failed to export zone: {e}")
        raise typer.Exit(1)

    output = output or Path(f"{domain}.{fmt}")
    try:
        save_zone(zone, output, fmt=fmt)
    except ConfigError as e:
        console.print(f"[red]✗[/red] Failed to save configuration: {e}")
        raise typer.Exit(1)

    console.print(
        f"[green]✓[/green] Exported {len(zone.records)} DNS records for domain {domain} to {output}"
    )


def apply(
    ctx: typer.Context,
    config_file: Path = typer.Option(
        ..., "--config", "-f", envvar="OVH_CONFIG_PATH", help="Zone file to apply"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show changes without applying them"
    ),
) -> None:
    """Sync DNS records at OVH to a zone file (one-way)."""
    try:
        zone = load_zone(config_file)
    except ConfigError as e:
        console.print(f"[red]✗[/red] Failed to load configuration: {e}")
        raise typer.Exit(1)

    provider = get_dns_provider(_credentials_path(ctx))
    syncer = Syncer(provider, SyncSettings(dry_run=dry_run))

    console.print(f"[bold]Syncing {zone.domain}{' (dry run)' if dry_run else ''}...[/bold]")
    try:
        result = syncer.reconcile(zone)
    except ZoneSyncError as e:
        console.print(f"[red]✗[/red] Failed to sync zone: {e}")
        raise typer.Exit(1)

    print_result(result, dry_run=dry_run)

    if result.has_errors():
        console.print(f"[red]✗[/red] Sync completed with {len(result.errors)} errors")
        raise typer.Exit(1)

    if dry_run and result.has_changes():
        console.print("[yellow]Dry run completed.[/yellow] Run without --dry-run to apply changes.")
    elif result.has_changes():
        console.print("[green]✓[/green] DNS zone sync completed successfully")


def list_records(
    ctx: typer.Context,
    domain: str = typer.Option(
        ..., "--domain", "-d", envvar="OVH_DOMAIN", help="Domain to list"
    ),
) -> None:
    """List all DNS records of a domain."""
    provider = get_dns_provider(_credentials_path(ctx))

    console.print(f"[bold]DNS records for {domain}[/bold]")

    try:
        records = provider.fetch_records(domain)
    except ProviderError as e:
        console.print(f"[red]✗[/red] Failed to list records: {e}")
        raise typer.Exit(1)

    table = Table()
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Target")
    table.add_column("TTL")
    table.add_column("Priority")

    for record in records:
        table.add_row(
            str(record.id),
            record.sub_domain or "@",
            record.field_type,
            escape(record.target),
            str(record.ttl),
            "-" if record.priority is None else str(record.priority),
        )

    console.print(table)
