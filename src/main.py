"""
EvGroup command line interface.

Manage Azure Event Hub consumer groups declaratively: upsert them from options
or from CONSUMERGROUP_{N}_* environment declarations, refresh their state,
import existing groups by ARM ID and delete them idempotently.
"""

import json
import logging
import sys
from typing import NoReturn

import logfire
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from resources.cancellation import CancellationToken
from resources.errors import ResourceError
from resources.eventhub_consumer_group import EventHubConsumerGroupAdapter
from resources.factory import create_consumer_group_adapter
from resources.models import ConsumerGroupConfig, ConsumerGroupState
from utils.azure import probe_credentials
from utils.config import EvGroupConfig, LogfireConfig, load_config

__version__ = "0.1.0"

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
)
# The Azure SDK logs every HTTP request at INFO
logging.getLogger("azure").setLevel(logging.WARNING)
logging.getLogger("azure.core.pipeline.policies.http_logging_policy").setLevel(logging.WARNING)
logging.getLogger("azure.identity").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="evgroup",
    help="Declarative lifecycle management for Azure Event Hub consumer groups",
    no_args_is_help=True,
)


@app.callback()
def main() -> None:
    """EvGroup - Event Hub consumer group lifecycle adapter."""


def _initialize_logfire(logfire_config: LogfireConfig) -> None:
    """Configure Logfire tracing; failures only produce a warning."""
    if not logfire_config.enabled:
        logger.info("Logfire observability disabled")
        return

    try:
        logfire.configure(
            token=logfire_config.token,
            service_name=logfire_config.service_name,
            environment=logfire_config.environment,
            send_to_logfire=logfire_config.send_to_logfire,
            console=False,
        )
        logging.getLogger().addHandler(logfire.LogfireLoggingHandler())
        logging.getLogger().setLevel(logfire_config.log_level)
        logger.info(f"Logfire observability enabled for service {logfire_config.service_name}")
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _load(env_file: str | None) -> EvGroupConfig:
    try:
        config = load_config(env_file)
    except Exception as e:
        console.print(f"[red]❌ Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e
    _initialize_logfire(config.logfire)
    return config


def _build_adapter(config: EvGroupConfig) -> EventHubConsumerGroupAdapter:
    try:
        return create_consumer_group_adapter(config.azure)
    except ValueError as e:
        console.print(f"[red]❌ Configuration error: {escape(str(e))}[/red]")
        raise typer.Exit(1) from e


def _timeout(config: EvGroupConfig) -> float | None:
    return float(config.azure.operation_timeout_seconds) if config.azure else None


def _print_state(state: ConsumerGroupState, as_json: bool = False) -> None:
    if as_json:
        typer.echo(json.dumps(state.to_record(), indent=2))
        return

    table = Table(title=f"Consumer Group {state.name}")
    table.add_column("Attribute", style="cyan")
    table.add_column("Value", style="green")
    for key, value in state.to_record().items():
        table.add_row(key, escape(value) if value else "-")
    console.print(table)


def _fail(message: str, exc: BaseException) -> NoReturn:
    console.print(f"[red]❌ {message}: {escape(str(exc))}[/red]")
    raise typer.Exit(1) from exc


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]EvGroup v{__version__}[/bold]")
    console.print("Event Hub consumer group lifecycle adapter")
    console.print("Backed by the Azure Event Hubs management API")


@app.command("check-credentials")
def check_credentials() -> None:
    """Check which Azure credentials can reach the management API."""
    console.print("[bold]🔐 Checking Available Azure Credentials[/bold]")

    table = Table()
    table.add_column("Credential", style="cyan")
    table.add_column("Available")
    table.add_column("Detail")
    results = probe_credentials()
    for name, available, detail in results:
        table.add_row(name, "[green]yes[/green]" if available else "[red]no[/red]", detail)
    console.print(table)

    if not any(available for _, available, _ in results):
        console.print(
            "[yellow]No credential could acquire a management token. "
            "Run 'az login' or set AZURE_CLIENT_ID/AZURE_TENANT_ID/AZURE_CLIENT_SECRET.[/yellow]"
        )


@app.command("validate-config")
def validate_config(
    env_file: str | None = typer.Option(None, "--env-file", "-e", help="Path to .env file"),
) -> None:
    """Validate configuration and list declared consumer groups."""
    config = _load(env_file)
    results = config.validate_configuration()

    table = Table(title="Configuration Summary")
    table.add_column("Key", style="cyan")
    table.add_column("Consumer Group")
    table.add_column("Namespace")
    table.add_column("Event Hub")
    table.add_column("Resource Group")
    for key, group in config.consumer_groups.items():
        table.add_row(
            key, group.name, group.namespace_name, group.eventhub_name, group.resource_group_name
        )
    console.print(table)
    console.print(f"Azure configured: {'yes' if results['azure_configured'] else 'no'}")

    if results["errors"]:
        console.print("[red]❌ Configuration has errors:[/red]")
        for error in results["errors"]:
            console.print(f"  - {error}")
    else:
        console.print("[green]✅ Configuration is valid[/green]")

    if results["warnings"]:
        console.print("[yellow]Warnings:[/yellow]")
        for warning in results["warnings"]:
            console.print(f"  - {warning}")


@app.command()
def apply(
    name: str | None = typer.Option(None, "--name", help="Consumer group name"),
    namespace: str | None = typer.Option(None, "--namespace", help="Event Hubs namespace name"),
    eventhub: str | None = typer.Option(None, "--eventhub", help="Event Hub name"),
    resource_group: str | None = typer.Option(None, "--resource-group", help="Resource group"),
    user_metadata: str | None = typer.Option(None, "--user-metadata", help="User metadata"),
    env_file: str | None = typer.Option(None, "--env-file", "-e", help="Path to .env file"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be applied"),
    as_json: bool = typer.Option(False, "--json", help="Print resulting state as JSON"),
) -> None:
    """Create or update consumer groups (one from options, or all declared)."""
    config = _load(env_file)

    if name:
        attributes = {
            "name": name,
            "namespace_name": namespace or config.eventhub_namespace,
            "eventhub_name": eventhub,
            "resource_group_name": resource_group or config.resource_group,
            "user_metadata": user_metadata,
        }
        try:
            groups = {"cli": ConsumerGroupConfig.from_attributes(attributes)}
        except ResourceError as e:
            _fail("Invalid consumer group", e)
    else:
        groups = dict(config.consumer_groups)

    if not groups:
        console.print("[yellow]Nothing to apply: no consumer groups declared[/yellow]")
        raise typer.Exit(1)

    if dry_run:
        console.print("[bold yellow]DRY RUN MODE[/bold yellow] - no changes will be made")
        for key, group in groups.items():
            console.print(
                f"  {key}: upsert {group.resource_group_name}/{group.namespace_name}/"
                f"{group.eventhub_name}/{group.name}"
            )
        return

    adapter = _build_adapter(config)
    for key, group in groups.items():
        # The operation timeout bounds each group, not the whole run
        token = CancellationToken(timeout_seconds=_timeout(config))
        try:
            state = adapter.create_or_update(group, token)
        except KeyboardInterrupt as e:
            token.cancel("interrupted by user")
            _fail("Cancelled", e)
        except ResourceError as e:
            _fail(f"Failed to apply {key}", e)
        console.print(f"[green]✅ Applied {key}[/green]")
        _print_state(state, as_json)


@app.command()
def show(
    identifier: str = typer.Argument(..., help="ARM ID of the consumer group"),
    env_file: str | None = typer.Option(None, "--env-file", "-e", help="Path to .env file"),
    as_json: bool = typer.Option(False, "--json", help="Print state as JSON"),
) -> None:
    """Read a consumer group's current state."""
    config = _load(env_file)
    adapter = _build_adapter(config)
    token = CancellationToken(timeout_seconds=_timeout(config))

    try:
        state = adapter.read(identifier, token)
    except KeyboardInterrupt as e:
        token.cancel("interrupted by user")
        _fail("Cancelled", e)
    except ResourceError as e:
        _fail("Read failed", e)

    if state is None:
        console.print(f"[yellow]Consumer group is absent: {identifier}[/yellow]")
        return
    _print_state(state, as_json)


@app.command()
def delete(
    identifier: str = typer.Argument(..., help="ARM ID of the consumer group"),
    env_file: str | None = typer.Option(None, "--env-file", "-e", help="Path to .env file"),
) -> None:
    """Delete a consumer group (absent groups count as deleted)."""
    config = _load(env_file)
    adapter = _build_adapter(config)
    token = CancellationToken(timeout_seconds=_timeout(config))

    try:
        adapter.delete(identifier, token)
    except KeyboardInterrupt as e:
        token.cancel("interrupted by user")
        _fail("Cancelled", e)
    except ResourceError as e:
        _fail("Delete failed", e)
    console.print(f"[green]✅ Deleted {identifier}[/green]")


@app.command("import")
def import_group(
    identifier: str = typer.Argument(..., help="ARM ID of an existing consumer group"),
    env_file: str | None = typer.Option(None, "--env-file", "-e", help="Path to .env file"),
    as_json: bool = typer.Option(False, "--json", help="Print state as JSON"),
) -> None:
    """Adopt an existing consumer group by its ARM ID."""
    config = _load(env_file)
    adapter = _build_adapter(config)
    token = CancellationToken(timeout_seconds=_timeout(config))

    try:
        imported = adapter.import_state(identifier)
        state = adapter.read(imported.id, token)
    except KeyboardInterrupt as e:
        token.cancel("interrupted by user")
        _fail("Cancelled", e)
    except ResourceError as e:
        _fail("Import failed", e)

    if state is None:
        console.print(f"[red]❌ Cannot import non-existent consumer group: {identifier}[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Imported {state.name}[/green]")
    _print_state(state, as_json)


def cli_main() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    sys.exit(cli_main())
