"""Command-line interface for the Chainlaunch reconciler."""

import asyncio
from pathlib import Path

import structlog
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .api.client import ChainlaunchClient
from .config import ReconcilerConfig, load_config
from .constants import FABRIC_JOIN_NODE, PLATFORM_FABRIC
from .core.controller import FabricJoinNodeController
from .core.resolver import ChainlaunchLookups
from .models.state import JoinNodeSpec, JoinNodeState, NodeRole
from .observability import configure_logging
from .persistence import StateStore
from .utils.exceptions import ReconcilerError, UnsupportedOperationError

app = typer.Typer(
    name="chainlaunch-reconcile",
    help="Chainlaunch reconciler - declarative lifecycle for Fabric channel membership",
    add_completion=False,
)

console = Console()
logger = structlog.get_logger(__name__)

DEFAULT_STATE_DB = Path(".chainlaunch/state.db")

ConfigOption = typer.Option(None, "--config", "-c", help="Configuration file (YAML)")
StateDbOption = typer.Option(DEFAULT_STATE_DB, "--state-db", help="State database path")
LogLevelOption = typer.Option(
    None, "--log-level", help="Log verbosity: TRACE, DEBUG, VERBOSE, INFO, WARNING, ERROR"
)
JsonLogsOption = typer.Option(False, "--json-logs", help="Emit logs as JSON")


def _setup(config_file: Path | None, log_level: str | None, json_logs: bool) -> ReconcilerConfig:
    """Load configuration and configure logging, exiting with code 1 on bad config."""
    try:
        config = load_config(config_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]ERROR: Configuration failed:[/red] {e}")
        raise typer.Exit(code=1) from e

    configure_logging(
        level=log_level or config.logging.level,
        json_logs=json_logs or config.logging.json_logs,
        log_file=config.logging.file,
    )
    return config


def _client(config: ReconcilerConfig) -> ChainlaunchClient:
    return ChainlaunchClient(config.require_chainlaunch())


def _fail(operation: str, error: Exception) -> typer.Exit:
    console.print(f"\n[red]ERROR: {operation} failed:[/red] {error}")
    return typer.Exit(code=1)


def _state_table(title: str, states: list[tuple[str, JoinNodeState]]) -> Table:
    table = Table(title=title)
    table.add_column("Address", style="cyan")
    table.add_column("ID", style="green")
    table.add_column("Network ID")
    table.add_column("Node ID")
    table.add_column("Role")
    for address, state in states:
        table.add_row(
            address,
            state.id or "-",
            str(state.network_id),
            str(state.node_id),
            state.role or "[yellow]unset[/yellow]",
        )
    return table


@app.command()
def join(
    address: str = typer.Argument(..., help="Resource address in the state database"),
    network_id: int = typer.Option(..., "--network-id", help="Fabric network (channel) ID"),
    node_id: int = typer.Option(..., "--node-id", help="Node ID to join"),
    role: str = typer.Option(..., "--role", help="Node role: peer or orderer"),
    replace: bool = typer.Option(
        False, "--replace", help="Unjoin and re-join when the declared attributes changed"
    ),
    config_file: Path | None = ConfigOption,
    state_db: Path = StateDbOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Join a Fabric node to a network.

    Every attribute forces replacement: if the address already holds state with
    different attributes, the change is rejected unless --replace is given.

    Examples:
        chainlaunch-reconcile join peer0 --network-id 12 --node-id 7 --role peer
        chainlaunch-reconcile join peer0 --network-id 12 --node-id 8 --role peer --replace
    """
    config = _setup(config_file, log_level, json_logs)
    spec = JoinNodeSpec(network_id=network_id, node_id=node_id, role=role)

    async def run_join() -> JoinNodeState | None:
        with StateStore(state_db) as store:
            current = store.get(address)
            if current is not None and (
                current.network_id,
                current.node_id,
                current.role,
            ) == (spec.network_id, spec.node_id, spec.role):
                return None

            async with _client(config) as client:
                controller = FabricJoinNodeController(client)

                if current is not None:
                    if not replace:
                        await controller.update(current, spec)
                    await controller.delete(current)
                    store.remove(address)
                    store.record_operation(address, "delete", True, outcome="replaced")

                try:
                    state = await controller.create(spec)
                except ReconcilerError as e:
                    store.record_operation(address, "create", False, error_message=str(e))
                    raise

                store.put(address, controller.resource_type, state)
                store.record_operation(address, "create", True, state=state)
                return state

    try:
        state = asyncio.run(run_join())
    except UnsupportedOperationError as e:
        console.print(f"\n[red]ERROR: Join failed:[/red] {e}")
        console.print("Re-run with [cyan]--replace[/cyan] to unjoin and join again.")
        raise typer.Exit(code=1) from e
    except ReconcilerError as e:
        raise _fail("Join", e) from e

    if state is None:
        console.print(f"[green]No changes:[/green] {address} is already joined")
        return
    console.print(f"[green]SUCCESS: Joined[/green] {address} (id [cyan]{state.id}[/cyan])")


@app.command()
def refresh(
    address: str = typer.Argument(..., help="Resource address in the state database"),
    config_file: Path | None = ConfigOption,
    state_db: Path = StateDbOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Check that a joined node is still a member of its network.

    A node missing from the network's node list is dropped from state.
    """
    config = _setup(config_file, log_level, json_logs)

    async def run_refresh() -> bool:
        with StateStore(state_db) as store:
            current = store.get(address)
            if current is None:
                raise ReconcilerError(f"No state for address {address!r}")

            async with _client(config) as client:
                result = await FabricJoinNodeController(client).read(current)

            if result.removed:
                store.remove(address)
                store.record_operation(address, "read", True, outcome="removed")
                return False
            store.put(address, FABRIC_JOIN_NODE, result.state)
            store.record_operation(address, "read", True, outcome="present", state=result.state)
            return True

    try:
        present = asyncio.run(run_refresh())
    except ReconcilerError as e:
        raise _fail("Refresh", e) from e

    if present:
        console.print(f"[green]Up to date:[/green] {address}")
    else:
        console.print(
            f"[yellow]WARNING: {address} is no longer in its network; removed from state[/yellow]"
        )


@app.command()
def unjoin(
    address: str = typer.Argument(..., help="Resource address in the state database"),
    config_file: Path | None = ConfigOption,
    state_db: Path = StateDbOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """Unjoin a node from its network and drop its state."""
    config = _setup(config_file, log_level, json_logs)

    async def run_unjoin() -> None:
        with StateStore(state_db) as store:
            current = store.get(address)
            if current is None:
                raise ReconcilerError(f"No state for address {address!r}")

            async with _client(config) as client:
                try:
                    await FabricJoinNodeController(client).delete(current)
                except ReconcilerError as e:
                    store.record_operation(address, "delete", False, error_message=str(e))
                    raise

            store.remove(address)
            store.record_operation(address, "delete", True)

    try:
        asyncio.run(run_unjoin())
    except ReconcilerError as e:
        raise _fail("Unjoin", e) from e

    console.print(f"[green]SUCCESS: Unjoined[/green] {address}")


@app.command(name="import")
def import_(
    address: str = typer.Argument(..., help="Resource address to store the imported state under"),
    import_id: str = typer.Argument(..., help="Existing membership as network_id:node_id"),
    state_db: Path = StateDbOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """
    Adopt an existing node membership into state.

    The role cannot be derived from the ID; set it afterwards with set-role.

    Examples:
        chainlaunch-reconcile import peer0 12:7
    """
    configure_logging(level=log_level or "INFO", json_logs=json_logs)

    async def run_import():
        return await FabricJoinNodeController().import_state(import_id)

    with StateStore(state_db) as store:
        if store.get(address) is not None:
            raise _fail(
                "Import",
                ReconcilerError(
                    f"Address {address!r} is already managed; unjoin it or choose another address"
                ),
            )

        try:
            result = asyncio.run(run_import())
        except ReconcilerError as e:
            raise _fail("Import", e) from e

        store.put(address, FABRIC_JOIN_NODE, result.state)
        store.record_operation(address, "import", True, state=result.state)

    console.print(
        f"[green]SUCCESS: Imported[/green] {address} (id [cyan]{result.state.id}[/cyan])"
    )
    for warning in result.warnings:
        console.print(f"[yellow]WARNING: {warning.summary}:[/yellow] {warning.detail}")
    console.print(
        f"Set it with: [cyan]chainlaunch-reconcile set-role {address} <peer|orderer>[/cyan]"
    )


@app.command(name="set-role")
def set_role(
    address: str = typer.Argument(..., help="Resource address in the state database"),
    role: str = typer.Argument(..., help="Node role: peer or orderer"),
    state_db: Path = StateDbOption,
) -> None:
    """Record the role of an imported node (local state only, no API call)."""
    try:
        parsed = NodeRole.parse(role, "set-role")
    except ReconcilerError as e:
        raise _fail("Set role", e) from e

    with StateStore(state_db) as store:
        current = store.get(address)
        if current is None:
            raise _fail("Set role", ReconcilerError(f"No state for address {address!r}"))
        current.role = parsed.value
        store.put(address, FABRIC_JOIN_NODE, current)
        store.record_operation(address, "set_role", True, state=current)

    console.print(f"[green]Role set:[/green] {address} -> {parsed.value}")


@app.command()
def show(
    address: str | None = typer.Argument(None, help="Show only this address"),
    state_db: Path = StateDbOption,
) -> None:
    """Show persisted state."""
    if not state_db.exists():
        console.print(f"[yellow]WARNING: No state database found[/yellow] ({state_db})")
        return

    with StateStore(state_db) as store:
        addresses = [address] if address else store.list_addresses()
        states = [(a, s) for a in addresses if (s := store.get(a)) is not None]

    if not states:
        console.print("[yellow]No resources in state[/yellow]")
        return
    console.print(_state_table("Fabric join-node state", states))


@app.command()
def history(
    address: str = typer.Argument(..., help="Resource address"),
    state_db: Path = StateDbOption,
) -> None:
    """Show the lifecycle history of an address."""
    if not state_db.exists():
        console.print(f"[yellow]WARNING: No state database found[/yellow] ({state_db})")
        return

    with StateStore(state_db) as store:
        entries = store.get_history(address)

    if not entries:
        console.print(f"[yellow]No history for {address}[/yellow]")
        return

    table = Table(title=f"History: {address}")
    table.add_column("Timestamp", style="dim")
    table.add_column("Operation", style="cyan")
    table.add_column("Result")
    table.add_column("Details")
    for entry in entries:
        result = "[green]ok[/green]" if entry.success else "[red]failed[/red]"
        table.add_row(
            entry.timestamp, entry.operation, result, entry.outcome or entry.error_message or ""
        )
    console.print(table)


@app.command(name="lookup-network")
def lookup_network(
    name: str = typer.Argument(..., help="Network name (exact, case-sensitive)"),
    platform: str = typer.Option(PLATFORM_FABRIC, "--platform", "-p", help="fabric or besu"),
    config_file: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """Resolve a network by name."""
    config = _setup(config_file, log_level, json_logs)

    async def run_lookup():
        async with _client(config) as client:
            return await ChainlaunchLookups(client).lookup_network(platform, name)

    try:
        network = asyncio.run(run_lookup())
    except ReconcilerError as e:
        raise _fail("Lookup", e) from e

    table = Table(title=f"{platform} network")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for field_name, value in network.__dict__.items():
        if value is not None:
            table.add_row(field_name, str(value))
    console.print(table)


@app.command(name="key-providers")
def key_providers(
    name: str | None = typer.Option(None, "--name", help="Case-insensitive name substring"),
    type_: str | None = typer.Option(None, "--type", help="Provider type (case-insensitive)"),
    config_file: Path | None = ConfigOption,
    log_level: str | None = LogLevelOption,
    json_logs: bool = JsonLogsOption,
) -> None:
    """List key providers and show the default provider."""
    config = _setup(config_file, log_level, json_logs)

    async def run_list():
        async with _client(config) as client:
            return await ChainlaunchLookups(client).list_key_providers(name, type_)

    try:
        listing = asyncio.run(run_list())
    except ReconcilerError as e:
        raise _fail("Listing key providers", e) from e

    table = Table(title="Key providers")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Status")
    for item in listing.providers:
        table.add_row(item.id, item.name, item.type, item.status)
    console.print(table)

    if listing.default_provider_id is not None:
        console.print(
            f"Default provider: [cyan]{listing.default_provider_name}[/cyan] "
            f"(id {listing.default_provider_id}, type {listing.default_provider_type})"
        )
    else:
        console.print("[yellow]No default provider found[/yellow]")


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel.fit(
            "[bold]Chainlaunch Reconciler[/bold]\n\n"
            f"Version: [cyan]{__version__}[/cyan]\n"
            "Python: 3.11+\n\n"
            "[bold]Resources:[/bold]\n"
            "- fabric_join_node (join/refresh/unjoin/import)\n\n"
            "[bold]Lookups:[/bold]\n"
            "- networks by name (fabric, besu)\n"
            "- key providers",
            title="About",
            border_style="blue",
        )
    )
