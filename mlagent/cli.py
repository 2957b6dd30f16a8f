"""mlagent CLI: drive resource package ingestion and inspect the registry."""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from mlagent import __version__
from mlagent.config import AgentConfig, load_config
from mlagent.errors import ConfigError, PackageManagerError

console = Console()


def _setup_logging(level: int) -> None:
    """Route the agent's log records through rich, once per process."""
    logger = logging.getLogger("mlagent")
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=False))
    logger.setLevel(level)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", "config_path", default=None, help="Path to YAML config file")
@click.option("--registry-dir", "-r", default=None, help="Registry directory (overrides config)")
@click.option("--verbose", "-v", is_flag=True, help="Be verbose")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, registry_dir: str | None, verbose: bool):
    """mlagent: ML service registry ingestion for resource packages.

    Reacts to resource package lifecycle events, reads the model, pipeline
    and resource manifests bundled in the package, and syncs them into the
    local registry.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if registry_dir:
        config.registry_dir = registry_dir

    _setup_logging(logging.DEBUG if verbose else config.log_level_value)
    ctx.obj = config


def _build_dispatcher(config: AgentConfig):
    from mlagent.events.dispatcher import PackageEventDispatcher
    from mlagent.events.platform import LocalPackageManager
    from mlagent.registry.local_registry import LocalRegistry

    package_manager = LocalPackageManager(config.packages)
    dispatcher = PackageEventDispatcher(package_manager, LocalRegistry(config.registry_dir), config)
    dispatcher.start()
    return package_manager, dispatcher


# ── Ingest ───────────────────────────────────────────────────────────


@main.command()
@click.argument("package_id")
@click.option("--res-type", required=True, help="Resource type of the package")
@click.option("--res-version", default="1.0.0", help="Resource version of the package")
@click.option("--app-root", default=None, help="Root of installed packages (overrides config)")
@click.pass_obj
def ingest(config: AgentConfig, package_id: str, res_type: str, res_version: str, app_root: str | None):
    """Register the manifests of an installed resource package.

    Simulates an install-completed event for PACKAGE_ID.
    """
    from mlagent.events.models import EventState, EventType, PackageEvent

    if app_root:
        config.app_root = app_root

    console.print(f"\n[bold blue]mlagent[/] Ingesting: {package_id}\n")

    package_manager, dispatcher = _build_dispatcher(config)
    package_manager.register_package(package_id, res_type, res_version)
    try:
        package_manager.emit(
            PackageEvent(
                package_type=config.package_type,
                package_id=package_id,
                event_type=EventType.INSTALL,
                event_state=EventState.COMPLETED,
                progress=100,
            )
        )
    finally:
        dispatcher.stop()

    report = dispatcher.last_report
    if report is None:
        raise click.ClickException("Ingestion aborted. See errors above.")

    table = Table(title=f"Sync Result ({report.directory})")
    table.add_column("Kind", style="cyan")
    table.add_column("Registered", justify="right", style="green")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Failed", justify="right", style="red")
    for kind, kind_report in report.kinds.items():
        table.add_row(
            kind.value,
            str(kind_report.registered),
            str(kind_report.skipped),
            str(kind_report.failed),
        )
    console.print(table)


# ── Replay ───────────────────────────────────────────────────────────


@main.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def replay(config: AgentConfig, events_file: str):
    """Feed a YAML or JSON list of package events through the dispatcher.

    Package metadata is taken from the config's ``packages`` section.
    """
    import yaml

    from mlagent.events.models import PackageEvent

    try:
        with open(events_file) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.ClickException(f"Failed to parse events file: {e}")

    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise click.ClickException("Events file must contain a list of events")

    package_manager, dispatcher = _build_dispatcher(config)
    handled = 0
    try:
        for i, item in enumerate(data):
            try:
                event = PackageEvent.from_dict(item)
            except (KeyError, TypeError, ValueError) as e:
                console.print(f"  [red]x[/] Event {i + 1} is invalid: {e}")
                continue
            package_manager.emit(event)
            handled += 1
    except PackageManagerError as e:
        raise click.ClickException(str(e))
    finally:
        dispatcher.stop()

    console.print(f"\n[green]Replayed {handled} of {len(data)} events.[/]")


# ── Registry ─────────────────────────────────────────────────────────


@main.group()
def registry():
    """Inspect the local ML service registry."""


@registry.command()
@click.pass_obj
def models(config: AgentConfig):
    """List all registered model versions."""
    from mlagent.registry.local_registry import LocalRegistry

    records = LocalRegistry(config.registry_dir).model_list()
    if not records:
        console.print("[yellow]No models registered.[/]")
        return

    table = Table(title=f"Models ({len(records)} versions)")
    table.add_column("Name", style="cyan")
    table.add_column("Version", justify="right")
    table.add_column("Active", justify="center")
    table.add_column("Path")
    table.add_column("Description")

    for record in records:
        active = "[green]Y[/]" if record.active else "[dim]N[/]"
        table.add_row(record.name, str(record.version), active, record.path, record.description[:50])

    console.print(table)


@registry.command()
@click.pass_obj
def pipelines(config: AgentConfig):
    """List all registered pipelines."""
    from mlagent.registry.local_registry import LocalRegistry

    records = LocalRegistry(config.registry_dir).pipeline_list()
    if not records:
        console.print("[yellow]No pipelines registered.[/]")
        return

    table = Table(title=f"Pipelines ({len(records)})")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    for record in records:
        table.add_row(record.name, record.description[:80])

    console.print(table)


@registry.command()
@click.pass_obj
def resources(config: AgentConfig):
    """List all registered resources."""
    from mlagent.registry.local_registry import LocalRegistry

    records = LocalRegistry(config.registry_dir).resource_list()
    if not records:
        console.print("[yellow]No resources registered.[/]")
        return

    table = Table(title=f"Resources ({len(records)})")
    table.add_column("Name", style="cyan")
    table.add_column("Path")
    table.add_column("Description")
    for record in records:
        table.add_row(record.name, record.path, record.description[:50])

    console.print(table)


if __name__ == "__main__":
    main()
