"""RoomPi status client CLI application.

This module provides the command-line interface for the RoomPi status
client: continuous polling, one-shot status output, device toggling and
configuration utilities.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Final

import typer
import yaml
from pydantic import ValidationError

from roompi.controller import DashboardController, DeviceNotFoundError
from roompi.settings import UserSettings
from roompi.utils.formatting import format_device_line, format_last_update, format_service_line

# ── CLI setup ────────────────────────────────────────────────────────────────
app = typer.Typer(help="RoomPi status client CLI", add_completion=False)
config_app = typer.Typer(help="Config helpers")
app.add_typer(config_app, name="config")

logger: Final = logging.getLogger(__name__)  # Will be "roompi.cli"

# Options for the main commands
CONFIG_OPTION = typer.Option(None, "--config", "-c", exists=True, dir_okay=False)
DEBUG_OPTION = typer.Option(False, "--debug", help="Enable debug logging")
ONCE_OPTION = typer.Option(False, "--once", "-1", help="Refresh once then exit")
DEVICE_ARGUMENT = typer.Argument(..., help="Shelly device id")
DST_ARGUMENT = typer.Argument(..., help="Output config.yaml")


def _controller(config: Path | None, debug: bool) -> DashboardController:
    try:
        return DashboardController(config, debug=debug)
    except (FileNotFoundError, RuntimeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2) from exc


@app.command()
def run(
    config: Path | None = CONFIG_OPTION,
    once: bool = ONCE_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Poll the status server and log every change until interrupted."""
    controller = _controller(config, debug)

    if once:
        state = asyncio.run(controller.refresh_once())
        if state.error_message:
            raise typer.Exit(code=1)
        return

    try:
        asyncio.run(controller.run())
    except KeyboardInterrupt:
        typer.echo("Stopped.")


@app.command()
def status(
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Fetch the status once and print a summary."""
    controller = _controller(config, debug)
    state = asyncio.run(controller.refresh_once())

    if state.bundle is None:
        typer.secho(state.error_message or "No data", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    snapshot = state.bundle.snapshot
    typer.echo(f"Last update:  {format_last_update(state.last_update)}")
    typer.echo(f"CPU temp:     {snapshot.cpu_temperature or '-'}")
    typer.echo(f"Load:         {snapshot.system_load or '-'}")
    typer.echo(f"Uptime:       {snapshot.uptime or '-'}")
    typer.echo(f"Memory:       {snapshot.memory_usage or '-'}")
    typer.echo(f"Disk:         {snapshot.disk_usage or '-'}")

    if snapshot.services:
        typer.echo("\nServices:")
        for service in snapshot.services:
            typer.echo(f"  {format_service_line(service)}")

    shelly = state.bundle.shelly
    if shelly.config_error or shelly.error:
        typer.secho(
            f"\nShelly: {shelly.message or shelly.error or 'configuration error'}",
            fg=typer.colors.YELLOW,
        )
    if shelly.devices:
        typer.echo("\nDevices:")
        for device in shelly.devices:
            typer.echo(f"  {format_device_line(device)}")

    history = state.bundle.history
    if history.is_available:
        typer.echo(f"\nHistory: {len(history.entries)} sample(s) of max {history.max_entries}")


@app.command()
def toggle(
    device_id: str = DEVICE_ARGUMENT,
    config: Path | None = CONFIG_OPTION,
    debug: bool = DEBUG_OPTION,
) -> None:
    """Switch a Shelly device to the opposite state."""
    controller = _controller(config, debug)

    try:
        error = asyncio.run(controller.toggle(device_id))
    except DeviceNotFoundError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    if error:
        typer.secho(f"{device_id}: {error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    bundle = controller.state.bundle
    device = bundle.shelly.device(device_id) if bundle else None
    typer.secho(
        format_device_line(device) if device else f"{device_id}: command sent",
        fg=typer.colors.GREEN,
    )


# ───────────────────────── config sub-commands ───────────────────────────────
@config_app.command("validate")
def validate_config(file: Path):
    """Validate a YAML config file against the schema."""
    try:
        UserSettings.load(file)
        typer.echo("✅ Config valid")
    except (FileNotFoundError, RuntimeError) as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


@config_app.command("wizard")
def wizard(dst: Path = DST_ARGUMENT):
    """Interactive prompt to create a config file."""
    typer.echo("Interactive config builder - press Enter for defaults.")

    while True:
        data: dict[str, Any] = {
            "base_url": typer.prompt("Status server URL", default="http://raspberrypi.local/"),
            "username": typer.prompt("Username (empty for none)", default="") or None,
        }
        if data["username"]:
            data["password"] = typer.prompt("Password", hide_input=True)
        try:
            cfg = UserSettings(**data)
            break  # valid → exit loop
        except ValidationError as err:
            typer.secho("\nConfig error(s):", fg=typer.colors.RED, err=True)
            for e in err.errors():
                loc = e["loc"][0] if e["loc"] else "config"
                typer.secho(f"  • {loc} - {e['msg']}", fg=typer.colors.RED, err=True)
            typer.echo("Please re-enter the values.\n")

    dst.write_text(
        yaml.safe_dump(cfg.model_dump(exclude_none=True), sort_keys=False), encoding="utf-8"
    )
    typer.secho(f"Config written to {dst}", fg=typer.colors.GREEN)


# ───────────────────────── module entrypoint ────────────────────────────────
if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(0)
