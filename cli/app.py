from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_active, render_reading


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Operator commands for the posyandu telemetry bridge.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Bridge base URL (defaults to BRIDGE_BASE_URL env or http://localhost:3000).",
    ),
    secret: Optional[str] = typer.Option(
        None,
        "--secret",
        "-s",
        help="Shared secret sent as X-Node-Secret (defaults to BRIDGE_NODE_SECRET env).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="HTTP timeout in seconds.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, node_secret=secret, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("health")
def health_command(ctx: typer.Context) -> None:
    """Check that the bridge is up."""
    state = _get_state(ctx)
    payload = state.client.health()
    if payload.get("ok") is True:
        typer.secho(f"{state.config.base_url} is healthy.", fg=typer.colors.GREEN)
        return
    typer.secho(f"Unexpected health payload: {payload}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("set-active")
def set_active_command(
    ctx: typer.Context,
    device_type: str = typer.Argument(..., help="Device class, e.g. bayi or balita."),
    device_id: str = typer.Argument(..., help="Instance id within the class."),
) -> None:
    """Select the active device for a class and notify the devices."""
    state = _get_state(ctx)
    active = state.client.set_active(device_type, device_id)
    typer.secho("Active target accepted.", fg=typer.colors.GREEN)
    render_active(active)


@app.command("latest")
def latest_command(
    ctx: typer.Context,
    device_type: str = typer.Argument(..., help="Device class."),
    device_id: str = typer.Argument(..., help="Instance id within the class."),
) -> None:
    """Show the latest temperature reported by a device."""
    state = _get_state(ctx)
    reading = state.client.latest(device_type, device_id)
    render_reading(device_type, device_id, reading)
