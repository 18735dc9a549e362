from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

import typer

Field = Tuple[str, Any]


def _print_block(title: str, fields: Sequence[Field] = ()) -> None:
    """Bold title line followed by one ``name: value`` line per field."""
    lines = [f"{name}: {value}" for name, value in fields]
    typer.secho(title, bold=True)
    if lines:
        typer.echo("\n".join(lines))


def _format_ts(ts: Any) -> str:
    if not isinstance(ts, (int, float)):
        return str(ts)
    observed = datetime.fromtimestamp(ts / 1000, tz=timezone.utc)
    return f"{ts} ({observed.isoformat(timespec='seconds')})"


def render_active(active: Dict[str, Any]) -> None:
    _print_block("Active Target", [("type", active.get("type")), ("id", active.get("id"))])


def render_reading(device_type: str, device_id: str, reading: Optional[Dict[str, Any]]) -> None:
    title = f"Latest Reading ({device_type}_{device_id})"
    if reading is None:
        _print_block(title, [])
        typer.echo("No data.")
        return
    _print_block(
        title,
        [
            ("suhu", reading.get("suhu")),
            ("ts", _format_ts(reading.get("ts"))),
            ("topic", reading.get("topic")),
        ],
    )
