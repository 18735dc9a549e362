from __future__ import annotations

from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx
import typer

from cli.config import CLIConfig

_SECRET_HEADER = "X-Node-Secret"


class ApiClient:
    """Minimal HTTP client for the bridge's operator routes."""

    def __init__(self, config: CLIConfig, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._config = config
        headers = {_SECRET_HEADER: config.node_secret} if config.node_secret else {}
        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=config.timeout,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def health(self) -> Dict[str, Any]:
        try:
            response = self._client.get("/health")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        return response.json()

    def set_active(self, device_type: str, device_id: str) -> Dict[str, Any]:
        try:
            response = self._client.post(
                "/set-active-id", json={"type": device_type, "id": device_id}
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        payload = response.json()
        active = payload.get("active")
        if not isinstance(active, dict):
            raise typer.BadParameter("Unexpected response payload when setting active id.")
        return active

    def latest(self, device_type: str, device_id: str) -> Optional[Dict[str, Any]]:
        """Latest reading, or ``None`` when the bridge has no data (HTTP 204)."""
        path = f"/latest/{quote(device_type, safe='')}/{quote(device_id, safe='')}"
        try:
            response = self._client.get(path)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        if response.status_code == httpx.codes.NO_CONTENT:
            return None
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except ValueError:
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
