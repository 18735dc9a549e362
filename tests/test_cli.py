from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import pytest
import typer
from typer.testing import CliRunner

from cli.app import app
from cli.client import ApiClient
from cli.config import CLIConfig, load_config


class StubClient:
    def __init__(self, config, reading: Optional[Dict[str, Any]] = None) -> None:
        self.config = config
        self.reading = reading
        self.set_calls: List[tuple[str, str]] = []
        self.closed = False

    def health(self) -> Dict[str, Any]:
        return {"ok": True}

    def set_active(self, device_type: str, device_id: str) -> Dict[str, Any]:
        self.set_calls.append((device_type, device_id))
        return {"type": device_type, "id": device_id}

    def latest(self, device_type: str, device_id: str) -> Optional[Dict[str, Any]]:
        return self.reading

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


def _install_stub(monkeypatch, stub: StubClient) -> None:
    def factory(config):
        stub.config = config
        return stub

    monkeypatch.setattr("cli.app.ApiClient", factory)


def test_health(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--base-url", "http://bridge:3000/", "health"])

    assert result.exit_code == 0
    assert "http://bridge:3000 is healthy." in result.stdout
    assert stub.closed is True


def test_set_active(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["--secret", "s3cret", "set-active", "balita", "7"])

    assert result.exit_code == 0
    assert stub.set_calls == [("balita", "7")]
    assert stub.config.node_secret == "s3cret"
    assert "type: balita" in result.stdout
    assert "id: 7" in result.stdout


def test_latest_with_reading(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(
        config=None,
        reading={"suhu": 36.7, "ts": 1_700_000_000_000, "topic": "posyandu/suhu/bayi_10"},
    )
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["latest", "bayi", "10"])

    assert result.exit_code == 0
    assert "Latest Reading (bayi_10)" in result.stdout
    assert "suhu: 36.7" in result.stdout
    assert "2023-11-14T22:13:20+00:00" in result.stdout


def test_latest_without_data(monkeypatch, runner: CliRunner) -> None:
    stub = StubClient(config=None)
    _install_stub(monkeypatch, stub)

    result = runner.invoke(app, ["latest", "bayi", "99"])

    assert result.exit_code == 0
    assert "No data." in result.stdout


def test_load_config_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("BRIDGE_BASE_URL", "http://example:3000/")
    monkeypatch.setenv("BRIDGE_NODE_SECRET", " abc ")
    monkeypatch.setenv("BRIDGE_TIMEOUT", "-1")

    config = load_config()

    assert config == CLIConfig(base_url="http://example:3000", node_secret="abc", timeout=10.0)


def _mock_client(handler) -> ApiClient:
    config = CLIConfig(base_url="http://bridge", node_secret="s3cret")
    return ApiClient(config, transport=httpx.MockTransport(handler))


def test_api_client_latest_handles_no_content() -> None:
    seen: List[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(204)

    client = _mock_client(handler)
    try:
        assert client.latest("bayi", "10") is None
    finally:
        client.close()

    assert seen[0].url.path == "/latest/bayi/10"
    assert seen[0].headers["X-Node-Secret"] == "s3cret"


def test_api_client_exits_on_forbidden() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, json={"detail": "forbidden"})

    client = _mock_client(handler)
    try:
        with pytest.raises(typer.Exit):
            client.set_active("balita", "7")
    finally:
        client.close()


def test_load_config_prefers_explicit_values(monkeypatch) -> None:
    monkeypatch.setenv("BRIDGE_BASE_URL", "http://example:3000")
    monkeypatch.setenv("BRIDGE_NODE_SECRET", "from-env")
    monkeypatch.setenv("BRIDGE_TIMEOUT", "nan")

    assert load_config().timeout == 10.0
    config = load_config(base_url="http://other:8080/", node_secret="cli", timeout=2.5)

    assert config == CLIConfig(base_url="http://other:8080", node_secret="cli", timeout=2.5)
