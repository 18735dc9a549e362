from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_MQTT_URL_ENV = "MQTT_URL"
_TOPIC_ENV = "TOPIC"
_COMMAND_TOPIC_ENV = "COMMAND_TOPIC"
_CLIENT_ID_ENV = "MQTT_CLIENT_ID"
_HOST_ENV = "HOST"
_PORT_ENV = "PORT"
_NODE_SECRET_ENV = "NODE_SECRET"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_TELEMETRY_TOPIC = "posyandu/suhu/#"


@dataclass(frozen=True)
class Settings:
    mqtt_url: str
    telemetry_topic: str
    command_topic: str
    mqtt_client_id: str
    host: str
    port: int
    node_secret: Optional[str]
    log_level: str


def _env(name: str) -> Optional[str]:
    """Trimmed value of ``name``, or ``None`` when it is unset or blank."""
    value = (os.getenv(name) or "").strip()
    return value or None


def _port(raw: Optional[str], default: int) -> int:
    if raw is None or not (raw.isascii() and raw.isdigit()):
        return default
    port = int(raw)
    return port if 0 < port < 65536 else default


def default_command_topic(telemetry_topic: str) -> str:
    """Derive ``<namespace>/cmd/set_id`` from the telemetry subscription."""
    namespace = telemetry_topic.split("/", 1)[0] or "posyandu"
    if namespace in {"#", "+"}:
        namespace = "posyandu"
    return f"{namespace}/cmd/set_id"


@lru_cache
def get_settings() -> Settings:
    telemetry_topic = _env(_TOPIC_ENV) or DEFAULT_TELEMETRY_TOPIC
    return Settings(
        mqtt_url=_env(_MQTT_URL_ENV) or "mqtt://broker.emqx.io:1883",
        telemetry_topic=telemetry_topic,
        command_topic=_env(_COMMAND_TOPIC_ENV) or default_command_topic(telemetry_topic),
        mqtt_client_id=_env(_CLIENT_ID_ENV) or "",
        host=_env(_HOST_ENV) or "0.0.0.0",
        port=_port(_env(_PORT_ENV), 3000),
        node_secret=_env(_NODE_SECRET_ENV),
        log_level=(_env(_LOG_LEVEL_ENV) or "INFO").upper(),
    )
