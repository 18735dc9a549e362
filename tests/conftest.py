from __future__ import annotations

from typing import List, Tuple, Union

import pytest

from services.bridge import BridgeService
from settings import get_settings


class RecordingTransport:
    """Stands in for the MQTT transport and remembers every publish."""

    def __init__(self, publish_ok: bool = True) -> None:
        self.published: List[Tuple[str, Union[str, bytes]]] = []
        self.publish_ok = publish_ok
        self.started = False
        self.stopped = False

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def publish(self, topic: str, payload: Union[str, bytes]) -> bool:
        self.published.append((topic, payload))
        return self.publish_ok


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def bridge(transport: RecordingTransport) -> BridgeService:
    return BridgeService(
        transport=transport,
        telemetry_topic="posyandu/suhu/#",
        command_topic="posyandu/cmd/set_id",
    )


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
