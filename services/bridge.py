"""Coordinates the bridge state and exposes the operator-facing operations."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from datastore.active_targets import ActiveTargetTable
from datastore.reading_cache import ReadingCache
from logging_config import identity_context
from models.identity import DeviceIdentity, InvalidIdentityError
from models.records import Reading
from services.ingress import IngressListener
from settings import get_settings
from transport.mqtt_client import MqttTransport, Transport

logger = logging.getLogger(__name__)


class BridgeService:
    """Owns the reading cache and active-target table for the process lifetime.

    The ingress listener writes into both from the MQTT thread; the HTTP
    routes call :meth:`set_active` and :meth:`get_latest`.
    """

    def __init__(
        self,
        transport: Transport,
        telemetry_topic: str,
        command_topic: str,
        cache: Optional[ReadingCache] = None,
        targets: Optional[ActiveTargetTable] = None,
    ) -> None:
        self.transport = transport
        self.command_topic = command_topic
        self.cache = cache if cache is not None else ReadingCache()
        self.targets = targets if targets is not None else ActiveTargetTable()
        self.ingress = IngressListener(
            cache=self.cache,
            targets=self.targets,
            telemetry_topic=telemetry_topic,
            command_topic=command_topic,
        )

    def set_active(self, device_class: Optional[str], instance_id: Optional[str]) -> DeviceIdentity:
        """Record the operator's selection and tell the devices about it."""
        try:
            identity = DeviceIdentity(
                device_class=(device_class or "").strip(),
                instance_id=(instance_id or "").strip(),
            )
        except InvalidIdentityError as exc:
            raise ValueError("type & id required") from exc

        self.targets.set_active(identity.device_class, identity.instance_id, source="http")
        payload = str(identity)
        if not self.transport.publish(self.command_topic, payload):
            logger.warning(
                "Active target stored but set_id publish failed",
                extra=identity_context(identity, topic=self.command_topic),
            )
        else:
            logger.info(
                "Active set (published to %s = %s)",
                self.command_topic,
                payload,
                extra=identity_context(identity, source="http"),
            )
        return identity

    def get_latest(self, device_class: str, instance_id: str) -> Optional[Reading]:
        """Latest cached reading, or ``None`` when the device never reported."""
        try:
            identity = DeviceIdentity(device_class=device_class, instance_id=instance_id)
        except InvalidIdentityError:
            return None
        return self.cache.get(identity)

    def start(self) -> None:
        self.transport.start()

    def shutdown(self) -> None:
        """Stop the transport during application shutdown."""
        self.transport.stop()


@lru_cache
def build_default_bridge() -> BridgeService:
    """Factory that wires the bridge to the configured MQTT broker."""
    settings = get_settings()
    transport = MqttTransport(
        broker_url=settings.mqtt_url,
        subscriptions=[settings.telemetry_topic, settings.command_topic],
        client_id=settings.mqtt_client_id,
    )
    bridge = BridgeService(
        transport=transport,
        telemetry_topic=settings.telemetry_topic,
        command_topic=settings.command_topic,
    )
    transport.set_message_handler(bridge.ingress.handle_message)
    return bridge
