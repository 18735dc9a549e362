"""Classification and dispatch of inbound MQTT messages."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Union

import paho.mqtt.client as mqtt

from datastore.active_targets import ActiveTargetTable
from datastore.reading_cache import ReadingCache
from models.identity import parse_from_payload, parse_from_topic

logger = logging.getLogger(__name__)


class IngressOutcome(str, Enum):
    """What happened to a single inbound message."""

    telemetry = "telemetry"
    command = "command"
    dropped = "dropped"
    ignored = "ignored"


class IngressListener:
    """Routes telemetry into the reading cache and set_id commands into the target table.

    The command topic is compared before the telemetry pattern so a broad
    subscription such as ``posyandu/#`` never caches a command as a reading.
    """

    def __init__(
        self,
        cache: ReadingCache,
        targets: ActiveTargetTable,
        telemetry_topic: str,
        command_topic: str,
    ) -> None:
        self.cache = cache
        self.targets = targets
        self.telemetry_topic = telemetry_topic
        self.command_topic = command_topic

    def handle_message(self, topic: str, payload: Union[str, bytes]) -> IngressOutcome:
        try:
            outcome = self._dispatch(topic, payload)
        except Exception:
            logger.exception("Error on message", extra={"topic": topic})
            outcome = IngressOutcome.dropped
        logger.debug("Handled message", extra={"topic": topic, "outcome": outcome.value})
        return outcome

    def _dispatch(self, topic: str, payload: Union[str, bytes]) -> IngressOutcome:
        if topic == self.command_topic:
            identity = parse_from_payload(payload)
            if identity is None:
                return IngressOutcome.dropped
            self.targets.set_active(identity.device_class, identity.instance_id, source="mqtt")
            return IngressOutcome.command

        if mqtt.topic_matches_sub(self.telemetry_topic, topic):
            identity = parse_from_topic(topic)
            if identity is None:
                return IngressOutcome.dropped
            if not self.cache.update(identity, payload, topic):
                return IngressOutcome.dropped
            return IngressOutcome.telemetry

        return IngressOutcome.ignored
