"""Device identity encoded as ``<class>_<instanceId>`` in topics and payloads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

logger = logging.getLogger(__name__)

SEPARATOR = "_"


class InvalidIdentityError(ValueError):
    """Raised when a token cannot be split into a class and an instance id."""


@dataclass(frozen=True, slots=True)
class DeviceIdentity:
    """A sensor category plus the id of one device within it."""

    device_class: str
    instance_id: str

    def __post_init__(self) -> None:
        if not self.device_class or not self.instance_id:
            raise InvalidIdentityError("device class and instance id must be non-empty")

    def __str__(self) -> str:
        return f"{self.device_class}{SEPARATOR}{self.instance_id}"

    @classmethod
    def parse(cls, token: str) -> DeviceIdentity:
        """Split ``token`` at the first separator.

        Anything after the first underscore belongs to the instance id, so
        ``"bayi_10_a"`` parses as class ``bayi`` and id ``10_a``.
        """
        device_class, separator, instance_id = token.partition(SEPARATOR)
        if not separator:
            raise InvalidIdentityError(f"missing {SEPARATOR!r} separator in {token!r}")
        if not device_class or not instance_id:
            raise InvalidIdentityError(f"empty class or instance id in {token!r}")
        return cls(device_class=device_class, instance_id=instance_id)


def parse_from_topic(topic: str) -> Optional[DeviceIdentity]:
    """Parse the last path segment of ``topic``; ``None`` when malformed."""
    suffix = topic.rsplit("/", 1)[-1]
    try:
        return DeviceIdentity.parse(suffix)
    except InvalidIdentityError as exc:
        logger.warning(
            "Malformed telemetry topic",
            extra={"topic": topic, "reason": str(exc)},
        )
        return None


def parse_from_payload(payload: Union[str, bytes]) -> Optional[DeviceIdentity]:
    """Parse a command payload such as ``b"bayi_10"``; ``None`` when malformed."""
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8", errors="replace")
    try:
        return DeviceIdentity.parse(payload.strip())
    except InvalidIdentityError as exc:
        logger.warning(
            "Ignored malformed set_id payload",
            extra={"payload": payload, "reason": str(exc)},
        )
        return None
