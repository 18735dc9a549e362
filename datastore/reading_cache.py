from __future__ import annotations

import logging
import math
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from threading import Lock
from typing import Callable, Dict, Optional, Union

from logging_config import identity_context
from models.identity import DeviceIdentity
from models.records import Reading

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")


def _now_ms() -> int:
    return int(time.time() * 1000)


def parse_reading_value(raw_value: Union[str, bytes]) -> Optional[float]:
    """Parse a decimal payload rounded half-up to one place; ``None`` if invalid."""
    if isinstance(raw_value, bytes):
        raw_value = raw_value.decode("utf-8", errors="replace")
    candidate = raw_value.strip()
    if not candidate:
        return None
    try:
        parsed = Decimal(candidate)
    except InvalidOperation:
        return None
    # readings are stored as floats, so anything past float range is not a value
    if not parsed.is_finite() or not math.isfinite(float(parsed)):
        return None
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, parsed.adjusted() + 3)
        rounded = parsed.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP)
    # adding 0.0 turns a rounded -0.0 into 0.0
    return float(rounded) + 0.0


class ReadingCache:
    """Last-known reading per device; in-memory, unbounded, last write wins."""

    def __init__(self, clock: Callable[[], int] = _now_ms) -> None:
        self._readings: Dict[DeviceIdentity, Reading] = {}
        self._clock = clock
        self._lock = Lock()

    def update(
        self,
        identity: DeviceIdentity,
        raw_value: Union[str, bytes],
        source_topic: str,
    ) -> bool:
        value = parse_reading_value(raw_value)
        if value is None:
            logger.info(
                "Ignored non-numeric payload",
                extra=identity_context(identity, topic=source_topic, payload=raw_value),
            )
            return False

        reading = Reading(value=value, observed_at=self._clock(), source_topic=source_topic)
        with self._lock:
            self._readings[identity] = reading
        logger.info(
            "Updated latest[%s] = %s",
            identity,
            value,
            extra=identity_context(identity, topic=source_topic, value=value),
        )
        return True

    def get(self, identity: DeviceIdentity) -> Optional[Reading]:
        with self._lock:
            return self._readings.get(identity)

    def snapshot(self) -> Dict[DeviceIdentity, Reading]:
        """Return a point-in-time copy of every cached reading."""

        with self._lock:
            return dict(self._readings)

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)
