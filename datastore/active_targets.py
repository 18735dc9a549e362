from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class ActiveTargetTable:
    """Which instance id is currently active for each device class."""

    def __init__(self) -> None:
        self._targets: Dict[str, str] = {}
        self._lock = Lock()

    def set_active(self, device_class: str, instance_id: str, source: str = "internal") -> None:
        with self._lock:
            previous = self._targets.get(device_class)
            self._targets[device_class] = instance_id
        logger.info(
            "Active target %s -> %s (was %s)",
            device_class,
            instance_id,
            previous,
            extra={"device_class": device_class, "instance_id": instance_id, "source": source},
        )

    def get_active(self, device_class: str) -> Optional[str]:
        with self._lock:
            return self._targets.get(device_class)

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._targets)
