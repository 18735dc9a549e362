"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Reading:
    """Latest temperature reported by one device."""

    value: float
    observed_at: int
    source_topic: str
