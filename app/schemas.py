"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from models.identity import DeviceIdentity
from models.records import Reading


class SetActiveRequest(BaseModel):
    """Operator selection; both fields are checked by the route, not by pydantic."""

    type: Optional[str] = Field(default=None, description="Device class, e.g. ``bayi``.")
    id: Optional[str] = Field(default=None, description="Instance id within the class.")

    @field_validator("type", "id", mode="before")
    @classmethod
    def _coerce_scalar(cls, value: object) -> object:
        # callers often send numeric ids
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ActiveTarget(BaseModel):
    type: str
    id: str

    @classmethod
    def from_identity(cls, identity: DeviceIdentity) -> ActiveTarget:
        return cls(type=identity.device_class, id=identity.instance_id)


class SetActiveResponse(BaseModel):
    ok: bool = True
    active: ActiveTarget


class LatestReadingResponse(BaseModel):
    """Most recent temperature for one device."""

    suhu: float = Field(..., description="Temperature rounded to one decimal place.")
    ts: int = Field(..., description="Bridge receive time, epoch milliseconds.")
    topic: str = Field(..., description="Topic the reading arrived on.")

    @classmethod
    def from_reading(cls, reading: Reading) -> LatestReadingResponse:
        return cls(suhu=reading.value, ts=reading.observed_at, topic=reading.source_topic)


class HealthResponse(BaseModel):
    ok: bool = True
