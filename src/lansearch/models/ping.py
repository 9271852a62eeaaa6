from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from lansearch.errors import PingErrorKind


class PingState(str, Enum):
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCESS = "success"
    FAILED = "failed"


class PingTarget(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    value: str


class PingResult(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    success: bool
    latency_ms: int | None = Field(default=None, ge=1)
    error_kind: PingErrorKind | None = None

    @classmethod
    def ok(cls, latency_ms: float) -> PingResult:
        # 0 ms would read as "not measured yet"
        return cls(success=True, latency_ms=max(1, round(latency_ms)))

    @classmethod
    def failed(cls, kind: PingErrorKind) -> PingResult:
        return cls(success=False, error_kind=kind)


class PingEntry(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    target: str
    state: PingState = PingState.PENDING
    result: PingResult | None = None
