"""Local scanner table models."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class ScanEntry(BaseModel):
    """One host seen by the local network scanner."""

    model_config = {"extra": "forbid"}

    ip: str
    mac: str | None = None
    hostname: str | None = None
    vendor: str | None = None
    hostname_source: str | None = None
    vendor_source: str | None = None
    status: Literal["online", "offline", "unknown"] = "unknown"
    ping_latency: int | None = None
    first_seen: datetime | None = None
    last_seen: datetime | None = None
    scan_count: int = 0
    additional_info: dict[str, Any] = Field(default_factory=dict)
