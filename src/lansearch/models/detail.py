from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

ConnectionType = Literal["wired", "wireless"]


class IpDetail(BaseModel):
    """Unified view of one IP address across sources.

    ``sources`` only contains sources that had data for the address; merged
    fields are None when no source supplied a value.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    ip: str
    sources: dict[str, dict[str, Any]] = Field(default_factory=dict)
    hostname: str | None = None
    hostname_source: str | None = None
    vendor: str | None = None
    vendor_source: str | None = None
    connection: ConnectionType | None = None

    def source(self, source_id: str) -> dict[str, Any] | None:
        return self.sources.get(source_id)

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"ip": self.ip}
        payload.update(self.sources)
        for field in (
            "hostname",
            "hostname_source",
            "vendor",
            "vendor_source",
            "connection",
        ):
            value = getattr(self, field)
            if value is not None:
                payload[field] = value
        return payload
