from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field
from typing_extensions import TypeAliasType

DataValue = TypeAliasType(
    "DataValue",
    "Union[str, int, float, bool, list[DataValue], dict[str, DataValue]]",
)


class RecordType(str, Enum):
    DEVICE = "device"
    DHCP = "dhcp"
    PORT_FORWARD = "port-forward"
    CLIENT = "client"
    AP = "ap"
    SWITCH = "switch"


class SearchRecord(BaseModel):
    """One normalized hit from a plugin."""

    model_config = {"frozen": True, "extra": "forbid"}

    plugin_id: str
    plugin_name: str
    type: RecordType
    id: str
    name: str
    ip: str | None = None
    mac: str | None = None
    port: Union[int, str, None] = None
    hostname: str | None = None
    active: bool | None = None
    last_seen: datetime | None = None
    additional_data: dict[str, DataValue] = Field(default_factory=dict)


class SearchOptions(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    case_sensitive: bool = False
    exact_match: bool = True
    types: frozenset[RecordType] | None = None

    def allows(self, record_type: RecordType) -> bool:
        return not self.types or record_type in self.types


def _compact_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return compact(value)
    if isinstance(value, (list, tuple)):
        return [_compact_value(item) for item in value if item is not None]
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def compact(data: Mapping[str, Any]) -> dict[str, Any]:
    """Drop None values (recursively) so missing fields stay absent."""
    return {
        str(key): _compact_value(value)
        for key, value in data.items()
        if value is not None
    }
