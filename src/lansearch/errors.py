from __future__ import annotations

from enum import Enum


class PingErrorKind(str, Enum):
    TIMEOUT = "timeout"
    RESET = "reset"
    CLOSED = "closed"
    UNREACHABLE = "unreachable"
    PERMISSION = "permission"
    UNAVAILABLE = "unavailable"


class LanSearchError(Exception):
    """Base class for lansearch errors."""


class InvalidQuery(LanSearchError, ValueError):
    """The query looks like an IP, range or MAC but is malformed."""


class EmptyQuery(InvalidQuery):
    def __init__(self) -> None:
        super().__init__("Search query is required")


class AllSourcesFailed(LanSearchError):
    def __init__(self, failures: dict[str, BaseException]) -> None:
        self.failures = failures
        names = ", ".join(sorted(failures)) or "none"
        super().__init__(f"All sources failed: {names}")


class InvalidTarget(LanSearchError, ValueError):
    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(f"Invalid IP address or domain: {target!r}")


class ExternalPingRefused(LanSearchError):
    def __init__(self, target: str) -> None:
        self.target = target
        super().__init__(
            f"Refusing to ping non-private address {target} in automatic mode"
        )


class ProbeFailed(LanSearchError):
    def __init__(self, target: str, kind: PingErrorKind, detail: str = "") -> None:
        self.target = target
        self.kind = kind
        message = f"Ping {target} failed: {kind.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
