"""Ping orchestration.

Automatic (batch) mode probes the distinct private IPv4 addresses of a result
set one after the other with a pause between targets. Manual mode probes one
explicit target and is the only way to reach a public address.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from lansearch.config import PingConfig
from lansearch.errors import (
    ExternalPingRefused,
    InvalidTarget,
    PingErrorKind,
    ProbeFailed,
)
from lansearch.models import PingEntry, PingResult, PingState, PingTarget, SearchRecord
from lansearch.utils.net import IPV4_SHAPE, is_ipv4, is_private_ipv4

logger = logging.getLogger(__name__)

DOMAIN_PATTERN = re.compile(
    r"^([a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}$"
)
LATENCY_PATTERN = re.compile(r"time[=<]([\d.]+)\s*ms", re.IGNORECASE)


def validate_target(value: str) -> PingTarget:
    target = (value or "").strip()
    if IPV4_SHAPE.match(target):
        if not is_ipv4(target):
            raise InvalidTarget(value)
        return PingTarget(value=target)
    if target == "localhost" or DOMAIN_PATTERN.match(target):
        return PingTarget(value=target)
    raise InvalidTarget(value)


def parse_latency(output: str) -> float | None:
    match = LATENCY_PATTERN.search(output)
    if match is None:
        return None
    return float(match.group(1))


class Prober(Protocol):
    async def probe(self, target: str, count: int) -> float:
        """Return the average round trip in ms or raise ProbeFailed."""
        ...


class SystemPingProber:
    """Runs the system ping binary once per echo."""

    def __init__(self, config: PingConfig) -> None:
        self._config = config

    async def echo(self, target: str) -> float:
        wait_seconds = max(1, int(self._config.timeout))
        try:
            process = await asyncio.create_subprocess_exec(
                self._config.command,
                "-c",
                "1",
                "-W",
                str(wait_seconds),
                target,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as exc:
            raise ProbeFailed(target, PingErrorKind.UNAVAILABLE, str(exc)) from exc
        except PermissionError as exc:
            raise ProbeFailed(target, PingErrorKind.PERMISSION, str(exc)) from exc
        except OSError as exc:
            raise ProbeFailed(target, PingErrorKind.UNAVAILABLE, str(exc)) from exc

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self._config.timeout + 0.5
            )
        except (asyncio.TimeoutError, TimeoutError) as exc:
            process.kill()
            await process.wait()
            raise ProbeFailed(target, PingErrorKind.TIMEOUT) from exc
        except ConnectionResetError as exc:
            raise ProbeFailed(target, PingErrorKind.RESET, str(exc)) from exc
        except (BrokenPipeError, EOFError) as exc:
            raise ProbeFailed(target, PingErrorKind.CLOSED, str(exc)) from exc

        latency = parse_latency(stdout.decode("utf-8", errors="replace"))
        if latency is not None:
            return latency

        errors = stderr.decode("utf-8", errors="replace")
        if "Operation not permitted" in errors or "Permission denied" in errors:
            raise ProbeFailed(target, PingErrorKind.PERMISSION, errors.strip())
        raise ProbeFailed(target, PingErrorKind.UNREACHABLE)

    async def probe(self, target: str, count: int) -> float:
        latencies: list[float] = []
        last_error: ProbeFailed | None = None
        for _ in range(count):
            try:
                latencies.append(await self.echo(target))
            except ProbeFailed as exc:
                if exc.kind in (PingErrorKind.UNAVAILABLE, PingErrorKind.PERMISSION):
                    raise
                last_error = exc
        if latencies:
            return sum(latencies) / len(latencies)
        if last_error is None:
            raise ProbeFailed(target, PingErrorKind.UNREACHABLE, "no echo sent")
        raise last_error


class PingBoard:
    """Latest ping state per target, safe to read while a batch is running."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, PingEntry] = {}

    def mark_pending(self, targets: Iterable[str]) -> None:
        with self._lock:
            for target in targets:
                self._entries[target] = PingEntry(target=target)

    def mark_in_flight(self, target: str) -> None:
        with self._lock:
            self._entries[target] = PingEntry(target=target, state=PingState.IN_FLIGHT)

    def record(self, target: str, result: PingResult) -> None:
        state = PingState.SUCCESS if result.success else PingState.FAILED
        with self._lock:
            self._entries[target] = PingEntry(target=target, state=state, result=result)

    def discard(self, targets: Iterable[str]) -> None:
        """Forget targets that never got a result; finished entries stay."""
        with self._lock:
            for target in targets:
                entry = self._entries.get(target)
                if entry is not None and entry.result is None:
                    del self._entries[target]

    def get(self, target: str) -> PingEntry | None:
        with self._lock:
            return self._entries.get(target)

    def snapshot(self) -> dict[str, PingEntry]:
        with self._lock:
            return dict(self._entries)


@dataclass
class BatchPlan:
    targets: list[str] = field(default_factory=list)
    refused: list[str] = field(default_factory=list)


def _record_ip(item: SearchRecord | str) -> str | None:
    if isinstance(item, SearchRecord):
        return item.ip
    return item


class PingOrchestrator:
    def __init__(
        self,
        prober: Prober | None = None,
        config: PingConfig | None = None,
        board: PingBoard | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config or PingConfig()
        self._prober = prober or SystemPingProber(self._config)
        self._sleep = sleep
        self.board = board or PingBoard()

    async def ping(self, target: str, count: int | None = None) -> PingResult:
        """Manual mode: any valid target, public addresses included."""
        checked = validate_target(target)
        return await self._probe(checked.value, count or self._config.count)

    @staticmethod
    def ensure_private(ip: str) -> None:
        if not is_private_ipv4(ip):
            raise ExternalPingRefused(ip)

    def plan(self, items: Iterable[SearchRecord | str]) -> BatchPlan:
        plan = BatchPlan()
        seen: set[str] = set()
        for item in items:
            ip = _record_ip(item)
            if not ip or ip in seen:
                continue
            seen.add(ip)
            if not is_ipv4(ip):
                logger.debug("Skipping non-IPv4 value %r", ip)
                continue
            try:
                self.ensure_private(ip)
            except ExternalPingRefused as exc:
                logger.info("%s", exc)
                plan.refused.append(ip)
                continue
            plan.targets.append(ip)
        return plan

    def run_batch(
        self,
        items: Iterable[SearchRecord | str],
        stop: asyncio.Event | None = None,
    ) -> AsyncIterator[tuple[str, PingResult]]:
        """Automatic mode: private targets only, strictly one at a time."""
        return self.run_plan(self.plan(items), stop)

    async def run_plan(
        self, plan: BatchPlan, stop: asyncio.Event | None = None
    ) -> AsyncIterator[tuple[str, PingResult]]:
        self.board.mark_pending(plan.targets)
        logger.debug("Batch ping of %d target(s)", len(plan.targets))

        try:
            for index, ip in enumerate(plan.targets):
                if stop is not None and stop.is_set():
                    skipped = len(plan.targets) - index
                    logger.info("Batch ping stopped, %d target(s) skipped", skipped)
                    return
                yield ip, await self._probe(ip, self._config.count)
                if index < len(plan.targets) - 1:
                    await self._sleep(self._config.delay)
        finally:
            # Targets without a result leave the board however the run ends.
            self.board.discard(plan.targets)

    async def _probe(self, target: str, count: int) -> PingResult:
        self.board.mark_in_flight(target)
        try:
            latency = await self._prober.probe(target, count)
            result = PingResult.ok(latency)
        except ProbeFailed as exc:
            logger.debug("%s", exc)
            result = PingResult.failed(exc.kind)
        except OSError as exc:
            logger.warning("Cannot ping %s: %s", target, exc)
            result = PingResult.failed(PingErrorKind.UNAVAILABLE)
        except asyncio.CancelledError:
            self.board.discard([target])
            raise
        self.board.record(target, result)
        return result
