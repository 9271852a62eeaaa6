from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import typer

from lansearch.config import (
    Settings,
    data_dir_from_settings,
    get_settings,
    resolve_config_path,
)
from lansearch.errors import AllSourcesFailed, InvalidQuery, InvalidTarget
from lansearch.storage import Database

T = TypeVar("T")


def load_settings_or_exit() -> Settings:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def resolve_config_path_or_exit(allow_missing: bool = False) -> tuple[Path, bool]:
    try:
        return resolve_config_path(allow_missing=allow_missing)
    except FileNotFoundError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def build_database(settings: Settings, data_dir: Path | None = None) -> Database:
    path = data_dir or data_dir_from_settings(settings)
    return Database(path)


def run_or_exit(coro: Coroutine[Any, Any, T]) -> T:
    """Run a service coroutine, turning user-facing errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except (InvalidQuery, InvalidTarget) as exc:
        typer.echo(f"Malformed query: {exc}", err=True)
        raise typer.Exit(1) from exc
    except AllSourcesFailed as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(1) from exc


def format_latency(latency_ms: int | float | None) -> str:
    if latency_ms is None:
        return "-"
    return f"{latency_ms:.0f} ms"
