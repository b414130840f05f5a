from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

APP_NAME = "srtcli"
APP_VERSION = "1.0"
MATCH_EXACT = "exact"
MATCH_THRESHOLD = "threshold"
SUPPORTED_MATCH_MODES = {MATCH_EXACT, MATCH_THRESHOLD}
DEFAULT_MATCH_MODE = MATCH_THRESHOLD
DEFAULT_POLL_INTERVAL_MS = 0
DEFAULT_PREAMBLE_SECONDS = 3.0


@dataclass(frozen=True)
class AppConfig:
    subtitle_path: Path
    use_clock: bool
    match_mode: str
    poll_interval_ms: int
    preamble_seconds: float
    verbose: bool


def normalize_match_mode(value: str) -> str:
    mode = value.strip().lower()
    if mode not in SUPPORTED_MATCH_MODES:
        raise ValueError(
            f"Unsupported match mode '{value}'. Allowed: {sorted(SUPPORTED_MATCH_MODES)}"
        )
    return mode


def normalize_poll_interval_ms(value: int | str) -> int:
    try:
        interval = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Poll interval must be an integer, got '{value}'") from exc
    if interval < 0:
        raise ValueError(f"Poll interval must be >= 0, got {interval}")
    return interval


def normalize_preamble_seconds(value: float | str) -> float:
    try:
        seconds = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Preamble pause must be a number, got '{value}'") from exc
    if seconds < 0:
        raise ValueError(f"Preamble pause must be >= 0, got {seconds}")
    return seconds


def resolve_match_mode(custom_mode: str | None = None) -> str:
    if custom_mode is not None:
        return normalize_match_mode(custom_mode)
    env_mode = os.getenv("SRTCLI_MATCH_MODE")
    if env_mode:
        return normalize_match_mode(env_mode)
    return DEFAULT_MATCH_MODE


def resolve_poll_interval_ms(custom_interval: int | None = None) -> int:
    if custom_interval is not None:
        return normalize_poll_interval_ms(custom_interval)
    env_interval = os.getenv("SRTCLI_POLL_INTERVAL_MS")
    if env_interval:
        return normalize_poll_interval_ms(env_interval)
    return DEFAULT_POLL_INTERVAL_MS


def resolve_preamble_seconds(custom_seconds: float | None = None) -> float:
    if custom_seconds is not None:
        return normalize_preamble_seconds(custom_seconds)
    env_seconds = os.getenv("SRTCLI_PREAMBLE_SECONDS")
    if env_seconds:
        return normalize_preamble_seconds(env_seconds)
    return DEFAULT_PREAMBLE_SECONDS


def build_app_config(
    *,
    subtitle_path: Path,
    use_clock: bool = False,
    match_mode: str | None = None,
    poll_interval_ms: int | None = None,
    preamble_seconds: float | None = None,
    verbose: bool = False,
) -> AppConfig:
    return AppConfig(
        subtitle_path=subtitle_path,
        use_clock=use_clock,
        match_mode=resolve_match_mode(match_mode),
        poll_interval_ms=resolve_poll_interval_ms(poll_interval_ms),
        preamble_seconds=resolve_preamble_seconds(preamble_seconds),
        verbose=verbose,
    )
