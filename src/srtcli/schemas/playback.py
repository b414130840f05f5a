from __future__ import annotations

from dataclasses import dataclass

EVENT_TICK = "tick"
EVENT_SHOW = "show"
EVENT_HIDE = "hide"


@dataclass(frozen=True)
class PlaybackEvent:
    kind: str
    elapsed_ms: int
    index: int | None = None
    text: str = ""


@dataclass
class ScheduleCursor:
    index: int = 0
    in_subtitle: bool = False
    last_tick_second: int = -1
