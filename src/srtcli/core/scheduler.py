from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

from srtcli.core.errors import InvalidFormat
from srtcli.infra.clock import PlaybackClock, Stopwatch
from srtcli.infra.config import (
    DEFAULT_POLL_INTERVAL_MS,
    DEFAULT_PREAMBLE_SECONDS,
    MATCH_EXACT,
    MATCH_THRESHOLD,
)
from srtcli.infra.terminal import CAPTION_CLEAR_LINES, CLOCK_CLEAR_LINES, TerminalDisplay
from srtcli.schemas.playback import (
    EVENT_HIDE,
    EVENT_SHOW,
    EVENT_TICK,
    PlaybackEvent,
    ScheduleCursor,
)
from srtcli.schemas.subtitle import SubtitleSequence

logger = logging.getLogger(__name__)


class ElapsedTimer(Protocol):
    def start(self) -> None:
        ...

    def elapsed_ms(self) -> int:
        ...


class Display(Protocol):
    def clear(self, lines: int) -> None:
        ...

    def write(self, text: str) -> None:
        ...


@dataclass(frozen=True)
class PlaybackRequest:
    subtitles: SubtitleSequence
    source_name: str
    use_clock: bool = False
    match_mode: str = MATCH_THRESHOLD
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    preamble_seconds: float = DEFAULT_PREAMBLE_SECONDS
    record_events: bool = False


@dataclass(frozen=True)
class PlaybackResult:
    status: str
    shown: int
    hidden: int
    ticks: int
    total: int
    elapsed_ms: int
    events: tuple[PlaybackEvent, ...]
    message: str


def _reached(elapsed_ms: int, boundary_ms: int, match_mode: str) -> bool:
    if match_mode == MATCH_EXACT:
        return elapsed_ms == boundary_ms
    return elapsed_ms >= boundary_ms


def _clock_due(cursor: ScheduleCursor, elapsed_ms: int, match_mode: str) -> bool:
    if elapsed_ms // 1000 <= cursor.last_tick_second:
        return False
    if match_mode == MATCH_EXACT:
        return elapsed_ms % 1000 == 0
    return True


def advance(
    cursor: ScheduleCursor,
    subtitles: SubtitleSequence,
    elapsed_ms: int,
    *,
    use_clock: bool = False,
    match_mode: str = MATCH_THRESHOLD,
) -> list[PlaybackEvent]:
    """Decide the events for one poll at ``elapsed_ms`` and move the cursor.

    Events come out in the order tick, show, hide. In exact mode each poll
    makes at most one pass over the current subtitle, so a boundary whose
    millisecond is never sampled is missed. In threshold mode the first poll
    at or past a boundary fires it, and one poll may catch up several
    subtitles.
    """
    events: list[PlaybackEvent] = []
    if cursor.index >= len(subtitles):
        return events

    if _clock_due(cursor, elapsed_ms, match_mode):
        cursor.last_tick_second = elapsed_ms // 1000
        if use_clock and not cursor.in_subtitle:
            events.append(PlaybackEvent(kind=EVENT_TICK, elapsed_ms=elapsed_ms))

    while cursor.index < len(subtitles):
        subtitle = subtitles[cursor.index]
        fired = False
        if not cursor.in_subtitle and _reached(elapsed_ms, subtitle.start_ms, match_mode):
            cursor.in_subtitle = True
            events.append(
                PlaybackEvent(
                    kind=EVENT_SHOW,
                    elapsed_ms=elapsed_ms,
                    index=cursor.index,
                    text=subtitle.text,
                )
            )
            fired = True
        if _reached(elapsed_ms, subtitle.end_ms, match_mode):
            events.append(
                PlaybackEvent(kind=EVENT_HIDE, elapsed_ms=elapsed_ms, index=cursor.index)
            )
            cursor.index += 1
            cursor.in_subtitle = False
            fired = True
        if not fired or match_mode == MATCH_EXACT:
            break
    return events


class PlaybackScheduler:
    def __init__(
        self,
        request: PlaybackRequest,
        *,
        display: Display | None = None,
        timer: ElapsedTimer | None = None,
        clock: PlaybackClock | None = None,
        sleep: Callable[[float], None] = time.sleep,
        should_stop: Callable[[], bool] | None = None,
    ) -> None:
        if not request.subtitles:
            raise InvalidFormat("No subtitles to play back")
        self.request = request
        self.display = display or TerminalDisplay()
        self.timer = timer or Stopwatch()
        self.clock = clock or PlaybackClock()
        self._sleep = sleep
        self._should_stop = should_stop

    def _render(self, event: PlaybackEvent) -> None:
        logger.debug("%s at %dms (index=%s)", event.kind, event.elapsed_ms, event.index)
        if event.kind == EVENT_TICK:
            self.display.clear(CLOCK_CLEAR_LINES)
            self.display.write(self.clock.get_time())
        elif event.kind == EVENT_SHOW:
            self.display.clear(CAPTION_CLEAR_LINES)
            self.display.write(event.text)
        elif event.kind == EVENT_HIDE:
            self.display.clear(CAPTION_CLEAR_LINES)

    def _preamble(self) -> None:
        runtime_ms = self.request.subtitles.runtime_ms
        self.clock.set_time_ms(runtime_ms)
        self.display.clear(CAPTION_CLEAR_LINES)
        self.display.write(
            f"Playing back: '{self.request.source_name}' "
            f"(Runtime: {self.clock.get_time()} [{runtime_ms}ms])..."
        )
        if self.request.preamble_seconds > 0:
            self._sleep(self.request.preamble_seconds)
        self.clock.set_time_ms(0)
        self.display.write(self.clock.get_time())
        self.display.clear(CAPTION_CLEAR_LINES)

    def play(self) -> PlaybackResult:
        subtitles = self.request.subtitles
        self._preamble()
        logger.info(
            "Playing %d subtitles from %s (match=%s).",
            len(subtitles),
            self.request.source_name,
            self.request.match_mode,
        )

        cursor = ScheduleCursor()
        events: list[PlaybackEvent] = []
        shown = 0
        hidden = 0
        ticks = 0
        elapsed_ms = 0
        self.timer.start()
        while cursor.index < len(subtitles):
            if self._should_stop is not None and self._should_stop():
                logger.info("Playback stopped at %dms.", elapsed_ms)
                return PlaybackResult(
                    status="stopped",
                    shown=shown,
                    hidden=hidden,
                    ticks=ticks,
                    total=len(subtitles),
                    elapsed_ms=elapsed_ms,
                    events=tuple(events),
                    message=f"Playback stopped after {shown}/{len(subtitles)} subtitles.",
                )
            elapsed_ms = self.timer.elapsed_ms()
            self.clock.set_time_ms(elapsed_ms)
            for event in advance(
                cursor,
                subtitles,
                elapsed_ms,
                use_clock=self.request.use_clock,
                match_mode=self.request.match_mode,
            ):
                self._render(event)
                if self.request.record_events:
                    events.append(event)
                if event.kind == EVENT_SHOW:
                    shown += 1
                elif event.kind == EVENT_HIDE:
                    hidden += 1
                else:
                    ticks += 1
            if cursor.index < len(subtitles) and self.request.poll_interval_ms > 0:
                self._sleep(self.request.poll_interval_ms / 1000)

        logger.info("Playback finished at %dms.", elapsed_ms)
        return PlaybackResult(
            status="done",
            shown=shown,
            hidden=hidden,
            ticks=ticks,
            total=len(subtitles),
            elapsed_ms=elapsed_ms,
            events=tuple(events),
            message=f"Played back {shown}/{len(subtitles)} subtitles.",
        )
