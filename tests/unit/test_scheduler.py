from __future__ import annotations

import pytest

from srtcli.core.errors import InvalidFormat
from srtcli.core.scheduler import PlaybackRequest, PlaybackScheduler, advance
from srtcli.schemas.playback import ScheduleCursor
from srtcli.schemas.subtitle import Subtitle, SubtitleSequence


class _FakeTimer:
    def __init__(self, ticks: list[int]) -> None:
        self._ticks = ticks
        self.reads = 0
        self.started = False

    def start(self) -> None:
        self.started = True

    def elapsed_ms(self) -> int:
        value = self._ticks[min(self.reads, len(self._ticks) - 1)]
        self.reads += 1
        return value

    @property
    def exhausted(self) -> bool:
        return self.reads >= len(self._ticks)


class _RecordingDisplay:
    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def clear(self, lines: int) -> None:
        self.calls.append(("clear", lines))

    def write(self, text: str) -> None:
        self.calls.append(("write", text))

    @property
    def written(self) -> list[object]:
        return [value for kind, value in self.calls if kind == "write"]


def _sequence(*windows: tuple[int, int, str]) -> SubtitleSequence:
    return SubtitleSequence(
        subtitles=tuple(
            Subtitle(sequence=index, start_ms=start, end_ms=end, text=text)
            for index, (start, end, text) in enumerate(windows, start=1)
        )
    )


def _play(
    subtitles: SubtitleSequence,
    ticks: list[int],
    *,
    stop_when_exhausted: bool = False,
    **request_kwargs: object,
):
    timer = _FakeTimer(ticks)
    display = _RecordingDisplay()
    sleeps: list[float] = []
    scheduler = PlaybackScheduler(
        PlaybackRequest(
            subtitles=subtitles,
            source_name="movie.srt",
            record_events=True,
            **request_kwargs,
        ),
        display=display,
        timer=timer,
        sleep=sleeps.append,
        should_stop=(lambda: timer.exhausted) if stop_when_exhausted else None,
    )
    return scheduler.play(), display, sleeps


def test_single_block_shows_at_start_and_hides_at_end() -> None:
    result, display, sleeps = _play(_sequence((0, 2_000, "Hello")), [0, 1, 1_000, 2_000])

    assert result.status == "done"
    assert result.shown == 1
    assert [(event.kind, event.elapsed_ms) for event in result.events] == [
        ("show", 0),
        ("hide", 2_000),
    ]
    assert display.written == [
        "Playing back: 'movie.srt' (Runtime: 00:00:02 [2000ms])...",
        "00:00:00",
        "Hello",
    ]
    assert display.calls[-1] == ("clear", 50)
    assert sleeps == [3.0]


def test_blocks_play_in_file_order() -> None:
    subtitles = _sequence((0, 1_000, "First"), (1_500, 2_500, "Second"))
    result, _, _ = _play(subtitles, [0, 1_000, 1_200, 1_500, 2_500])

    assert [(event.kind, event.index) for event in result.events] == [
        ("show", 0),
        ("hide", 0),
        ("show", 1),
        ("hide", 1),
    ]


@pytest.mark.parametrize("match_mode", ["exact", "threshold"])
def test_clock_ticks_only_while_idle(match_mode: str) -> None:
    subtitles = _sequence((1_500, 2_500, "Caption"))
    result, display, _ = _play(
        subtitles,
        [0, 500, 1_000, 1_500, 2_000, 2_500],
        use_clock=True,
        match_mode=match_mode,
        preamble_seconds=0,
    )

    assert [(event.kind, event.elapsed_ms) for event in result.events] == [
        ("tick", 0),
        ("tick", 1_000),
        ("show", 1_500),
        ("hide", 2_500),
    ]
    assert ("clear", 40) in display.calls
    assert display.written[-3:] == ["00:00:00", "00:00:01", "Caption"]


def test_threshold_mode_catches_up_skipped_boundaries() -> None:
    subtitles = _sequence((0, 1_000, "A"), (2_000, 3_000, "B"))
    result, _, _ = _play(subtitles, [0, 10_000])

    assert result.status == "done"
    assert result.shown == 2
    assert [event.kind for event in result.events] == ["show", "hide", "show", "hide"]


def test_exact_mode_misses_skipped_millisecond() -> None:
    subtitles = _sequence((1_000, 2_000, "Missed"))
    result, display, _ = _play(
        subtitles,
        [0, 999, 1_001, 2_001],
        match_mode="exact",
        stop_when_exhausted=True,
    )

    assert result.status == "stopped"
    assert result.shown == 0
    assert "Missed" not in display.written


def test_exact_mode_still_advances_when_only_the_end_is_sampled() -> None:
    cursor = ScheduleCursor()
    subtitles = _sequence((1_000, 2_000, "Late"))

    assert advance(cursor, subtitles, 1_001, match_mode="exact") == []
    events = advance(cursor, subtitles, 2_000, match_mode="exact")

    assert [event.kind for event in events] == ["hide"]
    assert cursor.index == 1


def test_advance_does_not_repeat_show_within_same_millisecond() -> None:
    cursor = ScheduleCursor()
    subtitles = _sequence((0, 2_000, "Once"))

    first = advance(cursor, subtitles, 0, match_mode="exact")
    second = advance(cursor, subtitles, 0, match_mode="exact")

    assert [event.kind for event in first] == ["show"]
    assert second == []
    assert cursor.in_subtitle


def test_poll_interval_sleeps_between_polls() -> None:
    _, _, sleeps = _play(
        _sequence((0, 2_000, "Hello")),
        [0, 2_000],
        poll_interval_ms=5,
        preamble_seconds=0,
    )
    assert sleeps == [0.005]


def test_scheduler_rejects_empty_sequence() -> None:
    with pytest.raises(InvalidFormat, match="No subtitles"):
        PlaybackScheduler(
            PlaybackRequest(subtitles=SubtitleSequence(subtitles=()), source_name="empty.srt")
        )


def test_events_are_counted_but_not_kept_by_default() -> None:
    subtitles = _sequence((1_500, 2_500, "Caption"))
    timer = _FakeTimer([0, 1_000, 1_500, 2_500])
    result = PlaybackScheduler(
        PlaybackRequest(
            subtitles=subtitles,
            source_name="movie.srt",
            use_clock=True,
            preamble_seconds=0,
        ),
        display=_RecordingDisplay(),
        timer=timer,
        sleep=lambda _: None,
    ).play()

    assert result.events == ()
    assert (result.ticks, result.shown, result.hidden) == (2, 1, 1)
