from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from srtcli.core.errors import InvalidFormat
from srtcli.core.timecode import is_sequence_number, parse_time_range, parse_unit
from srtcli.schemas.subtitle import Subtitle, SubtitleSequence

logger = logging.getLogger(__name__)

NOT_SUBTITLES_MESSAGE = "Input file is not valid subtitles"


@dataclass
class _BlockBuilder:
    sequence: int
    line_number: int
    start_ms: int | None = None
    end_ms: int | None = None
    text_lines: list[str] = field(default_factory=list)

    def build(self) -> Subtitle:
        if self.start_ms is None or self.end_ms is None:
            raise InvalidFormat(
                f"Subtitle #{self.sequence} has no time range",
                line_number=self.line_number,
            )
        if not self.text_lines:
            raise InvalidFormat(
                f"Subtitle #{self.sequence} has no caption text",
                line_number=self.line_number,
            )
        if self.end_ms < self.start_ms:
            raise InvalidFormat(
                f"Subtitle #{self.sequence} ends before it starts",
                line_number=self.line_number,
            )
        return Subtitle(
            sequence=self.sequence,
            start_ms=self.start_ms,
            end_ms=self.end_ms,
            text="\n".join(self.text_lines),
        )


def _non_empty_lines(lines: Iterable[str]) -> list[tuple[int, str]]:
    numbered: list[tuple[int, str]] = []
    for line_number, line in enumerate(lines, start=1):
        value = line.rstrip("\r\n").rstrip()
        if value.strip():
            numbered.append((line_number, value))
    return numbered


def _starts_block(numbered: list[tuple[int, str]], position: int) -> bool:
    """A digits-only line opens a block only when a time range follows it."""
    if not is_sequence_number(numbered[position][1]):
        return False
    if position + 1 >= len(numbered):
        return False
    return parse_time_range(numbered[position + 1][1]) is not None


def parse_subtitle_lines(lines: Iterable[str]) -> SubtitleSequence:
    numbered = _non_empty_lines(lines)
    if not numbered or not is_sequence_number(numbered[0][1]):
        line_number = numbered[0][0] if numbered else None
        raise InvalidFormat(NOT_SUBTITLES_MESSAGE, line_number=line_number)

    subtitles: list[Subtitle] = []
    block: _BlockBuilder | None = None
    for position, (line_number, line) in enumerate(numbered):
        if block is None or (
            block.start_ms is not None and _starts_block(numbered, position)
        ):
            if block is not None:
                subtitles.append(block.build())
            block = _BlockBuilder(sequence=parse_unit(line.strip()), line_number=line_number)
            continue

        if block.start_ms is None:
            time_range = parse_time_range(line)
            if time_range is None:
                raise InvalidFormat(
                    f"Subtitle #{block.sequence} has no time range",
                    line_number=line_number,
                )
            block.start_ms, block.end_ms = time_range
            continue

        if parse_time_range(line) is not None:
            raise InvalidFormat(
                f"Subtitle #{block.sequence} has more than one time range",
                line_number=line_number,
            )
        block.text_lines.append(line)

    if block is not None:
        subtitles.append(block.build())

    for previous, current in zip(subtitles, subtitles[1:]):
        if current.start_ms < previous.start_ms:
            raise InvalidFormat(
                f"Subtitle #{current.sequence} starts before subtitle #{previous.sequence}"
            )

    logger.debug("Parsed %d subtitle blocks.", len(subtitles))
    return SubtitleSequence(subtitles=tuple(subtitles))


def parse_subtitles(input_path: Path) -> SubtitleSequence:
    try:
        content = input_path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise InvalidFormat(f"{NOT_SUBTITLES_MESSAGE}: not UTF-8 text") from exc
    return parse_subtitle_lines(content.splitlines())
