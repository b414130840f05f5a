from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Subtitle:
    sequence: int
    start_ms: int
    end_ms: int
    text: str

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    def __str__(self) -> str:
        return f"Subtitle #{self.sequence} ({self.start_ms} -> {self.end_ms}): {self.text}"


@dataclass(frozen=True)
class SubtitleSequence:
    subtitles: tuple[Subtitle, ...]

    @property
    def runtime_ms(self) -> int:
        """End time of the final subtitle, used as the playback runtime."""
        if not self.subtitles:
            return 0
        return self.subtitles[-1].end_ms

    def __len__(self) -> int:
        return len(self.subtitles)

    def __iter__(self) -> Iterator[Subtitle]:
        return iter(self.subtitles)

    def __getitem__(self, index: int) -> Subtitle:
        return self.subtitles[index]
