from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from srtcli.core.errors import InvalidFormat
from srtcli.core.subtitle import parse_subtitles
from srtcli.core.timecode import format_timecode
from srtcli.schemas.subtitle import SubtitleSequence


@dataclass(frozen=True)
class SubtitleReport:
    input_path: Path
    subtitles: SubtitleSequence | None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def collect_subtitle_report(input_path: Path) -> SubtitleReport:
    try:
        subtitles = parse_subtitles(input_path)
    except InvalidFormat as exc:
        return SubtitleReport(input_path=input_path, subtitles=None, error=str(exc))
    return SubtitleReport(input_path=input_path, subtitles=subtitles)


def render_subtitle_report(report: SubtitleReport) -> str:
    header = "srtcli check: OK" if report.ok else "srtcli check: FAIL"
    lines = [header, f"- file: {report.input_path}"]
    if report.subtitles is None:
        lines.append(f"- error: {report.error}")
        return "\n".join(lines)
    runtime_ms = report.subtitles.runtime_ms
    lines.append(f"- subtitles: {len(report.subtitles)}")
    lines.append(f"- runtime: {format_timecode(runtime_ms)} [{runtime_ms}ms]")
    for subtitle in report.subtitles:
        lines.append(f"- {subtitle}".replace("\n", " / "))
    return "\n".join(lines)
