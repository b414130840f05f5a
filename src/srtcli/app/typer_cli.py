from __future__ import annotations

from pathlib import Path

import typer

from srtcli.core.errors import InvalidFormat, SrtcliError, UsageError
from srtcli.core.report import collect_subtitle_report, render_subtitle_report
from srtcli.core.scheduler import PlaybackRequest, PlaybackScheduler
from srtcli.core.subtitle import parse_subtitles
from srtcli.infra.config import APP_NAME, APP_VERSION, build_app_config
from srtcli.infra.log import setup_logging

EXIT_USAGE_ERROR = 2
EXIT_INTERRUPTED = 130

app = typer.Typer(
    name=APP_NAME,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Utility to playback subtitles on the command line.",
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"{APP_NAME} v. {APP_VERSION}")
        raise typer.Exit()


def _display_error(ctx: typer.Context, error: SrtcliError) -> None:
    message = str(error).rstrip(".")
    typer.echo(f"Error: {message}.")
    typer.echo()
    typer.echo(ctx.get_help())
    raise typer.Exit(code=EXIT_USAGE_ERROR)


@app.command()
def play_command(
    ctx: typer.Context,
    file: Path | None = typer.Option(
        None, "--file", "-f", help="Subtitle file (SubRip Text) to playback."
    ),
    clock: bool = typer.Option(
        False, "--clock", "-c", help="Display a playback clock."
    ),
    match: str | None = typer.Option(
        None,
        "--match",
        help="exact|threshold (default: threshold, or SRTCLI_MATCH_MODE).",
    ),
    poll_interval_ms: int | None = typer.Option(
        None,
        "--poll-interval-ms",
        help="Sleep between polls in ms (default: 0, or SRTCLI_POLL_INTERVAL_MS).",
    ),
    check: bool = typer.Option(
        False, "--check", help="Validate the file and list its subtitles without playback."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log scheduler events to stderr."
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Display version information and exit.",
    ),
) -> None:
    """Play back a SubRip subtitle file in the terminal."""
    del version
    setup_logging(verbose)
    try:
        if file is None:
            no_options = not (clock or check or verbose or match or poll_interval_ms is not None)
            raise UsageError(
                "No options specified" if no_options else "No subtitle file specified"
            )
        if not file.exists() or not file.is_file():
            raise UsageError(f"Subtitle file not found: {file}")
        try:
            config = build_app_config(
                subtitle_path=file,
                use_clock=clock,
                match_mode=match,
                poll_interval_ms=poll_interval_ms,
                verbose=verbose,
            )
        except ValueError as exc:
            raise UsageError(str(exc)) from exc

        try:
            if check:
                report = collect_subtitle_report(config.subtitle_path)
            else:
                subtitles = parse_subtitles(config.subtitle_path)
        except OSError as exc:
            raise UsageError(f"Cannot read subtitle file: {file}") from exc

        if check:
            typer.echo(render_subtitle_report(report))
            if not report.ok:
                raise typer.Exit(code=EXIT_USAGE_ERROR)
            return

        scheduler = PlaybackScheduler(
            PlaybackRequest(
                subtitles=subtitles,
                source_name=str(config.subtitle_path),
                use_clock=config.use_clock,
                match_mode=config.match_mode,
                poll_interval_ms=config.poll_interval_ms,
                preamble_seconds=config.preamble_seconds,
            )
        )
    except (UsageError, InvalidFormat) as exc:
        _display_error(ctx, exc)
        return

    try:
        result = scheduler.play()
    except KeyboardInterrupt:
        typer.echo("[stopped] Playback interrupted.")
        raise typer.Exit(code=EXIT_INTERRUPTED) from None
    typer.echo(f"[{result.status}] {result.message}")


def run() -> None:
    """Console-script entrypoint."""
    app()
