from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from .errors import RecError
from .export import recording_from_text
from .recording import Recording, decode_recording, encode_recording, recording_to_json
from .script import IMPORTED_SEQUENCE_NAME, recording_to_tasfile, render_tas_script
from .stats import approximate_fps, format_time, total_time_ms

app = typer.Typer(add_completion=False)

REC_SUFFIX = ".rec"


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _fail(message: str) -> typer.Exit:
    typer.echo(message, err=True)
    return typer.Exit(code=1)


def _read_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise _fail(f"cannot read {path}: {exc}") from exc


def _load_recording(path: Path) -> Recording:
    data = _read_bytes(path)
    try:
        return decode_recording(data)
    except RecError as exc:
        raise _fail(f"failed to decode {path}: {exc}") from exc


def _load_script(path: Path) -> Recording:
    try:
        text = _read_bytes(path).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise _fail(f"failed to parse {path}: not valid UTF-8 ({exc})") from exc
    try:
        return recording_from_text(text)
    except RecError as exc:
        raise _fail(f"failed to parse {path}:\n{exc}") from exc


@app.callback()
def cmd_root(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="enable debug logging"),
) -> None:
    """Convert input recordings to and from TAS scripts."""
    setup_logging(verbose)


@app.command("decode")
def cmd_decode(
    rec_file: Path = typer.Argument(..., help="binary recording (.rec)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="output path (default: stdout)"),
    as_json: bool = typer.Option(False, "--json", help="write the JSON interchange form instead of a TAS script"),
    sequence_name: str = typer.Option(IMPORTED_SEQUENCE_NAME, help="name of the generated sequence"),
) -> None:
    """Decode a binary recording into a TAS script."""
    recording = _load_recording(rec_file)
    if as_json:
        text = recording_to_json(recording).decode("utf-8") + "\n"
    else:
        text = render_tas_script(recording_to_tasfile(recording, sequence_name=sequence_name))
    if output is None:
        typer.echo(text, nl=False)
        return
    output.write_text(text, encoding="utf-8")
    typer.echo(f"wrote {len(recording.frames)} frames to {output}")


@app.command("encode")
def cmd_encode(
    script_file: Path = typer.Argument(..., help="TAS script or recording JSON"),
    output: Path | None = typer.Option(None, "--output", "-o", help="output path (default: <input>.rec)"),
) -> None:
    """Encode a TAS script (or recording JSON) into a binary recording."""
    recording = _load_script(script_file)
    try:
        blob = encode_recording(recording)
    except RecError as exc:
        raise _fail(f"failed to encode {script_file}: {exc}") from exc
    out_path = output if output is not None else script_file.with_suffix(REC_SUFFIX)
    if out_path == script_file:
        raise _fail(f"refusing to overwrite input {script_file}; pass --output")
    out_path.write_bytes(blob)
    typer.echo(f"wrote {len(recording.frames)} frames ({len(blob)} bytes) to {out_path}")


@app.command("info")
def cmd_info(
    rec_files: list[Path] = typer.Argument(..., help="binary recordings (.rec)"),
) -> None:
    """Print mission, frame and timing statistics for recordings."""
    for rec_file in rec_files:
        recording = _load_recording(rec_file)
        total_ms = total_time_ms(recording)
        fps = approximate_fps(recording)
        typer.echo(f"file: {rec_file}")
        typer.echo(f"mission: {recording.mission}")
        typer.echo(f"frames: {len(recording.frames)}")
        typer.echo(f"move frames: {sum(1 for frame in recording.frames if frame.has_move)}")
        typer.echo(f"total time: {total_ms} ({format_time(total_ms)})")
        typer.echo(f"approximate fps: {'n/a' if fps is None else f'{fps:.1f}'}")


def main(argv: list[str] | None = None) -> None:
    app(prog_name="tasrec", args=argv)


if __name__ == "__main__":
    main()
