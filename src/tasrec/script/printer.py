from __future__ import annotations

from collections.abc import Sequence as Seq
from typing import Final

from ..recording.types import Frame, Move
from .types import Sequence, TasFile

INDENT: Final[str] = "   "


def escape_string(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def format_number(value: float) -> str:
    # Shortest round-trip form; integral values drop the trailing ".0".
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return text


def _run_length(frames: Seq[Frame], start: int) -> int:
    delta = frames[start].delta
    end = start
    while end < len(frames) and not frames[end].has_move and frames[end].delta == delta:
        end += 1
    return end - start


def _render_move(move: Move | None, depth: int) -> list[str]:
    pad = INDENT * depth
    if move is None:
        return [f"{pad}{{}}"]
    inner = INDENT * (depth + 1)
    camera = " ".join(format_number(angle or 0.0) for angle in (move.yaw, move.pitch, move.roll))
    axes = " ".join(format_number(axis) for axis in (move.mx, move.my, move.mz))
    triggers = " ".join("1" if pressed else "0" for pressed in move.triggers)
    return [
        f"{pad}{{",
        f"{inner}camera ({camera})",
        f"{inner}move ({axes})",
        f"{inner}triggers ({triggers})",
        f"{pad}}}",
    ]


def _render_sequence(sequence: Sequence, elapsed: int) -> tuple[list[str], int]:
    pad = INDENT * 2
    lines = [f"{INDENT}{{", f"{pad}{escape_string(sequence.name)}"]
    frames = sequence.frames
    i = 0
    while i < len(frames):
        frame = frames[i]
        delta = int(frame.delta)
        elapsed += delta
        if frame.has_move:
            lines.append(f"{pad}moveframe {delta} ms // {elapsed}")
            lines.extend(_render_move(frame.moves[0], 2))
            lines.extend(_render_move(frame.moves[1], 2))
            i += 1
            continue

        count = _run_length(frames, i)
        if count > 1:
            end = elapsed + delta * (count - 1)
            lines.append(f"{pad}frames {count} {delta} ms // {elapsed} -> {end}")
            elapsed = end
        else:
            lines.append(f"{pad}frame {delta} ms // {elapsed}")
        i += count
    lines.append(f"{INDENT}}}")
    return lines, elapsed


def render_tas_script(tasfile: TasFile) -> str:
    """Render a TAS script.

    Runs of two or more no-move frames with equal delta collapse into one
    `frames` statement. Every statement ends with a comment holding the
    cumulative elapsed milliseconds.
    """

    lines = ["{", f"{INDENT}{escape_string(tasfile.mission)}"]
    elapsed = 0
    for sequence in tasfile.sequences:
        sequence_lines, elapsed = _render_sequence(sequence, elapsed)
        lines.extend(sequence_lines)
    lines.append("}")
    return "\n".join(lines) + "\n"
