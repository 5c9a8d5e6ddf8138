from __future__ import annotations

from typing import Final

from .recording.types import Recording

# Leading frames skipped before the FPS estimate; level loading dominates them.
WARMUP_FRAMES: Final[int] = 10
LOADING_DELTA_MS: Final[int] = 50


def total_time_ms(recording: Recording) -> int:
    return sum(int(frame.delta) for frame in recording.frames)


def approximate_fps(recording: Recording) -> float | None:
    """Estimate frames per second, ignoring warm-up and long loading frames."""
    counted = 0
    total_ms = 0
    loading = True
    for frame in recording.frames[WARMUP_FRAMES:]:
        if loading and frame.delta < LOADING_DELTA_MS:
            loading = False
        if not loading:
            counted += 1
            total_ms += int(frame.delta)
    if counted == 0 or total_ms == 0:
        return None
    return counted / (total_ms / 1000.0)


def format_time(ms: int) -> str:
    sign = "-" if ms < 0 else ""
    ms = abs(int(ms))
    return f"{sign}{(ms // 1000) // 60:02d}:{(ms // 1000) % 60:02d}.{ms % 1000:03d}"
