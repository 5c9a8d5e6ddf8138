from __future__ import annotations

import pytest

from tasrec.recording import Frame, Recording
from tasrec.stats import WARMUP_FRAMES, approximate_fps, format_time, total_time_ms


@pytest.mark.parametrize(
    ("ms", "expected"),
    [
        (0, "00:00.000"),
        (83_456, "01:23.456"),
        (3_600_000, "60:00.000"),
        (-1_500, "-00:01.500"),
    ],
)
def test_format_time(ms: int, expected: str) -> None:
    assert format_time(ms) == expected


def test_total_time(sample_recording: Recording) -> None:
    assert total_time_ms(sample_recording) == 16 + 5 * 33 + 20 + 16 + 8


def test_approximate_fps_skips_warmup_and_loading() -> None:
    frames = [Frame(delta=500)] * WARMUP_FRAMES + [Frame(delta=200)] * 2 + [Frame(delta=10)] * 100
    assert approximate_fps(Recording(mission="m", frames=frames)) == pytest.approx(100.0)


def test_approximate_fps_keeps_long_frames_after_loading() -> None:
    frames = [Frame(delta=16)] * WARMUP_FRAMES + [Frame(delta=10), Frame(delta=90)]
    assert approximate_fps(Recording(mission="m", frames=frames)) == pytest.approx(20.0)


def test_approximate_fps_without_usable_frames() -> None:
    assert approximate_fps(Recording(mission="m", frames=[Frame(delta=10)] * WARMUP_FRAMES)) is None
    assert approximate_fps(Recording(mission="m", frames=[Frame(delta=0)] * 20)) is None
