from __future__ import annotations

import math
import sys
from pathlib import Path

import pytest


def pytest_configure(config: pytest.Config) -> None:
    # Ensure the local `src/` tree wins over any other editable install that may exist
    # (e.g. a different git worktree pointing at the same project).
    src_dir = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_dir)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


@pytest.fixture
def sample_move():
    from tasrec.recording import Move

    # Power-of-two fractions of pi and 1/16 steps survive quantization exactly.
    return Move(
        yaw=math.pi / 2,
        pitch=math.pi / 4,
        roll=0.0,
        mx=0.5,
        my=-1.0,
        mz=0.9375,
        freelook=True,
        triggers=(True, False, True, False, False, True),
    )


@pytest.fixture
def sample_recording(sample_move):
    from tasrec.recording import Frame, Recording

    return Recording(
        mission="Test Mission",
        frames=[
            Frame(delta=16),
            *[Frame(delta=33)] * 5,
            Frame(delta=20, moves=(sample_move, None)),
            Frame(delta=16, moves=(None, sample_move)),
            Frame(delta=8),
        ],
    )
