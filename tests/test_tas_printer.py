from __future__ import annotations

from tasrec.recording import Frame, Move, Recording
from tasrec.script import Sequence, TasFile, parse_tas_script, recording_to_tasfile, render_tas_script
from tasrec.script.printer import _run_length, escape_string, format_number


def test_render_collapses_runs_and_tracks_elapsed() -> None:
    move = Move(
        yaw=1.5,
        pitch=-0.25,
        roll=0.0,
        mx=0.5,
        my=-1.0,
        mz=0.9375,
        freelook=True,
        triggers=(True, False, True, False, False, True),
    )
    recording = Recording(
        mission="Test Mission",
        frames=[
            Frame(delta=16),
            *[Frame(delta=33)] * 5,
            Frame(delta=20, moves=(move, None)),
            Frame(delta=8),
        ],
    )
    assert render_tas_script(recording_to_tasfile(recording)) == (
        "{\n"
        '   "Test Mission"\n'
        "   {\n"
        '      "Imported"\n'
        "      frame 16 ms // 16\n"
        "      frames 5 33 ms // 49 -> 181\n"
        "      moveframe 20 ms // 201\n"
        "      {\n"
        "         camera (1.5 -0.25 0)\n"
        "         move (0.5 -1 0.9375)\n"
        "         triggers (1 0 1 0 0 1)\n"
        "      }\n"
        "      {}\n"
        "      frame 8 ms // 209\n"
        "   }\n"
        "}\n"
    )


def test_move_frames_are_never_collapsed(sample_move: Move) -> None:
    tasfile = TasFile(mission="m", sequences=[Sequence(name="s", frames=[Frame(10, (sample_move, None))] * 2)])
    text = render_tas_script(tasfile)
    assert text.count("moveframe 10 ms") == 2
    assert "frames" not in text


def test_run_breaks_on_delta_change() -> None:
    tasfile = TasFile(
        mission="m",
        sequences=[Sequence(name="s", frames=[Frame(10), Frame(10), Frame(11), Frame(10)])],
    )
    lines = render_tas_script(tasfile).splitlines()
    assert lines[4:7] == [
        "      frames 2 10 ms // 10 -> 20",
        "      frame 11 ms // 31",
        "      frame 10 ms // 41",
    ]


def test_elapsed_carries_across_sequences() -> None:
    tasfile = TasFile(
        mission="m",
        sequences=[
            Sequence(name="a", frames=[Frame(10), Frame(10)]),
            Sequence(name="b", frames=[Frame(5)]),
        ],
    )
    text = render_tas_script(tasfile)
    assert "frames 2 10 ms // 10 -> 20\n" in text
    assert "frame 5 ms // 25\n" in text


def test_empty_tasfile() -> None:
    assert render_tas_script(TasFile(mission="")) == '{\n   ""\n}\n'


def test_absent_angles_render_as_zero() -> None:
    tasfile = TasFile(mission="m", sequences=[Sequence(name="s", frames=[Frame(1, (None, Move(yaw=2.0)))])])
    assert "         camera (2 0 0)\n" in render_tas_script(tasfile)


def test_format_number() -> None:
    assert format_number(0.0) == "0"
    assert format_number(-1.0) == "-1"
    assert format_number(0.9375) == "0.9375"
    assert format_number(0.1) == "0.1"
    assert format_number(1e-7) == "1e-07"


def test_escape_string() -> None:
    assert escape_string('a "b" \\') == '"a \\"b\\" \\\\"'


def test_rendered_script_parses_back(sample_recording: Recording) -> None:
    tasfile = TasFile(
        mission='quoted "mission" \\ name',
        sequences=[
            Sequence(name="first", frames=sample_recording.frames[:4]),
            Sequence(name="second // not a comment", frames=sample_recording.frames[4:]),
            Sequence(name="empty", frames=[]),
        ],
    )
    assert parse_tas_script(render_tas_script(tasfile)) == tasfile


def test_run_length_stops_at_run_end(sample_move: Move) -> None:
    frames = [Frame(10), Frame(10), Frame(11), Frame(10), Frame(10, (sample_move, None)), Frame(10)]
    assert _run_length(frames, 0) == 2
    assert _run_length(frames, 2) == 1
    assert _run_length(frames, 3) == 1
    assert _run_length(frames, 5) == 1


def test_render_long_alternating_deltas() -> None:
    count = 50_000
    frames = [Frame(delta=16 + i % 2) for i in range(count)] + [Frame(delta=5)] * 3
    lines = render_tas_script(TasFile(mission="m", sequences=[Sequence(name="s", frames=frames)])).splitlines()
    body = lines[4:-2]
    assert len(body) == count + 1
    assert body[0] == "      frame 16 ms // 16"
    assert body[1] == "      frame 17 ms // 33"
    total = sum(16 + i % 2 for i in range(count))
    assert body[count - 1] == f"      frame 17 ms // {total}"
    assert body[count] == f"      frames 3 5 ms // {total + 5} -> {total + 15}"
