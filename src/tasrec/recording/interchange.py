from __future__ import annotations

import msgspec

from ..errors import RecError
from .types import Frame, Move, Recording


class MoveDoc(msgspec.Struct, forbid_unknown_fields=True):
    yaw: float | None = None
    pitch: float | None = None
    roll: float | None = None
    mx: float = 0.0
    my: float = 0.0
    mz: float = 0.0
    freelook: bool = False
    triggers: tuple[bool, bool, bool, bool, bool, bool] = (False, False, False, False, False, False)


class FrameDoc(msgspec.Struct, forbid_unknown_fields=True):
    moves: tuple[MoveDoc | None, MoveDoc | None]
    delta: int


class RecordingDoc(msgspec.Struct, forbid_unknown_fields=True):
    mission: str
    frames: list[FrameDoc] = msgspec.field(default_factory=list)


def _move_doc(move: Move | None) -> MoveDoc | None:
    if move is None:
        return None
    return MoveDoc(
        yaw=move.yaw,
        pitch=move.pitch,
        roll=move.roll,
        mx=float(move.mx),
        my=float(move.my),
        mz=float(move.mz),
        freelook=bool(move.freelook),
        triggers=tuple(bool(t) for t in move.triggers),  # type: ignore[arg-type]
    )


def _move_from_doc(doc: MoveDoc | None) -> Move | None:
    if doc is None:
        return None
    return Move(
        yaw=doc.yaw,
        pitch=doc.pitch,
        roll=doc.roll,
        mx=doc.mx,
        my=doc.my,
        mz=doc.mz,
        freelook=doc.freelook,
        triggers=doc.triggers,
    )


def recording_to_doc(recording: Recording) -> RecordingDoc:
    return RecordingDoc(
        mission=recording.mission,
        frames=[
            FrameDoc(
                moves=(_move_doc(frame.moves[0]), _move_doc(frame.moves[1])),
                delta=int(frame.delta),
            )
            for frame in recording.frames
        ],
    )


def recording_from_doc(doc: RecordingDoc) -> Recording:
    return Recording(
        mission=doc.mission,
        frames=[
            Frame(
                delta=frame.delta,
                moves=(_move_from_doc(frame.moves[0]), _move_from_doc(frame.moves[1])),
            )
            for frame in doc.frames
        ],
    )


def recording_to_json(recording: Recording) -> bytes:
    return msgspec.json.encode(recording_to_doc(recording))


def recording_from_json(data: bytes | str) -> Recording:
    try:
        doc = msgspec.json.decode(data, type=RecordingDoc)
    except (msgspec.DecodeError, msgspec.ValidationError) as exc:
        raise RecError(f"invalid recording JSON: {exc}") from exc
    return recording_from_doc(doc)
