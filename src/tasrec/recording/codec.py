from __future__ import annotations

import io
import logging
import math
from typing import Final

from construct import Byte, Bytes, GreedyBytes, Prefixed, StreamError
from construct.core import ConstructError

from ..bitstream import MAX_STRING_BYTES, BitStream, decode_utf8
from ..errors import BitRangeError, EndOfDataError, RecError
from .types import TRIGGER_COUNT, Frame, Move, Recording

logger = logging.getLogger(__name__)

ANGLE_BITS: Final[int] = 16
# Angles are stored as unsigned 16-bit fractions of a full turn: [0, 2^16) -> [0, 2pi).
ANGLE_SCALE: Final[float] = math.pi / 32768.0
AXIS_BITS: Final[int] = 6
AXIS_SCALE: Final[float] = 1.0 / 16.0
AXIS_OFFSET: Final[float] = -1.0
DELTA_BITS: Final[int] = 10

MIN_FRAME_BYTES: Final[int] = 4
MAX_FRAME_BYTES: Final[int] = 0xFF

_MISSION = Prefixed(Byte, GreedyBytes)
_FRAME_LENGTH = Byte
_FRAME_BLOB = Prefixed(Byte, GreedyBytes)


def read_angle(bs: BitStream) -> float:
    angle = bs.read_scaled_float(ANGLE_BITS, ANGLE_SCALE, 0.0)
    if angle >= math.pi:
        return angle - 2.0 * math.pi
    return angle


def write_angle(bs: BitStream, angle: float) -> None:
    angle = float(angle)
    if angle < 0.0:
        angle += 2.0 * math.pi
        # Tiny negative angles round up to a full turn.
        if angle >= 2.0 * math.pi:
            angle = 0.0
    bs.write_scaled_float(angle, ANGLE_BITS, ANGLE_SCALE, 0.0)


def read_move(bs: BitStream) -> Move:
    yaw = bs.read_optional(read_angle)
    pitch = bs.read_optional(read_angle)
    roll = bs.read_optional(read_angle)
    mx = bs.read_scaled_float(AXIS_BITS, AXIS_SCALE, AXIS_OFFSET)
    my = bs.read_scaled_float(AXIS_BITS, AXIS_SCALE, AXIS_OFFSET)
    mz = bs.read_scaled_float(AXIS_BITS, AXIS_SCALE, AXIS_OFFSET)
    freelook = bs.read_bool()
    triggers = tuple(bs.read_bool() for _ in range(TRIGGER_COUNT))
    return Move(
        yaw=yaw,
        pitch=pitch,
        roll=roll,
        mx=mx,
        my=my,
        mz=mz,
        freelook=freelook,
        triggers=triggers,  # type: ignore[arg-type]
    )


def write_move(bs: BitStream, move: Move) -> None:
    bs.write_optional(move.yaw, write_angle)
    bs.write_optional(move.pitch, write_angle)
    bs.write_optional(move.roll, write_angle)
    bs.write_scaled_float(move.mx, AXIS_BITS, AXIS_SCALE, AXIS_OFFSET)
    bs.write_scaled_float(move.my, AXIS_BITS, AXIS_SCALE, AXIS_OFFSET)
    bs.write_scaled_float(move.mz, AXIS_BITS, AXIS_SCALE, AXIS_OFFSET)
    bs.write_bool(move.freelook)
    for pressed in move.triggers:
        bs.write_bool(pressed)


def read_frame(bs: BitStream) -> Frame:
    move0 = bs.read_optional(read_move)
    move1 = bs.read_optional(read_move)
    delta = bs.read_bits_u16(DELTA_BITS)
    return Frame(delta=delta, moves=(move0, move1))


def write_frame(bs: BitStream, frame: Frame) -> None:
    bs.write_optional(frame.moves[0], write_move)
    bs.write_optional(frame.moves[1], write_move)
    bs.write_bits_u16(frame.delta, DELTA_BITS)


def pack_frame(frame: Frame) -> bytes:
    """Bit-pack a frame into its own buffer, zero-padded to the minimum blob size."""
    bs = BitStream()
    write_frame(bs, frame)
    blob = bs.getvalue().ljust(MIN_FRAME_BYTES, b"\x00")
    if len(blob) > MAX_FRAME_BYTES:
        raise BitRangeError(f"packed frame too long: {len(blob)} bytes (max {MAX_FRAME_BYTES})")
    return blob


def unpack_frame(blob: bytes) -> Frame:
    return read_frame(BitStream(blob))


def decode_recording(data: bytes) -> Recording:
    """Decode a binary recording.

    A stream that ends inside a frame blob yields the frames decoded before it;
    any other structural problem raises a `RecError` subclass.
    """

    stream = io.BytesIO(bytes(data))
    try:
        mission_raw = _MISSION.parse_stream(stream)
    except StreamError as exc:
        raise EndOfDataError("unexpected EOF in mission name") from exc
    mission = decode_utf8(bytes(mission_raw))

    frames: list[Frame] = []
    while True:
        try:
            length = int(_FRAME_LENGTH.parse_stream(stream))
        except StreamError:
            break
        if length == 0:
            break
        start = stream.tell()
        try:
            blob = bytes(Bytes(length).parse_stream(stream))
        except StreamError:
            logger.warning(
                "truncated recording: frame %d declares %d bytes, %d available; keeping %d frames",
                len(frames),
                length,
                len(data) - start,
                len(frames),
            )
            break
        frames.append(unpack_frame(blob))

    logger.debug("decoded recording mission=%r frames=%d", mission, len(frames))
    return Recording(mission=mission, frames=frames)


def encode_recording(recording: Recording) -> bytes:
    mission_raw = recording.mission.encode("utf-8")
    if len(mission_raw) > MAX_STRING_BYTES:
        raise BitRangeError(f"mission name too long: {len(mission_raw)} bytes (max {MAX_STRING_BYTES})")

    out = bytearray()
    try:
        out += _MISSION.build(mission_raw)
        for frame in recording.frames:
            out += _FRAME_BLOB.build(pack_frame(frame))
    except ConstructError as exc:
        raise RecError(str(exc)) from exc
    return bytes(out)
