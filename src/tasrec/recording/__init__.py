from __future__ import annotations

from .codec import decode_recording, encode_recording, pack_frame, unpack_frame
from .interchange import recording_from_json, recording_to_json
from .types import MAX_DELTA_MS, NO_TRIGGERS, TRIGGER_COUNT, Frame, Move, Recording

__all__ = [
    "MAX_DELTA_MS",
    "NO_TRIGGERS",
    "TRIGGER_COUNT",
    "Frame",
    "Move",
    "Recording",
    "decode_recording",
    "encode_recording",
    "pack_frame",
    "recording_from_json",
    "recording_to_json",
    "unpack_frame",
]
