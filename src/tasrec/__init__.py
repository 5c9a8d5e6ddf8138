from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tasrec")
except PackageNotFoundError:  # pragma: no cover
    # Allow running from source (e.g. `PYTHONPATH=src`) without installed package metadata.
    __version__ = "0.0.0+dev"

from .bitstream import BitStream
from .errors import BitRangeError, EndOfDataError, ParseError, RecError, Utf8Error
from .recording import Frame, Move, Recording, decode_recording, encode_recording
from .script import (
    Sequence,
    TasFile,
    parse_tas_script,
    recording_to_tasfile,
    render_tas_script,
    tasfile_to_recording,
)

__all__ = [
    "BitRangeError",
    "BitStream",
    "EndOfDataError",
    "Frame",
    "Move",
    "ParseError",
    "RecError",
    "Recording",
    "Sequence",
    "TasFile",
    "Utf8Error",
    "decode_recording",
    "encode_recording",
    "parse_tas_script",
    "recording_to_tasfile",
    "render_tas_script",
    "tasfile_to_recording",
]
