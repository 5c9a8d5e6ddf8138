from __future__ import annotations

from .parser import parse_tas_script, strip_comments
from .printer import render_tas_script
from .types import IMPORTED_SEQUENCE_NAME, Sequence, TasFile, recording_to_tasfile, tasfile_to_recording

__all__ = [
    "IMPORTED_SEQUENCE_NAME",
    "Sequence",
    "TasFile",
    "parse_tas_script",
    "recording_to_tasfile",
    "render_tas_script",
    "strip_comments",
    "tasfile_to_recording",
]
