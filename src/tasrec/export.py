"""Buffer-in/buffer-out entry points for embedding hosts.

Failures never escape as exceptions here: `import_recording` returns `None`
and `export_recording` returns a buffer tagged with a leading status byte.
"""

from __future__ import annotations

import logging
from typing import Final

from .errors import RecError
from .recording import Recording, decode_recording, encode_recording, recording_from_json, recording_to_json
from .script import parse_tas_script, tasfile_to_recording

logger = logging.getLogger(__name__)

EXPORT_OK: Final[int] = 1
EXPORT_FAILED: Final[int] = 0


def import_recording(data: bytes) -> str | None:
    try:
        recording = decode_recording(data)
    except RecError as exc:
        logger.debug("import failed: %s", exc)
        return None
    return recording_to_json(recording).decode("utf-8")


def recording_from_text(text: str) -> Recording:
    """Load a recording from its JSON form, falling back to TAS script syntax."""
    try:
        return recording_from_json(text)
    except RecError:
        logger.debug("input is not recording JSON, parsing as TAS script")
    return tasfile_to_recording(parse_tas_script(text))


def export_recording(text: str) -> bytes:
    try:
        recording = recording_from_text(text)
        encoded = encode_recording(recording)
    except RecError as exc:
        logger.debug("export failed: %s", exc)
        return bytes([EXPORT_FAILED]) + str(exc).encode("utf-8")
    return bytes([EXPORT_OK]) + encoded
