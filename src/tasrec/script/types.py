from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final

from ..recording.types import Frame, Recording

IMPORTED_SEQUENCE_NAME: Final[str] = "Imported"


@dataclass(slots=True)
class Sequence:
    name: str
    frames: list[Frame] = field(default_factory=list)


@dataclass(slots=True)
class TasFile:
    """Script form of a recording: frames grouped into named sequences.

    The grouping exists only in text; the binary format keeps the flat frame list.
    """

    mission: str
    sequences: list[Sequence] = field(default_factory=list)

    def frames(self) -> list[Frame]:
        return [frame for sequence in self.sequences for frame in sequence.frames]


def recording_to_tasfile(recording: Recording, *, sequence_name: str = IMPORTED_SEQUENCE_NAME) -> TasFile:
    return TasFile(
        mission=recording.mission,
        sequences=[Sequence(name=sequence_name, frames=list(recording.frames))],
    )


def tasfile_to_recording(tasfile: TasFile) -> Recording:
    return Recording(mission=tasfile.mission, frames=tasfile.frames())
