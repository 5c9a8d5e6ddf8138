from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, TypeAlias

TRIGGER_COUNT: Final[int] = 6
PLAYER_SLOTS: Final[int] = 2
MAX_DELTA_MS: Final[int] = (1 << 10) - 1

Triggers: TypeAlias = tuple[bool, bool, bool, bool, bool, bool]

NO_TRIGGERS: Final[Triggers] = (False, False, False, False, False, False)


@dataclass(frozen=True, slots=True)
class Move:
    """One player's input sample for a frame.

    Angles are radians in [-pi, pi); `None` means the angle did not change.
    Translation components are fixed-point with a 1/16 step starting at -1.0.
    """

    yaw: float | None = None
    pitch: float | None = None
    roll: float | None = None
    mx: float = 0.0
    my: float = 0.0
    mz: float = 0.0
    freelook: bool = False
    triggers: Triggers = NO_TRIGGERS

    def __post_init__(self) -> None:
        if len(self.triggers) != TRIGGER_COUNT:
            raise ValueError(f"move must have {TRIGGER_COUNT} triggers, got {len(self.triggers)}")


MoveSlots: TypeAlias = tuple[Move | None, Move | None]


@dataclass(frozen=True, slots=True)
class Frame:
    """One recorded time step: up to two moves plus elapsed milliseconds.

    An absent move slot carries the previous move for that player.
    """

    delta: int
    moves: MoveSlots = (None, None)

    def __post_init__(self) -> None:
        if len(self.moves) != PLAYER_SLOTS:
            raise ValueError(f"frame must have {PLAYER_SLOTS} move slots, got {len(self.moves)}")

    @property
    def has_move(self) -> bool:
        return self.moves[0] is not None or self.moves[1] is not None


@dataclass(slots=True)
class Recording:
    mission: str
    frames: list[Frame] = field(default_factory=list)
