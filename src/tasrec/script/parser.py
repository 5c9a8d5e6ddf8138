from __future__ import annotations

import math
import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Final

from ..errors import ParseError
from ..recording.types import TRIGGER_COUNT, Frame, Move
from .types import Sequence, TasFile

# Grammar:
#
#   tasfile    := '{' string sequence* '}'
#   sequence   := '{' string frame_stmt* '}'
#   frame_stmt := 'frame' NUM 'ms'
#               | 'frames' NUM NUM? 'ms'?
#               | 'moveframe' NUM 'ms' move move
#   move       := '{' ( 'camera' float3 'move' float3 'triggers' bool6 )? '}'
#   float3     := '(' NUM NUM NUM ')'
#   bool6      := '(' BIT BIT BIT BIT BIT BIT ')'
#   string     := '"' ( [^"\\] | '\\' | '\"' )* '"'
#
# Whitespace is insignificant between tokens; `//` starts a comment that runs
# to the end of the line.

_WHITESPACE: Final[str] = " \t\r\n"
_STRING_OR_COMMENT_RE = re.compile(r'"(?:[^"\\]|\\[\s\S])*"|//[^\n]*')
_NUMBER_RE = re.compile(r"[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")
_WORD_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_ESCAPABLE: Final[str] = '"\\'

DEFAULT_FRAMES_DELTA_MS: Final[int] = 1
# Upper bound for the repeat count of one `frames` statement.
MAX_FRAMES_COUNT: Final[int] = 1 << 20


def strip_comments(text: str) -> str:
    """Blank out `//` comments, leaving string literals and offsets untouched."""

    def _blank(match: re.Match[str]) -> str:
        token = match.group(0)
        if token.startswith("//"):
            return " " * len(token)
        return token

    return _STRING_OR_COMMENT_RE.sub(_blank, text)


class _Parser:
    def __init__(self, source: str) -> None:
        self._source = source
        self._text = strip_comments(source)
        self._pos = 0
        self._contexts: list[str] = []

    # -- scanning ------------------------------------------------------------

    @contextmanager
    def _rule(self, name: str) -> Iterator[None]:
        self._contexts.append(name)
        try:
            yield
        finally:
            self._contexts.pop()

    def _error(self, reason: str, span: tuple[int, int] | None = None) -> ParseError:
        if span is None:
            span = self._next_span()
        return ParseError(reason, source=self._source, span=span, contexts=tuple(self._contexts))

    def _skip_ws(self) -> None:
        text = self._text
        pos = self._pos
        while pos < len(text) and text[pos] in _WHITESPACE:
            pos += 1
        self._pos = pos

    def _next_span(self) -> tuple[int, int]:
        self._skip_ws()
        pos = self._pos
        if pos >= len(self._text):
            return (pos, pos)
        match = _WORD_RE.match(self._text, pos) or _NUMBER_RE.match(self._text, pos)
        if match is not None:
            return match.span()
        return (pos, pos + 1)

    def _describe_next(self) -> str:
        start, end = self._next_span()
        if start == end:
            return "end of input"
        return repr(self._text[start:end])

    def _peek_char(self) -> str:
        self._skip_ws()
        return self._text[self._pos : self._pos + 1]

    def _expect_char(self, char: str) -> None:
        if self._peek_char() != char:
            raise self._error(f"expected {char!r}, found {self._describe_next()}")
        self._pos += 1

    def _peek_word(self) -> str | None:
        self._skip_ws()
        match = _WORD_RE.match(self._text, self._pos)
        if match is None:
            return None
        return match.group(0)

    def _expect_word(self, word: str) -> None:
        if self._peek_word() != word:
            raise self._error(f"expected {word!r}, found {self._describe_next()}")
        self._pos += len(word)

    def _peek_number(self) -> bool:
        self._skip_ws()
        return _NUMBER_RE.match(self._text, self._pos) is not None

    def _number(self) -> float:
        self._skip_ws()
        match = _NUMBER_RE.match(self._text, self._pos)
        if match is None:
            raise self._error(f"expected a number, found {self._describe_next()}")
        value = float(match.group(0))
        if not math.isfinite(value):
            raise self._error(f"number out of range: {match.group(0)}", match.span())
        self._pos = match.end()
        return value

    def _count(self, what: str, limit: int | None = None) -> int:
        self._skip_ws()
        start = self._pos
        value = self._number()
        if value < 0:
            raise self._error(f"{what} must not be negative", (start, self._pos))
        if limit is not None and int(value) > limit:
            raise self._error(f"{what} {self._text[start : self._pos]} exceeds {limit}", (start, self._pos))
        return int(value)

    def _bit(self) -> bool:
        self._skip_ws()
        match = _NUMBER_RE.match(self._text, self._pos)
        if match is None or match.group(0) not in ("0", "1"):
            raise self._error(f"expected 0 or 1, found {self._describe_next()}")
        self._pos = match.end()
        return match.group(0) == "1"

    # -- grammar rules -------------------------------------------------------

    def parse(self) -> TasFile:
        tasfile = self._tasfile()
        self._skip_ws()
        if self._pos < len(self._text):
            raise self._error(f"unexpected {self._describe_next()} after end of tasfile")
        return tasfile

    def _tasfile(self) -> TasFile:
        with self._rule("tasfile"):
            self._expect_char("{")
            mission = self._string()
            sequences: list[Sequence] = []
            while self._peek_char() == "{":
                sequences.append(self._sequence())
            self._expect_char("}")
        return TasFile(mission=mission, sequences=sequences)

    def _sequence(self) -> Sequence:
        with self._rule("sequence"):
            self._expect_char("{")
            name = self._string()
            frames: list[Frame] = []
            while (word := self._peek_word()) is not None:
                if word == "frame":
                    frames.extend(self._frame())
                elif word == "frames":
                    frames.extend(self._frames())
                elif word == "moveframe":
                    frames.extend(self._moveframe())
                else:
                    raise self._error(
                        f"unknown statement {word!r}, expected 'frame', 'frames' or 'moveframe'"
                    )
            self._expect_char("}")
        return Sequence(name=name, frames=frames)

    def _frame(self) -> list[Frame]:
        with self._rule("frame"):
            self._expect_word("frame")
            delta = self._count("frame delta")
            self._expect_word("ms")
        return [Frame(delta=delta)]

    def _frames(self) -> list[Frame]:
        with self._rule("frames"):
            self._expect_word("frames")
            count = self._count("frame count", MAX_FRAMES_COUNT)
            delta = DEFAULT_FRAMES_DELTA_MS
            if self._peek_number():
                delta = self._count("frame delta")
            if self._peek_word() == "ms":
                self._expect_word("ms")
        return [Frame(delta=delta)] * count

    def _moveframe(self) -> list[Frame]:
        with self._rule("moveframe"):
            self._expect_word("moveframe")
            delta = self._count("frame delta")
            self._expect_word("ms")
            move0 = self._move()
            move1 = self._move()
        return [Frame(delta=delta, moves=(move0, move1))]

    def _move(self) -> Move | None:
        with self._rule("move"):
            self._expect_char("{")
            if self._peek_char() == "}":
                self._pos += 1
                return None
            self._expect_word("camera")
            yaw, pitch, roll = self._float3()
            self._expect_word("move")
            mx, my, mz = self._float3()
            self._expect_word("triggers")
            triggers = self._bool6()
            self._expect_char("}")
        # The script cannot express an absent angle or freelook off.
        return Move(
            yaw=yaw,
            pitch=pitch,
            roll=roll,
            mx=mx,
            my=my,
            mz=mz,
            freelook=True,
            triggers=triggers,  # type: ignore[arg-type]
        )

    def _float3(self) -> tuple[float, float, float]:
        with self._rule("float3"):
            self._expect_char("(")
            values = (self._number(), self._number(), self._number())
            self._expect_char(")")
        return values

    def _bool6(self) -> tuple[bool, ...]:
        with self._rule("bool6"):
            self._expect_char("(")
            values = tuple(self._bit() for _ in range(TRIGGER_COUNT))
            self._expect_char(")")
        return values

    def _string(self) -> str:
        with self._rule("string"):
            self._expect_char('"')
            start = self._pos - 1
            text = self._text
            pos = self._pos
            chars: list[str] = []
            while True:
                if pos >= len(text):
                    raise self._error("unterminated string", (start, pos))
                char = text[pos]
                if char == '"':
                    pos += 1
                    break
                if char == "\\":
                    escaped = text[pos + 1 : pos + 2]
                    if not escaped or escaped not in _ESCAPABLE:
                        raise self._error(f"invalid escape sequence {text[pos : pos + 2]!r}", (pos, pos + 2))
                    chars.append(escaped)
                    pos += 2
                    continue
                chars.append(char)
                pos += 1
            self._pos = pos
        return "".join(chars)


def parse_tas_script(text: str) -> TasFile:
    """Parse TAS script text.

    Raises `ParseError` with the offending span and rule context chain; a
    partial result is never returned.
    """
    return _Parser(text).parse()
