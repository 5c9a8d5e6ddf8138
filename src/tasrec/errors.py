from __future__ import annotations


class RecError(ValueError):
    """Base class for every failure raised by the recording and script codecs."""


class BitRangeError(RecError):
    pass


class EndOfDataError(RecError):
    pass


class Utf8Error(RecError):
    pass


class ParseError(RecError):
    """Grammar violation in a TAS script.

    `span` holds `(start, end)` offsets into the source text and `contexts` the
    named grammar rules that were active, outermost first.
    """

    def __init__(
        self,
        reason: str,
        *,
        source: str,
        span: tuple[int, int],
        contexts: tuple[str, ...] = (),
    ) -> None:
        self.reason = reason
        self.span = span
        self.contexts = contexts
        start = span[0]
        self.line = source.count("\n", 0, start) + 1
        line_start = source.rfind("\n", 0, start) + 1
        self.column = start - line_start + 1
        line_end = source.find("\n", start)
        if line_end < 0:
            line_end = len(source)
        self.source_line = source[line_start:line_end]
        super().__init__(self._render())

    def _render(self) -> str:
        lines = [f"{self.line}:{self.column}: {self.reason}"]
        for name in reversed(self.contexts):
            lines.append(f"  in {name}")
        lines.append(self.source_line)
        width = max(1, self.span[1] - self.span[0])
        width = min(width, max(1, len(self.source_line) - self.column + 1))
        lines.append(" " * (self.column - 1) + "^" * width)
        return "\n".join(lines)
