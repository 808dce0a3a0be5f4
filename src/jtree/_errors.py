"""Structured parse errors with positional context."""

from enum import Enum

type Position = int

ROOT_CONTEXT = "the document root"


class ErrorKind(Enum):
    """Failure categories raised by the parser."""

    EMPTY_INPUT = "empty_input"
    MALFORMED_ROOT = "malformed_root"
    UNEXPECTED_CHARACTER = "unexpected_character"
    NUMBER_FORMAT = "number_format"
    UNEXPECTED_END = "unexpected_end"
    SOURCE_READ = "source_read"


class JsonParseError(ValueError):
    """
    Handles JSON parsing failures with position and container context.

    Position, offending character and the rendered innermost container are
    kept as attributes; the message is formatted from them on demand so
    tooling can match either the fields or the text.
    """

    def __init__(
        self,
        kind: ErrorKind,
        pos: Position = 0,
        char: str | None = None,
        context: str | None = None,
        detail: str = "",
    ) -> None:
        if not isinstance(kind, ErrorKind):
            raise TypeError("kind must be an ErrorKind")
        if not isinstance(pos, int) or pos < 0:
            raise ValueError("pos must be a non-negative integer")

        self.kind = kind
        self.pos = pos
        self.char = char
        self.context = context
        self.detail = detail
        super().__init__(kind, pos)

    @property
    def msg(self) -> str:
        """The compatibility message for this error."""
        where = self.context if self.context is not None else ROOT_CONTEXT

        if self.kind == ErrorKind.EMPTY_INPUT:
            return "Empty string was passed to parser."
        elif self.kind == ErrorKind.MALFORMED_ROOT:
            if self.char is None:
                return (
                    f"Reached end of input at position {self.pos} before an "
                    "object '{' or an array '['."
                )
            return (
                f"Character '{self.char}' at position {self.pos} did not "
                "indicate an object '{' or an array '['."
            )
        elif self.kind == ErrorKind.UNEXPECTED_END:
            return (
                f"Unexpected end of input at position {self.pos} "
                f"while parsing {where}."
            )
        elif self.kind == ErrorKind.SOURCE_READ:
            return f"Failed to read from character source: {self.detail}"
        else:
            return (
                f"Unexpected character '{self.char}' at position "
                f"{self.pos} while parsing {where}."
            )

    def __str__(self) -> str:
        return self.msg

    def __reduce__(self) -> tuple[object, ...]:
        return (
            type(self),
            (self.kind, self.pos, self.char, self.context, self.detail),
        )

    @classmethod
    def unexpected_character(
        cls, char: str, pos: Position, context: str | None
    ) -> "JsonParseError":
        return cls(ErrorKind.UNEXPECTED_CHARACTER, pos, char, context)

    @classmethod
    def number_format(
        cls, token: str, pos: Position, context: str | None
    ) -> "JsonParseError":
        return cls(ErrorKind.NUMBER_FORMAT, pos, token[:1], context, token)

    @classmethod
    def unexpected_end(
        cls, pos: Position, context: str | None
    ) -> "JsonParseError":
        return cls(ErrorKind.UNEXPECTED_END, pos, None, context)

    @classmethod
    def source_read(
        cls, pos: Position, fault: BaseException
    ) -> "JsonParseError":
        detail = str(fault) or type(fault).__name__
        return cls(ErrorKind.SOURCE_READ, pos, detail=detail)
