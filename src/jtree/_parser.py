"""
Streaming JSON parser.

A nesting-stack state machine over ``CharacterReader``: each ``{`` or ``[``
pushes a build frame, each matching close pops it and commits the sealed
container to the frame below. The loop is iterative, so nesting depth is
bounded by memory rather than by the interpreter's recursion limit.
"""

import io
import logging
import math
import re
from dataclasses import dataclass
from dataclasses import field
from typing import ClassVar
from typing import Final

from ._errors import ErrorKind
from ._errors import JsonParseError
from ._errors import Position
from ._profile import ProfileContext
from ._reader import DEFAULT_CHUNK_SIZE
from ._reader import DEFAULT_MAX_BUFFER_SIZE
from ._reader import CharacterReader
from ._reader import CharacterSource
from ._values import FLOAT32_MAX
from ._values import FLOAT32_MIN
from ._values import INT32_MAX
from ._values import INT32_MIN
from ._values import INT64_MAX
from ._values import INT64_MIN
from ._values import Container
from ._values import Float64
from ._values import Int32
from ._values import Int64
from ._values import JsonArray
from ._values import JsonObject
from ._values import Value
from ._values import kind_of
from ._values import nearest_float32
from ._values import render

logger = logging.getLogger(__name__)

_STRING_RUN: Final = re.compile(r'[^"\\]*')
_NUMBER_RUN: Final = re.compile(r"[-0-9.]*")
_NUMBER_START: Final = frozenset("-0123456789")

# Escapes kept verbatim, backslash included, in decoded strings
_PRESERVED_ESCAPES: Final = frozenset("\\/bfnrtu")

_LITERALS: Final[dict[str, tuple[str, Value]]] = {
    "t": ("true", True),
    "f": ("false", False),
    "n": ("null", None),
    "I": ("Infinity", Float64(math.inf)),
}


@dataclass(frozen=True)
class ParseConfig:
    """
    Configures the reader's buffering with immutable settings.

    ``max_buffer_size`` bounds how many characters are held in memory at
    once; ``chunk_size`` is how many are requested from the source per read.
    """

    max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE
    chunk_size: int = DEFAULT_CHUNK_SIZE

    def __post_init__(self) -> None:
        for name in ("max_buffer_size", "chunk_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool):
                raise TypeError(f"{name} must be an integer")
            if value <= 0:
                raise ValueError(f"{name} must be positive")
        if self.chunk_size > self.max_buffer_size:
            raise ValueError("chunk_size must not exceed max_buffer_size")


@dataclass
class _ObjectFrame:
    """An object under construction and the key awaiting its value."""

    closer: ClassVar[str] = "}"

    container: JsonObject = field(default_factory=JsonObject)
    key: str | None = None
    expecting_key: bool = True


@dataclass
class _ArrayFrame:
    """An array under construction."""

    closer: ClassVar[str] = "]"

    container: JsonArray = field(default_factory=JsonArray)


type _Frame = _ObjectFrame | _ArrayFrame


class _TreeBuilder:
    """
    Cursor state for one parse call: the reader and the nesting stack.

    Never shared between calls; ``JsonParser.parse`` creates a fresh one.
    """

    def __init__(self, reader: CharacterReader) -> None:
        self.reader = reader
        self.frames: list[_Frame] = []

    def build(self) -> Container:
        reader = self.reader
        char = reader.skip_whitespace()
        if not char:
            if reader.position == 0:
                raise JsonParseError(ErrorKind.EMPTY_INPUT)
            raise JsonParseError(ErrorKind.MALFORMED_ROOT, reader.position)
        if char not in "{[":
            raise JsonParseError(
                ErrorKind.MALFORMED_ROOT, reader.position, char
            )

        reader.advance()
        self._open(char)

        while True:
            char = reader.skip_whitespace()
            pos = reader.position
            if not char:
                raise self._unexpected_end(pos)
            reader.advance()

            frame = self.frames[-1]
            if char == frame.closer:
                sealed = self._close(char, pos)
                if sealed is not None:
                    return sealed
            elif char == ":":
                self._begin_value(char, pos)
            elif char == ",":
                if isinstance(frame, _ObjectFrame):
                    frame.expecting_key = True
            elif char == '"':
                text = self._read_string()
                if isinstance(frame, _ObjectFrame) and frame.expecting_key:
                    if frame.key is not None:
                        raise self._unexpected(char, pos)
                    frame.key = text
                else:
                    self._commit(text)
            elif char in _LITERALS:
                self._check_value_allowed(char, pos)
                self._commit(self._read_literal(char))
            elif char in _NUMBER_START:
                self._check_value_allowed(char, pos)
                self._commit(self._read_number(char, pos))
            elif char == "{" or char == "[":
                self._check_value_allowed(char, pos)
                self._open(char)
            else:
                raise self._unexpected(char, pos)

    def _open(self, char: str) -> None:
        if char == "{":
            self.frames.append(_ObjectFrame())
        else:
            self.frames.append(_ArrayFrame())

    def _close(self, char: str, pos: Position) -> Container | None:
        """Seals the top frame; returns the root once the stack empties."""
        frame = self.frames[-1]
        if isinstance(frame, _ObjectFrame) and frame.key is not None:
            raise self._unexpected(char, pos)

        self.frames.pop()
        if not self.frames:
            return frame.container
        self._commit(frame.container)
        return None

    def _begin_value(self, char: str, pos: Position) -> None:
        frame = self.frames[-1]
        if isinstance(frame, _ObjectFrame):
            if frame.key is None:
                raise self._unexpected(char, pos)
            frame.expecting_key = False

    def _check_value_allowed(self, char: str, pos: Position) -> None:
        """Values inside an object need a key and a preceding colon."""
        frame = self.frames[-1]
        if isinstance(frame, _ObjectFrame) and (
            frame.expecting_key or frame.key is None
        ):
            raise self._unexpected(char, pos)

    def _commit(self, value: Value) -> None:
        frame = self.frames[-1]
        if isinstance(frame, _ObjectFrame):
            key = frame.key
            if key is None:
                raise RuntimeError("object value committed without a key")
            frame.container[key] = value
            frame.key = None
            frame.expecting_key = True
        else:
            frame.container.append(value)

    def _read_string(self) -> str:
        """Reads up to the closing quote; the opening one is consumed."""
        reader = self.reader
        parts: list[str] = []
        with ProfileContext("read_string") as profile:
            while True:
                parts.append(reader.read_span(_STRING_RUN))
                pos = reader.position
                char = reader.advance()
                if char == '"':
                    break
                if not char:
                    raise self._unexpected_end(pos)

                pos = reader.position
                escaped = reader.advance()
                if escaped == '"':
                    parts.append('"')
                elif escaped in _PRESERVED_ESCAPES:
                    parts.append("\\" + escaped)
                elif not escaped:
                    raise self._unexpected_end(pos)
                else:
                    raise self._unexpected(escaped, pos)

            text = "".join(parts)
            profile.count(len(text))
        return text

    def _read_literal(self, first: str) -> Value:
        reader = self.reader
        word, value = _LITERALS[first]
        for expected in word[1:]:
            pos = reader.position
            char = reader.advance()
            if not char:
                raise self._unexpected_end(pos)
            if char != expected:
                raise self._unexpected(char, pos)
        return value

    def _read_number(self, first: str, start: Position) -> Value:
        """
        Reads a numeral and narrows it to the smallest fitting width.

        Integers become Int32 when they fit, else Int64. Decimals become
        Float32 when strictly inside (FLOAT32_MIN, FLOAT32_MAX), else
        Float64; negative decimals and zero therefore stay Float64.
        """
        with ProfileContext("read_number") as profile:
            token = first + self.reader.read_span(_NUMBER_RUN)
            profile.count(len(token))

        point = token.find(".")
        if point != -1:
            second = token.find(".", point + 1)
            if second != -1:
                raise self._unexpected(".", start + second)
            try:
                decimal = float(token)
            except ValueError as e:
                raise self._number_format(token, start) from e
            if FLOAT32_MIN < decimal < FLOAT32_MAX:
                return nearest_float32(token)
            return Float64(decimal)

        try:
            integer = int(token)
        except ValueError as e:
            raise self._number_format(token, start) from e
        if INT32_MIN <= integer <= INT32_MAX:
            return Int32(integer)
        if INT64_MIN <= integer <= INT64_MAX:
            return Int64(integer)
        raise self._number_format(token, start)

    def _context(self) -> str | None:
        if not self.frames:
            return None
        return render(self.frames[-1].container)

    def _unexpected(self, char: str, pos: Position) -> JsonParseError:
        return JsonParseError.unexpected_character(char, pos, self._context())

    def _unexpected_end(self, pos: Position) -> JsonParseError:
        return JsonParseError.unexpected_end(pos, self._context())

    def _number_format(self, token: str, pos: Position) -> JsonParseError:
        return JsonParseError.number_format(token, pos, self._context())


class JsonParser:
    """
    Parses JSON text into a ``JsonObject`` or ``JsonArray``.

    The root must be an object or an array. Input is pulled through a
    bounded buffer, so a stream is never read into memory whole. After a
    call, ``parsed_chars`` is the number of characters pulled from the
    source and ``end_position`` the offset just past the root's closing
    delimiter; anything after it is left unparsed.

    An instance may be reused but must not be shared between threads.
    """

    def __init__(self, config: ParseConfig | None = None) -> None:
        self.config = config if config is not None else ParseConfig()
        self.parsed_chars = 0
        self.end_position: Position = 0

    def parse(self, source: str | CharacterSource) -> Container:
        """Parses ``source``, a string or a readable text stream."""
        if isinstance(source, str):
            source = io.StringIO(source)
        elif not hasattr(source, "read"):
            msg = (
                "source must be str or have a read() method, "
                f"not {type(source).__name__}"
            )
            raise TypeError(msg)

        reader = CharacterReader(
            source, self.config.max_buffer_size, self.config.chunk_size
        )
        self.parsed_chars = 0
        self.end_position = 0

        with ProfileContext("parse") as profile:
            try:
                result = _TreeBuilder(reader).build()
            finally:
                self.parsed_chars = reader.chars_read
                profile.count(reader.position)

        self.end_position = reader.position
        logger.debug(
            "Parsed %s ending at position %d (%d characters read, %d refills)",
            kind_of(result).value,
            self.end_position,
            self.parsed_chars,
            reader.refills,
        )
        return result
