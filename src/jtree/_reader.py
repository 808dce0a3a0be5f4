"""
Bounded, refilling character reader.

The parser never sees the underlying source: it asks the reader to peek at
or consume the next character, and the reader refills its buffer from the
source whenever the buffered characters run out.
"""

import logging
import re
from typing import Final
from typing import Protocol

from ._errors import JsonParseError
from ._errors import Position
from ._profile import ProfileContext

logger = logging.getLogger(__name__)

DEFAULT_MAX_BUFFER_SIZE: Final = 1 << 20  # characters held per refill
DEFAULT_CHUNK_SIZE: Final = 1 << 10  # characters requested per read()

WHITESPACE: Final = frozenset(" \t\n\r\f")


class CharacterSource(Protocol):
    """Anything with a text-mode ``read(size)``, e.g. an open text file."""

    def read(self, size: int = -1, /) -> str: ...


class CharacterReader:
    """
    Pulls characters from a source through a bounded buffer.

    A refill reads ``chunk_size`` characters at a time until
    ``max_buffer_size`` characters are held or the source is exhausted, and
    happens only after every buffered character has been consumed, so at
    most one buffer's worth of input is in memory at once. ``position`` is
    absolute from the start of the source across refills.
    """

    def __init__(
        self,
        source: CharacterSource,
        max_buffer_size: int = DEFAULT_MAX_BUFFER_SIZE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.source = source
        self.max_buffer_size = max_buffer_size
        self.chunk_size = chunk_size
        self.buffer = ""
        self.offset = 0
        self.buffer_start: Position = 0
        self.chars_read = 0
        self.refills = 0
        self.exhausted = False

    @property
    def position(self) -> Position:
        """Absolute offset of the next unconsumed character."""
        return self.buffer_start + self.offset

    def _refill(self) -> bool:
        """Replaces the consumed buffer; returns False at end of input."""
        if self.exhausted:
            return False

        with ProfileContext("refill") as profile:
            chunks: list[str] = []
            total = 0
            while total < self.max_buffer_size:
                request = min(self.chunk_size, self.max_buffer_size - total)
                try:
                    chunk = self.source.read(request)
                except (OSError, ValueError) as e:
                    raise JsonParseError.source_read(
                        self.chars_read + total, e
                    ) from e
                if not isinstance(chunk, str):
                    msg = (
                        "character source must return str, "
                        f"not {type(chunk).__name__}"
                    )
                    raise TypeError(msg)
                if not chunk:
                    self.exhausted = True
                    break
                chunks.append(chunk)
                total += len(chunk)

            self.buffer_start += len(self.buffer)
            self.buffer = "".join(chunks)
            self.offset = 0
            self.chars_read += total
            self.refills += 1
            profile.count(total)

        logger.debug(
            "Refilled buffer with %d characters at position %d%s",
            total,
            self.buffer_start,
            " (source exhausted)" if self.exhausted else "",
        )
        return total > 0

    def peek(self) -> str:
        """Returns the next character without consuming it, '' at the end."""
        if self.offset >= len(self.buffer) and not self._refill():
            return ""
        return self.buffer[self.offset]

    def advance(self) -> str:
        """Consumes and returns the next character, '' at the end."""
        char = self.peek()
        if char:
            self.offset += 1
        return char

    def skip_whitespace(self) -> str:
        """Consumes whitespace and peeks at the next significant character."""
        while True:
            char = self.peek()
            if char not in WHITESPACE:
                return char
            self.offset += 1

    def read_span(self, pattern: re.Pattern[str]) -> str:
        """
        Consumes the longest run of characters matched by ``pattern``.

        ``pattern`` must be a single character class under ``*`` so that a
        run interrupted by the end of the buffer can resume after a refill.
        """
        parts: list[str] = []
        while self.offset < len(self.buffer) or self._refill():
            match = pattern.match(self.buffer, self.offset)
            end = match.end() if match else self.offset
            parts.append(self.buffer[self.offset : end])
            self.offset = end
            if end < len(self.buffer):
                break
        return "".join(parts)
