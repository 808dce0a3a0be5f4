"""
Value data model and compact serializer.

A parsed document is a tree of the closed variant ``Value``: ``None``,
``bool``, the four width-tagged numbers, ``str``, ``JsonObject`` and
``JsonArray``. Numeric widths are kept as ``int``/``float`` subclasses so
values behave like ordinary Python numbers while remembering how they were
typed by the parser.
"""

import bisect
import ctypes
import math
from collections.abc import Iterable
from collections.abc import Iterator
from collections.abc import Mapping
from collections.abc import MutableMapping
from collections.abc import MutableSequence
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from decimal import ROUND_CEILING
from decimal import ROUND_FLOOR
from decimal import ROUND_HALF_EVEN
from decimal import Context
from decimal import Decimal
from decimal import localcontext
from enum import Enum
from typing import Any
from typing import Final

from ._profile import ProfileContext

INT32_MIN: Final = -(2**31)
INT32_MAX: Final = 2**31 - 1
INT64_MIN: Final = -(2**63)
INT64_MAX: Final = 2**63 - 1

# Largest finite binary32 and its smallest positive (subnormal) magnitude
FLOAT32_MAX: Final = 3.4028234663852886e38
FLOAT32_MIN: Final = 1.401298464324817e-45

# Significant digits that always round-trip a binary64 value
_FLOAT64_DIGITS: Final = 17

_FLOAT32_INF_BITS: Final = 0x7F800000

_SHORTEST_ROUNDINGS: Final = (ROUND_HALF_EVEN, ROUND_CEILING, ROUND_FLOOR)

type Value = None | bool | int | float | str | JsonObject | JsonArray
type Container = JsonObject | JsonArray


class Kind(Enum):
    """Variant tags of ``Value``."""

    NULL = "null"
    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"


class Int32(int):
    """A 32-bit signed integer."""

    def __new__(cls, value: Any = 0) -> "Int32":
        number = int.__new__(cls, value)
        if not INT32_MIN <= number <= INT32_MAX:
            raise OverflowError(
                f"{int(number)} does not fit in a 32-bit signed integer"
            )
        return number

    def __repr__(self) -> str:
        return f"Int32({int(self)})"


class Int64(int):
    """A 64-bit signed integer."""

    def __new__(cls, value: Any = 0) -> "Int64":
        number = int.__new__(cls, value)
        if not INT64_MIN <= number <= INT64_MAX:
            raise OverflowError(
                f"{int(number)} does not fit in a 64-bit signed integer"
            )
        return number

    def __repr__(self) -> str:
        return f"Int64({int(self)})"


class Float32(float):
    """A binary32 float; the value is rounded to single precision."""

    def __new__(cls, value: Any = 0.0) -> "Float32":
        return float.__new__(cls, ctypes.c_float(float(value)).value)

    def __repr__(self) -> str:
        return f"Float32({_shortest_float32(self)})"


class Float64(float):
    """A binary64 float."""

    def __repr__(self) -> str:
        return f"Float64({float(self)!r})"


def kind_of(value: Any) -> Kind:
    """
    Returns the variant tag of ``value``.

    Untagged ``int`` values are classified by range and untagged ``float``
    values as ``FLOAT64``. Anything outside the closed variant raises
    ``TypeError``.
    """
    if value is None:
        return Kind.NULL
    elif isinstance(value, bool):
        return Kind.BOOL
    elif isinstance(value, Int32):
        return Kind.INT32
    elif isinstance(value, Int64):
        return Kind.INT64
    elif isinstance(value, int):
        if INT32_MIN <= value <= INT32_MAX:
            return Kind.INT32
        if INT64_MIN <= value <= INT64_MAX:
            return Kind.INT64
        raise OverflowError(f"{value} does not fit in a 64-bit signed integer")
    elif isinstance(value, Float32):
        return Kind.FLOAT32
    elif isinstance(value, float):
        return Kind.FLOAT64
    elif isinstance(value, str):
        return Kind.STRING
    elif isinstance(value, JsonObject):
        return Kind.OBJECT
    elif isinstance(value, JsonArray):
        return Kind.ARRAY
    else:
        msg = f"Object of type {type(value).__name__} is not a JSON value"
        raise TypeError(msg)


class JsonObject(MutableMapping[str, Value]):
    """
    String-keyed mapping whose iteration order is ascending by key.

    Lookups go through a dict; a parallel key list is kept sorted on insert
    so iteration and rendering never need to sort.
    """

    __slots__ = ("_entries", "_keys")

    def __init__(
        self,
        items: Mapping[str, Value] | Iterable[tuple[str, Value]] = (),
        **kwargs: Value,
    ) -> None:
        self._entries: dict[str, Value] = {}
        self._keys: list[str] = []
        self.update(items, **kwargs)

    def __getitem__(self, key: str) -> Value:
        return self._entries[key]

    def __setitem__(self, key: str, value: Value) -> None:
        if not isinstance(key, str):
            msg = f"keys must be str, not {type(key).__name__}"
            raise TypeError(msg)
        kind_of(value)
        if key not in self._entries:
            bisect.insort(self._keys, key)
        self._entries[key] = value

    def __delitem__(self, key: str) -> None:
        del self._entries[key]
        del self._keys[bisect.bisect_left(self._keys, key)]

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def clear(self) -> None:
        self._entries.clear()
        self._keys.clear()

    def render(self) -> str:
        """Returns the compact JSON text of this object."""
        return render(self)

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{k!r}: {self._entries[k]!r}" for k in self._keys)
        return f"JsonObject({{{pairs}}})"


class JsonArray(MutableSequence[Value]):
    """Insertion-ordered sequence of values."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[Value] = ()) -> None:
        self._items: list[Value] = []
        self.extend(items)

    def __getitem__(self, index: Any) -> Any:
        if isinstance(index, slice):
            return JsonArray(self._items[index])
        return self._items[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            values = list(value)
            for item in values:
                kind_of(item)
            self._items[index] = values
        else:
            kind_of(value)
            self._items[index] = value

    def __delitem__(self, index: Any) -> None:
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self._items)

    def insert(self, index: int, value: Value) -> None:
        kind_of(value)
        self._items.insert(index, value)

    def append(self, value: Value) -> None:
        kind_of(value)
        self._items.append(value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, JsonArray):
            return self._items == other._items
        if isinstance(other, Sequence) and not isinstance(other, str | bytes):
            return self._items == list(other)
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def render(self) -> str:
        """Returns the compact JSON text of this array."""
        return render(self)

    def __str__(self) -> str:
        return render(self)

    def __repr__(self) -> str:
        return f"JsonArray({self._items!r})"


def _quote(text: str) -> str:
    # Only the quote is escaped; backslashes are already escape sequences.
    return '"' + text.replace('"', '\\"') + '"'


def _float32_bits(number: float) -> int:
    return ctypes.c_uint32.from_buffer(ctypes.c_float(number)).value


def _float32_from_bits(bits: int) -> float:
    return ctypes.c_float.from_buffer(ctypes.c_uint32(bits)).value


def nearest_float32(text: str) -> Float32:
    """
    Rounds the positive decimal ``text`` to binary32 in a single step.

    The binary64 value of ``text`` lands on or next to the answer, so its
    binary32 neighbors are compared against the exact decimal. Ties go to
    the even significand.
    """
    exact = Decimal(text)
    bits = _float32_bits(float(exact))
    candidates = [
        b for b in (bits - 1, bits, bits + 1) if 0 <= b < _FLOAT32_INF_BITS
    ]
    with localcontext() as ctx:
        ctx.prec = len(text) + 200
        best = min(
            candidates,
            key=lambda b: (abs(Decimal(_float32_from_bits(b)) - exact), b & 1),
        )
    return Float32(_float32_from_bits(best))


def _shortest_float32(number: float) -> str:
    """
    Returns the shortest digit string that reads back as ``number``.

    Positive values must also fall strictly inside the window the parser
    narrows to Float32, so their text reparses with the same width.
    """
    exact = Decimal(number)
    bounded = number > 0
    for precision in range(1, _FLOAT64_DIGITS + 1):
        for rounding in _SHORTEST_ROUNDINGS:
            context = Context(prec=precision, rounding=rounding)
            parsed = float(context.plus(exact))
            if ctypes.c_float(parsed).value != number:
                continue
            if bounded and not FLOAT32_MIN < parsed < FLOAT32_MAX:
                continue
            return repr(parsed)
    return repr(float(number))


def _render_float(number: float, single: bool) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"

    digits = _shortest_float32(number) if single else repr(float(number))
    text = format(Decimal(digits), "f")
    if "." not in text:
        text += ".0"
    return text


def _render_scalar(value: Any) -> str:
    """Renders a non-container value; dispatch order is fixed."""
    if isinstance(value, bool):
        return "true" if value else "false"
    elif isinstance(value, Int32):
        return str(int(value))
    elif isinstance(value, Float32):
        return _render_float(value, single=True)
    elif isinstance(value, float):
        return _render_float(value, single=False)
    elif isinstance(value, str):
        return _quote(value)
    elif value is None:
        return "null"
    elif isinstance(value, int):
        kind_of(value)
        return str(int(value))
    else:
        msg = f"Object of type {type(value).__name__} is not a JSON value"
        raise TypeError(msg)


_EXHAUSTED: Final = object()


@dataclass
class _RenderFrame:
    items: Iterator[Any]
    closer: str
    keyed: bool
    started: bool = field(default=False)


def _render_parts(value: Value) -> Iterator[str]:
    """Yields the compact text of ``value`` piece by piece, iteratively."""
    frames: list[_RenderFrame] = []
    node: Any = value

    while True:
        if isinstance(node, JsonObject):
            yield "{"
            frames.append(_RenderFrame(iter(node.items()), "}", keyed=True))
        elif isinstance(node, JsonArray):
            yield "["
            frames.append(_RenderFrame(iter(node), "]", keyed=False))
        else:
            yield _render_scalar(node)

        while frames:
            frame = frames[-1]
            item = next(frame.items, _EXHAUSTED)
            if item is _EXHAUSTED:
                frames.pop()
                yield frame.closer
                continue

            if frame.started:
                yield ","
            frame.started = True

            if frame.keyed:
                key, node = item
                yield _quote(key)
                yield ":"
            else:
                node = item
            break
        else:
            return


def render(value: Value) -> str:
    """
    Renders ``value`` as compact JSON text.

    Objects list their members in ascending key order, arrays in stored
    order, with no whitespace between tokens.
    """
    with ProfileContext("render") as profile:
        text = "".join(_render_parts(value))
        profile.count(len(text))
        return text
