"""
Streaming JSON parser and compact serializer over a typed value tree.

Parses JSON text from strings or incrementally read text streams into
``JsonObject``/``JsonArray`` trees whose scalars keep the numeric width the
parser inferred, and renders those trees back to compact JSON.
"""

from typing import IO
from typing import Any

from ._errors import ErrorKind
from ._errors import JsonParseError
from ._errors import Position
from ._parser import JsonParser
from ._parser import ParseConfig
from ._profile import HotPathStats
from ._profile import clear_hot_path_stats
from ._profile import format_hot_path_stats
from ._profile import get_hot_path_stats
from ._reader import CharacterReader
from ._reader import CharacterSource
from ._values import Container
from ._values import Float32
from ._values import Float64
from ._values import Int32
from ._values import Int64
from ._values import JsonArray
from ._values import JsonObject
from ._values import Kind
from ._values import Value
from ._values import kind_of
from ._values import render

__version__ = "0.1.0"


def loads(s: str, **kwargs: Any) -> Container:
    """
    Parses a JSON document held in a string.

    Keyword arguments are ``ParseConfig`` fields.
    """
    if not isinstance(s, str):
        msg = f"the JSON object must be str, not {type(s).__name__}"
        raise TypeError(msg)

    config = ParseConfig(**kwargs)
    return JsonParser(config).parse(s)


def load(fp: IO[str], **kwargs: Any) -> Container:
    """
    Parses a JSON document from a text stream through a bounded buffer.
    """
    if not hasattr(fp, "read"):
        raise TypeError("fp must have a read() method")

    config = ParseConfig(**kwargs)
    return JsonParser(config).parse(fp)


def dumps(value: Value) -> str:
    """
    Serializes a value tree to compact JSON text.
    """
    return render(value)


def dump(value: Value, fp: IO[str]) -> None:
    """
    Serializes a value tree to a text stream.
    """
    if not hasattr(fp, "write"):
        raise TypeError("fp must have a write() method")

    fp.write(render(value))


__all__ = [
    "CharacterReader",
    "CharacterSource",
    "Container",
    "ErrorKind",
    "Float32",
    "Float64",
    "HotPathStats",
    "Int32",
    "Int64",
    "JsonArray",
    "JsonObject",
    "JsonParseError",
    "JsonParser",
    "Kind",
    "ParseConfig",
    "Position",
    "Value",
    "clear_hot_path_stats",
    "dump",
    "dumps",
    "format_hot_path_stats",
    "get_hot_path_stats",
    "kind_of",
    "load",
    "loads",
    "render",
]
