"""String <-> attribute value converters.

Response values are always strings on the wire. A converter parses the
string into the attribute's Python value and formats it back.
"""

from __future__ import annotations

import enum
import types
import typing
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from tik_objects.core.exceptions import ValueConversionError

_TRUE_WORDS = frozenset({"true", "yes"})
_FALSE_WORDS = frozenset({"false", "no"})


@dataclass(frozen=True)
class Converter:
    """Pair of parse/format functions for one attribute type."""

    name: str
    parse: Callable[[str], Any]
    format: Callable[[Any], str]

    def to_value(self, field_name: str, raw: str) -> Any:
        try:
            return self.parse(raw)
        except (TypeError, ValueError) as e:
            raise ValueConversionError(field_name, raw, self.name) from e

    def to_string(self, value: Any) -> str:
        if value is None:
            return ""
        return self.format(value)


def _parse_bool(raw: str) -> bool:
    lowered = raw.strip().lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    raise ValueError(f"not a boolean: {raw!r}")


def _format_bool(value: Any) -> str:
    return "true" if value else "false"


def _empty_is_none(parse: Callable[[str], Any]) -> Callable[[str], Any]:
    def parse_optional(raw: str) -> Any:
        if raw == "":
            return None
        return parse(raw)

    return parse_optional


STRING = Converter("str", str, str)
BOOL = Converter("bool", _parse_bool, _format_bool)
INT = Converter("int", int, str)
FLOAT = Converter("float", float, repr)
OPTIONAL_INT = Converter("int | None", _empty_is_none(int), str)
OPTIONAL_FLOAT = Converter("float | None", _empty_is_none(float), repr)

_BY_TYPE: dict[Any, Converter] = {
    str: STRING,
    bool: BOOL,
    int: INT,
    float: FLOAT,
    "str": STRING,
    "bool": BOOL,
    "int": INT,
    "float": FLOAT,
}

# An empty value means "unset" only where the annotation admits None
_OPTIONAL: dict[Converter, Converter] = {INT: OPTIONAL_INT, FLOAT: OPTIONAL_FLOAT}


@lru_cache(maxsize=None)
def enum_converter(enum_type: type[enum.Enum]) -> Converter:
    """Converter for an Enum whose member values are the wire strings."""

    def parse(raw: str) -> enum.Enum:
        return enum_type(raw)

    def fmt(value: Any) -> str:
        return str(value.value)

    return Converter(enum_type.__name__, parse, fmt)


def converter_for(annotation: Any) -> Converter:
    """Pick a converter from a type annotation.

    Optional[X] / X | None resolve to X; for int and float an empty value
    then parses to None. Unknown annotations keep the raw string.
    String annotations (from ``from __future__ import annotations``) are
    matched by name for the builtin types.
    """
    if isinstance(annotation, str):
        name = annotation.replace(" ", "")
        optional = name.endswith("|None") or name.startswith("Optional[")
        name = name.removesuffix("|None")
        if name.startswith("Optional[") and name.endswith("]"):
            name = name[len("Optional[") : -1]
        return _with_optional(_BY_TYPE.get(name, STRING), optional)

    if typing.get_origin(annotation) is typing.Annotated:
        annotation = typing.get_args(annotation)[0]

    optional = False
    if typing.get_origin(annotation) in (typing.Union, types.UnionType):
        args = typing.get_args(annotation)
        non_none = [a for a in args if a is not type(None)]
        optional = len(non_none) < len(args)
        if len(non_none) == 1:
            annotation = non_none[0]

    is_class = typing.get_origin(annotation) is None and isinstance(annotation, type)
    if is_class and issubclass(annotation, enum.Enum):
        return enum_converter(annotation)
    return _with_optional(_BY_TYPE.get(annotation, STRING), optional)


def _with_optional(converter: Converter, optional: bool) -> Converter:
    if optional:
        return _OPTIONAL.get(converter, converter)
    return converter
