# MIT License
#
# Copyright (c) 2025 Democratize Technology
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""Field descriptors and value coercion for configuration schemas.

Each schema class carries an explicit table of ``FieldSpec`` entries, built
once when the class is defined. The decoder walks this table instead of
inspecting annotations at load time.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any

from .constants import DEFAULT_SEPARATOR
from .durations import parse_duration


class FieldKind(str, Enum):
    """Semantic types understood by the decoder."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    FLOAT = "float"
    DURATION = "duration"
    STRING_LIST = "string_list"
    SECTION = "section"
    SECTION_LIST = "section_list"

    def __str__(self) -> str:
        return self.value


class _NoDefault:
    def __repr__(self) -> str:
        return "NO_DEFAULT"


NO_DEFAULT: Any = _NoDefault()

_TRUE_LITERALS = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_LITERALS = ("0", "f", "F", "FALSE", "false", "False")

SCALAR_KINDS = frozenset(
    {
        FieldKind.STRING,
        FieldKind.INTEGER,
        FieldKind.BOOLEAN,
        FieldKind.FLOAT,
        FieldKind.DURATION,
        FieldKind.STRING_LIST,
    },
)


@dataclass(frozen=True)
class FieldSpec:
    """Declarative contract for one schema field."""

    name: str
    key: str
    kind: FieldKind
    required: bool = False
    default: Any = NO_DEFAULT
    separator: str = DEFAULT_SEPARATOR
    env: tuple[str, ...] = ()
    secret: bool = False
    section: type | None = None
    description: str | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def lookup_env(self, environ: Mapping[str, str]) -> tuple[str, str] | None:
        """Return ``(variable, value)`` for the first declared override that is set."""
        for variable in self.env:
            value = environ.get(variable)
            if value is not None:
                return variable, value
        return None


def _to_string(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (int, float)):
        return str(raw)
    raise ValueError(f"expected a scalar value, got {type(raw).__name__}")


def _to_integer(raw: Any) -> int:
    if isinstance(raw, bool):
        raise ValueError("expected an integer, got a boolean")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            raise ValueError("expected an integer") from None
    raise ValueError(f"expected an integer, got {type(raw).__name__}")


def _to_float(raw: Any) -> float:
    if isinstance(raw, bool):
        raise ValueError("expected a number, got a boolean")
    if isinstance(raw, (int, float)):
        try:
            return float(raw)
        except OverflowError:
            raise ValueError("number out of range for a float") from None
    if isinstance(raw, str):
        try:
            return float(raw.strip())
        except ValueError:
            raise ValueError("expected a number") from None
    raise ValueError(f"expected a number, got {type(raw).__name__}")


def _to_boolean(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if text in _TRUE_LITERALS:
            return True
        if text in _FALSE_LITERALS:
            return False
        raise ValueError("expected a boolean (true/false/1/0)")
    raise ValueError(f"expected a boolean, got {type(raw).__name__}")


def _to_duration(raw: Any) -> timedelta:
    if isinstance(raw, timedelta):
        return raw
    if isinstance(raw, int) and not isinstance(raw, bool):
        raw = str(raw)
    if not isinstance(raw, str):
        raise ValueError(f"expected a duration literal such as '30s', got {type(raw).__name__}")
    try:
        return parse_duration(raw)
    except ValueError:
        raise ValueError("expected a duration literal such as '30s' or '1h30m'") from None


def _to_string_list(raw: Any, separator: str) -> list[str]:
    if isinstance(raw, str):
        if raw == "":
            return []
        return raw.split(separator)
    if isinstance(raw, Sequence):
        return [_to_string(item) for item in raw]
    raise ValueError(f"expected a list or a '{separator}'-separated string")


def coerce_value(kind: FieldKind, raw: Any, separator: str = DEFAULT_SEPARATOR) -> Any:
    """Convert a raw file or environment value to the field's semantic type.

    Raises:
        ValueError: With a short reason when the value does not fit the type
    """
    if kind is FieldKind.STRING:
        return _to_string(raw)
    if kind is FieldKind.INTEGER:
        return _to_integer(raw)
    if kind is FieldKind.FLOAT:
        return _to_float(raw)
    if kind is FieldKind.BOOLEAN:
        return _to_boolean(raw)
    if kind is FieldKind.DURATION:
        return _to_duration(raw)
    if kind is FieldKind.STRING_LIST:
        return _to_string_list(raw, separator)
    raise ValueError(f"{kind} values are decoded structurally")


def zero_value(kind: FieldKind) -> Any:
    """Value used for an optional field with no source and no default."""
    zeros: dict[FieldKind, Any] = {
        FieldKind.STRING: "",
        FieldKind.INTEGER: 0,
        FieldKind.BOOLEAN: False,
        FieldKind.FLOAT: 0.0,
        FieldKind.DURATION: timedelta(0),
        FieldKind.STRING_LIST: [],
        FieldKind.SECTION_LIST: [],
    }
    return zeros[kind]
