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

"""Compact duration literals such as ``30s``, ``250ms`` or ``2h45m``.

The grammar is a signed sequence of decimal numbers, each with an optional
fraction and a mandatory unit (``ns``, ``us``/``µs``, ``ms``, ``s``, ``m``,
``h``). The bare literal ``0`` is also accepted.
"""

from datetime import timedelta
from decimal import Decimal
import re

_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_NANOSECONDS = {
    "ns": Decimal(1),
    "us": Decimal(1_000),
    "µs": Decimal(1_000),
    "μs": Decimal(1_000),
    "ms": Decimal(1_000_000),
    "s": Decimal(1_000_000_000),
    "m": Decimal(60_000_000_000),
    "h": Decimal(3_600_000_000_000),
}

_MICROSECONDS_PER_HOUR = 3_600_000_000
_MICROSECONDS_PER_MINUTE = 60_000_000


def parse_duration(literal: str) -> timedelta:
    """Parse a compact duration literal.

    Args:
        literal: Text such as ``"1s"``, ``"-1.5h"`` or ``"1h30m"``

    Returns:
        The duration, rounded to microsecond resolution

    Raises:
        ValueError: If the literal does not follow the duration grammar
    """
    if not isinstance(literal, str):
        raise ValueError(f"expected a duration string, got {type(literal).__name__}")

    text = literal.strip()
    negative = text[:1] == "-"
    if text[:1] in ("-", "+"):
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {literal!r}")

    nanoseconds = Decimal(0)
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {literal!r}")
        number, unit = match.groups()
        nanoseconds += Decimal(number) * _UNIT_NANOSECONDS[unit]
        pos = match.end()

    microseconds = int((nanoseconds / 1000).to_integral_value())
    try:
        result = timedelta(microseconds=microseconds)
    except OverflowError:
        raise ValueError(f"duration {literal!r} out of range") from None
    return -result if negative else result


def _plain(value: Decimal) -> str:
    return f"{value.normalize():f}"


def format_duration(value: timedelta) -> str:
    """Render a duration back into the compact literal form (``1h0m30s``)."""
    microseconds = value // timedelta(microseconds=1)
    if microseconds == 0:
        return "0s"

    sign = "-" if microseconds < 0 else ""
    microseconds = abs(microseconds)

    if microseconds < 1_000:
        return f"{sign}{microseconds}µs"
    if microseconds < 1_000_000:
        return f"{sign}{_plain(Decimal(microseconds) / 1_000)}ms"

    hours, rest = divmod(microseconds, _MICROSECONDS_PER_HOUR)
    minutes, rest = divmod(rest, _MICROSECONDS_PER_MINUTE)
    seconds = _plain(Decimal(rest) / 1_000_000)

    text = sign
    if hours:
        text += f"{hours}h"
    if hours or minutes:
        text += f"{minutes}m"
    return f"{text}{seconds}s"
