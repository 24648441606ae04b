from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union


@dataclass(frozen=True)
class Text:
    value: str

    def render(self) -> str:
        return self.value


@dataclass(frozen=True)
class Number:
    value: int | float

    def render(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class Flag:
    value: bool

    def render(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Absent:
    def render(self) -> str:
        return ""


@dataclass(frozen=True)
class List:
    items: tuple[Value, ...]

    def render(self) -> str:
        return " ".join(item.render() for item in self.items)


Value = Union[Text, Number, Flag, Absent, List]

ABSENT = Absent()


def format_number(n: int | float) -> str:
    """
    Render a number the way JavaScript's String(n) does.

    Floats use their shortest round-trip digits, in plain decimal when
    1e-6 <= |n| < 1e21 and in exponent form ("1e+21", "1.5e-7") otherwise.
    Python ints are exact and render as str(n).
    """
    if not isinstance(n, float):
        return str(n)
    if math.isnan(n):
        return "NaN"
    if math.isinf(n):
        return "Infinity" if n > 0 else "-Infinity"
    if n == 0:
        return "0"

    sign, digit_tuple, exp = Decimal(repr(n)).normalize().as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    k = len(digits)
    point = exp + k
    prefix = "-" if sign else ""
    if k <= point <= 21:
        return prefix + digits + "0" * (point - k)
    if 0 < point <= 21:
        return prefix + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return prefix + "0." + "0" * (-point) + digits

    e = point - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{prefix}{mantissa}e{'+' if e > 0 else '-'}{abs(e)}"


def _classify_item(raw: Any) -> Value:
    # List items are never omitted: NaN stays a number and renders as "NaN".
    if isinstance(raw, float) and math.isnan(raw):
        return Number(raw)
    return classify(raw)


def classify(raw: Any) -> Value:
    """
    Map a plain Python value onto a Value variant.

    None and NaN are Absent. bool is checked before int since bool subclasses int.
    Anything unrecognized falls back to its str() form as Text.
    """
    if isinstance(raw, (Text, Number, Flag, Absent, List)):
        return raw
    if raw is None:
        return ABSENT
    if isinstance(raw, bool):
        return Flag(raw)
    if isinstance(raw, float) and math.isnan(raw):
        return ABSENT
    if isinstance(raw, (int, float)):
        return Number(raw)
    if isinstance(raw, str):
        return Text(raw)
    if isinstance(raw, (list, tuple)):
        return List(tuple(_classify_item(x) for x in raw))
    return Text(str(raw))


def is_omitted(value: Value) -> bool:
    """True when the value signals "not provided" and its flag should be dropped."""
    if isinstance(value, Absent):
        return True
    if isinstance(value, Flag):
        return not value.value
    return False
