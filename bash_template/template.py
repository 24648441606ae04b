"""
Conditional command templating.

`bash` takes literal fragments interleaved with values (the shape of a tagged
template) and drops the flag around any value that is missing:

    >>> bash(["run -t", " -u\\"", "\\" task"], 1, None)
    'run -t1 task'

`render` is the str.format-style front end for the same algorithm.
"""

from __future__ import annotations

import os
import re
import string
from typing import Any, Mapping, Sequence

from bash_template.values import ABSENT, classify, is_omitted

_WHITESPACE_RE = re.compile(r"[ \t\n]+")
# Leading part of a format field, before any `.attr` or `[key]` access.
_FIELD_HEAD_RE = re.compile(r"[^.\[]*")


def cut_last(fragment: str) -> str:
    # Drop the last space-separated word (the flag before the value).
    return " ".join(fragment.split(" ")[:-1])


def cut_first(fragment: str) -> str:
    # Drop the first space-separated word (the operand remainder after the value).
    return " ".join(fragment.split(" ")[1:])


def _check_shape(fragments: Sequence[str], values: Sequence[Any]) -> None:
    if not fragments:
        raise ValueError("Template requires at least one fragment")
    if len(values) != len(fragments) - 1:
        raise ValueError(
            f"Template with {len(fragments)} fragments expects {len(fragments) - 1} values, got {len(values)}"
        )


def bash(fragments: Sequence[str], *values: Any) -> str:
    """
    Build a command from fragments and values, removing flags whose value is missing.

    None, NaN and False are omitted together with the last word before them and
    the first word after them. Lists are joined with spaces. With at least one
    value the result has whitespace collapsed and trimmed; a lone fragment is
    returned untouched.
    """
    _check_shape(fragments, values)
    if len(fragments) == 1:
        return fragments[0]

    terms: list[str] = []
    for i, raw in enumerate(values):
        value = classify(raw)
        start = terms.pop() if terms else fragments[i]
        following = fragments[i + 1]
        if is_omitted(value):
            terms.extend([cut_last(start), " ", cut_first(following)])
        else:
            terms.extend([start, value.render(), following])

    return _WHITESPACE_RE.sub(" ", "".join(terms)).strip()


def split_format(fmt: str, args: Sequence[Any] = (), kwargs: Mapping[str, Any] | None = None) -> tuple[list[str], list[Any]]:
    """
    Split a str.format-style string into template fragments and values.

    `{}` and `{0}` read positional args, `{name}` reads kwargs, and `{p.name}` /
    `{src[0]}` look up attributes and items like str.format. Unknown top-level
    names resolve to absent so their flags are dropped. Conversions and format
    specs are not supported.
    """
    kwargs = kwargs or {}
    formatter = string.Formatter()
    fragments: list[str] = []
    values: list[Any] = []
    pending = ""
    auto_index: int | None = 0
    for literal, field, spec, conversion in formatter.parse(fmt):
        pending += literal
        if field is None:
            continue
        if conversion is not None or spec:
            raise ValueError(f"Conversions and format specs are not supported (field {field!r} in {fmt!r})")

        head = _FIELD_HEAD_RE.match(field).group(0)
        if head == "":
            if auto_index is None:
                raise ValueError(f"Cannot switch from manual field numbering to automatic in {fmt!r}")
            field = f"{auto_index}{field}"
            head = str(auto_index)
            auto_index += 1
        elif head.isdigit():
            if auto_index:
                raise ValueError(f"Cannot switch from automatic field numbering to manual in {fmt!r}")
            auto_index = None

        if head.isdigit():
            if int(head) >= len(args):
                raise ValueError(f"Positional argument {head} missing for {fmt!r}")
        elif head not in kwargs:
            fragments.append(pending)
            values.append(ABSENT)
            pending = ""
            continue

        try:
            value, _ = formatter.get_field(field, args, kwargs)
        except (AttributeError, IndexError, KeyError, TypeError) as e:
            raise ValueError(f"Cannot resolve field {field!r} in {fmt!r}: {e}") from e
        fragments.append(pending)
        values.append(value)
        pending = ""
    fragments.append(pending)
    return fragments, values


def render(fmt: str, *args: Any, **kwargs: Any) -> str:
    fragments, values = split_format(fmt, args, kwargs)
    return bash(fragments, *values)


def resolve(fragments: Sequence[str], *values: Any) -> str:
    """Interpolate a path template and return it as an absolute, normalized path."""
    _check_shape(fragments, values)
    parts: list[str] = [fragments[0]]
    for raw, fragment in zip(values, fragments[1:]):
        parts.append(classify(raw).render())
        parts.append(fragment)
    return os.path.abspath("".join(parts))
