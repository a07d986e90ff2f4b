"""Text utility helpers for naming generated identifiers."""

from __future__ import annotations

import re

_AT_RULE_RE = re.compile(r"^@([a-z])")
_PSEUDO_ELEMENT_RE = re.compile(r"^::([a-z])")
_PSEUDO_CLASS_RE = re.compile(r"^:([a-z])")
_ENUM_WORD_RE = re.compile(r"(^|-)([a-z])")


def _upper_last_group(match: re.Match[str]) -> str:
    return match.group(match.lastindex or 0).upper()


def camel_case(value: str, *, separators: str = "-") -> str:
    """Join words split by any of ``separators`` in camelCase."""
    pattern = re.compile(f"[{re.escape(separators)}]([a-z])")
    return pattern.sub(_upper_last_group, value)


def pascal_case(value: str, *, separators: str = "-") -> str:
    """Like camel_case, with the first character upper-cased."""
    if not value:
        return value
    return value[0].upper() + camel_case(value[1:], separators=separators)


def enumify(name: str) -> str:
    """Turn a CSS construct or feature name into an enum variant name.

    ``@keyframes`` becomes ``AtKeyframes``, ``::placeholder`` becomes
    ``PseudoElementPlaceholder`` and ``border-radius`` becomes ``BorderRadius``.
    """
    name = _AT_RULE_RE.sub(lambda match: "At" + match.group(1).upper(), name)
    name = _PSEUDO_ELEMENT_RE.sub(lambda match: "PseudoElement" + match.group(1).upper(), name)
    name = _PSEUDO_CLASS_RE.sub(lambda match: "PseudoClass" + match.group(1).upper(), name)
    return _ENUM_WORD_RE.sub(_upper_last_group, name)
