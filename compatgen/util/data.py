"""Helpers for walking the nested dataset mappings."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from ..exceptions import SchemaError


def dig(source: str, data: Any, path: Sequence[str]) -> Any:
    """Follow ``path`` through nested mappings, failing loudly when a key is absent."""
    node = data
    for depth, key in enumerate(path):
        if not isinstance(node, Mapping) or key not in node:
            raise SchemaError(source, path[: depth + 1])
        node = node[key]
    return node


def dig_mapping(source: str, data: Any, path: Sequence[str]) -> Mapping[str, Any]:
    node = dig(source, data, path)
    if not isinstance(node, Mapping):
        raise SchemaError(source, path, f"expected an object, got {type(node).__name__}")
    return node


def compat_support(mdn: Any, path: Sequence[str]) -> Mapping[str, Any]:
    """Return the ``__compat.support`` mapping of an mdn node."""
    return dig_mapping("mdn", mdn, (*path, "__compat", "support"))


def feature_children(node: Mapping[str, Any], *, skip: Sequence[str] = ()) -> list[str]:
    """Return the sub-feature keys of an mdn node, in dataset order."""
    return [key for key in node if key != "__compat" and key not in skip]
