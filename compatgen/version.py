"""Version codec: dotted browser versions to comparable integers."""

from __future__ import annotations

from .constants import VERSION_APPROX_MARKER, VERSION_RANGE_SEPARATOR

_MAX_COMPONENTS = 3
_MINOR_BITS = 8
_PATCH_BITS = 8
_COMPONENT_LIMIT = 1 << 8


def _component(value: str) -> int | None:
    if not value or not value.isascii() or not value.isdigit():
        return None
    return int(value, 10)


def parse_version(text: object) -> int | None:
    """Encode a version like ``"15.4"`` or ``"≤79"`` as ``major << 16 | minor << 8 | patch``.

    Ranges such as ``"3.1-3.2"`` keep their lower end. Anything that does not
    decompose into at most three non-negative integers yields None.
    """
    if not isinstance(text, str):
        return None

    release = text.replace(VERSION_APPROX_MARKER, "").strip()
    release = release.split(VERSION_RANGE_SEPARATOR, maxsplit=1)[0]
    parts = release.split(".")
    if len(parts) > _MAX_COMPONENTS:
        return None

    components: list[int] = []
    for part in parts:
        value = _component(part)
        if value is None:
            return None
        components.append(value)
    while len(components) < _MAX_COMPONENTS:
        components.append(0)

    major, minor, patch = components
    if minor >= _COMPONENT_LIMIT or patch >= _COMPONENT_LIMIT:
        return None
    return major << (_MINOR_BITS + _PATCH_BITS) | minor << _PATCH_BITS | patch


def format_version(version: int) -> str:
    """Render an encoded version back into ``major.minor.patch``."""
    major = version >> (_MINOR_BITS + _PATCH_BITS)
    minor = (version >> _PATCH_BITS) & (_COMPONENT_LIMIT - 1)
    patch = version & (_COMPONENT_LIMIT - 1)
    return f"{major}.{minor}.{patch}"
