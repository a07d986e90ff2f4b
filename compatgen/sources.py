"""Loading of the compatibility datasets from a data directory."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import json
import logging
from pathlib import Path
from typing import Any

from .constants import DATA_FILES
from .exceptions import SchemaError, SourceError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataSources:
    agents: Mapping[str, Any]
    prefixes: Mapping[str, Any]
    caniuse: Mapping[str, Any]
    mdn: Mapping[str, Any]


def _load_json(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceError(str(path), cause=exc.__class__.__name__) from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SourceError(str(path), cause="invalid JSON") from exc


def _require_object(source: str, value: Any) -> Mapping[str, Any]:
    if not isinstance(value, Mapping) or not value:
        raise SchemaError(source, (), "expected a non-empty object")
    return value


def load_sources(data_dir: Path) -> DataSources:
    """Read ``agents.json``, ``prefixes.json``, ``caniuse.json`` and ``mdn.json``.

    ``caniuse.json`` may also be a complete caniuse ``data.json``; its
    ``agents`` table is used when no separate ``agents.json`` exists.
    """
    caniuse = _load_json(data_dir / DATA_FILES["caniuse"])
    agents_path = data_dir / DATA_FILES["agents"]
    if isinstance(caniuse, Mapping) and isinstance(caniuse.get("data"), Mapping):
        LOGGER.debug("Using full caniuse data.json layout")
        agents = _load_json(agents_path) if agents_path.exists() else caniuse.get("agents")
        caniuse = caniuse["data"]
    else:
        agents = _load_json(agents_path)

    return DataSources(
        agents=_require_object("agents", agents),
        prefixes=_require_object("prefixes", _load_json(data_dir / DATA_FILES["prefixes"])),
        caniuse=_require_object("caniuse", caniuse),
        mdn=_require_object("mdn", _load_json(data_dir / DATA_FILES["mdn"])),
    )
