from __future__ import annotations

from collections.abc import Sequence
import json
from pathlib import Path
from typing import Any

import pytest

from compatgen.sources import DataSources
from compatgen.tables import DEFAULT_COMPAT_TABLES


def make_agents() -> dict[str, Any]:
    return {
        "chrome": {
            "prefix": "webkit",
            "versions": ["4", "5", "10", "12", "20", "24", "54", "87", "88", "90", None, None],
        },
        "edge": {
            "prefix": "webkit",
            "prefix_exceptions": {"12": "ms", "17": "ms", "18": "ms"},
            "versions": ["12", "17", "18", "79", "90"],
        },
        "firefox": {
            "prefix": "moz",
            "versions": ["2", "3", "3.5", "4", "21", "63", "77", "78", "102", "110"],
        },
        "ie": {"prefix": "ms", "versions": ["6", "9", "10", "11"]},
        "ios_saf": {"prefix": "webkit", "versions": ["4", "7", "9.3", "13", "14"]},
        "opera": {
            "prefix": "webkit",
            "prefix_exceptions": {"9": "o", "12": "o"},
            "versions": ["9", "12", "15", "76"],
        },
        "safari": {
            "prefix": "webkit",
            "versions": ["3.1", "4", "5.1", "6.1", "7", "9", "9.1", "13", "14", "TP"],
        },
        "and_chr": {"prefix": "webkit", "versions": ["90"]},
        "ie_mob": {"prefix": "ms", "versions": ["10", "11"]},
        "op_mini": {"prefix": "o", "versions": ["all"]},
    }


def make_prefixes() -> dict[str, Any]:
    return {
        "border-radius": {
            "browsers": [
                "chrome 4",
                "chrome 5",
                "safari 3.1",
                "safari 4",
                "firefox 3",
                "firefox 3.5",
                "op_mini all",
            ]
        },
        "box-shadow": {
            "browsers": ["chrome 4", "chrome 5", "safari 3.1", "safari 4", "firefox 3", "firefox 3.5"]
        },
        "clip-path": {
            "browsers": [
                "chrome 24",
                "chrome 54",
                "safari 7",
                "safari 9.1",
                "safari 13",
                "ios_saf 7",
                "ios_saf 9.3",
            ]
        },
        "background-clip": {"browsers": ["chrome 4", "chrome 90", "and_chr 90"]},
        "display-flex": {
            "browsers": [
                "chrome 4 2009",
                "chrome 20",
                "safari 3.1 2009",
                "safari 6.1",
                "firefox 2 2009",
                "firefox 21 2009",
            ]
        },
        "linear-gradient": {
            "browsers": ["chrome 4 old", "chrome 10", "safari 4 old", "safari 5.1"]
        },
        "backdrop-filter": {"browsers": ["edge 17", "edge 18", "safari 9"]},
        "@keyframes": {"browsers": ["opera 12", "opera 15", "ie 10"]},
    }


def make_stats(**per_browser: dict[str, str]) -> dict[str, Any]:
    return {"stats": per_browser}


def make_caniuse(**features: dict[str, Any]) -> dict[str, Any]:
    data = {
        feature: make_stats(chrome={"4": "n", "90": "y"}, and_chr={"90": "y"})
        for feature in DEFAULT_COMPAT_TABLES.caniuse_features
    }
    data.update(features)
    return data


def set_support(tree: dict[str, Any], path: Sequence[str], support: dict[str, Any]) -> None:
    node = tree
    for key in path:
        node = node.setdefault(key, {})
    node["__compat"] = {"support": support}


def make_mdn() -> dict[str, Any]:
    tree: dict[str, Any] = {}
    default = {"chrome": {"version_added": "100"}, "oculus": {"version_added": "1"}}
    for path in DEFAULT_COMPAT_TABLES.mdn_features.values():
        set_support(tree, path, default)

    for gradient in ("radial-gradient", "linear-gradient", "conic-gradient"):
        set_support(tree, ("css", "types", "gradient", gradient), default)

    set_support(
        tree,
        ("css", "at-rules", "media", "range_syntax"),
        {
            "chrome": {"version_added": "104"},
            "firefox": [
                {"version_added": "102"},
                {"version_added": "63", "partial_implementation": True},
            ],
        },
    )
    set_support(
        tree,
        ("css", "selectors", "is"),
        {
            "chrome": [
                {"version_added": "88"},
                {"version_added": "12", "alternative_name": ":-webkit-any()"},
            ],
            "firefox": [
                {"version_added": "78"},
                {"version_added": "4", "alternative_name": ":-moz-any()"},
            ],
            "safari": {"version_added": "14"},
        },
    )

    set_support(tree, ("css", "types", "length", "cap"), {"chrome": {"version_added": "118"}})
    set_support(
        tree,
        ("css", "types", "length", "viewport_percentage_units_dynamic"),
        {"chrome": {"version_added": "108"}, "safari": {"version_added": "15.4"}},
    )

    list_style = ("css", "properties", "list-style-type")
    set_support(tree, list_style, default)
    set_support(tree, (*list_style, "decimal"), {"chrome": {"version_added": "1"}})
    set_support(tree, (*list_style, "disclosure-open"), {"chrome": {"version_added": "86"}})
    set_support(tree, (*list_style, "hangul"), {"chrome": {"version_added": "1"}})
    set_support(
        tree,
        (*list_style, "ethiopic-numeric"),
        {"chrome": {"version_added": "1", "version_removed": "50"}},
    )

    width = ("css", "properties", "width")
    set_support(tree, width, default)
    tree["css"]["properties"]["width"]["animatable"] = {"type": "length"}
    set_support(tree, (*width, "fit-content"), {"chrome": {"version_added": "46"}})
    set_support(
        tree,
        (*width, "stretch"),
        {
            "chrome": [
                {"version_added": "138"},
                {"version_added": "22", "alternative_name": "-webkit-fill-available"},
            ],
            "firefox": {"version_added": "3", "alternative_name": "-moz-available"},
        },
    )
    return tree


def make_sources() -> DataSources:
    return DataSources(
        agents=make_agents(),
        prefixes=make_prefixes(),
        caniuse=make_caniuse(),
        mdn=make_mdn(),
    )


def write_data_dir(path: Path, sources: DataSources) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    (path / "agents.json").write_text(json.dumps(sources.agents), encoding="utf-8")
    (path / "prefixes.json").write_text(json.dumps(sources.prefixes), encoding="utf-8")
    (path / "caniuse.json").write_text(json.dumps(sources.caniuse), encoding="utf-8")
    (path / "mdn.json").write_text(json.dumps(sources.mdn), encoding="utf-8")
    return path


@pytest.fixture
def sources() -> DataSources:
    return make_sources()


@pytest.fixture
def data_dir(tmp_path: Path, sources: DataSources) -> Path:
    return write_data_dir(tmp_path / "data", sources)
