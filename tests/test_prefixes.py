from __future__ import annotations

from typing import Any

import pytest

from compatgen.exceptions import SchemaError, UnknownPrefixError
from compatgen.model import PrefixCompilation, VendorPrefix, VersionRange
from compatgen.prefixes import (
    PrefixRow,
    any_pseudo_rows,
    apply_corrections,
    compile_prefixes,
    current_release,
    load_agents,
)
from compatgen.tables import DEFAULT_PREFIX_TABLES, PrefixTables
from compatgen.targets import prefix_predicate, prefixes_for
from compatgen.version import parse_version

from .conftest import make_agents, make_mdn, make_prefixes

_NO_CORRECTIONS = PrefixTables(any_pseudo_construct=None)


def v(text: str) -> int:
    version = parse_version(text)
    assert version is not None
    return version


def _compile(
    prefix_data: dict[str, Any] | None = None,
    agents: dict[str, Any] | None = None,
    tables: PrefixTables = DEFAULT_PREFIX_TABLES,
) -> PrefixCompilation:
    return compile_prefixes(
        make_prefixes() if prefix_data is None else prefix_data,
        make_agents() if agents is None else agents,
        tables,
        mdn=make_mdn(),
    )


def test_prefix_row_parse() -> None:
    assert PrefixRow.parse("safari 3.1 2009") == PrefixRow("safari", "3.1", "2009")
    assert PrefixRow.parse("chrome 4") == PrefixRow("chrome", "4")
    with pytest.raises(SchemaError):
        PrefixRow.parse("chrome")


def test_current_release_skips_placeholders() -> None:
    assert current_release(["13", "14", "TP"]) == "14"
    assert current_release(["88", "90", None, None]) == "90"
    assert current_release(["all"]) is None
    # Only the last ten entries are considered.
    assert current_release(["5", *([None] * 10)]) is None


def test_load_agents_uses_prefix_exceptions() -> None:
    agents = load_agents(make_agents())
    assert agents["edge"].prefix_for("17") == "ms"
    assert agents["edge"].prefix_for("79") == "webkit"
    assert agents["chrome"].current_release == "90"


def test_load_agents_requires_versions() -> None:
    with pytest.raises(SchemaError) as excinfo:
        load_agents({"chrome": {"prefix": "webkit"}})
    assert excinfo.value.path == ("chrome", "versions")


def test_ranges_for_repeated_rows() -> None:
    compilation = _compile()
    predicate = prefix_predicate(compilation, "border-radius")
    assert predicate == {
        "chrome": {"webkit": VersionRange(v("4"), v("5"))},
        "safari": {"webkit": VersionRange(v("3.1"), v("4"))},
        "firefox": {"moz": VersionRange(v("3"), v("3.5"))},
    }


def test_identical_constructs_share_a_group() -> None:
    compilation = _compile()
    names = [group.names for group in compilation.groups]
    assert ["border-radius", "box-shadow"] in names
    assert compilation.names.count("box-shadow") == 1


def test_current_release_leaves_range_open() -> None:
    predicate = prefix_predicate(_compile(), "background-clip")
    assert predicate["chrome"] == {"webkit": VersionRange(v("4"), None)}


def test_clip_path_removals() -> None:
    predicate = prefix_predicate(_compile(), "clip-path")
    assert predicate["chrome"] == {"webkit": VersionRange(v("24"), v("54"))}
    # Rows at and after the removal point are gone, leaving one observation.
    assert predicate["safari"] == {"webkit": VersionRange(None, v("7"))}
    assert predicate["ios_saf"] == {"webkit": VersionRange(None, v("7"))}


def test_background_clip_additions() -> None:
    predicate = prefix_predicate(_compile(), "background-clip")
    assert predicate["safari"] == {"webkit": VersionRange(None, v("13"))}
    assert predicate["ios_saf"] == {"webkit": VersionRange(v("4"), v("13"))}


def test_corrections_need_their_constructs() -> None:
    prefix_data = make_prefixes()
    del prefix_data["clip-path"]
    with pytest.raises(SchemaError):
        apply_corrections(prefix_data, None, DEFAULT_PREFIX_TABLES)


def test_prefix_override() -> None:
    predicate = prefix_predicate(_compile(), "backdrop-filter")
    assert predicate["edge"] == {"webkit": VersionRange(v("17"), v("18"))}
    assert predicate["safari"] == {"webkit": VersionRange(None, v("9"))}


def test_prefix_exceptions_split_ranges() -> None:
    predicate = prefix_predicate(_compile(), "@keyframes")
    assert predicate["opera"] == {
        "o": VersionRange(v("12"), v("12")),
        "webkit": VersionRange(v("15"), v("15")),
    }
    assert predicate["ie"] == {"ms": VersionRange(None, v("10"))}


def test_dropped_browsers_are_ignored() -> None:
    predicate = prefix_predicate(_compile(), "border-radius")
    assert "op_mini" not in predicate
    assert "and_chr" not in prefix_predicate(_compile(), "background-clip")


def test_flex_2009_and_gradient_ranges() -> None:
    compilation = _compile()
    assert compilation.flex_2009 == {
        "chrome": VersionRange(v("4"), v("4")),
        "safari": VersionRange(v("3.1"), v("3.1")),
        "firefox": VersionRange(v("2"), v("21")),
    }
    assert compilation.webkit_gradient == {
        "chrome": VersionRange(v("4"), v("4")),
        "safari": VersionRange(v("4"), v("4")),
    }


def test_any_pseudo_rows() -> None:
    rows = any_pseudo_rows(make_mdn(), ("css", "selectors", "is"))
    assert rows == ["chrome 12", "chrome 87", "firefox 4", "firefox 77"]


def test_any_pseudo_construct() -> None:
    compilation = _compile()
    assert compilation.names[-1] == "any-pseudo"
    assert prefix_predicate(compilation, "any-pseudo") == {
        "chrome": {"webkit": VersionRange(v("12"), v("87"))},
        "firefox": {"moz": VersionRange(v("4"), v("77"))},
    }


def test_single_current_observation_is_unbounded() -> None:
    agents = {"safari": {"prefix": "webkit", "versions": ["13", "14"]}}
    compilation = compile_prefixes({"thing": {"browsers": ["safari 14"]}}, agents, _NO_CORRECTIONS)
    assert prefix_predicate(compilation, "thing") == {"safari": {"webkit": VersionRange(None, None)}}
    assert prefixes_for(compilation, "thing", {"safari": v("14")}) == VendorPrefix.WEBKIT
    assert prefixes_for(compilation, "thing", {"safari": v("17")}) == VendorPrefix.WEBKIT


def test_single_older_observation_caps_range() -> None:
    agents = {"safari": {"prefix": "webkit", "versions": ["14", "15", "16", "17"]}}
    compilation = compile_prefixes({"thing": {"browsers": ["safari 14"]}}, agents, _NO_CORRECTIONS)
    assert prefix_predicate(compilation, "thing") == {"safari": {"webkit": VersionRange(None, v("14"))}}
    assert prefixes_for(compilation, "thing", {"safari": v("14")}) == VendorPrefix.WEBKIT
    assert prefixes_for(compilation, "thing", {"safari": v("17")}) == VendorPrefix.NONE


def test_bad_versions_are_reported_and_skipped() -> None:
    agents = {"safari": {"prefix": "webkit", "versions": ["4", "5", "6", "TP"]}}
    compilation = compile_prefixes(
        {"thing": {"browsers": ["safari 4", "safari 5", "safari TP"]}}, agents, _NO_CORRECTIONS
    )
    assert prefix_predicate(compilation, "thing") == {"safari": {"webkit": VersionRange(v("4"), v("5"))}}
    assert compilation.warnings == ["Bad version for thing: safari TP"]


def test_unparseable_rows_count_as_observations() -> None:
    agents = {"safari": {"prefix": "webkit", "versions": ["13", "14"]}}
    compilation = compile_prefixes(
        {"thing": {"browsers": ["safari 14", "safari x"]}}, agents, _NO_CORRECTIONS
    )
    assert prefix_predicate(compilation, "thing") == {"safari": {"webkit": VersionRange(v("14"), None)}}
    assert compilation.warnings == ["Bad version for thing: safari x"]


def test_unknown_prefix_is_fatal() -> None:
    agents = {"safari": {"prefix": "khtml", "versions": ["4"]}}
    with pytest.raises(UnknownPrefixError) as excinfo:
        compile_prefixes({"thing": {"browsers": ["safari 4"]}}, agents, _NO_CORRECTIONS)
    assert "khtml" in str(excinfo.value)


def test_row_for_unknown_agent_is_schema_error() -> None:
    agents = {"safari": {"prefix": "webkit", "versions": ["4"]}}
    with pytest.raises(SchemaError):
        compile_prefixes(
            {"thing": {"browsers": ["safari 4", "chrome 4"]}},
            agents,
            _NO_CORRECTIONS,
            browsers=("chrome", "safari"),
        )
