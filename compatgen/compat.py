"""Feature support compiler.

Computes, per tracked feature, the first version of every browser with
unconditional support, from caniuse stats, mdn browser-compat-data and a few
hard-coded entries.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
import logging
from typing import Any

from .browsers import CANIUSE_SOURCE, MDN_SOURCE
from .dedup import PredicateDeduplicator
from .exceptions import SchemaError
from .model import CompatCompilation, CompatPredicate
from .tables import CompatTables
from .util.data import compat_support, dig_mapping, feature_children
from .util.text import camel_case, pascal_case
from .version import parse_version

LOGGER = logging.getLogger(__name__)

SUPPORTED = "y"
_CSS_PREFIX = "css-"

SupportTable = Mapping[str, Any]
_Transform = Callable[[Any], Any]


def _without_partial(record: Any) -> Any:
    if isinstance(record, list):
        return [entry for entry in record if not entry.get("partial_implementation")]
    if isinstance(record, Mapping) and record.get("partial_implementation"):
        return None
    return record


def _alternative_any(record: Any) -> Any:
    if isinstance(record, list):
        entries = [
            {key: value for key, value in entry.items() if key != "alternative_name"}
            for entry in record
            if "-any" in (entry.get("alternative_name") or "")
        ]
        if entries:
            return entries
    return {"version_added": False}


_TRANSFORMS: dict[str, _Transform] = {
    "without-partial": _without_partial,
    "alternative-any": _alternative_any,
}


def caniuse_name(feature: str, tables: CompatTables) -> str:
    name = tables.caniuse_names.get(feature, feature)
    return name.removeprefix(_CSS_PREFIX)


def _is_unconditional(entry: Mapping[str, Any]) -> bool:
    return not (entry.get("alternative_name") or entry.get("flags") or entry.get("prefix"))


def earliest_version_added(record: Any) -> str | None:
    """Pick the version a browser first shipped a feature without conditions.

    A list record holds several historical states; the earliest added entry that
    is not an alternative name, flagged, or prefixed wins. Anything that is not a
    version string (``True``, ``False``, ``None``) counts as no data.
    """
    if isinstance(record, list):
        candidates = [
            entry.get("version_added")
            for entry in record
            if isinstance(entry, Mapping) and entry.get("version_added") and _is_unconditional(entry)
        ]
        candidates = [value for value in candidates if isinstance(value, str)]
        if not candidates:
            return None

        def _order(value: str) -> tuple[int, int]:
            parsed = parse_version(value)
            return (1, 0) if parsed is None else (0, parsed)

        return min(candidates, key=_order)

    if isinstance(record, Mapping) and _is_unconditional(record):
        value = record.get("version_added")
        if isinstance(value, str) and value:
            return value
    return None


class _CompatBuilder:
    def __init__(self, browsers: tuple[str, ...]) -> None:
        self.browsers = browsers
        self.caniuse = CANIUSE_SOURCE.bind(browsers)
        self.mdn = MDN_SOURCE.bind(browsers)
        self.groups: PredicateDeduplicator[CompatPredicate] = PredicateDeduplicator()
        self.warnings: list[str] = []

    def _version(self, feature: str, browser: str, raw: str) -> int | None:
        version = parse_version(raw)
        if version is None:
            message = f"Bad version for {feature}: {browser} {raw}"
            LOGGER.warning("%s", message)
            self.warnings.append(message)
        return version

    def add_caniuse(
        self,
        feature: str,
        stats: Mapping[str, Any],
        overrides: Mapping[str, Mapping[str, str]],
        name: str,
    ) -> None:
        predicate: CompatPredicate = {}
        for source_id, versions in stats.items():
            browser = self.caniuse.canonical_browser(source_id)
            if browser is None:
                continue
            if not isinstance(versions, Mapping):
                raise SchemaError("caniuse", (feature, "stats", source_id), "expected an object")
            browser_overrides = overrides.get(browser, {})
            for raw_version, value in versions.items():
                value = browser_overrides.get(value, value)
                if value != SUPPORTED:
                    continue
                version = self._version(feature, browser, raw_version)
                if version is None:
                    continue
                if browser not in predicate or version < predicate[browser]:
                    predicate[browser] = version
        self.groups.add(name, predicate)

    def add_mdn(self, name: str, support: SupportTable) -> None:
        predicate: CompatPredicate = {}
        for source_id, record in support.items():
            browser = self.mdn.canonical_browser(source_id)
            if browser is None:
                continue
            raw_version = earliest_version_added(record)
            if raw_version is None:
                continue
            version = self._version(name, browser, raw_version)
            if version is None:
                continue
            # Every source feeding one browser must support it.
            predicate[browser] = max(version, predicate.get(browser, version))
        self.groups.add(name, predicate)

    def add_fixed(self, name: str, minimums: Mapping[str, str]) -> None:
        predicate: CompatPredicate = {}
        for browser, raw_version in minimums.items():
            version = self._version(name, browser, raw_version)
            if version is not None:
                predicate[browser] = version
        self.groups.add(name, predicate)


def _named_mdn_features(
    mdn: Mapping[str, Any], tables: CompatTables
) -> Iterator[tuple[str, SupportTable]]:
    for name, path in tables.mdn_features.items():
        support = compat_support(mdn, path)
        transform_name = tables.mdn_transforms.get(name)
        if transform_name is not None:
            transform = _TRANSFORMS[transform_name]
            support = {browser: transform(record) for browser, record in support.items()}
        yield name, support


def _length_units(mdn: Mapping[str, Any]) -> Iterator[tuple[str, SupportTable]]:
    path = ("css", "types", "length")
    node = dig_mapping("mdn", mdn, path)
    for key in feature_children(node):
        name = camel_case(key, separators="_") if "_" in key else f"{key}Unit"
        yield name, compat_support(mdn, (*path, key))


def _gradients(mdn: Mapping[str, Any]) -> Iterator[tuple[str, SupportTable]]:
    path = ("css", "types", "gradient")
    node = dig_mapping("mdn", mdn, path)
    for key in feature_children(node):
        yield camel_case(key), compat_support(mdn, (*path, key))


def _list_style_types(
    mdn: Mapping[str, Any], nonstandard: frozenset[str]
) -> Iterator[tuple[str, SupportTable]]:
    path = ("css", "properties", "list-style-type")
    node = dig_mapping("mdn", mdn, path)
    for key in feature_children(node):
        if key in nonstandard:
            continue
        support = compat_support(mdn, (*path, key))
        chrome = support.get("chrome")
        if isinstance(chrome, Mapping) and chrome.get("version_removed"):
            continue
        yield f"{pascal_case(key)}ListStyleType", support


def _sizes(mdn: Mapping[str, Any]) -> Iterator[tuple[str, SupportTable]]:
    path = ("css", "properties", "width")
    node = dig_mapping("mdn", mdn, path)
    for key in feature_children(node, skip=("animatable",)):
        yield f"{pascal_case(key, separators='-_')}Size", compat_support(mdn, (*path, key))


def _stretch_alternatives(mdn: Mapping[str, Any]) -> dict[str, dict[str, Any]]:
    """Turn alternative names of ``width: stretch`` into features of their own.

    ``-webkit-fill-available`` becomes ``webkitFillAvailableSize``.
    """
    features: dict[str, dict[str, Any]] = {}
    support = compat_support(mdn, ("css", "properties", "width", "stretch"))
    for browser, record in support.items():
        entries = record if isinstance(record, list) else [record]
        for entry in entries:
            if not isinstance(entry, Mapping):
                continue
            alternative = entry.get("alternative_name")
            if not isinstance(alternative, str) or not alternative:
                continue
            name = camel_case(alternative[1:], separators="-_") + "Size"
            features.setdefault(name, {})[browser] = {"version_added": entry.get("version_added")}
    return features


def mdn_feature_tables(
    mdn: Mapping[str, Any], tables: CompatTables
) -> dict[str, SupportTable]:
    """Collect every mdn-backed feature and its support table, in emission order."""
    features: dict[str, SupportTable] = dict(_named_mdn_features(mdn, tables))
    if tables.generate_mdn_families:
        features.update(_length_units(mdn))
        features.update(_gradients(mdn))
        features.update(_list_style_types(mdn, tables.nonstandard_list_style_types))
        features.update(_sizes(mdn))
        for name, support in _stretch_alternatives(mdn).items():
            merged = dict(features.get(name, {}))
            merged.update(support)
            features[name] = merged
    return features


def compile_compat(
    caniuse: Mapping[str, Any],
    mdn: Mapping[str, Any],
    tables: CompatTables,
    *,
    browsers: tuple[str, ...],
) -> CompatCompilation:
    """Compile minimum supported versions for every tracked feature."""
    builder = _CompatBuilder(browsers)

    for feature in tables.caniuse_features:
        stats = dig_mapping("caniuse", caniuse, (feature, "stats"))
        builder.add_caniuse(
            feature,
            stats,
            tables.caniuse_overrides.get(feature, {}),
            caniuse_name(feature, tables),
        )

    for name in tables.never_supported:
        builder.groups.add(name, {})

    for name, support in mdn_feature_tables(mdn, tables).items():
        builder.add_mdn(name, support)

    for name, minimums in tables.fixed_minimums.items():
        builder.add_fixed(name, minimums)

    LOGGER.debug("Compiled %d compat groups", len(builder.groups))
    return CompatCompilation(
        groups=builder.groups.groups,
        browsers=browsers,
        warnings=builder.warnings,
    )

