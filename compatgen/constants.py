"""Constants used across compatgen."""

from __future__ import annotations

from typing import Final

# Source browser ids that have no field of their own in the generated targets.
# A value of None drops the browser entirely.
CANIUSE_BROWSER_MAPPING: Final[dict[str, str | None]] = {
    "and_chr": "chrome",
    "and_ff": "firefox",
    "ie_mob": "ie",
    "op_mob": "opera",
    "and_qq": None,
    "and_uc": None,
    "baidu": None,
    "bb": None,
    "kaios": None,
    "op_mini": None,
    "oculus": None,
}

MDN_BROWSER_MAPPING: Final[dict[str, str | None]] = {
    "chrome_android": "chrome",
    "firefox_android": "firefox",
    "opera_android": "opera",
    "safari_ios": "ios_saf",
    "webview_ios": "ios_saf",
    "samsunginternet_android": "samsung",
    "webview_android": "android",
    "oculus": None,
}

# Agent version entries that never count as a release.
NON_RELEASE_VERSIONS: Final[frozenset[str]] = frozenset({"all", "TP"})
CURRENT_RELEASE_WINDOW: Final[int] = 10

VERSION_APPROX_MARKER: Final[str] = "≤"
VERSION_RANGE_SEPARATOR: Final[str] = "-"

FLEX_2009_VARIANT: Final[str] = "2009"
OLD_GRADIENT_VARIANT: Final[str] = "old"

# Vendor prefix ids as used by the data sources, mapped to generated code names.
PREFIX_CODE_NAMES: Final[dict[str, str]] = {
    "webkit": "WebKit",
    "moz": "Moz",
    "ms": "Ms",
    "o": "O",
}

TARGETS_RS_PATH: Final[str] = "src/targets.rs"
PREFIXES_RS_PATH: Final[str] = "src/prefixes.rs"
COMPAT_RS_PATH: Final[str] = "src/compat.rs"
TARGETS_DTS_PATH: Final[str] = "node/targets.d.ts"
FLAGS_JS_PATH: Final[str] = "node/flags.js"

DEFAULT_FORMATTER: Final[tuple[str, ...]] = ("rustfmt",)
FORMATTED_SUFFIXES: Final[tuple[str, ...]] = (".rs",)

GENERATED_HEADER: Final[str] = "// This file is autogenerated by compatgen. DO NOT EDIT!"

DATA_FILES: Final[dict[str, str]] = {
    "agents": "agents.json",
    "prefixes": "prefixes.json",
    "caniuse": "caniuse.json",
    "mdn": "mdn.json",
}

DEBUG_ENV_VAR: Final[str] = "COMPATGEN_DEBUG"
