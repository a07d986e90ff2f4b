"""Curated tables fed into the compilers.

These are the hand-maintained parts of a generation run: which features are
tracked, under which names, and which upstream entries are known to be wrong.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .flags import FlagEntry


@dataclass(frozen=True)
class RowRemoval:
    """Drop prefix rows for ``browser`` at or above ``since``."""

    browser: str
    since: str


@dataclass(frozen=True)
class PrefixTables:
    removals: Mapping[str, tuple[RowRemoval, ...]] = field(default_factory=dict)
    additions: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    # (construct, prefix from the agent table) -> prefix actually used
    prefix_overrides: Mapping[tuple[str, str], str] = field(default_factory=dict)
    # Synthetic construct built from the mdn :is() record and its -any() alternative.
    any_pseudo_construct: str | None = "any-pseudo"
    any_pseudo_path: tuple[str, ...] = ("css", "selectors", "is")


@dataclass(frozen=True)
class CompatTables:
    caniuse_features: tuple[str, ...] = ()
    caniuse_names: Mapping[str, str] = field(default_factory=dict)
    # feature -> browser -> raw stat value -> replacement value
    caniuse_overrides: Mapping[str, Mapping[str, Mapping[str, str]]] = field(default_factory=dict)
    never_supported: tuple[str, ...] = ()
    mdn_features: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    # feature -> name of a record transform in compat._TRANSFORMS
    mdn_transforms: Mapping[str, str] = field(default_factory=dict)
    generate_mdn_families: bool = True
    nonstandard_list_style_types: frozenset[str] = frozenset()
    fixed_minimums: Mapping[str, Mapping[str, str]] = field(default_factory=dict)


DEFAULT_PREFIX_TABLES = PrefixTables(
    removals=MappingProxyType(
        {
            # Caniuse data for clip-path is incorrect.
            # https://github.com/Fyrd/caniuse/issues/6209
            "clip-path": (RowRemoval("safari", "9.1"), RowRemoval("ios_saf", "9.3")),
        }
    ),
    additions=MappingProxyType(
        {
            # Safari 4-13 supports background-clip: text with a prefix.
            "background-clip": ("safari 13", "ios_saf 4", "ios_saf 13"),
        }
    ),
    prefix_overrides=MappingProxyType({("backdrop-filter", "ms"): "webkit"}),
)

_CANIUSE_FEATURES = (
    "css-sel2",
    "css-sel3",
    "css-gencontent",
    "css-first-letter",
    "css-first-line",
    "css-in-out-of-range",
    "form-validation",
    "css-any-link",
    "css-default-pseudo",
    "css-dir-pseudo",
    "css-focus-within",
    "css-focus-visible",
    "css-indeterminate-pseudo",
    "css-matches-pseudo",
    "css-optional-pseudo",
    "css-placeholder-shown",
    "dialog",
    "fullscreen",
    "css-marker-pseudo",
    "css-placeholder",
    "css-selection",
    "css-case-insensitive",
    "css-read-only-write",
    "css-autofill",
    "css-namespaces",
    "shadowdomv1",
    "css-rrggbbaa",
    "css-nesting",
    "css-not-sel-list",
    "css-has",
    "font-family-system-ui",
    "extended-system-fonts",
    "calc",
)

_CANIUSE_NAMES = {
    "css-dir-pseudo": "DirSelector",
    "css-rrggbbaa": "HexAlphaColors",
    "css-not-sel-list": "NotSelectorList",
    "css-has": "HasSelector",
    "css-matches-pseudo": "IsSelector",
    "css-sel2": "Selectors2",
    "css-sel3": "Selectors3",
    "calc": "CalcFunction",
}

_CANIUSE_OVERRIDES = {
    # Safari only styles some properties of ::marker, which does not matter for
    # using the selector itself.
    # https://bugs.webkit.org/show_bug.cgi?id=204163
    "css-marker-pseudo": {"safari": {"y #1": "y"}},
}

_MDN_FEATURES = {
    "doublePositionGradients": ("css", "types", "gradient", "radial-gradient", "doubleposition"),
    "clampFunction": ("css", "types", "clamp"),
    "placeSelf": ("css", "properties", "place-self"),
    "placeContent": ("css", "properties", "place-content"),
    "placeItems": ("css", "properties", "place-items"),
    "overflowShorthand": ("css", "properties", "overflow", "multiple_keywords"),
    "mediaRangeSyntax": ("css", "at-rules", "media", "range_syntax"),
    "mediaIntervalSyntax": ("css", "at-rules", "media", "range_syntax"),
    "logicalBorders": ("css", "properties", "border-inline-start"),
    "logicalBorderShorthand": ("css", "properties", "border-inline"),
    "logicalBorderRadius": ("css", "properties", "border-start-start-radius"),
    "logicalMargin": ("css", "properties", "margin-inline-start"),
    "logicalMarginShorthand": ("css", "properties", "margin-inline"),
    "logicalPadding": ("css", "properties", "padding-inline-start"),
    "logicalPaddingShorthand": ("css", "properties", "padding-inline"),
    "logicalInset": ("css", "properties", "inset-inline-start"),
    "logicalSize": ("css", "properties", "inline-size"),
    "logicalTextAlign": ("css", "properties", "text-align", "start"),
    "labColors": ("css", "types", "color", "lab"),
    "oklabColors": ("css", "types", "color", "oklab"),
    "colorFunction": ("css", "types", "color", "color"),
    "spaceSeparatedColorNotation": ("css", "types", "color", "rgb", "space_separated_parameters"),
    "textDecorationThicknessPercent": (
        "css",
        "properties",
        "text-decoration-thickness",
        "percentage",
    ),
    "textDecorationThicknessShorthand": (
        "css",
        "properties",
        "text-decoration",
        "includes_thickness",
    ),
    "cue": ("css", "selectors", "cue"),
    "cueFunction": ("css", "selectors", "cue", "selector_argument"),
    "anyPseudo": ("css", "selectors", "is"),
    "partPseudo": ("css", "selectors", "part"),
    "imageSet": ("css", "types", "image", "image-set"),
    "xResolutionUnit": ("css", "types", "resolution", "x"),
    "nthChildOf": ("css", "selectors", "nth-child", "of_syntax"),
    "minFunction": ("css", "types", "min"),
    "maxFunction": ("css", "types", "max"),
    "roundFunction": ("css", "types", "round"),
    "remFunction": ("css", "types", "rem"),
    "modFunction": ("css", "types", "mod"),
    "absFunction": ("css", "types", "abs"),
    "signFunction": ("css", "types", "sign"),
    "hypotFunction": ("css", "types", "hypot"),
    "gradientInterpolationHints": (
        "css",
        "types",
        "gradient",
        "linear-gradient",
        "interpolation_hints",
    ),
    "borderImageRepeatRound": ("css", "properties", "border-image-repeat", "round"),
    "borderImageRepeatSpace": ("css", "properties", "border-image-repeat", "space"),
    "fontSizeRem": ("css", "properties", "font-size", "rem_values"),
    "fontSizeXXXLarge": ("css", "properties", "font-size", "xxx-large"),
    "fontStyleObliqueAngle": ("css", "properties", "font-style", "oblique-angle"),
    "fontWeightNumber": ("css", "properties", "font-weight", "number"),
    "fontStretchPercentage": ("css", "properties", "font-stretch", "percentage"),
    "lightDark": ("css", "types", "color", "light-dark"),
    "accentSystemColor": (
        "css",
        "types",
        "color",
        "system-color",
        "accentcolor_accentcolortext",
    ),
    "animationTimelineShorthand": (
        "css",
        "properties",
        "animation",
        "animation-timeline_included",
    ),
    "viewTransition": ("css", "selectors", "view-transition"),
    "detailsContent": ("css", "selectors", "details-content"),
    "targetText": ("css", "selectors", "target-text"),
    "picker": ("css", "selectors", "picker"),
    "pickerIcon": ("css", "selectors", "picker-icon"),
    "checkmark": ("css", "selectors", "checkmark"),
}

_MDN_TRANSFORMS = {
    # Firefox supported only ranges and not intervals for a while.
    "mediaIntervalSyntax": "without-partial",
    "anyPseudo": "alternative-any",
}

_NONSTANDARD_LIST_STYLE_TYPES = frozenset(
    {
        # https://developer.mozilla.org/en-US/docs/Web/CSS/list-style-type#non-standard_extensions
        "ethiopic-halehame",
        "ethiopic-halehame-am",
        "ethiopic-halehame-ti-er",
        "ethiopic-halehame-ti-et",
        "hangul",
        "hangul-consonant",
        "urdu",
        "cjk-ideographic",
        # https://github.com/w3c/csswg-drafts/issues/135
        "upper-greek",
    }
)

DEFAULT_COMPAT_TABLES = CompatTables(
    caniuse_features=_CANIUSE_FEATURES,
    caniuse_names=MappingProxyType(_CANIUSE_NAMES),
    caniuse_overrides=MappingProxyType(_CANIUSE_OVERRIDES),
    # No browser supports custom media queries yet.
    never_supported=("custom-media-queries",),
    mdn_features=MappingProxyType(_MDN_FEATURES),
    mdn_transforms=MappingProxyType(_MDN_TRANSFORMS),
    nonstandard_list_style_types=_NONSTANDARD_LIST_STYLE_TYPES,
    fixed_minimums=MappingProxyType(
        {
            "p3Colors": {"safari": "10.1", "ios_saf": "10.3"},
            # https://github.com/WebKit/WebKit/commit/baed0d8b0abf366e1d9a6105dc378c59a5f21575
            "LangSelectorList": {"safari": "10.1", "ios_saf": "10.3"},
        }
    ),
)

FLAG_ENTRIES: tuple[FlagEntry, ...] = (
    "Nesting",
    "NotSelectorList",
    "DirSelector",
    "LangSelectorList",
    "IsSelector",
    "TextDecorationThicknessPercent",
    "MediaIntervalSyntax",
    "MediaRangeSyntax",
    "CustomMediaQueries",
    "ClampFunction",
    "ColorFunction",
    "OklabColors",
    "LabColors",
    "P3Colors",
    "HexAlphaColors",
    "SpaceSeparatedColorNotation",
    "FontFamilySystemUi",
    "DoublePositionGradients",
    "VendorPrefixes",
    "LogicalProperties",
    "LightDark",
    ("Selectors", ("Nesting", "NotSelectorList", "DirSelector", "LangSelectorList", "IsSelector")),
    ("MediaQueries", ("MediaIntervalSyntax", "MediaRangeSyntax", "CustomMediaQueries")),
    (
        "Colors",
        (
            "ColorFunction",
            "OklabColors",
            "LabColors",
            "P3Colors",
            "HexAlphaColors",
            "SpaceSeparatedColorNotation",
            "LightDark",
        ),
    ),
)
