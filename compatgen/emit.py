"""Artifact emitters: render compiled tables as Rust and TypeScript/JS sources."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
import re
import subprocess

from .constants import (
    COMPAT_RS_PATH,
    DEFAULT_FORMATTER,
    FLAGS_JS_PATH,
    FORMATTED_SUFFIXES,
    GENERATED_HEADER,
    PREFIX_CODE_NAMES,
    PREFIXES_RS_PATH,
    TARGETS_DTS_PATH,
    TARGETS_RS_PATH,
)
from .exceptions import ArtifactError, FormatterError, UnknownPrefixError
from .model import (
    CompatCompilation,
    Compilation,
    FlagBit,
    PrefixCompilation,
    PrefixPredicate,
    VersionRange,
)
from .util.text import enumify

LOGGER = logging.getLogger(__name__)

_BROWSERS_STRUCT_RE = re.compile(r"pub struct Browsers \{(?:.|\n)+?\}")
_FEATURES_STRUCT_RE = re.compile(r"pub struct Features: u32 \{(?:.|\n)+?\}")


class ArtifactWriter:
    """Write artifacts below ``out_dir`` and run the formatter on Rust files."""

    def __init__(
        self,
        out_dir: Path,
        formatter: Sequence[str] | None = DEFAULT_FORMATTER,
    ) -> None:
        self.out_dir = out_dir
        self.formatter = tuple(formatter) if formatter else None
        self.written: list[Path] = []

    def read(self, relative: str) -> str | None:
        path = self.out_dir / relative
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def write(self, relative: str, text: str) -> Path:
        path = self.out_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        LOGGER.info("Wrote %s", path)
        if self.formatter and path.suffix in FORMATTED_SUFFIXES:
            self.format(path)
        self.written.append(path)
        return path

    def format(self, path: Path) -> None:
        if not self.formatter:
            return
        command = [*self.formatter, str(path)]
        try:
            result = subprocess.run(command, capture_output=True, text=True, check=False)
        except FileNotFoundError as exc:
            raise FormatterError(command) from exc
        if result.returncode != 0:
            LOGGER.error("%s", result.stderr.strip())
            raise FormatterError(command, returncode=result.returncode)


def _leaf_shift(flag: FlagBit) -> int:
    return flag.value.bit_length() - 1


def render_browsers_struct(browsers: Sequence[str]) -> str:
    fields = ",\n  ".join(f"pub {browser}: Option<u32>" for browser in browsers)
    return f"pub struct Browsers {{\n  {fields}\n}}"


def render_features_struct(flags: Sequence[FlagBit]) -> str:
    lines: list[str] = []
    for flag in flags:
        if flag.is_composite:
            value = " | ".join(f"Self::{member}.bits()" for member in flag.members)
            lines.append(f"const {flag.name} = {value};")
        else:
            lines.append(f"const {flag.name} = 1 << {_leaf_shift(flag)};")
    body = "\n    ".join(lines)
    return f"pub struct Features: u32 {{\n    {body}\n  }}"


def render_targets_rs(existing: str | None, browsers: Sequence[str], flags: Sequence[FlagBit]) -> str:
    """Splice the Browsers struct and Features flags into ``targets.rs``."""
    browsers_rs = render_browsers_struct(browsers)
    features_rs = render_features_struct(flags)
    if existing is None:
        return (
            f"{GENERATED_HEADER}\n\n"
            "#[derive(Debug, Clone, Copy, Default, PartialEq)]\n"
            f"{browsers_rs}\n\n"
            "bitflags::bitflags! {\n"
            "  #[derive(Debug, Clone, Copy, PartialEq, Eq, Hash)]\n"
            f"  {features_rs}\n"
            "}\n"
        )

    if not _BROWSERS_STRUCT_RE.search(existing):
        raise ArtifactError(TARGETS_RS_PATH, "no `pub struct Browsers` declaration")
    if not _FEATURES_STRUCT_RE.search(existing):
        raise ArtifactError(TARGETS_RS_PATH, "no `pub struct Features: u32` declaration")
    updated = _BROWSERS_STRUCT_RE.sub(lambda _: browsers_rs, existing, count=1)
    return _FEATURES_STRUCT_RE.sub(lambda _: features_rs, updated, count=1)


def _flag_values_js(flags: Sequence[FlagBit]) -> str:
    return "\n  ".join(f"{flag.name}: {flag.value}," for flag in flags)


def render_targets_dts(browsers: Sequence[str], flags: Sequence[FlagBit]) -> str:
    fields = "?: number,\n  ".join(browsers)
    return (
        f"{GENERATED_HEADER}\n\n"
        f"export interface Targets {{\n  {fields}?: number\n}}\n\n"
        f"export const Features: {{\n  {_flag_values_js(flags)}\n}};\n"
    )


def render_flags_js(flags: Sequence[FlagBit]) -> str:
    return f"{GENERATED_HEADER}\n\nexports.Features = {{\n  {_flag_values_js(flags)}\n}};\n"


def _prefix_code_name(construct: str, prefix: str) -> str:
    code_name = PREFIX_CODE_NAMES.get(prefix)
    if code_name is None:
        raise UnknownPrefixError(construct, prefix)
    return code_name


def _range_condition(version_range: VersionRange) -> str | None:
    low, high = version_range.min, version_range.max
    if low is None and high is None:
        return None
    if low is None:
        return f"version <= {high}"
    if high is None:
        return f"version >= {low}"
    if low == high:
        return f"version == {low}"
    return f"version >= {low} && version <= {high}"


def _render_prefix_arm(names: Sequence[str], predicate: PrefixPredicate) -> str:
    variants = " |\n      ".join(f"Feature::{enumify(name)}" for name in names)
    blocks: list[str] = []
    for browser, ranges in predicate.items():
        needs_version = not all(version_range.is_unbounded for version_range in ranges.values())
        if needs_version:
            guard = f"if let Some(version) = browsers.{browser}"
        else:
            guard = f"if browsers.{browser}.is_some()"

        statements: list[str] = []
        for prefix, version_range in ranges.items():
            add_prefix = f"prefixes |= VendorPrefix::{_prefix_code_name(names[0], prefix)};"
            condition = _range_condition(version_range)
            if condition is None:
                statements.append(add_prefix)
            else:
                statements.append(f"if {condition} {{\n            {add_prefix}\n          }}")
        body = "\n          ".join(statements)
        blocks.append(f"{guard} {{\n          {body}\n        }}")
    return f"{variants} => {{\n        " + "\n        ".join(blocks) + "\n      }"


def _render_range_check(name: str, ranges: dict[str, VersionRange]) -> str:
    checks = "\n  ".join(
        f"if let Some(version) = browsers.{browser} {{\n"
        f"    if version >= {version_range.min} && version <= {version_range.max} {{\n"
        "      return true;\n"
        "    }\n"
        "  }"
        for browser, version_range in ranges.items()
    )
    return f"pub fn {name}(browsers: Browsers) -> bool {{\n  {checks}\n  false\n}}"


def render_prefixes_rs(compilation: PrefixCompilation) -> str:
    variants = ",\n  ".join(sorted(enumify(name) for name in compilation.names))
    arms = ",\n      ".join(
        _render_prefix_arm(group.names, group.predicate) for group in compilation.groups
    )
    return (
        f"{GENERATED_HEADER}\n\n"
        "use crate::vendor_prefix::VendorPrefix;\n"
        "use crate::targets::Browsers;\n\n"
        "#[allow(dead_code)]\n"
        f"pub enum Feature {{\n  {variants}\n}}\n\n"
        "impl Feature {\n"
        "  pub fn prefixes_for(&self, browsers: Browsers) -> VendorPrefix {\n"
        "    let mut prefixes = VendorPrefix::None;\n"
        "    match self {\n"
        f"      {arms}\n"
        "    }\n"
        "    prefixes\n"
        "  }\n"
        "}\n\n"
        f"{_render_range_check('is_flex_2009', compilation.flex_2009)}\n\n"
        f"{_render_range_check('is_webkit_gradient', compilation.webkit_gradient)}\n"
    )


def _render_compat_arm(names: Sequence[str], minimums: dict[str, int], browsers: Sequence[str]) -> str:
    variants = " |\n      ".join(f"Feature::{enumify(name)}" for name in names)
    if not minimums:
        return f"{variants} => {{\n        return false\n      }}"

    checks = [
        f"if let Some(version) = browsers.{browser} {{\n"
        f"          if version < {minimum} {{\n"
        "            return false\n"
        "          }\n"
        "        }"
        for browser, minimum in minimums.items()
    ]
    missing = [browser for browser in browsers if browser not in minimums]
    if missing:
        condition = " || ".join(f"browsers.{browser}.is_some()" for browser in missing)
        checks.append(f"if {condition} {{\n          return false\n        }}")
    return f"{variants} => {{\n        " + "\n        ".join(checks) + "\n      }"


def render_compat_rs(compilation: CompatCompilation) -> str:
    variants = ",\n  ".join(sorted(enumify(name) for name in compilation.names))
    arms = "\n      ".join(
        _render_compat_arm(group.names, group.predicate, compilation.browsers)
        for group in compilation.groups
    )
    partial = "    ".join(
        f"if targets.{browser}.is_some() {{\n"
        f"      browsers.{browser} = targets.{browser};\n"
        "      if self.is_compatible(browsers) {\n"
        "        return true\n"
        "      }\n"
        f"      browsers.{browser} = None;\n"
        "    }\n"
        for browser in compilation.browsers
    )
    return (
        f"{GENERATED_HEADER}\n\n"
        "use crate::targets::Browsers;\n\n"
        "#[allow(dead_code)]\n"
        "#[derive(Clone, Copy, PartialEq)]\n"
        f"pub enum Feature {{\n  {variants}\n}}\n\n"
        "impl Feature {\n"
        "  pub fn is_compatible(&self, browsers: Browsers) -> bool {\n"
        "    match self {\n"
        f"      {arms}\n"
        "    }\n"
        "    true\n"
        "  }\n\n"
        "  pub fn is_partially_compatible(&self, targets: Browsers) -> bool {\n"
        "    let mut browsers = Browsers::default();\n"
        f"    {partial}"
        "    false\n"
        "  }\n"
        "}\n"
    )


def emit_artifacts(compilation: Compilation, writer: ArtifactWriter) -> list[Path]:
    """Render and write every artifact, in dependency order."""
    writer.write(
        TARGETS_RS_PATH,
        render_targets_rs(writer.read(TARGETS_RS_PATH), compilation.browsers, compilation.flags),
    )
    writer.write(TARGETS_DTS_PATH, render_targets_dts(compilation.browsers, compilation.flags))
    writer.write(FLAGS_JS_PATH, render_flags_js(compilation.flags))
    writer.write(PREFIXES_RS_PATH, render_prefixes_rs(compilation.prefixes))
    writer.write(COMPAT_RS_PATH, render_compat_rs(compilation.compat))
    return list(writer.written)
