"""Cargo.toml scanning."""

import re

from .models import DependencyItem, Ecosystem, Manifest

_TABLE = re.compile(r"^\s*\[\[?([^\]]+)\]\]?\s*(?:#.*)?$")
_DEPENDENCY_TABLE = re.compile(r"^(?:.+\.)?(?:dev-|build-)?dependencies$")
_DEPENDENCY_SUBTABLE = re.compile(r"^(?:.+\.)?(?:dev-|build-)?dependencies\.(.+)$")
_PLAIN = re.compile(r'^\s*("?[\w.-]+"?)\s*=\s*"([^"]*)"')
_INLINE = re.compile(r'^\s*("?[\w.-]+"?)\s*=\s*\{.*?\bversion\s*=\s*"([^"]*)"')
_VERSION = re.compile(r'^\s*version\s*=\s*"([^"]*)"')


def parse_cargo_toml(content: str) -> Manifest:
    """Scan Cargo.toml content into a Manifest.

    Handles `name = "req"`, `name = { version = "req", ... }` and
    `[dependencies.name]` tables carrying a `version` key, in every
    dependencies table (dev, build, target-specific, workspace).
    """
    items: list[DependencyItem] = []
    in_dependencies = False
    table_key = None

    for lineno, line in enumerate(content.splitlines()):
        table = _TABLE.match(line)
        if table:
            name = table.group(1).strip()
            in_dependencies = bool(_DEPENDENCY_TABLE.match(name))
            subtable = _DEPENDENCY_SUBTABLE.match(name)
            table_key = subtable.group(1).strip() if subtable else None
            continue

        if table_key is not None:
            version = _VERSION.match(line)
            if version:
                items.append(
                    DependencyItem.at(
                        table_key, version.group(1), lineno, version.start(1), version.end(1), len(line)
                    )
                )
            continue

        if not in_dependencies:
            continue

        entry = _INLINE.match(line) or _PLAIN.match(line)
        if entry:
            items.append(
                DependencyItem.at(
                    entry.group(1), entry.group(2), lineno, entry.start(2), entry.end(2), len(line)
                )
            )

    return Manifest(ecosystem=Ecosystem.RUST, raw=content, items=items)
