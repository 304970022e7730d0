"""Node.js package.json scanning."""

import re

from .models import DependencyItem, Ecosystem, Manifest

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "peerDependencies", "optionalDependencies")

_SECTION_START = re.compile(r'^\s*"(\w+)"\s*:\s*\{')
_ENTRY = re.compile(r'^\s*"([^"]+)"\s*:\s*"([^"]*)"')


def parse_package_json(content: str) -> Manifest:
    """Scan package.json content into a Manifest.

    Works line by line so every item keeps the position of its version
    string; entries must sit on their own line, as npm writes them.

    Args:
        content: The package.json file content

    Returns:
        Manifest with one item per dependency entry
    """
    items: list[DependencyItem] = []
    in_section = False

    for lineno, line in enumerate(content.splitlines()):
        if not in_section:
            section = _SECTION_START.match(line)
            if section and section.group(1) in DEPENDENCY_SECTIONS:
                in_section = "}" not in line[section.end():]
            continue

        if line.strip().startswith("}"):
            in_section = False
            continue

        entry = _ENTRY.match(line)
        if entry:
            items.append(
                DependencyItem.at(
                    f'"{entry.group(1)}"',
                    entry.group(2),
                    lineno,
                    entry.start(2),
                    entry.end(2),
                    len(line),
                )
            )

    return Manifest(ecosystem=Ecosystem.JAVASCRIPT, raw=content, items=items)
