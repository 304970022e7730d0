"""go.mod scanning."""

import re

from .models import DependencyItem, Ecosystem, Manifest

_SINGLE = re.compile(r"^\s*require\s+(\S+)\s+(v\S+)")
_BLOCK_START = re.compile(r"^\s*require\s*\(\s*$")
_BLOCK_ENTRY = re.compile(r"^\s*(\S+)\s+(v[^\s/]+)")


def parse_go_mod(content: str) -> Manifest:
    """Scan go.mod content into a Manifest."""
    items: list[DependencyItem] = []
    in_block = False

    for lineno, line in enumerate(content.splitlines()):
        if in_block:
            if line.strip().startswith(")"):
                in_block = False
                continue
            entry = _BLOCK_ENTRY.match(line)
        elif _BLOCK_START.match(line):
            in_block = True
            continue
        else:
            entry = _SINGLE.match(line)

        if entry and not entry.group(1).startswith("//"):
            items.append(
                DependencyItem.at(
                    entry.group(1), entry.group(2), lineno, entry.start(2), entry.end(2), len(line)
                )
            )

    return Manifest(ecosystem=Ecosystem.GO, raw=content, items=items)
