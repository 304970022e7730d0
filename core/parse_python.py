"""Python requirements.txt and pyproject.toml scanning."""

import re

from packaging.requirements import InvalidRequirement, Requirement

from .models import DependencyItem, Ecosystem, Manifest

_NAME = re.compile(r"^\s*[A-Za-z0-9][A-Za-z0-9._-]*\s*(?:\[[^\]]*\])?\s*")
_STRING = re.compile(r'"([^"]*)"')
_TABLE = re.compile(r"^\s*\[([^\]]+)\]\s*$")
_ARRAY_START = re.compile(r"^\s*([A-Za-z0-9_.-]+)\s*=\s*\[")


def _specifier_span(text: str) -> tuple[str, int, int] | None:
    """Locate the version specifier inside a single requirement string.

    Returns:
        (name, start, end) of the specifier within `text`, or None if the
        requirement is malformed, a direct reference, or unpinned
    """
    body = text.split("#")[0].split(";")[0]
    if not body.strip():
        return None

    try:
        req = Requirement(text.split("#")[0].strip())
    except InvalidRequirement:
        # Skip malformed requirements gracefully
        return None
    if req.url:
        return None

    match = _NAME.match(body)
    if not match:
        return None
    start = match.end()
    end = len(body.rstrip())
    if start >= end:
        return None
    return req.name, start, end


class RequirementsParser:
    """Parser for Python requirements.txt files."""

    def __init__(self):
        # Patterns for lines to skip
        self.skip_patterns = [
            r"^\s*#",  # Comment lines
            r"^\s*$",  # Empty lines
            r"^-e\s+",  # Editable installs
            r"^git\+",  # Git URLs
            r"^hg\+",  # Mercurial URLs
            r"^svn\+",  # SVN URLs
            r"^bzr\+",  # Bazaar URLs
            r"^https?://",  # Direct URLs
            r"^file://",  # File URLs
            r"^\./",  # Local paths
            r"^-r\s+",  # Include other requirements files
            r"^-f\s+",  # Find links
            r"^--",  # Other pip options
        ]

    def _should_skip_line(self, line: str) -> bool:
        """Check if a line should be skipped during parsing."""
        stripped = line.strip()
        if not stripped:
            return True

        return any(re.match(pattern, stripped) for pattern in self.skip_patterns)

    def _parse_requirement_line(self, line: str, lineno: int) -> DependencyItem | None:
        """Build an item covering the specifier of one requirement line."""
        span = _specifier_span(line)
        if span is None:
            return None

        name, start, end = span
        return DependencyItem.at(name, line[start:end], lineno, start, end, len(line))

    def parse(self, content: str) -> Manifest:
        """Scan requirements.txt content into a Manifest."""
        items: list[DependencyItem] = []

        for lineno, line in enumerate(content.splitlines()):
            if self._should_skip_line(line):
                continue

            item = self._parse_requirement_line(line, lineno)
            if item:
                items.append(item)

        return Manifest(ecosystem=Ecosystem.PYTHON, raw=content, items=items)


class PyprojectParser:
    """Parser for PEP 621 dependency arrays in pyproject.toml."""

    def _is_dependency_array(self, table: str | None, key: str) -> bool:
        if table == "project":
            return key == "dependencies"
        return table == "project.optional-dependencies"

    def parse(self, content: str) -> Manifest:
        """Scan pyproject.toml content into a Manifest."""
        items: list[DependencyItem] = []
        table = None
        in_array = False

        for lineno, line in enumerate(content.splitlines()):
            header = _TABLE.match(line)
            if header and not in_array:
                table = header.group(1).strip()
                continue

            search_from = 0
            if not in_array:
                start = _ARRAY_START.match(line)
                if not start or not self._is_dependency_array(table, start.group(1)):
                    continue
                in_array = True
                search_from = start.end()

            last = search_from
            for match in _STRING.finditer(line, search_from):
                last = match.end()
                span = _specifier_span(match.group(1))
                if span is None:
                    continue
                name, start, end = span
                offset = match.start(1)
                items.append(
                    DependencyItem.at(
                        name, match.group(1)[start:end], lineno, offset + start, offset + end, len(line)
                    )
                )

            if "]" in line[last:].split("#")[0]:
                in_array = False

        return Manifest(ecosystem=Ecosystem.PYTHON, raw=content, items=items)


def parse_requirements(content: str) -> Manifest:
    """Scan requirements.txt content into a Manifest.

    Args:
        content: The requirements.txt file content

    Returns:
        Manifest with one item per pinned or constrained requirement
    """
    parser = RequirementsParser()
    return parser.parse(content)


def parse_pyproject(content: str) -> Manifest:
    """Scan pyproject.toml content into a Manifest."""
    return PyprojectParser().parse(content)
