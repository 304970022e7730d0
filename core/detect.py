"""Ecosystem detection for dependency manifests."""

import re

from .models import Ecosystem

FILENAMES = {
    "Cargo.toml": Ecosystem.RUST,
    "go.mod": Ecosystem.GO,
    "package.json": Ecosystem.JAVASCRIPT,
    "requirements.txt": Ecosystem.PYTHON,
    "pyproject.toml": Ecosystem.PYTHON,
}


def identify(content: str, filename: str | None = None) -> Ecosystem:
    """Detect ecosystem from content and filename hints.

    Args:
        content: The manifest file content
        filename: Optional filename for additional context

    Returns:
        Detected ecosystem, Ecosystem.UNKNOWN if nothing matches
    """
    # Filename-based detection (takes precedence)
    if filename:
        for suffix, ecosystem in FILENAMES.items():
            if filename.endswith(suffix):
                return ecosystem

    # Content-based detection, most distinctive markers first
    if re.search(r"^module\s+\S+", content, re.MULTILINE) and re.search(
        r"^(?:go\s+\d|require\b)", content, re.MULTILINE
    ):
        return Ecosystem.GO

    if re.search(r"^\[(?:package|workspace)\]", content, re.MULTILINE) or re.search(
        r"^\[(?:dev-|build-)?dependencies\]", content, re.MULTILINE
    ):
        return Ecosystem.RUST

    if re.search(r'"(?:dependencies|devDependencies|peerDependencies)"\s*:', content):
        return Ecosystem.JAVASCRIPT

    python_patterns = [
        r"^\[project\]",  # pyproject.toml
        r"^[a-zA-Z0-9\-_]+\s*[><=!~]+\s*[\d\w\.\-]+",  # package>=1.0.0
        r"^[a-zA-Z0-9\-_]+\[.*?\]\s*[><=!~]+",  # package[extras]>=1.0.0
        r";\s*(?:sys_platform|python_version)",  # environment markers
    ]

    for pattern in python_patterns:
        if re.search(pattern, content, re.MULTILINE):
            return Ecosystem.PYTHON

    return Ecosystem.UNKNOWN
