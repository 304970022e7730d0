"""Manifest scanning dispatch."""

from collections.abc import Callable

from .errors import ManifestError
from .models import Ecosystem, Manifest
from .parse_go import parse_go_mod
from .parse_node import parse_package_json
from .parse_python import parse_pyproject, parse_requirements
from .parse_rust import parse_cargo_toml

PARSERS: dict[Ecosystem, Callable[[str], Manifest]] = {
    Ecosystem.RUST: parse_cargo_toml,
    Ecosystem.GO: parse_go_mod,
    Ecosystem.JAVASCRIPT: parse_package_json,
    Ecosystem.PYTHON: parse_requirements,
}


def parse_manifest(content: str, ecosystem: Ecosystem, filename: str | None = None) -> Manifest:
    """Scan a manifest into dependency items.

    Args:
        content: The manifest file content
        ecosystem: Ecosystem the manifest belongs to
        filename: Optional filename, used to tell pyproject.toml from requirements.txt

    Raises:
        ManifestError: If the ecosystem has no scanner
    """
    if ecosystem is Ecosystem.PYTHON and (
        (filename and filename.endswith("pyproject.toml"))
        or (not filename and "[project]" in content)
    ):
        return parse_pyproject(content)

    parser = PARSERS.get(ecosystem)
    if parser is None:
        raise ManifestError(f"Unsupported ecosystem: {ecosystem.value}")
    return parser(content)
