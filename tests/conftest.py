"""Pytest configuration and fixtures."""


import pytest

from core.models import DependencyItem, PresentationPreferences


@pytest.fixture
def preferences():
    """Presentation preferences with easily recognisable templates."""
    return PresentationPreferences(
        position="after",
        compatible_text="OK ${version}",
        incompatible_text="OLD ${version}",
        error_text="ERR ${version}",
        vuln_text="VULN ${count}",
    )


@pytest.fixture
def versions():
    """Known versions, newest first."""
    return ["2.0.0", "1.5.0", "1.0.0"]


@pytest.fixture
def make_item():
    """Build a dependency item on line 3 whose value sits at columns 9 onwards."""

    def _make(value, key="serde", line=3, start=9):
        end = start + len(value or "")
        return DependencyItem.at(key, value, line, start, end, end + 1)

    return _make


@pytest.fixture
def sample_requirements():
    """Sample requirements.txt content for testing."""
    return "fastapi==0.85.0\nuvicorn>=0.18.0"


@pytest.fixture
def sample_cargo_toml():
    """Sample Cargo.toml content for testing."""
    return """[package]
name = "demo"
version = "0.1.0"

[dependencies]
serde = "1.0.100"
tokio = { version = "1.20", features = ["full"] }
"""


@pytest.fixture
def sample_package_json():
    """Sample package.json content for testing."""
    return """
{
  "name": "test-project",
  "dependencies": {
    "express": "^4.18.0",
    "lodash": "~4.17.21"
  }
}
"""


@pytest.fixture
def temp_manifest_file(tmp_path):
    """Create a temporary manifest file for testing."""
    manifest = tmp_path / "requirements.txt"
    manifest.write_text("fastapi==0.85.0")
    return manifest
