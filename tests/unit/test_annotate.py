"""Tests for whole-manifest annotation."""

import pytest

from core.annotate import annotate_manifest
from core.document import TextBuffer
from core.models import Classification
from core.parse_node import parse_package_json
from core.parse_rust import parse_cargo_toml
from core.replace import ReplaceSession, replace_all

CARGO = """[dependencies]
serde = "1.0"
tokio = "2"
rand = "0.8"
missing = "1"
"""

VERSIONS = {
    "serde": ["1.0.200", "1.0.100"],
    "tokio": ["1.38.0", "1.0.0"],
    "rand": ["0.9.0", "0.8.5"],
}


class TestAnnotateManifest:
    """Test manifest-level annotation."""

    def test_classifies_every_item(self, preferences):
        """Should produce one annotation per item in document order."""
        report = annotate_manifest(parse_cargo_toml(CARGO), VERSIONS, preferences)

        assert [a.item.name for a in report.annotations] == ["serde", "tokio", "rand", "missing"]
        assert [a.classification for a in report.annotations] == [
            Classification.COMPATIBLE,
            Classification.INCOMPATIBLE,
            Classification.COMPATIBLE,
            Classification.ERROR,
        ]
        assert report.outdated == 2
        assert report.errors == 1

    def test_missing_versions_become_error_hover(self, preferences):
        """Should explain dependencies without known versions in the hover."""
        report = annotate_manifest(parse_cargo_toml(CARGO), VERSIONS, preferences)

        missing = report.annotations[-1]
        assert missing.decoration.hover.value == "#### Errors \n* No versions found for missing\n"
        assert missing.decoration.render_text == "ERR "

    def test_vulnerabilities_per_dependency(self, preferences):
        """Should look up advisories by dependency name."""
        report = annotate_manifest(
            parse_cargo_toml(CARGO),
            VERSIONS,
            preferences,
            vulnerabilities={"rand": {"0.8.5": ["RUSTSEC-2020-0001"]}},
        )

        rand = report.annotations[2]
        assert rand.decoration.render_text == "OK 0.9.0\tVULN 1"
        assert "RUSTSEC-2020-0001" in rand.decoration.hover.value

    def test_queues_outdated_items(self, preferences):
        """Should rebuild the session queue with the latest version of outdated items."""
        session = ReplaceSession()
        session.queue(object())  # stale entry from a previous pass

        report = annotate_manifest(parse_cargo_toml(CARGO), VERSIONS, preferences, session=session)

        assert [item.value for item in session.replace_items] == ["1.38.0", "0.9.0"]
        assert session.replace_items[0].range == report.annotations[1].item.range

    @pytest.mark.asyncio
    async def test_update_all_round(self, preferences):
        """Should let replace_all bring every outdated item to its latest version."""
        content = """{
  "dependencies": {
    "express": "^4.18.0",
    "lodash": "~4.17.0",
    "left-pad": "1.3.0"
  }
}
"""
        versions = {
            "express": ["5.0.0", "4.19.2"],
            "lodash": ["4.17.21", "4.17.0"],
            "left-pad": ["1.3.0"],
        }
        session = ReplaceSession()
        document = TextBuffer(content)

        report = annotate_manifest(parse_package_json(content), versions, preferences, session=session)
        applied = await replace_all(document, session)

        assert report.outdated == 1
        assert applied == 1
        assert '"express": "5.0.0",' in document.text
        assert '"lodash": "~4.17.0",' in document.text
