"""Tests for ecosystem detection."""


from core.detect import identify
from core.models import Ecosystem


class TestEcosystemDetection:
    """Test ecosystem detection from filenames and content."""

    def test_detect_python_by_filename(self):
        """Should detect Python from requirements.txt filename."""
        assert identify("", "requirements.txt") == "python"
        assert identify("", "pyproject.toml") == "python"

    def test_detect_other_ecosystems_by_filename(self):
        """Should detect Rust, Go and JavaScript from their manifest names."""
        assert identify("", "package.json") == Ecosystem.JAVASCRIPT
        assert identify("", "path/to/Cargo.toml") == Ecosystem.RUST
        assert identify("", "go.mod") == Ecosystem.GO

    def test_detect_python_by_content(self):
        """Should detect Python from requirements content patterns."""
        content = "fastapi==0.85.0\nuvicorn>=0.18.0"
        assert identify(content) == "python"

        content_with_markers = 'uvloop>=0.17.0; sys_platform != "win32"'
        assert identify(content_with_markers) == "python"

        content_with_extras = "fastapi[all]>=0.85.0"
        assert identify(content_with_extras) == "python"

        assert identify('[project]\nname = "demo"\n') == "python"

    def test_detect_node_by_content(self):
        """Should detect JavaScript from package.json content patterns."""
        content = '''
        {
          "dependencies": {
            "express": "^4.18.0"
          }
        }
        '''
        assert identify(content) == "javascript"

        content_dev = '{"devDependencies": {"jest": "^29.0.0"}}'
        assert identify(content_dev) == "javascript"

    def test_detect_rust_by_content(self):
        """Should detect Rust from Cargo tables."""
        assert identify('[package]\nname = "demo"\n') == "rust"
        assert identify('[dependencies]\nserde = "1"\n') == "rust"

    def test_detect_go_by_content(self):
        """Should detect Go from module and require directives."""
        content = "module example.com/demo\n\ngo 1.21\n"
        assert identify(content) == "go"

    def test_detect_unknown_for_ambiguous(self):
        """Should return unknown for unclear content."""
        assert identify("", "unknown.txt") == "unknown"
        assert identify("some random text") == "unknown"
        assert identify("") == "unknown"

    def test_filename_takes_precedence(self):
        """Filename should take precedence over content when both present."""
        # Package.json content but requirements.txt filename
        content = '{"dependencies": {"express": "^4.18.0"}}'
        assert identify(content, "requirements.txt") == "python"
