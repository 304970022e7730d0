"""Tests for editable documents."""

import logging

import pytest

from core.document import FileDocument, TextBuffer, save_document
from core.errors import DocumentError
from core.models import SourcePosition, SourceRange


class TestTextBuffer:
    """Test position-based edits."""

    def test_replace_on_later_line(self):
        """Should map line/character positions to offsets."""
        buffer = TextBuffer("first\nserde = \"1.0\"\nlast\n")
        buffer.replace(SourceRange.on_line(1, 9, 12), "2.1")
        assert buffer.text == "first\nserde = \"2.1\"\nlast\n"

    def test_replace_across_lines(self):
        """Should replace spans that cross line boundaries."""
        buffer = TextBuffer("ab\ncd\r\nef")
        span = SourceRange(
            start=SourcePosition(line=0, character=1),
            end=SourcePosition(line=2, character=1),
        )
        buffer.replace(span, "X")
        assert buffer.text == "aXf"

    def test_insert_at_end(self):
        """Should accept the position just past the last line."""
        buffer = TextBuffer("a\n")
        buffer.replace(SourceRange.on_line(1, 0, 0), "b")
        assert buffer.text == "a\nb"

    @pytest.mark.parametrize(
        "span",
        [
            SourceRange.on_line(5, 0, 1),
            SourceRange.on_line(0, 2, 9),
            SourceRange.on_line(0, 3, 1),
        ],
    )
    def test_rejects_invalid_ranges(self, span):
        """Should raise DocumentError for spans outside the text."""
        with pytest.raises(DocumentError):
            TextBuffer("abcd\n").replace(span, "x")


class TestFileDocument:
    """Test file-backed documents."""

    @pytest.mark.asyncio
    async def test_save_writes_file(self, temp_manifest_file):
        """Should write edits back to disk on save."""
        document = FileDocument(temp_manifest_file)
        document.replace(SourceRange.on_line(0, 7, 15), "==0.115.0")

        assert await save_document(document) is True
        assert temp_manifest_file.read_text() == "fastapi==0.115.0"

    @pytest.mark.asyncio
    async def test_failed_write_is_logged(self, tmp_path, caplog):
        """Should report a failed write instead of raising."""
        document = FileDocument(tmp_path / "missing" / "requirements.txt", text="x==1\n")

        with caplog.at_level(logging.ERROR):
            assert await save_document(document) is False

        assert "Failed to write" in caplog.text
        assert "Failed to save" in caplog.text
