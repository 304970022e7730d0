"""Editable documents that replace commands operate on."""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from .errors import DocumentError
from .models import SourcePosition, SourceRange

logger = logging.getLogger(__name__)

# Fire-and-forget saves, kept referenced until they finish
_pending_saves: set[asyncio.Task] = set()


class TextDocument(Protocol):
    uri: str

    def replace(self, range: SourceRange, text: str) -> None: ...

    async def save(self) -> bool: ...


class TextBuffer:
    """In-memory document addressed by line/character positions."""

    def __init__(self, text: str, uri: str = "untitled:buffer"):
        self.uri = uri
        self.text = text

    def _offset(self, position: SourcePosition) -> int:
        lines = self.text.splitlines(keepends=True)
        if position.line > len(lines):
            raise DocumentError(f"Line {position.line} is outside {self.uri}")
        if position.line == len(lines):
            if position.character:
                raise DocumentError(f"Line {position.line} is outside {self.uri}")
            return len(self.text)

        line = lines[position.line]
        if position.character > len(line.rstrip("\r\n")):
            raise DocumentError(
                f"Character {position.character} is past the end of line {position.line}"
            )
        return sum(len(previous) for previous in lines[: position.line]) + position.character

    def replace(self, range: SourceRange, text: str) -> None:
        start = self._offset(range.start)
        end = self._offset(range.end)
        if end < start:
            raise DocumentError(f"Range ends before it starts in {self.uri}")
        self.text = self.text[:start] + text + self.text[end:]

    async def save(self) -> bool:
        return True


class FileDocument(TextBuffer):
    """Document backed by a file on disk."""

    def __init__(self, path: Path, text: str | None = None):
        self.path = Path(path)
        if text is None:
            text = self.path.read_text()
        super().__init__(text, uri=str(self.path))

    async def save(self) -> bool:
        try:
            await asyncio.to_thread(self.path.write_text, self.text)
        except OSError as e:
            logger.error("Failed to write %s: %s", self.path, e)
            return False
        return True


async def save_document(document: TextDocument) -> bool:
    """Save `document`, logging the outcome instead of raising."""
    saved = await document.save()
    if saved:
        logger.debug("Saved %s", document.uri)
    else:
        logger.error("Failed to save %s", document.uri)
    return saved


def schedule_save(document: TextDocument) -> None:
    """Request a save without waiting for it.

    On a running event loop the save becomes a task; otherwise it is
    run to completion immediately.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(save_document(document))
        return

    task = loop.create_task(save_document(document))
    _pending_saves.add(task)
    task.add_done_callback(_pending_saves.discard)
