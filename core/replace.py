"""Replace-version commands embedded in hover documents.

A hover lists each known version as a `command:` link whose query is a
percent-encoded JSON `ReplaceInstruction`. Clicking it dispatches
`replace_version`; `replace_all` applies every instruction queued while
annotating a manifest.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, unquote

from pydantic import ValidationError

from .document import TextDocument, save_document
from .errors import DocumentError, PayloadError
from .models import ReplaceInstruction

logger = logging.getLogger(__name__)

REPLACE_VERSION_COMMAND = "dephint.commands.replaceVersion"
UPDATE_ALL_COMMAND = "dephint.commands.updateAll"

# Characters encodeURI leaves untouched (besides alphanumerics)
_URI_SAFE = ";,/?:@&=+$-_.!~*'()#"


@dataclass
class ReplaceSession:
    """Re-entrancy guard and update-all queue shared by replace commands.

    A command that finds the guard held is dropped, not deferred.
    """

    in_progress: bool = False
    replace_items: list[ReplaceInstruction] = field(default_factory=list)

    def try_acquire(self) -> bool:
        if self.in_progress:
            return False
        self.in_progress = True
        return True

    def release(self) -> None:
        self.in_progress = False

    def queue(self, instruction: ReplaceInstruction) -> None:
        self.replace_items.append(instruction)

    def clear(self) -> None:
        self.replace_items.clear()


def encode_payload(instruction: ReplaceInstruction) -> str:
    """Serialize an instruction for use as a command link query."""
    data = json.dumps(instruction.model_dump(), separators=(",", ":"), ensure_ascii=False)
    return quote(data, safe=_URI_SAFE)


def decode_payload(payload: str | dict[str, Any]) -> ReplaceInstruction:
    """Decode a command link payload.

    Accepts the encoded string or an already-parsed JSON object, which
    is what command dispatchers usually hand over.

    Raises:
        PayloadError: If the payload is not a valid instruction
    """
    if isinstance(payload, str):
        try:
            payload = json.loads(unquote(payload))
        except json.JSONDecodeError as e:
            raise PayloadError(f"Replace payload is not JSON: {e}") from e

    try:
        return ReplaceInstruction.model_validate(payload)
    except ValidationError as e:
        raise PayloadError(f"Invalid replace payload: {e}") from e


def command_uri(command: str, instruction: ReplaceInstruction) -> str:
    """Build a `command:` link that carries `instruction`."""
    return f"command:{command}?{encode_payload(instruction)}"


async def replace_version(
    document: TextDocument, payload: str | dict[str, Any], session: ReplaceSession
) -> bool:
    """Overwrite one range with the version carried by `payload`, then save.

    Returns:
        True if the edit was applied
    """
    try:
        instruction = decode_payload(payload)
    except PayloadError as e:
        logger.warning("Ignoring replace command: %s", e)
        return False

    if not session.try_acquire():
        logger.debug("Replace already in progress, dropping %s", instruction.value)
        return False

    try:
        logger.debug("Replacing %s at %s", instruction.value, instruction.range)
        document.replace(instruction.range, instruction.value)
    except DocumentError as e:
        logger.warning("Could not replace %s: %s", instruction.value, e)
        return False
    finally:
        session.release()

    # The guard is already released here; a command fired while this
    # save is pending is not blocked.
    await save_document(document)
    return True


async def replace_all(document: TextDocument, session: ReplaceSession) -> int:
    """Apply every queued instruction, last queued first, then save once.

    Ranges were computed against the unedited document, so applying
    them back to front keeps earlier ranges valid.

    Returns:
        Number of instructions applied
    """
    if not session.replace_items:
        return 0
    if not session.try_acquire():
        logger.debug("Replace already in progress, dropping update-all")
        return 0

    applied = 0
    try:
        logger.debug("Replacing all %d queued versions", len(session.replace_items))
        for instruction in reversed(session.replace_items):
            document.replace(instruction.range, instruction.value)
            applied += 1
    except DocumentError as e:
        logger.warning("Update-all stopped after %d replacements: %s", applied, e)
    finally:
        session.release()

    await save_document(document)
    return applied
