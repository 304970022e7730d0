"""Core data models for DepHint."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .markdown import MarkdownText


class Ecosystem(str, Enum):
    """Package registry a manifest belongs to."""

    RUST = "rust"
    GO = "go"
    JAVASCRIPT = "javascript"
    PYTHON = "python"
    UNKNOWN = "unknown"


class Classification(str, Enum):
    """Compatibility of a declared constraint with the known versions."""

    COMPATIBLE = "COMPATIBLE"
    INCOMPATIBLE = "INCOMPATIBLE"
    ERROR = "ERROR"


class SourcePosition(BaseModel):
    """Zero-based line/character position in a document."""

    line: int = Field(ge=0)
    character: int = Field(ge=0)


class SourceRange(BaseModel):
    """Span between two positions in a document."""

    start: SourcePosition
    end: SourcePosition

    @classmethod
    def on_line(cls, line: int, start: int, end: int) -> "SourceRange":
        return cls(
            start=SourcePosition(line=line, character=start),
            end=SourcePosition(line=line, character=end),
        )


class ReplaceInstruction(BaseModel):
    """Replace the text at `range` with `value`."""

    value: str
    range: SourceRange


class PresentationPreferences(BaseModel):
    """Templates and placement for inline hints."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    position: Literal["before", "after"] = "after"
    compatible_text: str = "✅"
    incompatible_text: str = "❌ ${version}"
    error_text: str = "❗❗❗"
    vuln_text: str = "⚠️ ${count} vulnerabilities"

    def text_for(self, classification: Classification) -> str:
        if classification is Classification.INCOMPATIBLE:
            return self.incompatible_text
        if classification is Classification.ERROR:
            return self.error_text
        return self.compatible_text


@dataclass(frozen=True)
class DependencyItem:
    """A single declared dependency occurrence in a manifest."""

    key: str
    value: str | None
    range: SourceRange
    line: int
    end_of_line: int
    deco_range: SourceRange

    @property
    def name(self) -> str:
        """Dependency name without surrounding quotes."""
        return self.key.replace('"', "")

    @classmethod
    def at(
        cls, key: str, value: str | None, line: int, start: int, end: int, end_of_line: int
    ) -> "DependencyItem":
        """Build an item whose version token spans `start:end` on `line`."""
        return cls(
            key=key,
            value=value,
            range=SourceRange.on_line(line, start, end),
            line=line,
            end_of_line=end_of_line,
            deco_range=SourceRange.on_line(line, end_of_line, end_of_line),
        )


@dataclass
class Decoration:
    """Inline hint and hover document for one dependency."""

    range: SourceRange
    position: Literal["before", "after"]
    render_text: str
    hover: MarkdownText
    latest: str | None = None
    current: str | None = None


@dataclass
class Manifest:
    """A scanned dependency manifest."""

    ecosystem: Ecosystem
    raw: str
    items: list[DependencyItem] = field(default_factory=list)
