"""Inline hints and hover documents for declared dependencies."""

import logging
from collections.abc import Iterable, Mapping, Sequence

from .document import TextDocument, schedule_save
from .errors import DocumentError
from .links import docs_link, quick_links
from .markdown import MarkdownText
from .models import (
    Classification,
    Decoration,
    DependencyItem,
    Ecosystem,
    PresentationPreferences,
    ReplaceInstruction,
    SourceRange,
)
from .replace import REPLACE_VERSION_COMMAND, command_uri
from .versions import check_version, is_valid_constraint

logger = logging.getLogger(__name__)

PLACEHOLDER = "?"

VulnerabilityMap = Mapping[str, Iterable[str]]


def format_error(error: str) -> MarkdownText:
    """Render an error message as one escaped bullet per line."""
    markdown = MarkdownText("#### Errors ")
    markdown.append_markdown("\n")
    for part in error.split("\n"):
        # Surrounding spaces break emphasis, so trim before escaping
        part = part.strip()
        if not part:
            continue
        markdown.append_markdown("* ")
        markdown.append_text(part)
        markdown.append_markdown("\n")
    return markdown


def _advisories(vulnerabilities: VulnerabilityMap | None, version: str | None) -> list[str]:
    if vulnerabilities is None or version is None:
        return []
    return list(dict.fromkeys(vulnerabilities.get(version, ())))


def _vuln_text(preferences: PresentationPreferences, count: int) -> str:
    return preferences.vuln_text.replace("${count}", str(count))


def _auto_fill(item: DependencyItem, version: str, document: TextDocument | None) -> None:
    """Write `version` over a `?` placeholder and save the document.

    The item's range sits inside the quotes of the source literal, so
    the delimiters are stripped from the literal before writing.
    """
    if document is None:
        logger.debug("No document to auto-fill %s with %s", item.name, version)
        return

    fill = ReplaceInstruction(value=f'"{version}"', range=item.range)
    try:
        document.replace(fill.range, fill.value[1:-1])
    except DocumentError as e:
        logger.warning("Could not auto-fill %s: %s", item.name, e)
        return
    schedule_save(document)


def _append_vulnerabilities(hover: MarkdownText, advisories: list[str]) -> None:
    if not advisories:
        return
    hover.append_markdown("#### Vulnerabilities (Current)")
    lines = [f" - [{advisory}](https://osv.dev/vulnerability/{advisory}) \n" for advisory in advisories]
    hover.append_markdown("\n" + "".join(lines))


def _append_versions(
    hover: MarkdownText,
    item: DependencyItem,
    versions: Sequence[str],
    max_satisfying: str | None,
    vulnerabilities: VulnerabilityMap | None,
    preferences: PresentationPreferences,
    ecosystem: Ecosystem,
) -> None:
    for index, version in enumerate(versions):
        instruction = ReplaceInstruction(value=version, range=item.range)
        is_current = version == max_satisfying
        docs = docs_link(ecosystem, item.key, version) if index == 0 or is_current else ""
        advisories = _advisories(vulnerabilities, version)
        vuln_text = _vuln_text(preferences, len(advisories)) if advisories else ""
        bold = "**" if is_current else ""

        link = command_uri(REPLACE_VERSION_COMMAND, instruction)
        hover.append_markdown("\n * ")
        hover.append_markdown(f"{bold}[{version}]({link}){docs}{bold}  {vuln_text}")


def build_decoration(
    item: DependencyItem,
    versions: Sequence[str],
    preferences: PresentationPreferences,
    ecosystem: Ecosystem,
    vulnerabilities: VulnerabilityMap | None = None,
    error: str | None = None,
    document: TextDocument | None = None,
) -> tuple[Decoration, Classification]:
    """Build the inline hint and hover document for one dependency.

    Args:
        item: Declared dependency
        versions: Known versions, newest first
        preferences: Inline text templates and placement
        ecosystem: Registry the dependency comes from
        vulnerabilities: Advisory IDs per version, if known
        error: Upstream error to report instead of a version check
        document: Document to auto-fill a `?` placeholder in

    Returns:
        The decoration and its classification
    """
    version = item.value.rstrip(",") if item.value is not None else None
    latest = versions[0] if versions else None
    classification = Classification.COMPATIBLE
    max_satisfying = None
    advisories: list[str] = []

    if error:
        hover = format_error(error)
        classification = Classification.ERROR
    else:
        if version == PLACEHOLDER and latest is not None:
            version = latest
            _auto_fill(item, latest, document)

        satisfies, max_satisfying = check_version(version, versions, ecosystem)
        if not is_valid_constraint(version, ecosystem):
            classification = Classification.ERROR
        elif latest != max_satisfying:
            classification = Classification.COMPATIBLE if satisfies else Classification.INCOMPATIBLE

        advisories = _advisories(vulnerabilities, max_satisfying or version)

        hover = MarkdownText()
        _append_vulnerabilities(hover, advisories)
        hover.append_markdown("#### Versions")
        hover.append_markdown(quick_links(ecosystem, item.key))
        hover.is_trusted = True
        _append_versions(hover, item, versions, max_satisfying, vulnerabilities, preferences, ecosystem)

    render_text = preferences.text_for(classification).replace("${version}", latest or "")
    if advisories:
        render_text += "\t" + _vuln_text(preferences, len(advisories))

    if preferences.position == "after":
        target = item.deco_range
    else:
        target = SourceRange.on_line(item.line, 0, item.end_of_line)

    decoration = Decoration(
        range=target,
        position=preferences.position,
        render_text=render_text,
        hover=hover,
        latest=latest,
        current=max_satisfying,
    )
    return decoration, classification
