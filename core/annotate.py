"""Whole-manifest annotation."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from .decoration import VulnerabilityMap, build_decoration
from .document import TextDocument
from .models import (
    Classification,
    Decoration,
    DependencyItem,
    Manifest,
    PresentationPreferences,
    ReplaceInstruction,
)
from .replace import ReplaceSession

logger = logging.getLogger(__name__)


@dataclass
class Annotation:
    """Decoration built for one dependency item."""

    item: DependencyItem
    decoration: Decoration
    classification: Classification

    @property
    def outdated(self) -> bool:
        return (
            self.classification is not Classification.ERROR
            and self.decoration.latest != self.decoration.current
        )


@dataclass
class AnnotationReport:
    """Annotations for every dependency of a manifest."""

    manifest: Manifest
    annotations: list[Annotation] = field(default_factory=list)

    @property
    def outdated(self) -> int:
        return sum(1 for annotation in self.annotations if annotation.outdated)

    @property
    def errors(self) -> int:
        return sum(
            1 for annotation in self.annotations if annotation.classification is Classification.ERROR
        )


def annotate_manifest(
    manifest: Manifest,
    versions: Mapping[str, Sequence[str]],
    preferences: PresentationPreferences,
    vulnerabilities: Mapping[str, VulnerabilityMap] | None = None,
    session: ReplaceSession | None = None,
    document: TextDocument | None = None,
) -> AnnotationReport:
    """Decorate every dependency of a manifest.

    Args:
        manifest: Scanned manifest
        versions: Known versions per dependency name, newest first
        preferences: Inline text templates and placement
        vulnerabilities: Advisory IDs per version, per dependency name
        session: Replace session whose update-all queue is rebuilt
        document: Document the manifest was read from, for `?` auto-fill

    Returns:
        Report with one annotation per item
    """
    report = AnnotationReport(manifest=manifest)
    if session is not None:
        session.clear()

    for item in manifest.items:
        known = list(versions.get(item.name) or [])
        error = None if known else f"No versions found for {item.name}"
        item_vulns = vulnerabilities.get(item.name) if vulnerabilities is not None else None

        decoration, classification = build_decoration(
            item,
            known,
            preferences,
            manifest.ecosystem,
            vulnerabilities=item_vulns,
            error=error,
            document=document,
        )
        annotation = Annotation(item=item, decoration=decoration, classification=classification)
        report.annotations.append(annotation)

        if session is not None and annotation.outdated:
            session.queue(ReplaceInstruction(value=decoration.latest, range=item.range))

    logger.debug(
        "Annotated %d dependencies: %d outdated, %d errors",
        len(report.annotations),
        report.outdated,
        report.errors,
    )
    return report
