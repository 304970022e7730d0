"""Registry links shown in hover documents."""

from typing import NamedTuple

from .models import Ecosystem


class LinkTemplates(NamedTuple):
    quick: str
    docs: str


LINKS: dict[Ecosystem, LinkTemplates] = {
    Ecosystem.RUST: LinkTemplates(
        quick=(
            " _( [View Crate](https://crates.io/crates/{key})"
            " | [Check Reviews](https://web.crev.dev/rust-reviews/crate/{key}) )_"
        ),
        docs="[(docs)](https://docs.rs/crate/{key}/{version})",
    ),
    Ecosystem.GO: LinkTemplates(
        quick=(
            " _( [View Module](https://pkg.go.dev/{key})"
            " | [Check Docs](https://pkg.go.dev/{key}#section-documentation) )_"
        ),
        docs="[(docs)](https://pkg.go.dev/{key}@{version}#section-documentation)",
    ),
    Ecosystem.JAVASCRIPT: LinkTemplates(
        quick=" _( [View Package](https://npmjs.com/package/{key}) )_",
        docs="[(docs)](https://npmjs.com/package/{key}/v/{version})",
    ),
    Ecosystem.PYTHON: LinkTemplates(
        quick=" _( [View Package](https://pypi.org/project/{key}) )_",
        docs="[(docs)](https://pypi.org/project/{key}/{version})",
    ),
}


def _clean(key: str) -> str:
    return key.replace('"', "")


def quick_links(ecosystem: Ecosystem, key: str) -> str:
    """Package page links for the hover heading ('' for unknown registries)."""
    templates = LINKS.get(ecosystem)
    if templates is None:
        return ""
    return templates.quick.format(key=_clean(key))


def docs_link(ecosystem: Ecosystem, key: str, version: str) -> str:
    """Documentation link pinned to `version` ('' for unknown registries)."""
    templates = LINKS.get(ecosystem)
    if templates is None:
        return ""
    return templates.docs.format(key=_clean(key), version=version)
