"""Constraint checks against known version lists.

Range grammars are delegated to real libraries: npm-style ranges
(also used for Cargo and Go) go through node-semver, Python
specifiers through packaging.
"""

from typing import NamedTuple, Protocol, Sequence

from nodesemver import max_satisfying, valid, valid_range
from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from .models import Ecosystem


class VersionCheck(NamedTuple):
    """Outcome of checking a constraint against known versions."""

    satisfies: bool
    max_satisfying: str | None


class ConstraintChecker(Protocol):
    def is_valid(self, constraint: str) -> bool: ...

    def max_satisfying(self, constraint: str, versions: Sequence[str]) -> str | None: ...


class SemverChecker:
    """npm range semantics (`^1.2`, `~1.2.3`, `>=1 <2`, `1.x`)."""

    def _range(self, constraint: str) -> str:
        return constraint

    def is_valid(self, constraint: str) -> bool:
        return valid_range(self._range(constraint), False) is not None

    def max_satisfying(self, constraint: str, versions: Sequence[str]) -> str | None:
        # node-semver raises on entries it cannot parse
        parsable = [version for version in versions if valid(version, False) is not None]
        return max_satisfying(parsable, self._range(constraint), False)


class CargoChecker(SemverChecker):
    """Cargo requirements: bare versions are caret requirements, commas mean AND."""

    def _range(self, constraint: str) -> str:
        parts = [part.strip() for part in constraint.split(",")]
        return " ".join(f"^{part}" if part[:1].isdigit() else part for part in parts if part)


class Pep440Checker:
    """PEP 440 specifiers; a bare version is an exact pin."""

    def _specifier(self, constraint: str) -> SpecifierSet:
        constraint = constraint.strip()
        if constraint in ("", "*"):
            return SpecifierSet("")
        if constraint[0].isdigit():
            constraint = f"=={constraint}"
        return SpecifierSet(constraint)

    def is_valid(self, constraint: str) -> bool:
        try:
            self._specifier(constraint)
        except InvalidSpecifier:
            return False
        return True

    def max_satisfying(self, constraint: str, versions: Sequence[str]) -> str | None:
        spec_set = self._specifier(constraint)
        matching = []
        for version_str in versions:
            try:
                version = Version(version_str)
            except InvalidVersion:
                continue  # Skip versions packaging cannot order
            if version in spec_set:
                matching.append((version, version_str))

        if not matching:
            return None
        return max(matching)[1]


CHECKERS: dict[Ecosystem, ConstraintChecker] = {
    Ecosystem.RUST: CargoChecker(),
    Ecosystem.GO: SemverChecker(),
    Ecosystem.JAVASCRIPT: SemverChecker(),
    Ecosystem.PYTHON: Pep440Checker(),
    Ecosystem.UNKNOWN: SemverChecker(),
}


def is_valid_constraint(constraint: str | None, ecosystem: Ecosystem) -> bool:
    """Check whether `constraint` parses as a range expression for `ecosystem`."""
    if constraint is None:
        return False
    return CHECKERS[ecosystem].is_valid(constraint)


def check_version(
    constraint: str | None, versions: Sequence[str], ecosystem: Ecosystem = Ecosystem.UNKNOWN
) -> VersionCheck:
    """Check a declared constraint against the known versions.

    Args:
        constraint: Declared version constraint
        versions: Known versions, newest first
        ecosystem: Registry whose range grammar applies

    Returns:
        Whether any known version satisfies the constraint, and the
        highest one that does (as written in `versions`)
    """
    if not is_valid_constraint(constraint, ecosystem):
        return VersionCheck(False, None)

    best = CHECKERS[ecosystem].max_satisfying(constraint, versions)
    return VersionCheck(best is not None, best)
