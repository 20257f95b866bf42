"""Conformance checker for profiles documents."""

from __future__ import annotations

from typing import Any

from profcheck.config import CheckerConfig
from profcheck.model import ProfilesData, ProfilesDictionary
from profcheck.report import ConformanceReport
from profcheck.types import FindingKind
from profcheck.validators.base import Finding, _get_logger, prefix_findings
from profcheck.validators.dictionary import DICTIONARY_VALIDATORS
from profcheck.validators.profile import check_profile


class ConformanceChecker:
    """Checks that a decoded profiles document meets the structural rules.

    The checker is a pure function of the document and its configuration.
    It never mutates the document and never stops at the first problem:
    every finding across all profiles and dictionary tables is collected.
    The only exception is a document with no resource profiles, for which
    nothing else can be checked.

    Profile findings are located by resource, scope and profile, e.g.
    ``resource_profiles[0]: scope_profiles[1]: profile 0: sample[1]: ...``.
    Everything after the ``profile N`` segment follows the plain
    ``profile 0: sample[1]: ...`` form.

    Example:
        >>> checker = ConformanceChecker(CheckerConfig(check_dictionary_duplicates=True))
        >>> report = checker.check(document)
        >>> if not report.is_valid:
        ...     print(report.render())
    """

    def __init__(self, config: CheckerConfig | None = None, **kwargs: Any):
        """Initialize the checker.

        Args:
            config: Immutable checker configuration
            **kwargs: Option overrides merged into config
        """
        config = config or CheckerConfig()
        self.config = config.replace(**kwargs) if kwargs else config
        self.logger = _get_logger("checker")
        self._table_validators = [cls(self.config) for cls in DICTIONARY_VALIDATORS]

    def check(self, data: ProfilesData, source: str = "<memory>") -> ConformanceReport:
        """Run every check on ``data`` and return the collected findings."""
        return ConformanceReport(
            findings=self.find_all(data),
            source=source,
            config=self.config,
        )

    def find_all(self, data: ProfilesData) -> list[Finding]:
        """Return every finding for ``data`` in discovery order."""
        if not data.resource_profiles:
            return [Finding("", "resource profiles are empty", FindingKind.STRUCTURAL_EMPTY)]

        dictionary = data.dictionary
        if dictionary is None:
            self.logger.debug("Document has no dictionary, checking against empty tables")
            dictionary = ProfilesDictionary()

        findings = self._check_profiles(data, dictionary)
        findings += self.check_dictionary(dictionary)

        self.logger.info(
            "Checked %d profile(s) in %d resource profile(s): %d finding(s)",
            sum(1 for _ in data.iter_profiles()),
            len(data.resource_profiles),
            len(findings),
        )
        return findings

    def _check_profiles(
        self, data: ProfilesData, dictionary: ProfilesDictionary
    ) -> list[Finding]:
        findings: list[Finding] = []
        for r, resource_profiles in enumerate(data.resource_profiles):
            resource_path = f"resource_profiles[{r}]"
            if not resource_profiles.scope_profiles:
                findings.append(Finding(
                    resource_path,
                    "resource profiles has no scope profiles",
                    FindingKind.STRUCTURAL_EMPTY,
                ))
                continue
            for s, scope_profiles in enumerate(resource_profiles.scope_profiles):
                scope_path = f"{resource_path}: scope_profiles[{s}]"
                if not scope_profiles.profiles:
                    findings.append(Finding(
                        scope_path,
                        "scope profiles has no profiles",
                        FindingKind.STRUCTURAL_EMPTY,
                    ))
                    continue
                for i, profile in enumerate(scope_profiles.profiles):
                    findings += prefix_findings(
                        check_profile(profile, dictionary, self.config),
                        f"{scope_path}: profile {i}",
                    )
        return findings

    def check_dictionary(self, dictionary: ProfilesDictionary) -> list[Finding]:
        """Check the dictionary tables in declaration order."""
        findings: list[Finding] = []
        for validator in self._table_validators:
            findings += validator.validate_table(dictionary)
        return findings


def check_conformance(
    data: ProfilesData,
    config: CheckerConfig | None = None,
    **kwargs: Any,
) -> ConformanceReport:
    """Check ``data`` with a one-off ConformanceChecker."""
    return ConformanceChecker(config, **kwargs).check(data)
