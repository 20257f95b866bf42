"""Base building blocks shared by all conformance validators.

Features:
- Findings as plain data, aggregated by list concatenation
- Path prefixing so nested checks report where a problem was found
- A single index range primitive used by every cross-table reference
- The attribute-key uniqueness check reused at every attachment point
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, Iterable, Sequence

from profcheck.config import CheckerConfig
from profcheck.model import ProfilesDictionary
from profcheck.types import FindingKind


# ============================================================================
# Logging - Uses standard Python logging directly
# ============================================================================

def _get_logger(name: str) -> logging.Logger:
    """Get a logger for the given validator name."""
    return logging.getLogger(f"profcheck.{name}")


# ============================================================================
# Finding
# ============================================================================

PATH_SEPARATOR = ": "


@dataclass(frozen=True)
class Finding:
    """A single structural violation found in a document.

    ``path`` locates the problem, for example
    ``profile 0: sample[1]: stack_index``; it is empty for document-level
    findings.
    """

    path: str
    message: str
    kind: FindingKind

    def prefixed(self, prefix: str) -> "Finding":
        """Return a copy located under ``prefix``."""
        if not prefix:
            return self
        path = f"{prefix}{PATH_SEPARATOR}{self.path}" if self.path else prefix
        return replace(self, path=path)

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{self.path}{PATH_SEPARATOR}{self.message}"

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {
            "path": self.path,
            "message": self.message,
            "kind": self.kind.value,
        }


def prefix_findings(findings: Iterable[Finding], prefix: str) -> list[Finding]:
    """Locate every finding under ``prefix``."""
    return [f.prefixed(prefix) for f in findings]


def quote(s: str) -> str:
    """Quote a string for messages, escaping control characters."""
    return json.dumps(s, ensure_ascii=False)


# ============================================================================
# Primitive checks
# ============================================================================

def check_index(length: int, idx: int) -> list[Finding]:
    """Check that ``idx`` addresses an element of a table of ``length`` entries."""
    if idx < 0 or idx >= length:
        return [Finding(
            "",
            f"index {idx} is out of range [0..{length})",
            FindingKind.INDEX_OUT_OF_RANGE,
        )]
    return []


def check_non_negative(n: int) -> list[Finding]:
    if n < 0:
        return [Finding("", f"{n} < 0, must be non-negative", FindingKind.NEGATIVE_VALUE)]
    return []


def check_zero_value(table: Sequence[Any], entity_type: type) -> list[Finding]:
    """Verify dictionary conventions for a table.

    The table must not be empty and must hold the zero value of
    ``entity_type`` at index 0.
    """
    if not table:
        return [Finding(
            "",
            "empty table, must have at least zero value entry",
            FindingKind.STRUCTURAL_EMPTY,
        )]
    zero = entity_type()
    if table[0] != zero:
        return [Finding(
            "",
            f"must have zero value {zero!r} at index 0, got {table[0]!r}",
            FindingKind.ZERO_VALUE,
        )]
    return []


def check_attribute_indices(
    attr_indices: Sequence[int],
    dictionary: ProfilesDictionary,
) -> list[Finding]:
    """Check an attribute index list attached to a profile, sample, location or mapping.

    Every index must address the attribute table, every referenced attribute
    must have a valid key, and no key may appear twice within the list.
    """
    findings: list[Finding] = []
    attribute_table = dictionary.attribute_table
    string_table = dictionary.string_table
    keys: dict[str, int] = {}

    for pos, attr_idx in enumerate(attr_indices):
        errs = check_index(len(attribute_table), attr_idx)
        if errs:
            findings += prefix_findings(errs, f"[{pos}]")
            continue

        attr = attribute_table[attr_idx]
        errs = check_index(len(string_table), attr.key_strindex)
        if errs:
            findings += prefix_findings(errs, f"[{pos}].key_strindex")
            continue

        key = string_table[attr.key_strindex]
        if key in keys:
            findings.append(Finding(
                f"[{pos}].key_strindex",
                f"duplicate key {quote(key)}, previously seen at [{keys[key]}].key_strindex",
                FindingKind.DUPLICATE_KEY,
            ))
        else:
            keys[key] = pos

    return findings


# ============================================================================
# Base Validator
# ============================================================================

class TableValidator:
    """Base class for dictionary table validators.

    Subclasses check one entry at a time in validate_entry, or override
    validate when a table needs a rule that spans entries.

    Class Attributes:
        name: Table name, used as the path prefix of every finding
        entity_type: Entity type of the table; when set, the zero value
            convention is checked before any entry
        skip_first: Skip the zero value entry when checking entries

    Example:
        class StackTableValidator(TableValidator):
            name = "stack_table"
            entity_type = Stack

            def validate_entry(self, idx, stack, dictionary):
                ...
    """

    name: str = "base"
    entity_type: type | None = None
    skip_first: bool = False

    def __init__(self, config: CheckerConfig | None = None):
        self.config = config or CheckerConfig()
        self.logger = _get_logger(self.name)

    def table(self, dictionary: ProfilesDictionary) -> Sequence[Any]:
        return getattr(dictionary, self.name)

    def validate(self, dictionary: ProfilesDictionary) -> list[Finding]:
        """Run the table checks, returning findings relative to the table."""
        table = self.table(dictionary)
        if self.entity_type is not None:
            errs = check_zero_value(table, self.entity_type)
            if errs:
                return errs

        findings: list[Finding] = []
        start = 1 if self.skip_first else 0
        for idx in range(start, len(table)):
            findings += self.validate_entry(idx, table[idx], dictionary)
        return findings

    def validate_table(self, dictionary: ProfilesDictionary) -> list[Finding]:
        """Run the table checks, locating findings under the table name."""
        findings = self.validate(dictionary)
        self.logger.debug(
            "Checked %d entries, %d finding(s)",
            len(self.table(dictionary)),
            len(findings),
        )
        return prefix_findings(findings, self.name)

    def validate_entry(
        self,
        idx: int,
        entry: Any,
        dictionary: ProfilesDictionary,
    ) -> list[Finding]:
        """Check a single table entry, locating findings under ``[idx]``."""
        return []
