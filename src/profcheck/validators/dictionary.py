"""Validators for the tables of the profiles dictionary.

Each table gets its own validator. Validators run in table declaration
order (mapping, location, function, link, string, attribute, stack) so that
findings are reported in a stable order.
"""

from __future__ import annotations

from profcheck.model import (
    Function,
    KeyValueAndUnit,
    Line,
    Link,
    Location,
    Mapping,
    ProfilesDictionary,
    Stack,
)
from profcheck.types import FindingKind
from profcheck.validators.base import (
    Finding,
    TableValidator,
    check_attribute_indices,
    check_index,
    check_non_negative,
    prefix_findings,
    quote,
)

TRACE_ID_SIZE = 16
SPAN_ID_SIZE = 8


class MappingTableValidator(TableValidator):
    """Checks string references, attributes and address ranges of mappings."""

    name = "mapping_table"
    entity_type = Mapping

    def validate_entry(
        self, idx: int, mapping: Mapping, dictionary: ProfilesDictionary
    ) -> list[Finding]:
        findings = prefix_findings(
            check_index(len(dictionary.string_table), mapping.filename_strindex),
            f"[{idx}].filename_strindex",
        )
        findings += prefix_findings(
            check_attribute_indices(mapping.attribute_indices, dictionary),
            f"[{idx}].attribute_indices",
        )
        # Both bounds zero is the only valid way to leave the range unset
        start, limit = mapping.memory_start, mapping.memory_limit
        if not (start == 0 and limit == 0) and not start < limit:
            findings.append(Finding(
                f"[{idx}]",
                f"memory_start={start:016x}, memory_limit={limit:016x}: "
                "must be both zero or start < limit",
                FindingKind.RANGE_ORDER,
            ))
        return findings


class LocationTableValidator(TableValidator):
    """Checks mapping, attribute and line references of locations."""

    name = "location_table"
    entity_type = Location

    def validate_entry(
        self, idx: int, location: Location, dictionary: ProfilesDictionary
    ) -> list[Finding]:
        findings = prefix_findings(
            check_index(len(dictionary.mapping_table), location.mapping_index),
            f"[{idx}].mapping_index",
        )
        findings += prefix_findings(
            check_attribute_indices(location.attribute_indices, dictionary),
            f"[{idx}].attribute_indices",
        )
        for line_idx, line in enumerate(location.lines):
            findings += prefix_findings(
                self._check_line(line, dictionary),
                f"[{idx}].lines[{line_idx}]",
            )
        return findings

    @staticmethod
    def _check_line(line: Line, dictionary: ProfilesDictionary) -> list[Finding]:
        findings = prefix_findings(
            check_index(len(dictionary.function_table), line.function_index),
            "function_index",
        )
        findings += prefix_findings(check_non_negative(line.line), "line")
        findings += prefix_findings(check_non_negative(line.column), "column")
        return findings


class FunctionTableValidator(TableValidator):
    """Checks string references and start lines of functions."""

    name = "function_table"
    entity_type = Function

    def validate_entry(
        self, idx: int, function: Function, dictionary: ProfilesDictionary
    ) -> list[Finding]:
        n_strings = len(dictionary.string_table)
        findings: list[Finding] = []
        for field_name in ("name_strindex", "system_name_strindex", "filename_strindex"):
            findings += prefix_findings(
                check_index(n_strings, getattr(function, field_name)),
                f"[{idx}].{field_name}",
            )
        findings += prefix_findings(
            check_non_negative(function.start_line), f"[{idx}].start_line"
        )
        return findings


class LinkTableValidator(TableValidator):
    """Checks that every link past the zero entry carries fixed-width ids."""

    name = "link_table"
    entity_type = Link
    skip_first = True

    def validate_entry(
        self, idx: int, link: Link, dictionary: ProfilesDictionary
    ) -> list[Finding]:
        findings: list[Finding] = []
        for field_name, want in (("trace_id", TRACE_ID_SIZE), ("span_id", SPAN_ID_SIZE)):
            got = len(getattr(link, field_name))
            if got != want:
                findings.append(Finding(
                    f"[{idx}].{field_name}",
                    f"length is {got} bytes, want {want}",
                    FindingKind.FIXED_WIDTH,
                ))
        return findings


class StringTableValidator(TableValidator):
    """Checks the empty string convention and, optionally, duplicates.

    Strings are compared by content, so this table has its own index 0
    rule instead of the generic zero value check.
    """

    name = "string_table"

    def validate(self, dictionary: ProfilesDictionary) -> list[Finding]:
        table = dictionary.string_table
        if not table:
            return [Finding(
                "",
                "empty string table, must have at least empty string",
                FindingKind.STRUCTURAL_EMPTY,
            )]
        if table[0] != "":
            return [Finding(
                "",
                f"must have empty string at index 0, got {quote(table[0])}",
                FindingKind.ZERO_VALUE,
            )]
        if not self.config.check_dictionary_duplicates:
            return []

        findings: list[Finding] = []
        seen: dict[str, int] = {}
        for idx, s in enumerate(table):
            if s in seen:
                findings.append(Finding(
                    f"[{idx}]",
                    f"duplicate string {quote(s)}, first seen at index {seen[s]}",
                    FindingKind.DUPLICATE_STRING,
                ))
                continue
            seen[s] = idx
        return findings


class AttributeTableValidator(TableValidator):
    """Checks key and unit string references of attributes."""

    name = "attribute_table"
    entity_type = KeyValueAndUnit

    def validate_entry(
        self, idx: int, attr: KeyValueAndUnit, dictionary: ProfilesDictionary
    ) -> list[Finding]:
        n_strings = len(dictionary.string_table)
        findings = prefix_findings(
            check_index(n_strings, attr.key_strindex), f"[{idx}].key_strindex"
        )
        findings += prefix_findings(
            check_index(n_strings, attr.unit_strindex), f"[{idx}].unit_strindex"
        )
        return findings


class StackTableValidator(TableValidator):
    """Checks that stacks only reference existing locations."""

    name = "stack_table"
    entity_type = Stack

    def validate_entry(
        self, idx: int, stack: Stack, dictionary: ProfilesDictionary
    ) -> list[Finding]:
        findings: list[Finding] = []
        n_locations = len(dictionary.location_table)
        for j, loc_idx in enumerate(stack.location_indices):
            findings += prefix_findings(
                check_index(n_locations, loc_idx),
                f"[{idx}].location_indices[{j}]",
            )
        return findings


# Declaration order of the dictionary tables
DICTIONARY_VALIDATORS: tuple[type[TableValidator], ...] = (
    MappingTableValidator,
    LocationTableValidator,
    FunctionTableValidator,
    LinkTableValidator,
    StringTableValidator,
    AttributeTableValidator,
    StackTableValidator,
)
