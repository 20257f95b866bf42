"""In-memory model of a decoded profiles document.

The model mirrors the OTLP profiles signal: a document holds resource
profiles, each holding scope profiles, each holding profiles, each holding
samples. Everything shared between profiles lives once in the
ProfilesDictionary and is referenced by plain integer offsets into its
tables. Index 0 of every table is reserved for the zero value, so that a
reference of 0 means "unset".

Every field has a default, which makes ``Entity()`` the zero value of that
entity type. The checker relies on this to verify the index 0 convention
with a plain equality comparison.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValueType:
    """Describes the type and unit of a sample value."""

    type_strindex: int = 0
    unit_strindex: int = 0


@dataclass
class Mapping:
    """A binary loaded into the address space of the profiled process.

    Attributes:
        memory_start: Address at which the binary is loaded
        memory_limit: Limit of the address range occupied by the binary
        file_offset: Offset in the binary that corresponds to memory_start
        filename_strindex: Index into the string table for the binary path
        attribute_indices: Indices into the attribute table
    """

    memory_start: int = 0
    memory_limit: int = 0
    file_offset: int = 0
    filename_strindex: int = 0
    attribute_indices: list[int] = field(default_factory=list)


@dataclass
class Line:
    """Source line information for a location."""

    function_index: int = 0
    line: int = 0
    column: int = 0


@dataclass
class Location:
    """A code location, possibly expanded to several inlined source lines.

    Attributes:
        mapping_index: Index into the mapping table, 0 when unknown
        address: Instruction address within the mapping
        lines: Source lines, innermost inlined frame first
        attribute_indices: Indices into the attribute table
    """

    mapping_index: int = 0
    address: int = 0
    lines: list[Line] = field(default_factory=list)
    attribute_indices: list[int] = field(default_factory=list)


@dataclass
class Function:
    """A function referenced by location lines."""

    name_strindex: int = 0
    system_name_strindex: int = 0
    filename_strindex: int = 0
    start_line: int = 0


@dataclass
class Link:
    """Connects samples to a trace span (16 byte trace id, 8 byte span id)."""

    trace_id: bytes = b""
    span_id: bytes = b""


@dataclass
class KeyValueAndUnit:
    """An attribute stored once in the attribute table.

    ``value`` holds the decoded AnyValue, or None when the value is unset.
    """

    key_strindex: int = 0
    value: Any = None
    unit_strindex: int = 0


@dataclass
class Stack:
    """An ordered list of location indices, leaf first."""

    location_indices: list[int] = field(default_factory=list)


@dataclass
class ProfilesDictionary:
    """Shared lookup tables for every profile in a document."""

    mapping_table: list[Mapping] = field(default_factory=list)
    location_table: list[Location] = field(default_factory=list)
    function_table: list[Function] = field(default_factory=list)
    link_table: list[Link] = field(default_factory=list)
    string_table: list[str] = field(default_factory=list)
    attribute_table: list[KeyValueAndUnit] = field(default_factory=list)
    stack_table: list[Stack] = field(default_factory=list)


@dataclass
class Sample:
    """A set of values and/or timestamps recorded for one stack.

    ``values`` and ``timestamps_unix_nano`` are parallel sequences when both
    are present.
    """

    stack_index: int = 0
    values: list[int] = field(default_factory=list)
    attribute_indices: list[int] = field(default_factory=list)
    link_index: int = 0
    timestamps_unix_nano: list[int] = field(default_factory=list)


@dataclass
class Profile:
    """A collection of samples covering the window [time, time + duration)."""

    sample_type: ValueType = field(default_factory=ValueType)
    samples: list[Sample] = field(default_factory=list)
    time_unix_nano: int = 0
    duration_nano: int = 0
    period_type: ValueType = field(default_factory=ValueType)
    period: int = 0
    comment_strindices: list[int] = field(default_factory=list)
    profile_id: bytes = b""
    dropped_attributes_count: int = 0
    original_payload_format: str = ""
    original_payload: bytes = b""
    attribute_indices: list[int] = field(default_factory=list)

    @property
    def end_unix_nano(self) -> int:
        """Exclusive upper bound of the profile time window."""
        return self.time_unix_nano + self.duration_nano


@dataclass
class ScopeProfiles:
    """Profiles produced by one instrumentation scope."""

    scope: dict[str, Any] = field(default_factory=dict)
    profiles: list[Profile] = field(default_factory=list)
    schema_url: str = ""


@dataclass
class ResourceProfiles:
    """Profiles produced by one resource."""

    resource: dict[str, Any] = field(default_factory=dict)
    scope_profiles: list[ScopeProfiles] = field(default_factory=list)
    schema_url: str = ""


@dataclass
class ProfilesData:
    """Top level profiles document."""

    resource_profiles: list[ResourceProfiles] = field(default_factory=list)
    dictionary: ProfilesDictionary | None = None

    def iter_profiles(self):
        """Yield ``(resource_index, scope_index, profile_index, profile)`` tuples."""
        for r, resource_profiles in enumerate(self.resource_profiles):
            for s, scope_profiles in enumerate(resource_profiles.scope_profiles):
                for i, profile in enumerate(scope_profiles.profiles):
                    yield r, s, i, profile
