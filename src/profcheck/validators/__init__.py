"""Conformance validators for profiles documents."""

from profcheck.validators.base import (
    Finding,
    TableValidator,
    check_attribute_indices,
    check_index,
    check_non_negative,
    check_zero_value,
    prefix_findings,
)
from profcheck.validators.dictionary import (
    DICTIONARY_VALIDATORS,
    AttributeTableValidator,
    FunctionTableValidator,
    LinkTableValidator,
    LocationTableValidator,
    MappingTableValidator,
    StackTableValidator,
    StringTableValidator,
)
from profcheck.validators.profile import (
    check_profile,
    check_sample,
    check_sample_shapes,
    check_value_type,
)

__all__ = [
    "Finding",
    "TableValidator",
    "check_attribute_indices",
    "check_index",
    "check_non_negative",
    "check_zero_value",
    "prefix_findings",
    "DICTIONARY_VALIDATORS",
    "MappingTableValidator",
    "LocationTableValidator",
    "FunctionTableValidator",
    "LinkTableValidator",
    "StringTableValidator",
    "AttributeTableValidator",
    "StackTableValidator",
    "check_profile",
    "check_sample",
    "check_sample_shapes",
    "check_value_type",
]
