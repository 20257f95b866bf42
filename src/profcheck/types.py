"""Type definitions for profcheck."""

from __future__ import annotations

from enum import Enum
from os import PathLike
from typing import TYPE_CHECKING, Any, Mapping, Union

if TYPE_CHECKING:
    from opentelemetry.proto.profiles.v1development import profiles_pb2

    from profcheck.model import ProfilesData

# A file path, a parsed OTLP/JSON mapping, protobuf bytes or message, or a
# decoded document
DocumentInput = Union[
    str,
    "PathLike[str]",
    Mapping[str, Any],
    bytes,
    "profiles_pb2.ProfilesData",
    "ProfilesData",
]


class FindingKind(str, Enum):
    """Kinds of structural conformance violations."""

    STRUCTURAL_EMPTY = "structural_empty"
    ZERO_VALUE = "zero_value"
    INDEX_OUT_OF_RANGE = "index_out_of_range"
    DUPLICATE_KEY = "duplicate_key"
    DUPLICATE_STRING = "duplicate_string"
    TIME_RANGE = "time_range"
    SHAPE_MISMATCH = "shape_mismatch"
    FIXED_WIDTH = "fixed_width"
    RANGE_ORDER = "range_order"
    NEGATIVE_VALUE = "negative_value"


class SampleShape(str, Enum):
    """Which of the parallel value/timestamp sequences a sample carries."""

    VALUES_ONLY = "values-only"
    TIMESTAMPS_ONLY = "timestamps-only"
    BOTH = "values-and-timestamps"

    @classmethod
    def of(cls, has_values: bool, has_timestamps: bool) -> "SampleShape | None":
        """Return the shape for the given presence flags, None when both are absent."""
        if has_values and has_timestamps:
            return cls.BOTH
        if has_values:
            return cls.VALUES_ONLY
        if has_timestamps:
            return cls.TIMESTAMPS_ONLY
        return None
