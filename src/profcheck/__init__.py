"""profcheck - structural conformance checks for OTLP profiles documents."""

__version__ = "0.1.0"

from profcheck.api import check
from profcheck.checker import ConformanceChecker, check_conformance
from profcheck.config import CheckerConfig, ConfigError, load_config
from profcheck.loader import (
    DocumentDecodeError,
    decode_document,
    decode_message,
    load_document,
)
from profcheck.model import (
    Function,
    KeyValueAndUnit,
    Line,
    Link,
    Location,
    Mapping,
    Profile,
    ProfilesData,
    ProfilesDictionary,
    ResourceProfiles,
    Sample,
    ScopeProfiles,
    Stack,
    ValueType,
)
from profcheck.report import ConformanceError, ConformanceReport
from profcheck.types import FindingKind, SampleShape
from profcheck.validators.base import Finding

__all__ = [
    "__version__",
    # Main API
    "check",
    "check_conformance",
    "ConformanceChecker",
    "ConformanceReport",
    "ConformanceError",
    "Finding",
    "FindingKind",
    "SampleShape",
    # Configuration
    "CheckerConfig",
    "ConfigError",
    "load_config",
    # Loading
    "DocumentDecodeError",
    "decode_document",
    "decode_message",
    "load_document",
    # Model
    "ProfilesData",
    "ResourceProfiles",
    "ScopeProfiles",
    "Profile",
    "Sample",
    "ValueType",
    "ProfilesDictionary",
    "Mapping",
    "Location",
    "Line",
    "Function",
    "Link",
    "KeyValueAndUnit",
    "Stack",
]
