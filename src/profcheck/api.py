"""Main API functions for profcheck."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from os import PathLike
from typing import Any

from opentelemetry.proto.profiles.v1development import profiles_pb2

from profcheck.checker import ConformanceChecker
from profcheck.config import CheckerConfig
from profcheck.loader import decode_document, decode_message, load_document
from profcheck.model import ProfilesData
from profcheck.report import ConformanceReport
from profcheck.types import DocumentInput

logger = logging.getLogger("profcheck.api")


def check(
    data: DocumentInput,
    config: CheckerConfig | None = None,
    **options: Any,
) -> ConformanceReport:
    """Check a profiles document for structural conformance.

    Args:
        data: Input document. Can be:
              - Path to a binary protobuf, OTLP/JSON or YAML file
              - A parsed OTLP/JSON mapping
              - Serialized protobuf bytes or a profiles_pb2.ProfilesData
              - A decoded ProfilesData
        config: Checker configuration. Defaults to CheckerConfig().
        **options: Config overrides, e.g. check_dictionary_duplicates=True.

    Returns:
        ConformanceReport holding every finding, empty when the document
        conforms.

    Raises:
        DocumentDecodeError: If data cannot be decoded.
        ConfigError: If an option is unknown or not a bool.

    Example:
        >>> import profcheck
        >>> report = profcheck.check("profile.json", check_dictionary_duplicates=True)
        >>> print(report.render())
    """
    if isinstance(data, ProfilesData):
        document, source = data, "<memory>"
    elif isinstance(data, profiles_pb2.ProfilesData):
        document, source = decode_message(data), "<message>"
    elif isinstance(data, (bytes, bytearray)):
        document, source = decode_document(data), "<bytes>"
    elif isinstance(data, (str, PathLike)):
        document, source = load_document(data), str(data)
    elif isinstance(data, Mapping):
        document, source = decode_document(dict(data)), "<mapping>"
    else:
        raise TypeError(
            "data must be a path, a mapping, protobuf bytes or ProfilesData, "
            f"got {type(data).__name__}"
        )

    checker = ConformanceChecker(config, **options)
    logger.debug("Checking %s with %s", source, checker.config)
    return checker.check(document, source=source)
