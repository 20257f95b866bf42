"""Loading profiles documents into the checker model.

Documents are decoded with the OTLP protobuf bindings from
``opentelemetry-proto`` and then mapped onto the plain dataclasses in
profcheck.model. Three encodings are accepted:

- binary protobuf ``ProfilesData`` (the wire format, and the default for
  any file that is not JSON or YAML)
- OTLP/JSON, parsed with ``google.protobuf.json_format``
- YAML with the OTLP/JSON layout, for hand-written fixtures

OTLP/JSON differs from the canonical protobuf JSON mapping in one way that
matters here: trace, span and profile ids are hex strings rather than
base64. Those fields are converted before parsing.

Decoding does not check references; that is the checker's job.
"""

from __future__ import annotations

import base64
import json
import logging
from collections.abc import Mapping as MappingABC
from pathlib import Path
from typing import Any

import yaml
from google.protobuf import json_format
from google.protobuf.message import DecodeError
from opentelemetry.proto.common.v1 import common_pb2
from opentelemetry.proto.profiles.v1development import profiles_pb2

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

logger = logging.getLogger("profcheck.loader")

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


class DocumentDecodeError(ValueError):
    """Raised when a document cannot be decoded into the profiles model."""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


# ============================================================================
# OTLP/JSON id fields
# ============================================================================

def _hex_to_base64(obj: dict[str, Any], *names: str) -> None:
    for name in names:
        value = obj.get(name)
        if not isinstance(value, str):
            continue
        try:
            obj[name] = base64.b64encode(bytes.fromhex(value)).decode("ascii")
        except ValueError as e:
            raise DocumentDecodeError(f"invalid hex string {value!r}", name) from e


def _dicts(obj: Any, *names: str) -> list[dict[str, Any]]:
    if not isinstance(obj, dict):
        return []
    for name in names:
        items = obj.get(name)
        if isinstance(items, list):
            return [item for item in items if isinstance(item, dict)]
    return []


def _normalize_ids(document: dict[str, Any]) -> None:
    """Rewrite hex-encoded OTLP/JSON ids in place as protobuf JSON base64."""
    dictionary = document.get("dictionary")
    for link in _dicts(dictionary, "linkTable", "link_table"):
        _hex_to_base64(link, "traceId", "trace_id", "spanId", "span_id")

    for resource in _dicts(document, "resourceProfiles", "resource_profiles"):
        for scope in _dicts(resource, "scopeProfiles", "scope_profiles"):
            for profile in _dicts(scope, "profiles"):
                _hex_to_base64(profile, "profileId", "profile_id")


# ============================================================================
# Protobuf -> model
# ============================================================================

def decode_any_value(value: common_pb2.AnyValue) -> Any:
    """Convert an AnyValue message into a plain Python value.

    An AnyValue with no field set decodes to None.
    """
    kind = value.WhichOneof("value")
    if kind is None:
        return None
    if kind == "array_value":
        return [decode_any_value(v) for v in value.array_value.values]
    if kind == "kvlist_value":
        return {kv.key: decode_any_value(kv.value) for kv in value.kvlist_value.values}
    return getattr(value, kind)


def _value_type(msg: profiles_pb2.ValueType) -> ValueType:
    return ValueType(type_strindex=msg.type_strindex, unit_strindex=msg.unit_strindex)


def _decode_dictionary(msg: profiles_pb2.ProfilesDictionary) -> ProfilesDictionary:
    return ProfilesDictionary(
        mapping_table=[
            Mapping(
                memory_start=m.memory_start,
                memory_limit=m.memory_limit,
                file_offset=m.file_offset,
                filename_strindex=m.filename_strindex,
                attribute_indices=list(m.attribute_indices),
            )
            for m in msg.mapping_table
        ],
        location_table=[
            Location(
                mapping_index=loc.mapping_index,
                address=loc.address,
                lines=[
                    Line(function_index=ln.function_index, line=ln.line, column=ln.column)
                    for ln in loc.lines
                ],
                attribute_indices=list(loc.attribute_indices),
            )
            for loc in msg.location_table
        ],
        function_table=[
            Function(
                name_strindex=f.name_strindex,
                system_name_strindex=f.system_name_strindex,
                filename_strindex=f.filename_strindex,
                start_line=f.start_line,
            )
            for f in msg.function_table
        ],
        link_table=[Link(trace_id=lk.trace_id, span_id=lk.span_id) for lk in msg.link_table],
        string_table=list(msg.string_table),
        attribute_table=[
            KeyValueAndUnit(
                key_strindex=a.key_strindex,
                value=decode_any_value(a.value) if a.HasField("value") else None,
                unit_strindex=a.unit_strindex,
            )
            for a in msg.attribute_table
        ],
        stack_table=[Stack(location_indices=list(s.location_indices)) for s in msg.stack_table],
    )


def _decode_profile(msg: profiles_pb2.Profile) -> Profile:
    return Profile(
        sample_type=_value_type(msg.sample_type),
        samples=[
            Sample(
                stack_index=s.stack_index,
                values=list(s.values),
                attribute_indices=list(s.attribute_indices),
                link_index=s.link_index,
                timestamps_unix_nano=list(s.timestamps_unix_nano),
            )
            for s in msg.samples
        ],
        time_unix_nano=msg.time_unix_nano,
        duration_nano=msg.duration_nano,
        period_type=_value_type(msg.period_type),
        period=msg.period,
        profile_id=msg.profile_id,
        dropped_attributes_count=msg.dropped_attributes_count,
        original_payload_format=msg.original_payload_format,
        original_payload=msg.original_payload,
        attribute_indices=list(msg.attribute_indices),
    )


def decode_message(msg: profiles_pb2.ProfilesData) -> ProfilesData:
    """Map a ``ProfilesData`` protobuf message onto the checker model.

    The dictionary is None when the message does not carry one.
    """
    return ProfilesData(
        resource_profiles=[
            ResourceProfiles(
                resource=json_format.MessageToDict(rp.resource),
                scope_profiles=[
                    ScopeProfiles(
                        scope=json_format.MessageToDict(sp.scope),
                        profiles=[_decode_profile(p) for p in sp.profiles],
                        schema_url=sp.schema_url,
                    )
                    for sp in rp.scope_profiles
                ],
                schema_url=rp.schema_url,
            )
            for rp in msg.resource_profiles
        ],
        dictionary=_decode_dictionary(msg.dictionary) if msg.HasField("dictionary") else None,
    )


# ============================================================================
# Entry points
# ============================================================================

def parse_bytes(content: bytes) -> profiles_pb2.ProfilesData:
    """Parse a binary protobuf ``ProfilesData`` message."""
    try:
        return profiles_pb2.ProfilesData.FromString(content)
    except DecodeError as e:
        raise DocumentDecodeError(f"invalid protobuf: {e}") from e


def parse_mapping(obj: Any) -> profiles_pb2.ProfilesData:
    """Parse an already-loaded OTLP/JSON ``ProfilesData`` object."""
    if not isinstance(obj, MappingABC):
        raise DocumentDecodeError(f"expected an object, got {type(obj).__name__}")
    # Round trip through JSON so the caller's mapping is never modified
    try:
        document = json.loads(json.dumps(obj))
    except (TypeError, ValueError) as e:
        raise DocumentDecodeError(f"not a JSON-compatible document: {e}") from e
    _normalize_ids(document)
    try:
        return json_format.ParseDict(document, profiles_pb2.ProfilesData())
    except (json_format.ParseError, TypeError, ValueError) as e:
        raise DocumentDecodeError(str(e)) from e


def decode_document(obj: Any) -> ProfilesData:
    """Decode an OTLP/JSON mapping, binary protobuf or a ``ProfilesData`` message."""
    if isinstance(obj, profiles_pb2.ProfilesData):
        return decode_message(obj)
    if isinstance(obj, (bytes, bytearray)):
        return decode_message(parse_bytes(bytes(obj)))
    return decode_message(parse_mapping(obj))


def load_document(path: str | Path) -> ProfilesData:
    """Read and decode a profiles document from ``path``.

    ``.json`` files are read as OTLP/JSON, ``.yaml``/``.yml`` as YAML with
    the same layout, and everything else as binary protobuf.

    Raises:
        OSError: If the file cannot be read
        DocumentDecodeError: If the content is not a valid document
    """
    path = Path(path)
    content = path.read_bytes()
    suffix = path.suffix.lower()
    try:
        if suffix in JSON_SUFFIXES:
            message = parse_mapping(json.loads(content.decode("utf-8")))
        elif suffix in YAML_SUFFIXES:
            message = parse_mapping(yaml.safe_load(content.decode("utf-8")))
        else:
            message = parse_bytes(content)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise DocumentDecodeError(f"failed to parse {path.name}: {e}") from e

    document = decode_message(message)
    logger.debug(
        "Loaded %s: %d resource profile(s)", path, len(document.resource_profiles)
    )
    return document
