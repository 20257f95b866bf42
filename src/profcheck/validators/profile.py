"""Validators for profiles and their samples."""

from __future__ import annotations

from profcheck.config import CheckerConfig
from profcheck.model import Profile, ProfilesDictionary, Sample, ValueType
from profcheck.types import FindingKind, SampleShape
from profcheck.validators.base import (
    Finding,
    _get_logger,
    check_attribute_indices,
    check_index,
    prefix_findings,
)

logger = _get_logger("profile")


def check_value_type(value_type: ValueType, dictionary: ProfilesDictionary) -> list[Finding]:
    n_strings = len(dictionary.string_table)
    findings = prefix_findings(check_index(n_strings, value_type.unit_strindex), "unit_strindex")
    findings += prefix_findings(check_index(n_strings, value_type.type_strindex), "type_strindex")
    return findings


def check_sample(
    sample: Sample,
    start_unix_nano: int,
    end_unix_nano: int,
    dictionary: ProfilesDictionary,
) -> list[Finding]:
    """Check one sample against the dictionary and its profile's time window.

    The window is half-open: a timestamp equal to ``end_unix_nano`` is
    outside of it.
    """
    findings = prefix_findings(
        check_index(len(dictionary.stack_table), sample.stack_index), "stack_index"
    )
    findings += prefix_findings(
        check_attribute_indices(sample.attribute_indices, dictionary), "attribute_indices"
    )
    findings += prefix_findings(
        check_index(len(dictionary.link_table), sample.link_index), "link_index"
    )

    for i, ts in enumerate(sample.timestamps_unix_nano):
        if ts < start_unix_nano or ts >= end_unix_nano:
            findings.append(Finding(
                "",
                f"timestamps_unix_nano[{i}]={ts} is outside profile time range "
                f"[{start_unix_nano}, {end_unix_nano})",
                FindingKind.TIME_RANGE,
            ))

    n_values = len(sample.values)
    n_timestamps = len(sample.timestamps_unix_nano)
    if n_values == 0 and n_timestamps == 0:
        findings.append(Finding(
            "",
            "sample must have at least one values or timestamps_unix_nano entry",
            FindingKind.SHAPE_MISMATCH,
        ))
    elif n_values > 0 and n_timestamps > 0 and n_values != n_timestamps:
        findings.append(Finding(
            "",
            f"values (len={n_values}) and timestamps_unix_nano (len={n_timestamps}) "
            "must contain the same number of elements",
            FindingKind.SHAPE_MISMATCH,
        ))

    return findings


def sample_shape(sample: Sample) -> SampleShape | None:
    return SampleShape.of(bool(sample.values), bool(sample.timestamps_unix_nano))


def check_sample_shapes(samples: list[Sample]) -> list[Finding]:
    """Require every sample of a profile to share one shape.

    The first sample that has a shape sets the expectation. Samples with
    neither values nor timestamps are skipped; they are reported by
    check_sample.
    """
    findings: list[Finding] = []
    expected: SampleShape | None = None
    expected_at = -1
    for i, sample in enumerate(samples):
        shape = sample_shape(sample)
        if shape is None:
            continue
        if expected is None:
            expected, expected_at = shape, i
            continue
        if shape is not expected:
            findings.append(Finding(
                f"sample[{i}]",
                f"shape {shape.value} does not match expected sample shape "
                f"{expected.value} (set by sample[{expected_at}])",
                FindingKind.SHAPE_MISMATCH,
            ))
    return findings


def check_profile(
    profile: Profile,
    dictionary: ProfilesDictionary,
    config: CheckerConfig,
) -> list[Finding]:
    """Check a profile and all of its samples against the shared dictionary."""
    findings = prefix_findings(
        check_attribute_indices(profile.attribute_indices, dictionary), "attribute_indices"
    )
    findings += prefix_findings(check_value_type(profile.sample_type, dictionary), "sample_type")
    findings += prefix_findings(check_value_type(profile.period_type, dictionary), "period_type")

    start, end = profile.time_unix_nano, profile.end_unix_nano
    for i, sample in enumerate(profile.samples):
        findings += prefix_findings(check_sample(sample, start, end, dictionary), f"sample[{i}]")
        # TODO: Check uniqueness of samples keyed by
        # {stack_index, sorted(attribute_indices), link_index}.

    n_strings = len(dictionary.string_table)
    for i, str_idx in enumerate(profile.comment_strindices):
        findings += prefix_findings(check_index(n_strings, str_idx), f"comment_strindices[{i}]")

    if config.check_sample_timestamp_shape:
        findings += check_sample_shapes(profile.samples)

    logger.debug("Checked profile with %d sample(s), %d finding(s)",
                 len(profile.samples), len(findings))
    return findings
