"""Shared fixtures for profcheck tests."""

from __future__ import annotations

from typing import Callable

import pytest

from profcheck.model import (
    Function,
    KeyValueAndUnit,
    Link,
    Location,
    Mapping,
    Profile,
    ProfilesData,
    ProfilesDictionary,
    ResourceProfiles,
    ScopeProfiles,
    Stack,
)


def zero_dictionary(**tables) -> ProfilesDictionary:
    """A dictionary holding only the zero value of every table."""
    dictionary = ProfilesDictionary(
        mapping_table=[Mapping()],
        location_table=[Location()],
        function_table=[Function()],
        link_table=[Link()],
        string_table=[""],
        attribute_table=[KeyValueAndUnit()],
        stack_table=[Stack()],
    )
    for name, table in tables.items():
        setattr(dictionary, name, table)
    return dictionary


def single_profile_document(
    profile: Profile | None = None,
    dictionary: ProfilesDictionary | None = None,
) -> ProfilesData:
    """A document with one resource, one scope and one profile."""
    return ProfilesData(
        resource_profiles=[
            ResourceProfiles(scope_profiles=[ScopeProfiles(profiles=[profile or Profile()])])
        ],
        dictionary=dictionary if dictionary is not None else zero_dictionary(),
    )


@pytest.fixture
def make_dictionary() -> Callable[..., ProfilesDictionary]:
    return zero_dictionary


@pytest.fixture
def make_document() -> Callable[..., ProfilesData]:
    return single_profile_document


@pytest.fixture
def otlp_json_document() -> dict:
    """A small valid document in the OTLP/JSON encoding."""
    return {
        "resourceProfiles": [
            {
                "resource": {"attributes": []},
                "scopeProfiles": [
                    {
                        "scope": {"name": "example"},
                        "profiles": [
                            {
                                "sampleType": {"typeStrindex": 1, "unitStrindex": 2},
                                "timeUnixNano": "1700000000000000000",
                                "durationNano": "1000000000",
                                "periodType": {"typeStrindex": 1, "unitStrindex": 2},
                                "period": "10000000",
                                "profileId": "0102030405060708090a0b0c0d0e0f10",
                                "attributeIndices": [1],
                                "samples": [
                                    {
                                        "stackIndex": 1,
                                        "values": ["3"],
                                        "timestampsUnixNano": ["1700000000500000000"],
                                        "linkIndex": 1,
                                    }
                                ],
                            }
                        ],
                    }
                ],
            }
        ],
        "dictionary": {
            "mappingTable": [
                {},
                {"memoryStart": "4096", "memoryLimit": "8192", "filenameStrindex": 3},
            ],
            "locationTable": [
                {},
                {
                    "mappingIndex": 1,
                    "address": "4100",
                    "lines": [{"functionIndex": 1, "line": "12", "column": "4"}],
                },
            ],
            "functionTable": [
                {},
                {"nameStrindex": 4, "systemNameStrindex": 4, "filenameStrindex": 5, "startLine": "10"},
            ],
            "linkTable": [
                {},
                {"traceId": "0102030405060708090a0b0c0d0e0f10", "spanId": "0102030405060708"},
            ],
            "stringTable": ["", "cpu", "nanoseconds", "/usr/bin/app", "main", "main.go", "thread.name"],
            "attributeTable": [
                {},
                {"keyStrindex": 6, "value": {"stringValue": "worker-1"}},
            ],
            "stackTable": [{}, {"locationIndices": [1]}],
        },
    }
