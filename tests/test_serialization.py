"""
Tests for progress snapshot serialization.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `questmark.serialization`.
"""

import json

import pytest
from questmark.interpreter import ProgressError
from questmark.model import Progress
from questmark.serialization import (
    progress_from_dict,
    progress_from_json,
    progress_from_yaml,
    progress_to_dict,
    progress_to_json,
    progress_to_yaml,
)


def build_sample_progress() -> Progress:
    return Progress(current_page="lighthouse", vars={"gold": 8, "shell": 1, "debt": -3})


def test_dict_shape():
    assert progress_to_dict(build_sample_progress()) == {
        "currentPage": "lighthouse",
        "vars": {"gold": 8, "shell": 1, "debt": -3},
    }


def test_json_roundtrip():
    progress = build_sample_progress()
    restored = progress_from_json(progress_to_json(progress))
    assert restored == progress


def test_yaml_roundtrip():
    progress = build_sample_progress()
    restored = progress_from_yaml(progress_to_yaml(progress))
    assert restored == progress


def test_json_is_stable():
    """Keys are sorted so equal snapshots serialize identically."""
    a = Progress(current_page="x", vars={"b": 1, "a": 2})
    b = Progress(current_page="x", vars={"a": 2, "b": 1})
    assert progress_to_json(a) == progress_to_json(b)
    assert json.loads(progress_to_json(a))["currentPage"] == "x"


def test_zero_values_never_exported():
    progress = Progress(current_page="x", vars={"gold": 0, "gems": 2})
    assert progress_to_dict(progress)["vars"] == {"gems": 2}


def test_from_dict_normalizes_names():
    restored = progress_from_dict({"currentPage": "Dark Cave", "vars": {"GOLD": 2, "Zero": 0}})
    assert restored == Progress(current_page="dark cave", vars={"gold": 2})


def test_from_dict_accepts_snake_case():
    assert progress_from_dict({"current_page": "a", "vars": {}}).current_page == "a"


@pytest.mark.parametrize("data", [
    None,
    [],
    {"vars": {}},
    {"currentPage": "a"},
    {"currentPage": "a", "vars": None},
    {"currentPage": "a", "vars": {"gold": 1.5}},
    {"currentPage": "a", "vars": {"flag": True}},
])
def test_from_dict_rejects_malformed(data):
    with pytest.raises(ProgressError, match="State loading error"):
        progress_from_dict(data)


def test_from_json_rejects_garbage():
    with pytest.raises(ProgressError):
        progress_from_json("not json at all")


def test_from_yaml_rejects_garbage():
    with pytest.raises(ProgressError):
        progress_from_yaml("currentPage: [unclosed")
