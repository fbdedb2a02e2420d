from __future__ import annotations

"""
Unit tests for the Story Definition Validator.

Verifies:
1. Acceptance of minimal and complete story documents.
2. Rejection of the required-field, variation and extra-assigns violations.
3. Fail-fast reporting of the offending field.
"""

from typing import Any, Dict

import pytest

from storyshelf.core.stories.validator import validate_story
from storyshelf.domain.errors import StoryValidationError


def _reject(raw: Any) -> StoryValidationError:
    with pytest.raises(StoryValidationError) as exc_info:
        validate_story(raw, "/sample")
    assert exc_info.value.path == "/sample"
    return exc_info.value


# -----------------------------------------------------------------------------
# ACCEPTANCE
# -----------------------------------------------------------------------------

def test_accepts_minimal_story(minimal_story_dict: Dict[str, Any]):
    assert validate_story(minimal_story_dict, "/sample") is minimal_story_dict


def test_accepts_complete_stories(button_story_dict, input_story_dict):
    validate_story(button_story_dict, "/components/button")
    validate_story(input_story_dict, "/components/forms/input")


def test_same_id_allowed_in_different_groups():
    raw = {
        "component": "X",
        "variations": [
            {"id": "a", "variations": [{"id": "same"}]},
            {"id": "b", "variations": [{"id": "same"}]},
        ],
    }
    validate_story(raw, "/sample")


# -----------------------------------------------------------------------------
# REQUIRED FIELDS
# -----------------------------------------------------------------------------

def test_rejects_non_object_document():
    assert _reject([1, 2]).field == "<root>"


def test_rejects_missing_component():
    assert _reject({"variations": [{"id": "a"}]}).field == "component"


def test_rejects_blank_component():
    assert _reject({"component": "  ", "variations": [{"id": "a"}]}).field == "component"


def test_rejects_missing_variations():
    err = _reject({"component": "X"})
    assert err.field == "variations"
    assert "missing" in err.message


def test_rejects_unknown_kind(minimal_story_dict):
    minimal_story_dict["kind"] = "page"
    assert _reject(minimal_story_dict).field == "kind"


def test_component_checked_before_variations():
    assert _reject({"variations": "nope"}).field == "component"


# -----------------------------------------------------------------------------
# VARIATIONS
# -----------------------------------------------------------------------------

def test_rejects_zero_variations():
    err = _reject({"component": "X", "variations": []})
    assert err.field == "variations"
    assert "at least one" in err.message


def test_rejects_duplicate_variation_ids():
    err = _reject({"component": "X", "variations": [{"id": "a"}, {"id": "a"}]})
    assert err.field == "variations[1].id"


def test_rejects_duplicate_ids_inside_group():
    raw = {
        "component": "X",
        "variations": [
            {"id": "group", "variations": [{"id": "x"}, {"id": "x"}]},
        ],
    }
    assert _reject(raw).field == "variations[0].variations[1].id"


def test_rejects_empty_group():
    raw = {"component": "X", "variations": [{"id": "group", "variations": []}]}
    assert _reject(raw).field == "variations[0].variations"


def test_rejects_separator_in_variation_id():
    assert _reject({"component": "X", "variations": [{"id": "a:b"}]}).field == "variations[0].id"


def test_rejects_non_string_slots():
    raw = {"component": "X", "variations": [{"id": "a", "slots": ["ok", 3]}]}
    assert _reject(raw).field == "variations[0].slots"


def test_rejects_non_object_variation_attributes():
    raw = {"component": "X", "variations": [{"id": "a", "attributes": ["label"]}]}
    assert _reject(raw).field == "variations[0].attributes"


# -----------------------------------------------------------------------------
# EXTRA ASSIGNS & ATTRIBUTES
# -----------------------------------------------------------------------------

def test_rejects_duplicate_extra_assigns(minimal_story_dict):
    minimal_story_dict["extra_assigns"] = ["color", "color"]
    assert _reject(minimal_story_dict).field == "extra_assigns[1]"


def test_many_extra_assigns_reject_first_repeat(minimal_story_dict):
    keys = [f"field_{i}" for i in range(5000)]
    minimal_story_dict["extra_assigns"] = keys
    validate_story(minimal_story_dict, "/sample")

    minimal_story_dict["extra_assigns"] = keys + ["field_17"]
    assert _reject(minimal_story_dict).field == "extra_assigns[5000]"


def test_rejects_non_string_extra_assign(minimal_story_dict):
    minimal_story_dict["extra_assigns"] = ["color", 7]
    assert _reject(minimal_story_dict).field == "extra_assigns[1]"


def test_rejects_unknown_attribute_type(minimal_story_dict):
    minimal_story_dict["attributes"] = [{"id": "size", "type": "decimal"}]
    assert _reject(minimal_story_dict).field == "attributes[0].type"


def test_rejects_duplicate_attribute_ids(minimal_story_dict):
    minimal_story_dict["attributes"] = [{"id": "size"}, {"id": "size"}]
    assert _reject(minimal_story_dict).field == "attributes[1].id"


def test_fails_fast_on_first_violation():
    raw = {"component": "X", "variations": [{"id": "a"}, {"id": "a"}], "extra_assigns": "bad"}
    assert _reject(raw).field == "variations[1].id"
