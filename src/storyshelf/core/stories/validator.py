from __future__ import annotations

"""
Story Definition Validator.

Enforces the story schema on the raw JSON document before a descriptor is
built. Validation fails fast: the first violation raises a
StoryValidationError naming the story path and the offending field.
"""

import logging
from typing import Any, Dict, Set

from storyshelf.domain.constants import ATTRIBUTE_TYPES, STORY_KINDS
from storyshelf.domain.errors import StoryValidationError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def validate_story(raw: Any, path: str) -> Dict[str, Any]:
    """
    Validate a raw story document.

    Checks, in order: document shape, required fields, variations
    (recursively through groups), extra assigns, declared attributes.

    Args:
        raw: Parsed JSON document.
        path: Storybook path used in error reports.

    Returns:
        Dict[str, Any]: The document, unchanged.

    Raises:
        StoryValidationError: On the first schema violation.
    """
    try:
        _check_document(raw, path)
    except StoryValidationError as e:
        logger.warning(f"Story rejected: {e}")
        raise
    return raw


# -----------------------------------------------------------------------------
# PRIVATE CHECKS
# -----------------------------------------------------------------------------

def _check_document(raw: Any, path: str) -> None:
    if not isinstance(raw, dict):
        raise StoryValidationError(path, "<root>", f"expected object, got {type(raw).__name__}")

    component = raw.get("component")
    if component is None:
        raise StoryValidationError(path, "component", "required field is missing")
    if not isinstance(component, str) or not component.strip():
        raise StoryValidationError(path, "component", "must be a non-empty string")

    if "variations" not in raw:
        raise StoryValidationError(path, "variations", "required field is missing")
    if not isinstance(raw["variations"], list):
        raise StoryValidationError(path, "variations", "must be a list")

    kind = raw.get("kind")
    if kind is not None and kind not in STORY_KINDS:
        raise StoryValidationError(path, "kind", f"must be one of {sorted(STORY_KINDS)}, got {kind!r}")

    for key in ("name", "description", "icon"):
        value = raw.get(key)
        if value is not None and not isinstance(value, str):
            raise StoryValidationError(path, key, "must be a string")

    _check_variations(raw["variations"], path, "variations")
    _check_extra_assigns(raw.get("extra_assigns"), path)
    _check_attributes(raw.get("attributes"), path)


def _check_attributes(attributes: Any, path: str) -> None:
    if attributes is None:
        return
    if not isinstance(attributes, list):
        raise StoryValidationError(path, "attributes", "must be a list")

    seen: Set[str] = set()
    for i, attr in enumerate(attributes):
        field = f"attributes[{i}]"
        if not isinstance(attr, dict):
            raise StoryValidationError(path, field, "must be an object")

        attr_id = attr.get("id")
        if not isinstance(attr_id, str) or not attr_id:
            raise StoryValidationError(path, f"{field}.id", "must be a non-empty string")
        if attr_id in seen:
            raise StoryValidationError(path, f"{field}.id", f"duplicate attribute id {attr_id!r}")
        seen.add(attr_id)

        attr_type = attr.get("type")
        if attr_type is not None and attr_type not in ATTRIBUTE_TYPES:
            raise StoryValidationError(
                path, f"{field}.type", f"must be one of {sorted(ATTRIBUTE_TYPES)}, got {attr_type!r}"
            )

        if "required" in attr and not isinstance(attr["required"], bool):
            raise StoryValidationError(path, f"{field}.required", "must be a boolean")

        values = attr.get("values")
        if values is not None and not isinstance(values, list):
            raise StoryValidationError(path, f"{field}.values", "must be a list")


def _check_variations(variations: Any, path: str, field: str) -> None:
    """Validate a variation list; ids must be unique within this list only."""
    if not isinstance(variations, list):
        raise StoryValidationError(path, field, "must be a list")
    if not variations:
        raise StoryValidationError(path, field, "must contain at least one variation")

    seen: Set[str] = set()
    for i, variation in enumerate(variations):
        item = f"{field}[{i}]"
        if not isinstance(variation, dict):
            raise StoryValidationError(path, item, "must be an object")

        variation_id = variation.get("id")
        if not isinstance(variation_id, str) or not variation_id.strip():
            raise StoryValidationError(path, f"{item}.id", "must be a non-empty string")
        if ":" in variation_id:
            raise StoryValidationError(path, f"{item}.id", "must not contain ':'")
        if variation_id in seen:
            raise StoryValidationError(path, f"{item}.id", f"duplicate variation id {variation_id!r}")
        seen.add(variation_id)

        description = variation.get("description")
        if description is not None and not isinstance(description, str):
            raise StoryValidationError(path, f"{item}.description", "must be a string")

        if "variations" in variation:
            _check_variations(variation["variations"], path, f"{item}.variations")
            continue

        attributes = variation.get("attributes")
        if attributes is not None and not isinstance(attributes, dict):
            raise StoryValidationError(path, f"{item}.attributes", "must be an object")

        slots = variation.get("slots")
        if slots is not None and (
            not isinstance(slots, list) or not all(isinstance(s, str) for s in slots)
        ):
            raise StoryValidationError(path, f"{item}.slots", "must be a list of strings")


def _check_extra_assigns(extra_assigns: Any, path: str) -> None:
    if extra_assigns is None:
        return
    if not isinstance(extra_assigns, list):
        raise StoryValidationError(path, "extra_assigns", "must be a list")

    seen: Set[str] = set()
    for i, key in enumerate(extra_assigns):
        if not isinstance(key, str) or not key.strip():
            raise StoryValidationError(path, f"extra_assigns[{i}]", "must be a non-empty string")
        if key in seen:
            raise StoryValidationError(path, f"extra_assigns[{i}]", f"duplicate key {key!r}")
        seen.add(key)
