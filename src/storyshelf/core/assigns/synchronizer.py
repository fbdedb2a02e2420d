from __future__ import annotations

"""
Extra-Assigns Synchronizer.

Pure state transitions for the interactive preview: each UI event plus the
current extra-assigns map yields the affected variation id and a complete new
map. Nothing is stored here; the owning preview session keeps the map and
feeds it back on the next event.

Two map shapes exist:
  flat    {field: value}
  nested  {variation_id: {field: value}}   (stories with variation groups)

The synchronizer is permissive by contract: unknown fields and values that
cannot be coerced are stored as given. Schema validation happened once, at
story load time.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from storyshelf.domain.constants import (
    FALSE_STRINGS,
    MODE_FLAT,
    MODE_NESTED,
    TRUE_STRINGS,
    VARIATION_FIELD_SEPARATOR,
)
from storyshelf.domain.story_models import AttributeSpec, StoryDescriptor, Variation

logger = logging.getLogger(__name__)

Assigns = Dict[str, Any]


@dataclass(frozen=True)
class AssignEvent:
    """
    A 'set' or 'toggle' request emitted by the preview UI.

    Attributes:
        field: Field name, optionally namespaced as '<variation_id>:<field>'.
        value: New value for 'set'; the member to flip for list toggles.
        variation_id: Variation the event targets when the field is not namespaced.
    """
    field: str
    value: Any = None
    variation_id: Optional[str] = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "AssignEvent":
        """Build an event from raw UI parameters ('field' or 'attr', 'value', 'variation_id')."""
        field = params.get("field", params.get("attr"))
        return cls(
            field=str(field) if field is not None else "",
            value=params.get("value"),
            variation_id=params.get("variation_id") or None,
        )


# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def assigns_mode(story: StoryDescriptor) -> str:
    """Nested when the story has variation groups, flat otherwise."""
    return MODE_NESTED if story.has_variation_groups else MODE_FLAT


def handle_set(
        event: AssignEvent,
        assigns: Mapping[str, Any],
        story: StoryDescriptor,
        mode: str = MODE_FLAT,
) -> Tuple[Optional[str], Assigns]:
    """
    Apply a 'set' event.

    Args:
        event: Field and new value.
        assigns: Current extra assigns (never mutated).
        story: Loaded story, used to coerce the value to the declared type.
        mode: MODE_FLAT or MODE_NESTED.

    Returns:
        Tuple[Optional[str], Assigns]: Affected variation id and the full new map.
    """
    variation_id, field = parse_field(event, mode)
    value = coerce_value(event.value, story.attribute(field))

    new_assigns, target = _target_map(assigns, variation_id, mode)
    target[field] = value
    return variation_id, new_assigns


def handle_toggle(
        event: AssignEvent,
        assigns: Mapping[str, Any],
        story: StoryDescriptor,
        mode: str = MODE_FLAT,
) -> Tuple[Optional[str], Assigns]:
    """
    Apply a 'toggle' event.

    Boolean fields flip without needing a value. List fields toggle the
    membership of event.value. When the result equals the field's default
    the key is dropped, so toggling twice restores the original map.

    Returns:
        Tuple[Optional[str], Assigns]: Affected variation id and the full new map.
    """
    variation_id, field = parse_field(event, mode)
    attr = story.attribute(field)

    new_assigns, target = _target_map(assigns, variation_id, mode)
    current = target.get(field)

    if _is_list_field(attr, current, event.value):
        if event.value is None:
            return variation_id, copy.deepcopy(dict(assigns))
        default = list(attr.default) if attr is not None and isinstance(attr.default, list) else []
        result = _toggle_member(current, default, event.value)
    else:
        default = attr.default if attr is not None and isinstance(attr.default, bool) else False
        effective = default if field not in target else _truthy(current)
        result = not effective

    if result == default:
        target.pop(field, None)
        if target is not new_assigns and not target:
            del new_assigns[variation_id]
    else:
        target[field] = result
    return variation_id, new_assigns


def parse_field(event: AssignEvent, mode: str) -> Tuple[Optional[str], str]:
    """
    Split a namespaced field in nested mode.

    'group1:color' -> ('group1', 'color'); 'group1:sub:color' -> ('group1:sub', 'color').
    Flat mode keeps the field verbatim.
    """
    if mode == MODE_NESTED and VARIATION_FIELD_SEPARATOR in event.field:
        variation_id, _, field = event.field.rpartition(VARIATION_FIELD_SEPARATOR)
        return variation_id, field
    return event.variation_id, event.field


def coerce_value(value: Any, attr: Optional[AttributeSpec]) -> Any:
    """Convert a UI value to the attribute's declared type; fall back to the raw value."""
    if attr is None or value is None:
        return value

    try:
        if attr.type == "boolean":
            if isinstance(value, bool):
                return value
            if isinstance(value, (int, float)) and value in (0, 1):
                return bool(value)
            if isinstance(value, str):
                s = value.strip().lower()
                if s in TRUE_STRINGS:
                    return True
                if s in FALSE_STRINGS:
                    return False
            raise ValueError(f"not a boolean: {value!r}")
        if attr.type == "integer":
            if isinstance(value, bool):
                raise ValueError("booleans are not integers")
            if isinstance(value, float) and not value.is_integer():
                raise ValueError(f"not an integer: {value!r}")
            return int(str(value).strip()) if isinstance(value, str) else int(value)
        if attr.type == "float":
            if isinstance(value, bool):
                raise ValueError("booleans are not floats")
            return float(value)
        if attr.type == "list":
            if isinstance(value, (list, tuple)):
                return list(value)
            if isinstance(value, str):
                return [item.strip() for item in value.split(",") if item.strip()]
            return [value]
        if attr.type == "string":
            return value if isinstance(value, str) else str(value)
    except (TypeError, ValueError) as e:
        logger.debug(f"Keeping raw value for '{attr.id}': {e}")
        return value

    return value


def merge_assigns(
        variation: Variation,
        extra_assigns: Mapping[str, Any],
        theme: Optional[str] = None,
) -> Assigns:
    """Assigns passed to the component: base attributes, then theme, then user overrides."""
    merged: Assigns = dict(variation.attributes)
    if theme is not None:
        merged["theme"] = theme
    merged.update(extra_assigns)
    return merged


def variation_extra_assigns(
        assigns: Mapping[str, Any],
        variation_id: Optional[str],
        mode: str,
) -> Mapping[str, Any]:
    """The overrides that apply to one variation in either map shape."""
    if mode == MODE_NESTED:
        sub = assigns.get(variation_id) if variation_id is not None else None
        return sub if isinstance(sub, dict) else {}
    return assigns


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _target_map(
        assigns: Mapping[str, Any],
        variation_id: Optional[str],
        mode: str,
) -> Tuple[Assigns, Assigns]:
    """Copy the assigns and return (new_assigns, map the event mutates)."""
    new_assigns: Assigns = copy.deepcopy(dict(assigns))
    if mode != MODE_NESTED or variation_id is None:
        return new_assigns, new_assigns

    sub = new_assigns.get(variation_id)
    if not isinstance(sub, dict):
        sub = {}
        new_assigns[variation_id] = sub
    return new_assigns, sub


def _is_list_field(attr: Optional[AttributeSpec], current: Any, value: Any) -> bool:
    if attr is not None:
        return attr.type == "list"
    return isinstance(current, list) or value is not None


def _toggle_member(current: Any, default: List[Any], member: Any) -> List[Any]:
    if current is None:
        items = list(default)
    elif isinstance(current, (list, tuple)):
        items = list(current)
    else:
        items = [current]

    if member in items:
        return [item for item in items if item != member]
    return items + [member]


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)
