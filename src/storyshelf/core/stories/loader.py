from __future__ import annotations

"""
Story Loader.

Resolves a storybook path to its story definition file, parses the JSON
document and turns it into a StoryDescriptor. Loading is deferred until a
story is opened so the tree build never reads story bodies.

A path that does not resolve to a file is a normal outcome (None). A file
that exists but cannot be parsed or fails validation raises.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from storyshelf.core.stories.validator import validate_story
from storyshelf.domain.constants import (
    DEFAULT_ATTRIBUTE_TYPE,
    DEFAULT_STORY_KIND,
    PATH_SEPARATOR,
    STORY_FILE_SUFFIX,
)
from storyshelf.domain.errors import StoryLoadError
from storyshelf.domain.story_models import (
    AnyVariation,
    AttributeSpec,
    StoryDescriptor,
    Variation,
    VariationGroup,
)
from storyshelf.infra.fs import is_within, relative_to_root

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def load_story(content_path: str, path: str, *, validate: bool = True) -> Optional[StoryDescriptor]:
    """
    Load the story addressed by a storybook path.

    Args:
        content_path: Content root directory.
        path: Storybook path ('/components/button'); the leading '/' is optional.
        validate: Run the story validator before building the descriptor.

    Returns:
        Optional[StoryDescriptor]: The descriptor, or None if no such story file exists.

    Raises:
        StoryLoadError: If the file exists but is unreadable or not valid JSON.
        StoryValidationError: If 'validate' is set and the story is malformed.
    """
    story_path = PATH_SEPARATOR + path.strip().lstrip(PATH_SEPARATOR)
    file_path = resolve_story_file(content_path, story_path)
    if file_path is None:
        logger.debug(f"Story not found: {story_path}")
        return None

    raw = _read_json(file_path, story_path)
    if validate:
        validate_story(raw, story_path)
    return build_descriptor(raw, story_path)


def resolve_story_file(content_path: str, story_path: str) -> Optional[str]:
    """Map a storybook path to an existing story file inside the content root."""
    rel = story_path.strip().lstrip(PATH_SEPARATOR)
    if not rel:
        return None

    candidate = os.path.join(content_path, *rel.split(PATH_SEPARATOR)) + STORY_FILE_SUFFIX
    if not is_within(candidate, content_path, resolve_links=False):
        logger.warning(f"Rejected story path outside of content root: {story_path}")
        return None
    if not os.path.isfile(candidate):
        return None
    return candidate


def storybook_path(content_path: str, story_ref: str) -> Optional[str]:
    """
    Compute the storybook path of a story file.

    Args:
        content_path: Content root directory.
        story_ref: Story file path, absolute or relative to the content root.

    Returns:
        Optional[str]: '/'-prefixed storybook path, or None if the file is
                       outside the root or is not a story file.
    """
    rel = relative_to_root(story_ref, content_path)
    if rel is None or not rel.endswith(STORY_FILE_SUFFIX):
        return None
    stem = rel[: -len(STORY_FILE_SUFFIX)]
    if not stem or stem.endswith(PATH_SEPARATOR):
        return None
    return PATH_SEPARATOR + stem


def build_descriptor(raw: Any, path: str) -> StoryDescriptor:
    """
    Build a descriptor from a story document.

    Validated documents map one to one. Unvalidated documents are read
    leniently: missing fields take defaults and malformed items are skipped.

    Raises:
        StoryLoadError: If the document is not a JSON object.
    """
    if not isinstance(raw, dict):
        raise StoryLoadError(path, "story document must be a JSON object")

    return StoryDescriptor(
        path=path,
        component=str(raw.get("component") or ""),
        kind=raw.get("kind") or DEFAULT_STORY_KIND,
        name=raw.get("name"),
        description=raw.get("description"),
        icon=raw.get("icon"),
        attributes=_build_attributes(raw.get("attributes")),
        extra_assigns=tuple(
            k for k in (raw.get("extra_assigns") or []) if isinstance(k, str)
        ),
        variations=_build_variations(raw.get("variations")),
    )


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _read_json(file_path: str, story_path: str) -> Any:
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in story '{story_path}': {e}")
        raise StoryLoadError(story_path, f"invalid JSON: {e}") from e
    except OSError as e:
        logger.error(f"Cannot read story '{story_path}': {e}")
        raise StoryLoadError(story_path, str(e)) from e


def _build_attributes(items: Any) -> Tuple[AttributeSpec, ...]:
    out: List[AttributeSpec] = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            continue
        values = item.get("values")
        out.append(AttributeSpec(
            id=item["id"],
            type=item.get("type") or DEFAULT_ATTRIBUTE_TYPE,
            default=item.get("default"),
            required=bool(item.get("required", False)),
            values=tuple(values) if isinstance(values, list) else None,
            doc=item.get("doc"),
        ))
    return tuple(out)


def _build_variations(items: Any) -> Tuple[AnyVariation, ...]:
    out: List[AnyVariation] = []
    for item in items if isinstance(items, list) else []:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            continue
        if "variations" in item:
            out.append(VariationGroup(
                id=item["id"],
                description=item.get("description"),
                variations=_build_variations(item["variations"]),
            ))
            continue

        attributes: Dict[str, Any] = item.get("attributes") if isinstance(item.get("attributes"), dict) else {}
        slots = item.get("slots") if isinstance(item.get("slots"), list) else []
        out.append(Variation(
            id=item["id"],
            description=item.get("description"),
            attributes=dict(attributes),
            slots=tuple(s for s in slots if isinstance(s, str)),
        ))
    return tuple(out)
