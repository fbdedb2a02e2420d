from __future__ import annotations

"""
Variation Rendering Model.

Resolves which variations a preview shows and the assigns each one receives.
Turning these into HTML is left to the templates.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from storyshelf.core.assigns.synchronizer import merge_assigns
from storyshelf.domain.story_models import StoryDescriptor, Variation, VariationGroup


@dataclass(frozen=True)
class RenderedVariation:
    variation_id: str
    component: str
    assigns: Dict[str, Any]
    slots: Tuple[str, ...]
    description: Optional[str] = None


def render_variations(
        story: StoryDescriptor,
        variation_id: Optional[str],
        extra_assigns: Mapping[str, Any],
        theme: Optional[str] = None,
) -> List[RenderedVariation]:
    """
    Compute the component calls for a preview.

    A plain variation renders once; a group renders each of its leaf
    variations; no id renders every leaf variation of the story. An unknown
    id renders nothing.
    """
    if variation_id is None:
        targets = list(story.iter_variations())
    else:
        found = story.find_variation(variation_id)
        if found is None:
            return []
        if isinstance(found, VariationGroup):
            targets = [
                (full_id, v) for full_id, v in story.iter_variations()
                if full_id.startswith(f"{variation_id}:")
            ]
        else:
            targets = [(variation_id, found)]

    return [_render(story, full_id, variation, extra_assigns, theme) for full_id, variation in targets]


def _render(
        story: StoryDescriptor,
        full_id: str,
        variation: Variation,
        extra_assigns: Mapping[str, Any],
        theme: Optional[str],
) -> RenderedVariation:
    return RenderedVariation(
        variation_id=full_id,
        component=story.component,
        assigns=merge_assigns(variation, extra_assigns, theme=theme),
        slots=variation.slots,
        description=variation.description,
    )
