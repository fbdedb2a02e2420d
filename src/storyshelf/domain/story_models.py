from __future__ import annotations

"""
Story Descriptor Models.

Typed representation of a story definition file. Descriptors are loaded
lazily (only when a story is opened) and are never part of the content tree.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from storyshelf.domain.constants import DEFAULT_ATTRIBUTE_TYPE, DEFAULT_STORY_KIND

# -----------------------------------------------------------------------------
# DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AttributeSpec:
    """
    Declared component prop.

    Attributes:
        id: Prop name.
        type: One of the ATTRIBUTE_TYPES ('string', 'boolean', 'list', ...).
        default: Value used when neither the variation nor the user sets one.
        required: Whether the component requires the prop.
        values: Allowed values, if the prop is an enumeration.
        doc: Free text documentation.
    """
    id: str
    type: str = DEFAULT_ATTRIBUTE_TYPE
    default: Any = None
    required: bool = False
    values: Optional[Tuple[Any, ...]] = None
    doc: Optional[str] = None


@dataclass(frozen=True)
class Variation:
    """One named set of prop values demonstrated by a story."""
    id: str
    description: Optional[str] = None
    attributes: Dict[str, Any] = field(default_factory=dict)
    slots: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class VariationGroup:
    """A variation made of sub-variations sharing the group's id namespace."""
    id: str
    description: Optional[str] = None
    variations: Tuple["AnyVariation", ...] = field(default_factory=tuple)


AnyVariation = Union[Variation, VariationGroup]


@dataclass(frozen=True)
class StoryDescriptor:
    """
    Fully loaded story definition.

    Attributes:
        path: Storybook path of the story.
        component: Reference of the rendering target.
        kind: 'component' or 'live_component'.
        name: Optional display name override.
        description: Optional story documentation.
        icon: Optional icon identifier.
        attributes: Declared props schema.
        extra_assigns: Declared user configurable fields.
        variations: Ordered variations and variation groups.
    """
    path: str
    component: str
    variations: Tuple[AnyVariation, ...]
    kind: str = DEFAULT_STORY_KIND
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    attributes: Tuple[AttributeSpec, ...] = field(default_factory=tuple)
    extra_assigns: Tuple[str, ...] = field(default_factory=tuple)

    def attribute(self, attr_id: str) -> Optional[AttributeSpec]:
        for attr in self.attributes:
            if attr.id == attr_id:
                return attr
        return None

    @property
    def has_variation_groups(self) -> bool:
        return any(isinstance(v, VariationGroup) for v in self.variations)

    def iter_variations(self) -> Iterator[Tuple[str, Variation]]:
        """
        Yield every leaf variation with its namespaced id.

        Sub-variations of a group are yielded as '<group_id>:<id>'.
        """
        yield from _walk(self.variations, prefix="")

    def find_variation(self, variation_id: str) -> Optional[AnyVariation]:
        """Resolve a top level id, a group id, or a namespaced sub-variation id."""
        head, _, rest = variation_id.partition(":")
        for variation in self.variations:
            if variation.id != head:
                continue
            if not rest:
                return variation
            if isinstance(variation, VariationGroup):
                return _find_in_group(variation, rest)
        return None


def _walk(variations: Tuple[AnyVariation, ...], prefix: str) -> Iterator[Tuple[str, Variation]]:
    for variation in variations:
        full_id = f"{prefix}{variation.id}"
        if isinstance(variation, VariationGroup):
            yield from _walk(variation.variations, prefix=f"{full_id}:")
        else:
            yield full_id, variation


def _find_in_group(group: VariationGroup, variation_id: str) -> Optional[AnyVariation]:
    head, _, rest = variation_id.partition(":")
    for variation in group.variations:
        if variation.id != head:
            continue
        if not rest:
            return variation
        if isinstance(variation, VariationGroup):
            return _find_in_group(variation, rest)
    return None
