from __future__ import annotations

"""
Unit tests for the Story Loader.

Verifies:
1. Path resolution, not-found and content root confinement.
2. Descriptor construction for flat and grouped stories.
3. Hard failures for unreadable JSON and invalid stories.
4. Lenient loading with validation disabled.
5. Mapping story files back to storybook paths.
"""

import os
from pathlib import Path

import pytest

from storyshelf.core.stories.loader import build_descriptor, load_story, storybook_path
from storyshelf.domain.errors import StoryLoadError, StoryValidationError
from storyshelf.domain.story_models import Variation, VariationGroup


def test_load_story_builds_descriptor(content_dir: Path):
    story = load_story(str(content_dir), "/components/button")

    assert story.path == "/components/button"
    assert story.component == "MyApp.Components.Button"
    assert story.kind == "component"
    assert story.extra_assigns == ("disabled", "tags")
    assert [v.id for v in story.variations] == ["default", "primary"]
    assert story.variations[1].slots == ("Go!",)
    assert story.attribute("size").default == 2
    assert story.attribute("label").required is True


def test_load_story_with_groups(content_dir: Path):
    story = load_story(str(content_dir), "/components/forms/input")

    assert story.kind == "live_component"
    assert isinstance(story.variations[0], VariationGroup)
    assert isinstance(story.variations[1], Variation)
    assert [full_id for full_id, _ in story.iter_variations()] == [
        "states:enabled",
        "states:locked",
        "plain",
    ]


def test_leading_separator_is_optional(content_dir: Path):
    assert load_story(str(content_dir), "alpha") == load_story(str(content_dir), "/alpha")


def test_load_story_is_idempotent(content_dir: Path):
    first = load_story(str(content_dir), "/components/button")
    second = load_story(str(content_dir), "/components/button")

    assert first == second


@pytest.mark.parametrize("path", ["/missing", "/components", "/", "", "/components/forms"])
def test_unknown_paths_are_not_found(content_dir: Path, path: str):
    assert load_story(str(content_dir), path) is None


def test_paths_outside_root_are_not_found(content_dir: Path, write_json):
    write_json(content_dir.parent / "secret.story.json", {"component": "X", "variations": [{"id": "a"}]})

    assert load_story(str(content_dir), "/../secret") is None


def test_invalid_json_raises_load_error(content_dir: Path):
    (content_dir / "broken.story.json").write_text("{", encoding="utf-8")

    with pytest.raises(StoryLoadError) as exc_info:
        load_story(str(content_dir), "/broken")
    assert exc_info.value.path == "/broken"


def test_invalid_story_raises_validation_error(content_dir: Path, write_json):
    write_json(content_dir / "bad.story.json", {"component": "X", "variations": []})

    with pytest.raises(StoryValidationError):
        load_story(str(content_dir), "/bad")


def test_validation_can_be_skipped(content_dir: Path, write_json):
    write_json(content_dir / "bad.story.json", {
        "component": "X",
        "variations": [{"id": "a"}, "junk", {"id": "a"}],
        "attributes": [{"type": "string"}, {"id": "size", "values": [1, 2]}],
    })

    story = load_story(str(content_dir), "/bad", validate=False)

    assert [v.id for v in story.variations] == ["a", "a"]
    assert [a.id for a in story.attributes] == ["size"]
    assert story.attribute("size").values == (1, 2)


def test_build_descriptor_requires_object():
    with pytest.raises(StoryLoadError, match="JSON object"):
        build_descriptor(["not", "a", "story"], "/x")


def test_build_descriptor_defaults():
    story = build_descriptor({}, "/x")

    assert story.component == ""
    assert story.kind == "component"
    assert story.variations == ()
    assert story.extra_assigns == ()


def test_storybook_path(content_dir: Path):
    root = str(content_dir)

    assert storybook_path(root, "components/button.story.json") == "/components/button"
    assert storybook_path(root, os.path.join(root, "alpha.story.json")) == "/alpha"
    assert storybook_path(root, "components/_.index.json") is None
    assert storybook_path(root, "../outside.story.json") is None


@pytest.mark.skipif(not hasattr(os, "symlink") or os.name == "nt", reason="symlinks required")
def test_story_in_symlinked_directory_is_loadable(content_dir: Path, tmp_path: Path, write_json):
    write_json(tmp_path / "shared" / "card.story.json", {"component": "Card", "variations": [{"id": "a"}]})
    os.symlink(str(tmp_path / "shared"), str(content_dir / "linked"))

    story = load_story(str(content_dir), "/linked/card")

    assert story is not None
    assert story.component == "Card"
    assert load_story(str(content_dir), "/linked/../../shared/card") is None
