from __future__ import annotations

"""
Unit tests for the Preview Session Store.

Verifies:
1. Least recently used eviction once the session cap is reached.
2. Atomic read-compute-store of extra assigns through apply().
3. No lost updates under concurrent playground events.
"""

import threading
from typing import Any, Dict

import pytest

from storyshelf.core.stories.loader import build_descriptor
from storyshelf.domain.story_models import StoryDescriptor
from storyshelf.interface.web.sessions import SessionStore


@pytest.fixture
def story(minimal_story_dict: Dict[str, Any]) -> StoryDescriptor:
    return build_descriptor(minimal_story_dict, "/minimal")


def _increment(session):
    count = session.extra_assigns.get("count", 0) + 1
    return count, {**session.extra_assigns, "count": count}


# -----------------------------------------------------------------------------
# CAPACITY
# -----------------------------------------------------------------------------

def test_capped_store_evicts_oldest_session(story: StoryDescriptor):
    store = SessionStore(max_sessions=2)

    first = store.open("/minimal", story)
    second = store.open("/minimal", story)
    third = store.open("/minimal", story)

    assert len(store) == 2
    assert store.get(first.id) is None
    assert store.get(second.id) is not None
    assert store.get(third.id) is not None


def test_recent_use_protects_session_from_eviction(story: StoryDescriptor):
    store = SessionStore(max_sessions=2)
    first = store.open("/minimal", story)
    second = store.open("/minimal", story)

    store.get(first.id)
    store.open("/minimal", story)

    assert first.id in store
    assert second.id not in store


def test_store_rejects_non_positive_cap():
    with pytest.raises(ValueError):
        SessionStore(max_sessions=0)


# -----------------------------------------------------------------------------
# APPLY
# -----------------------------------------------------------------------------

def test_apply_stores_new_assigns(story: StoryDescriptor):
    store = SessionStore()
    session = store.open("/minimal", story)

    result, updated = store.apply(session.id, _increment)

    assert result == 1
    assert updated.extra_assigns == {"count": 1}
    assert store.get(session.id).extra_assigns == {"count": 1}


def test_apply_on_unknown_session_returns_none():
    store = SessionStore()
    calls = []

    assert store.apply("missing", lambda s: calls.append(s)) is None
    assert calls == []


def test_concurrent_apply_loses_no_updates(story: StoryDescriptor):
    store = SessionStore()
    session = store.open("/minimal", story)

    def worker():
        for _ in range(200):
            store.apply(session.id, _increment)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert store.get(session.id).extra_assigns == {"count": 800}
