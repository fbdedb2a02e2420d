from __future__ import annotations

"""
Integration tests for the Preview Web Application.

Drives the FastAPI app through TestClient: content API, iframe rendering,
preview sessions and the playground assign/toggle endpoints.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from storyshelf.core.backend import StorybookBackend
from storyshelf.domain.config import StorybookConfig
from storyshelf.interface.web.app import SESSION_HEADER, create_app


@pytest.fixture
def client(content_dir: Path) -> TestClient:
    backend = StorybookBackend(StorybookConfig(
        content_path=str(content_dir),
        title="UI Kit",
        themes=("light", "dark"),
        default_theme="light",
    ))
    return TestClient(create_app(backend))


def _open(client: TestClient, **params) -> str:
    response = client.get("/iframe", params=params)
    assert response.status_code == 200
    return response.headers[SESSION_HEADER]


# -----------------------------------------------------------------------------
# CONTENT API
# -----------------------------------------------------------------------------

def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}


def test_tree_endpoint(client: TestClient):
    data = client.get("/api/tree").json()

    assert data["title"] == "UI Kit"
    assert [e["path"] for e in data["entries"]] == ["/alpha", "/components", "/Zeta"]
    assert data["entries"][1]["children"][0]["name"] == "Fancy Button"


def test_entry_endpoint(client: TestClient):
    response = client.get("/api/entries", params={"path": "/components/button"})

    assert response.status_code == 200
    assert response.json()["source"] == "components/button.story.json"
    assert client.get("/api/entries", params={"path": "/nope"}).status_code == 404


# -----------------------------------------------------------------------------
# IFRAME
# -----------------------------------------------------------------------------

def test_iframe_renders_selected_variation(client: TestClient):
    response = client.get("/iframe", params={"story": "/components/button", "variation_id": "primary"})
    html = response.text

    assert response.status_code == 200
    assert response.headers[SESSION_HEADER] in html
    assert 'data-variation-id="primary"' in html
    assert 'data-variation-id="default"' not in html
    assert "MyApp.Components.Button" in html
    assert "light" in html
    assert "Go!" in html


def test_iframe_without_variation_renders_all(client: TestClient):
    html = client.get("/iframe", params={"story": "/components/button"}).text

    assert 'data-variation-id="default"' in html
    assert 'data-variation-id="primary"' in html


def test_iframe_group_renders_members(client: TestClient):
    html = client.get(
        "/iframe", params={"story": "/components/forms/input", "variation_id": "states"}
    ).text

    assert 'data-variation-id="states:enabled"' in html
    assert 'data-variation-id="states:locked"' in html
    assert 'data-variation-id="plain"' not in html


def test_iframe_playground_container(client: TestClient):
    html = client.get("/iframe", params={"story": "/alpha", "playground": "true"}).text
    assert "playground-preview" in html


def test_iframe_unknown_story(client: TestClient):
    response = client.get("/iframe", params={"story": "/nope"})

    assert response.status_code == 404
    assert "unknown story" in response.json()["error"]


def test_iframe_invalid_story(client: TestClient, content_dir: Path, write_json):
    write_json(content_dir / "bad.story.json", {"component": "X", "variations": [{"id": "a"}, {"id": "a"}]})

    response = client.get("/iframe", params={"story": "/bad"})

    assert response.status_code == 500
    assert response.json()["field"] == "variations[1].id"


def test_iframe_unreadable_story(client: TestClient, content_dir: Path):
    (content_dir / "broken.story.json").write_text("{", encoding="utf-8")

    response = client.get("/iframe", params={"story": "/broken"})

    assert response.status_code == 500
    assert response.json()["story"] == "/broken"


# -----------------------------------------------------------------------------
# PLAYGROUND EVENTS
# -----------------------------------------------------------------------------

def test_assign_updates_session(client: TestClient):
    session_id = _open(client, story="/components/button", variation_id="primary")

    response = client.post(f"/iframe/{session_id}/assign", json={"field": "size", "value": "5"})

    assert response.json() == {"variation_id": "primary", "extra_assigns": {"size": 5}}
    html = client.get(f"/iframe/{session_id}").text
    assert "<dt>size</dt><dd>5</dd>" in html


def test_toggle_round_trip(client: TestClient):
    session_id = _open(client, story="/components/button", variation_id="default")

    first = client.post(f"/iframe/{session_id}/toggle", json={"field": "disabled"}).json()
    second = client.post(f"/iframe/{session_id}/toggle", json={"field": "disabled"}).json()

    assert first["extra_assigns"] == {"disabled": True}
    assert second["extra_assigns"] == {}


def test_multi_select_toggle(client: TestClient):
    session_id = _open(client, story="/components/button")

    client.post(f"/iframe/{session_id}/toggle", json={"field": "tags", "value": "a"})
    response = client.post(f"/iframe/{session_id}/toggle", json={"field": "tags", "value": "b"})

    assert response.json()["extra_assigns"] == {"tags": ["a", "b"]}


def test_sessions_are_independent(client: TestClient):
    first = _open(client, story="/components/button", variation_id="default")
    second = _open(client, story="/components/button", variation_id="default")

    client.post(f"/iframe/{first}/assign", json={"field": "label", "value": "One"})

    assert "One" in client.get(f"/iframe/{first}").text
    assert "One" not in client.get(f"/iframe/{second}").text


def test_unknown_session(client: TestClient):
    assert client.get("/iframe/missing").status_code == 404
    assert client.post("/iframe/missing/assign", json={"field": "x"}).status_code == 404
    assert client.delete("/iframe/missing").status_code == 404


def test_close_session(client: TestClient):
    session_id = _open(client, story="/alpha")

    assert client.delete(f"/iframe/{session_id}").json() == {"closed": session_id}
    assert client.get(f"/iframe/{session_id}").status_code == 404


def test_evicted_session_returns_404(content_dir: Path):
    backend = StorybookBackend(StorybookConfig(content_path=str(content_dir)))
    capped = TestClient(create_app(backend, max_sessions=2))

    oldest = _open(capped, story="/alpha")
    _open(capped, story="/alpha")
    newest = _open(capped, story="/alpha")

    assert capped.get(f"/iframe/{oldest}").status_code == 404
    assert capped.post(f"/iframe/{oldest}/assign", json={"field": "x"}).status_code == 404
    assert capped.get(f"/iframe/{newest}").status_code == 200
