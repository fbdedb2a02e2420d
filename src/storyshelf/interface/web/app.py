from __future__ import annotations

"""
Preview Web Application.

Serves the isolated iframe preview of a story and the playground event
endpoints that feed interactive prop edits through the extra-assigns
synchronizer. A missing story becomes an HTTP 404 here, at the routing
boundary; the core only ever returns None for it.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from storyshelf.core.assigns.synchronizer import AssignEvent, handle_set, handle_toggle
from storyshelf.core.backend import StorybookBackend
from storyshelf.domain.constants import APP_VERSION, DEFAULT_MAX_PREVIEW_SESSIONS, MODE_FLAT
from storyshelf.domain.errors import StoryLoadError, StoryNotFound, StoryValidationError
from storyshelf.domain.story_models import StoryDescriptor
from storyshelf.infra.logging import get_logger
from storyshelf.interface.web.rendering import render_variations
from storyshelf.interface.web.sessions import PreviewSession, SessionStore

logger = get_logger(__name__)

BASE_DIR = Path(__file__).parent
SESSION_HEADER = "X-Preview-Session"

AssignHandler = Callable[
    [AssignEvent, Mapping[str, Any], StoryDescriptor, str],
    Tuple[Optional[str], Dict[str, Any]],
]


class AssignPayload(BaseModel):
    field: str
    value: Any = None
    variation_id: Optional[str] = None


# -----------------------------------------------------------------------------
# APPLICATION FACTORY
# -----------------------------------------------------------------------------

def create_app(backend: StorybookBackend, max_sessions: int = DEFAULT_MAX_PREVIEW_SESSIONS) -> FastAPI:
    """Build the preview application around an already built backend."""
    app = FastAPI(title=backend.config("title"), version=APP_VERSION, docs_url=None, redoc_url=None)
    app.state.backend = backend
    app.state.sessions = SessionStore(max_sessions=max_sessions)

    templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

    @app.exception_handler(StoryNotFound)
    async def story_not_found(request: Request, exc: StoryNotFound):
        return JSONResponse({"error": str(exc)}, status_code=404)

    @app.exception_handler(StoryValidationError)
    async def story_invalid(request: Request, exc: StoryValidationError):
        logger.error(f"Preview of invalid story: {exc}")
        return JSONResponse(
            {"error": exc.message, "story": exc.path, "field": exc.field},
            status_code=500,
        )

    @app.exception_handler(StoryLoadError)
    async def story_unreadable(request: Request, exc: StoryLoadError):
        logger.error(f"Preview of unreadable story: {exc}")
        return JSONResponse({"error": str(exc), "story": exc.path}, status_code=500)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # -------------------------------------------------------------------------
    # CONTENT API
    # -------------------------------------------------------------------------

    @app.get("/api/tree")
    def tree():
        return {
            "title": backend.config("title"),
            "entries": [entry.to_dict() for entry in backend.content_tree()],
        }

    @app.get("/api/entries")
    def entry(path: str):
        found = backend.find_entry_by_path(path)
        if found is None:
            raise HTTPException(status_code=404, detail=f"unknown entry {path!r}")
        return found.to_dict()

    # -------------------------------------------------------------------------
    # IFRAME PREVIEW
    # -------------------------------------------------------------------------

    @app.get("/iframe", response_class=HTMLResponse)
    def iframe(
        request: Request,
        story: str,
        variation_id: Optional[str] = None,
        theme: Optional[str] = None,
        playground: bool = False,
    ):
        descriptor = _load_or_raise(backend, story)
        session = app.state.sessions.open(
            story_path=story,
            story=descriptor,
            variation_id=variation_id,
            theme=theme or backend.config("default_theme"),
            playground=playground,
        )
        logger.debug(f"Preview session {session.id} opened for {story}")
        response = _render_session(templates, request, session)
        response.headers[SESSION_HEADER] = session.id
        return response

    @app.get("/iframe/{session_id}", response_class=HTMLResponse)
    def iframe_refresh(request: Request, session_id: str):
        return _render_session(templates, request, _session_or_404(app, session_id))

    @app.post("/iframe/{session_id}/assign")
    def assign(session_id: str, payload: AssignPayload):
        return _sync(app, session_id, payload, handle_set)

    @app.post("/iframe/{session_id}/toggle")
    def toggle(session_id: str, payload: AssignPayload):
        return _sync(app, session_id, payload, handle_toggle)

    @app.delete("/iframe/{session_id}")
    def close(session_id: str):
        if not app.state.sessions.close(session_id):
            raise HTTPException(status_code=404, detail="unknown preview session")
        return {"closed": session_id}

    return app


# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _load_or_raise(backend: StorybookBackend, story_path: str) -> StoryDescriptor:
    descriptor = backend.load_story(story_path)
    if descriptor is None:
        raise StoryNotFound(f"unknown story {story_path!r}")
    return descriptor


def _session_or_404(app: FastAPI, session_id: str) -> PreviewSession:
    session = app.state.sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="unknown preview session")
    return session


def _event(payload: AssignPayload, session: PreviewSession) -> AssignEvent:
    return AssignEvent(
        field=payload.field,
        value=payload.value,
        variation_id=payload.variation_id or session.variation_id,
    )


def _sync(app: FastAPI, session_id: str, payload: AssignPayload, handler: AssignHandler):
    """Apply one playground event to a session's extra assigns under the store lock."""
    outcome = app.state.sessions.apply(
        session_id,
        lambda session: handler(_event(payload, session), session.extra_assigns, session.story, MODE_FLAT),
    )
    if outcome is None:
        raise HTTPException(status_code=404, detail="unknown preview session")
    variation_id, session = outcome
    return {"variation_id": variation_id, "extra_assigns": session.extra_assigns}


def _render_session(templates: Jinja2Templates, request: Request, session: PreviewSession):
    # No variation id renders every variation of the story
    rendered = render_variations(
        session.story, session.variation_id, session.extra_assigns, theme=session.theme
    )

    return templates.TemplateResponse(
        request,
        "iframe.html",
        {
            "session": session,
            "story": session.story,
            "rendered": rendered,
            "playground": session.playground,
        },
    )
