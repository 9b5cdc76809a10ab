"""FastAPI application: HTTP surface for the emergency event log screen."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from emergency_log.config import Settings, get_settings
from emergency_log.domain.bus import EventBus
from emergency_log.domain.errors import StorageError
from emergency_log.domain.handlers import HandlerRegistry
from emergency_log.domain.models import (
    Draft,
    DraftUpdate,
    Event,
    Notice,
    PhotoPickResult,
    ScreenView,
    SelectionView,
)
from emergency_log.repos.memory import NoticeRepository
from emergency_log.repos.sqlite import EventRepository
from emergency_log.services.coordinator import ViewCoordinator

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app and its singletons. The store is opened on startup."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # ── Singletons (one set per app) ──────────────────────────────────────
    event_bus = EventBus()
    event_repo = EventRepository(
        settings.database_url, timeout=settings.STORE_TIMEOUT_SECONDS
    )
    notice_repo = NoticeRepository()
    handler_registry = HandlerRegistry(bus=event_bus, notice_repo=notice_repo)
    coordinator = ViewCoordinator(
        event_repo, event_bus, refetch_after_write=settings.REFETCH_AFTER_WRITE
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # StorageUnavailable propagates and aborts startup: nothing can be shown.
        await coordinator.start()
        logger.info("Loaded %d event(s)", len(coordinator.state.events))
        try:
            yield
        finally:
            await event_repo.close()

    app = FastAPI(title="Emergency Event Log", lifespan=lifespan)
    app.state.settings = settings
    app.state.coordinator = coordinator
    app.state.notice_repo = notice_repo
    app.state.handler_registry = handler_registry

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={"detail": exc.message, "code": exc.code.value},
        )

    def _event_or_404(event_id: int) -> Event:
        event = coordinator.find(event_id)
        if event is None:
            raise HTTPException(status_code=404, detail="Event not found")
        return event

    # ── Routes: screen and records ────────────────────────────────────────

    @app.get("/screen", response_model=ScreenView)
    def get_screen() -> ScreenView:
        """Everything the screen renders: form, list, detail panel, preview."""
        return coordinator.screen_view()

    @app.get("/events", response_model=list[Event])
    def list_events() -> list[Event]:
        return list(coordinator.state.events)

    @app.post("/events/reload", response_model=ScreenView)
    async def reload_events() -> ScreenView:
        """Retry loading the list after a read failure."""
        if not await coordinator.reload():
            raise HTTPException(status_code=503, detail=coordinator.state.load_error)
        return coordinator.screen_view()

    @app.post("/events/{event_id}/edit", response_model=Draft)
    def edit_event(event_id: int) -> Draft:
        return coordinator.begin_edit(_event_or_404(event_id))

    @app.delete("/events/{event_id}", status_code=204)
    async def delete_event(event_id: int) -> None:
        await coordinator.remove(event_id)

    # ── Routes: draft form ────────────────────────────────────────────────

    @app.patch("/draft", response_model=Draft)
    def update_draft(body: DraftUpdate) -> Draft:
        # null leaves a field unchanged.
        fields = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
        return coordinator.edit_draft(**fields)

    @app.put("/draft/photo", response_model=Draft)
    async def set_draft_photo(body: PhotoPickResult) -> Draft:
        """Receive the external picker's result; ``null`` means cancelled."""

        async def picked() -> str | None:
            return body.photo

        await coordinator.pick_photo(picked)
        return coordinator.state.draft

    @app.post("/draft/submit", response_model=Event)
    async def submit_draft() -> Event:
        event = await coordinator.submit()
        if event is None:
            pending = notice_repo.list_pending()
            detail = pending[-1].message if pending else "Draft is incomplete"
            raise HTTPException(status_code=400, detail=detail)
        return event

    @app.delete("/draft", status_code=204)
    def discard_draft() -> None:
        coordinator.cancel_edit()

    # ── Routes: selection and preview ─────────────────────────────────────

    @app.post("/events/{event_id}/select", response_model=SelectionView)
    def select_event(event_id: int) -> SelectionView:
        coordinator.select(_event_or_404(event_id))
        return coordinator.state.selection.view()

    @app.delete("/selection", response_model=SelectionView)
    def clear_selection() -> SelectionView:
        coordinator.deselect()
        return coordinator.state.selection.view()

    @app.post("/selection/preview", response_model=SelectionView)
    def open_preview() -> SelectionView:
        coordinator.open_preview()
        return coordinator.state.selection.view()

    @app.delete("/selection/preview", response_model=SelectionView)
    def close_preview() -> SelectionView:
        coordinator.close_preview()
        return coordinator.state.selection.view()

    # ── Routes: notices and about tab ─────────────────────────────────────

    @app.get("/notices", response_model=list[Notice])
    def list_notices() -> list[Notice]:
        return notice_repo.list_pending()

    @app.delete("/notices/{notice_id}", status_code=204)
    def dismiss_notice(notice_id: str) -> None:
        if not notice_repo.dismiss(notice_id):
            raise HTTPException(status_code=404, detail="Notice not found")

    @app.get("/about")
    def about() -> dict:
        return {"title": "About", "text": settings.ABOUT_TEXT}

    return app


app = create_app()
