"""View coordinator: routes user intents to the event repository and keeps
the in-memory mirror of events consistent with what was stored."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from emergency_log.domain.bus import EventBus
from emergency_log.domain.errors import StorageReadError, ValidationError
from emergency_log.domain.events import (
    DraftRejected,
    EventCreated,
    EventDeleted,
    EventUpdated,
)
from emergency_log.domain.models import Creating, Draft, Editing, Event, ScreenView
from emergency_log.domain.selection import Selection
from emergency_log.repos.sqlite import EventRepository

logger = logging.getLogger(__name__)

# External capability yielding a photo reference, or None when cancelled.
PhotoPicker = Callable[[], Awaitable[str | None]]

_DRAFT_FIELDS = frozenset({"title", "description", "date", "photo"})

CREATE_LABEL = "Add Event"
UPDATE_LABEL = "Update Event"


class ScreenState:
    """All transient state of the screen, owned by one ViewCoordinator."""

    def __init__(self) -> None:
        self.draft = Draft()
        self.events: list[Event] = []
        self.selection = Selection()
        self.load_error: str | None = None


class ViewCoordinator:
    """Mediates every create/update/delete/select on the events screen.

    The mirror (``state.events``) is loaded once by :meth:`start` and from then
    on is only updated from the results of completed repository calls. A failed
    repository call leaves draft, mirror and selection exactly as they were.
    """

    def __init__(
        self,
        repository: EventRepository,
        bus: EventBus,
        refetch_after_write: bool = False,
    ) -> None:
        self.repository = repository
        self.bus = bus
        self.refetch_after_write = refetch_after_write
        self.state = ScreenState()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Open the store and load the mirror.

        Raises:
            StorageUnavailable: If the store cannot be opened.
        """
        await self.repository.open()
        await self.reload()

    async def reload(self) -> bool:
        """Replace the mirror with a fresh read. Returns ``False`` on failure."""
        try:
            events = await self.repository.list_all()
        except StorageReadError as exc:
            self.state.load_error = exc.message
            logger.warning(
                "Could not load events, keeping %d mirrored: %s",
                len(self.state.events),
                exc.message,
            )
            return False
        self.state.events = events
        self.state.load_error = None
        return True

    # ------------------------------------------------------------------
    # Draft
    # ------------------------------------------------------------------

    @property
    def submit_label(self) -> str:
        return UPDATE_LABEL if isinstance(self.state.draft.mode, Editing) else CREATE_LABEL

    def edit_draft(self, **fields: str | None) -> Draft:
        unknown = set(fields) - _DRAFT_FIELDS
        if unknown:
            raise TypeError(f"Unknown draft field(s): {', '.join(sorted(unknown))}")
        self.state.draft = Draft.model_validate({**self.state.draft.model_dump(), **fields})
        return self.state.draft

    async def pick_photo(self, picker: PhotoPicker) -> bool:
        """Ask the external picker for a photo. Cancelling leaves the draft as is."""
        photo = await picker()
        if photo is None:
            logger.debug("Photo selection cancelled")
            return False
        self.edit_draft(photo=photo)
        return True

    def begin_edit(self, event: Event) -> Draft:
        self.state.draft = Draft(
            title=event.title,
            description=event.description,
            date=event.date,
            photo=event.photo,
            mode=Editing(event_id=event.id),
        )
        return self.state.draft

    def cancel_edit(self) -> None:
        self.state.draft = Draft()

    async def submit(self) -> Event | None:
        """Create or update depending on the draft mode.

        Returns the stored event, or ``None`` if the draft was rejected. A
        rejection publishes :class:`DraftRejected` and touches nothing else.

        Raises:
            StorageWriteError: If the store refused the write.
        """
        draft = self.state.draft
        try:
            self._validate(draft)
        except ValidationError as exc:
            logger.info("Submit rejected: %s", exc.message)
            self.bus.publish(
                DraftRejected(message=exc.message, missing_fields=exc.missing_fields)
            )
            return None

        mode = draft.mode
        if isinstance(mode, Creating):
            return await self._create(draft)
        if isinstance(mode, Editing):
            return await self._update(draft, mode.event_id)
        raise TypeError(f"Unknown draft mode: {mode!r}")

    @staticmethod
    def _validate(draft: Draft) -> None:
        missing = draft.missing_fields()
        if missing:
            raise ValidationError(missing)

    async def _create(self, draft: Draft) -> Event:
        new_id = await self.repository.insert(
            draft.title, draft.description, draft.date, draft.photo
        )
        created = await self._stored_or_built(new_id, draft)
        self.state.events.append(created)
        self.state.draft = Draft()
        self.bus.publish(EventCreated(event_id=created.id, title=created.title))
        return created

    async def _update(self, draft: Draft, event_id: int) -> Event:
        await self.repository.update(
            event_id, draft.title, draft.description, draft.date, draft.photo
        )
        updated = await self._stored_or_built(event_id, draft)
        for i, existing in enumerate(self.state.events):
            if existing.id == event_id:
                self.state.events[i] = updated
                break
        else:
            logger.warning("Updated event %s is not in the mirror", event_id)
        self.state.draft = Draft()
        self.bus.publish(EventUpdated(event_id=event_id, title=updated.title))
        return updated

    async def _stored_or_built(self, event_id: int, draft: Draft) -> Event:
        built = Event(
            id=event_id,
            title=draft.title,
            description=draft.description,
            date=draft.date,
            photo=draft.photo,
        )
        if not self.refetch_after_write:
            return built
        # The write already happened, so a failed re-read must not hide it.
        try:
            stored = await self.repository.get(event_id)
        except StorageReadError as exc:
            logger.warning("Re-read of event %s failed: %s", event_id, exc.message)
            return built
        return stored if stored is not None else built

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def find(self, event_id: int) -> Event | None:
        for event in self.state.events:
            if event.id == event_id:
                return event
        return None

    async def remove(self, event_id: int) -> None:
        """Delete a record. Deleting the selected record clears the selection.

        Raises:
            StorageWriteError: If the store refused the delete.
        """
        await self.repository.delete(event_id)
        self.state.events = [e for e in self.state.events if e.id != event_id]
        was_selected = self.state.selection.is_selected(event_id)
        if was_selected:
            self.state.selection.deselect()
        self.bus.publish(EventDeleted(event_id=event_id, was_selected=was_selected))

    # ------------------------------------------------------------------
    # Selection / preview
    # ------------------------------------------------------------------

    def select(self, event: Event) -> None:
        self.state.selection.select(event)

    def deselect(self) -> None:
        self.state.selection.deselect()

    def open_preview(self) -> None:
        self.state.selection.open_preview()

    def close_preview(self) -> None:
        self.state.selection.close_preview()

    def screen_view(self) -> ScreenView:
        return ScreenView(
            draft=self.state.draft,
            submit_label=self.submit_label,
            events=list(self.state.events),
            selection=self.state.selection.view(),
            load_error=self.state.load_error,
        )
