"""Domain events emitted by the view coordinator."""

from __future__ import annotations

from pydantic import BaseModel


class EventCreated(BaseModel):
    """Fired after a new record has been inserted and mirrored."""

    event_id: int
    title: str


class EventUpdated(BaseModel):
    """Fired after a record has been replaced in the store and the mirror."""

    event_id: int
    title: str


class EventDeleted(BaseModel):
    """Fired after a record has been deleted."""

    event_id: int
    was_selected: bool = False


class DraftRejected(BaseModel):
    """Fired when a submit is refused because required fields are empty."""

    message: str
    missing_fields: list[str]
