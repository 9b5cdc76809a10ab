"""Domain models for the emergency event log."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator


class SelectionState(StrEnum):
    IDLE = "idle"
    SELECTED = "selected"
    PREVIEWING = "previewing"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Event(BaseModel):
    """A stored emergency record.

    ``date`` and ``photo`` are opaque strings: the date is never parsed and the
    photo is a reference to an image owned by someone else.
    """

    id: int
    title: str
    description: str = ""
    date: str
    photo: str | None = None

    # The schema has no NOT NULL constraints, so older rows may hold NULLs.
    @field_validator("title", "description", "date", mode="before")
    @classmethod
    def _null_text_is_empty(cls, value: str | None) -> str:
        return "" if value is None else value


class Creating(BaseModel):
    kind: Literal["creating"] = "creating"


class Editing(BaseModel):
    kind: Literal["editing"] = "editing"
    event_id: int


DraftMode = Annotated[Union[Creating, Editing], Field(discriminator="kind")]


class Draft(BaseModel):
    """In-progress form fields feeding the next submit."""

    title: str = ""
    description: str = ""
    date: str = ""
    photo: str | None = None
    mode: DraftMode = Field(default_factory=Creating)

    def missing_fields(self) -> list[str]:
        """Names of the required fields that are still empty."""
        return [
            name for name in ("title", "date", "photo") if not getattr(self, name)
        ]


class Notice(BaseModel):
    """User-facing message raised when a submit is rejected."""

    id: str = Field(default_factory=_new_id)
    message: str
    missing_fields: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class DraftUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    date: str | None = None


class PhotoPickResult(BaseModel):
    """Result of the external photo picker; ``None`` means it was cancelled."""

    photo: str | None = None


class SelectionView(BaseModel):
    state: SelectionState
    event: Event | None = None
    preview_open: bool = False


class ScreenView(BaseModel):
    draft: Draft
    submit_label: str
    events: list[Event]
    selection: SelectionView
    load_error: str | None = None
