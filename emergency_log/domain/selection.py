"""Selection / full-screen preview state machine.

States::

    IDLE        nothing selected
    SELECTED    one event shown in the detail panel
    PREVIEWING  the selected event's photo shown full screen

Transitions::

    IDLE        --select(e)-->      SELECTED(e)
    SELECTED    --select(e')-->     SELECTED(e')
    SELECTED    --open_preview-->   PREVIEWING
    PREVIEWING  --close_preview-->  SELECTED
    SELECTED    --deselect-->       IDLE
    PREVIEWING  --deselect-->       IDLE        (preview is force-closed)
    PREVIEWING  --select(e')-->     PREVIEWING(e')
    IDLE        --open_preview-->   IDLE        (accepted, nothing to show)
"""

from __future__ import annotations

import logging

from emergency_log.domain.models import Event, SelectionState, SelectionView

logger = logging.getLogger(__name__)


class Selection:
    """Holds at most one selected event as a snapshot copy."""

    def __init__(self) -> None:
        self._event: Event | None = None
        self._preview_open = False

    @property
    def event(self) -> Event | None:
        return self._event

    @property
    def preview_open(self) -> bool:
        return self._preview_open

    @property
    def state(self) -> SelectionState:
        if self._event is None:
            return SelectionState.IDLE
        if self._preview_open:
            return SelectionState.PREVIEWING
        return SelectionState.SELECTED

    def is_selected(self, event_id: int) -> bool:
        return self._event is not None and self._event.id == event_id

    def select(self, event: Event) -> None:
        # Deep copy; the caller keeps its own instance.
        self._event = event.model_copy(deep=True)
        logger.debug("Selected event %s (%s)", event.id, self.state)

    def deselect(self) -> None:
        self._event = None
        self._preview_open = False
        logger.debug("Selection cleared")

    def open_preview(self) -> None:
        if self._event is None:
            logger.debug("Preview requested with nothing selected; ignoring")
            return
        self._preview_open = True

    def close_preview(self) -> None:
        self._preview_open = False

    def view(self) -> SelectionView:
        return SelectionView(
            state=self.state,
            event=self._event,
            preview_open=self._preview_open,
        )
