"""Domain event handlers, wired up at application startup."""

from __future__ import annotations

import logging

from emergency_log.domain.bus import EventBus
from emergency_log.domain.events import (
    DraftRejected,
    EventCreated,
    EventDeleted,
    EventUpdated,
)
from emergency_log.domain.models import Notice
from emergency_log.repos.memory import NoticeRepository

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus."""

    def __init__(self, bus: EventBus, notice_repo: NoticeRepository) -> None:
        self.bus = bus
        self.notice_repo = notice_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(EventCreated, self.on_event_created)
        self.bus.subscribe(EventUpdated, self.on_event_updated)
        self.bus.subscribe(EventDeleted, self.on_event_deleted)
        self.bus.subscribe(DraftRejected, self.on_draft_rejected)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_event_created(self, event: EventCreated) -> None:
        logger.info("Event %s created: %r", event.event_id, event.title)

    def on_event_updated(self, event: EventUpdated) -> None:
        logger.info("Event %s updated: %r", event.event_id, event.title)

    def on_event_deleted(self, event: EventDeleted) -> None:
        if event.was_selected:
            logger.info("Event %s deleted; selection cleared", event.event_id)
        else:
            logger.info("Event %s deleted", event.event_id)

    def on_draft_rejected(self, event: DraftRejected) -> None:
        self.notice_repo.add(
            Notice(message=event.message, missing_fields=event.missing_fields)
        )
