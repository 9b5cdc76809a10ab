"""Tests for the event bus, handlers and the notice repository."""

from __future__ import annotations

from emergency_log.domain.bus import EventBus
from emergency_log.domain.events import DraftRejected, EventCreated, EventDeleted
from emergency_log.domain.handlers import HandlerRegistry
from emergency_log.domain.models import Notice
from emergency_log.repos.memory import NoticeRepository


def test_draft_rejected_becomes_notice():
    bus = EventBus()
    notice_repo = NoticeRepository()
    HandlerRegistry(bus=bus, notice_repo=notice_repo)

    bus.publish(DraftRejected(message="Title is required", missing_fields=["title"]))

    [notice] = notice_repo.list_pending()
    assert notice.message == "Title is required"
    assert notice.missing_fields == ["title"]


def test_mutation_events_do_not_create_notices():
    bus = EventBus()
    notice_repo = NoticeRepository()
    HandlerRegistry(bus=bus, notice_repo=notice_repo)

    bus.publish(EventCreated(event_id=1, title="Flood"))
    bus.publish(EventDeleted(event_id=1, was_selected=True))

    assert notice_repo.list_pending() == []


def test_handlers_run_in_registration_order():
    bus = EventBus()
    calls = []
    bus.subscribe(EventCreated, lambda e: calls.append(("first", e.event_id)))
    bus.subscribe(EventCreated, lambda e: calls.append(("second", e.event_id)))

    bus.publish(EventCreated(event_id=7, title="x"))

    assert calls == [("first", 7), ("second", 7)]


def test_publish_without_subscribers_is_noop():
    EventBus().publish(EventCreated(event_id=1, title="x"))


def test_dismiss_notice():
    repo = NoticeRepository()
    first = Notice(message="one")
    second = Notice(message="two")
    repo.add(first)
    repo.add(second)

    assert repo.dismiss(first.id) is True
    assert repo.dismiss(first.id) is False
    assert [n.message for n in repo.list_pending()] == ["two"]
