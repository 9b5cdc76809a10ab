"""Tests for the selection / preview state machine."""

from __future__ import annotations

import pytest

from emergency_log.domain.models import Event, SelectionState
from emergency_log.domain.selection import Selection


def _make_event(**overrides) -> Event:
    defaults = dict(
        id=1,
        title="Flood",
        description="River overflow",
        date="2024-11-07",
        photo="file://a.jpg",
    )
    defaults.update(overrides)
    return Event(**defaults)


@pytest.fixture()
def selection() -> Selection:
    return Selection()


def test_starts_idle(selection):
    assert selection.state == SelectionState.IDLE
    assert selection.event is None
    assert selection.preview_open is False


def test_select_from_idle(selection):
    selection.select(_make_event())

    assert selection.state == SelectionState.SELECTED
    assert selection.event.id == 1


def test_select_replaces_selected(selection):
    selection.select(_make_event())
    selection.select(_make_event(id=2, title="Fire"))

    assert selection.state == SelectionState.SELECTED
    assert selection.event.title == "Fire"


def test_open_and_close_preview(selection):
    selection.select(_make_event())

    selection.open_preview()
    assert selection.state == SelectionState.PREVIEWING

    selection.close_preview()
    assert selection.state == SelectionState.SELECTED
    assert selection.event.id == 1


def test_deselect_returns_to_idle(selection):
    selection.select(_make_event())

    selection.deselect()

    assert selection.state == SelectionState.IDLE


def test_deselect_while_previewing_force_closes_preview(selection):
    selection.select(_make_event())
    selection.open_preview()

    selection.deselect()

    assert selection.state == SelectionState.IDLE
    assert selection.preview_open is False

    # A later selection must not reopen the old preview.
    selection.select(_make_event(id=2))
    assert selection.state == SelectionState.SELECTED


def test_select_while_previewing_keeps_preview_open(selection):
    selection.select(_make_event())
    selection.open_preview()

    selection.select(_make_event(id=2, photo="file://b.jpg"))

    assert selection.state == SelectionState.PREVIEWING
    assert selection.event.photo == "file://b.jpg"


def test_open_preview_with_nothing_selected_stays_idle(selection):
    selection.open_preview()

    assert selection.state == SelectionState.IDLE
    assert selection.preview_open is False

    selection.select(_make_event())
    assert selection.state == SelectionState.SELECTED


def test_close_preview_when_not_open_is_harmless(selection):
    selection.close_preview()
    assert selection.state == SelectionState.IDLE


def test_selected_event_is_a_copy(selection):
    event = _make_event()
    selection.select(event)

    event.title = "Changed after selection"

    assert selection.event.title == "Flood"
    assert selection.event is not event


def test_is_selected(selection):
    assert selection.is_selected(1) is False
    selection.select(_make_event())
    assert selection.is_selected(1) is True
    assert selection.is_selected(2) is False


def test_view(selection):
    selection.select(_make_event())
    selection.open_preview()

    view = selection.view()

    assert view.state == SelectionState.PREVIEWING
    assert view.preview_open is True
    assert view.event.id == 1
