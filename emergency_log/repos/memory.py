"""In-memory repositories for transient, per-process data."""

from __future__ import annotations

from emergency_log.domain.models import Notice


class NoticeRepository:
    """List-backed store for Notice instances waiting to be shown."""

    def __init__(self) -> None:
        self._notices: list[Notice] = []

    def add(self, notice: Notice) -> None:
        self._notices.append(notice)

    def list_pending(self) -> list[Notice]:
        return sorted(self._notices, key=lambda n: n.created_at)

    def dismiss(self, notice_id: str) -> bool:
        """Remove a notice. Returns ``False`` if it was not pending."""
        for i, notice in enumerate(self._notices):
            if notice.id == notice_id:
                del self._notices[i]
                return True
        return False
