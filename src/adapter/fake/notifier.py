"""In-memory implementation of NotificationPort for testing."""

from domain.model.sweep import FavoriteNotice


class FakeNotifier:
    def __init__(self, failing_owner_ids: set[str] | None = None):
        self.sent: list[FavoriteNotice] = []
        self.failing_owner_ids = failing_owner_ids or set()

    def notify(self, notice: FavoriteNotice) -> None:
        if notice.owner_id in self.failing_owner_ids:
            raise RuntimeError(f"delivery failed for {notice.owner_id}")
        self.sent.append(notice)
