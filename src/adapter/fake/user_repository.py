"""In-memory implementation of UserRepository for testing."""

import uuid
from datetime import datetime, timezone
from domain.model.user import User


class FakeUserRepository:
    def __init__(self):
        self.store: dict[str, User] = {}

    # ── write operations ─────────────────────────────────────

    def create(self, email: str, password_hash: str, name: str) -> User | None:
        if self.get_by_email(email):
            return None

        now = datetime.now(timezone.utc)
        user = User(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            created_at=now,
            updated_at=now,
            password_hash=password_hash,
        )
        self.store[user.id] = user
        return user

    def update_last_login(self, user_id: str) -> bool:
        user = self.store.get(user_id)
        if not user:
            return False
        now = datetime.now(timezone.utc)
        user.last_login = now
        user.updated_at = now
        return True

    # ── read operations ──────────────────────────────────────

    def get_by_email(self, email: str) -> User | None:
        return next((u for u in self.store.values() if u.email == email), None)

    def get_by_id(self, user_id: str) -> User | None:
        return self.store.get(user_id)
