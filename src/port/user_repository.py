"""Port for account data access.

Accounts own favorites. The API resolves the caller through it and the
retention sweep resolves owners before notifying them.
"""

from typing import Protocol

from domain.model.user import User


class UserRepository(Protocol):

    def create(self, email: str, password_hash: str, name: str) -> User | None:
        """Create an account. None if the email is taken or the write failed."""
        ...

    def get_by_email(self, email: str) -> User | None:
        ...

    def get_by_id(self, user_id: str) -> User | None:
        """Resolve an owner_id. None for unknown ids, including deleted accounts."""
        ...

    def update_last_login(self, user_id: str) -> bool:
        ...
