"""
User document model.

Maps to the `users` MongoDB collection.

`password_hash` is stored on the document but excluded from every normal
read by the repository's default projection, so a UserDoc loaded through
the User Directory carries `password_hash=None`. `to_public()` drops the
field entirely for anything that leaves the service layer.
"""

from __future__ import annotations

from typing import Optional

from schemas.models.base import TimestampedDoc

USERS_COLLECTION = "users"


class UserDoc(TimestampedDoc):
    """Document model for the `users` collection."""

    username: str
    email: str
    password_hash: Optional[str] = None
    is_verified: bool = False

    def to_public(self) -> dict:
        """Return a JSON-safe dict without the password hash."""
        return self.model_dump(mode="json", exclude={"password_hash"})
