"""User storage. Users are the targets of ``contacts.owner_id``."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from passlib.context import CryptContext

from ..docstore import DocumentStore, now_ms
from ..errors import DocumentNotFoundError, UserNotFoundError
from ..schema import USERS, get_table

logger = logging.getLogger(__name__)

USER_SCHEMA = get_table(USERS)

# Password hashing setup
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def _check_password(candidate: str, encoded: str) -> bool:
    # Unrecognised or empty hashes never verify.
    if not encoded or pwd_context.identify(encoded) is None:
        return False
    return pwd_context.verify(candidate, encoded)


@dataclass(slots=True)
class User:
    id: str
    name: str
    email: str
    password_hash: str
    created_at: int
    updated_at: int
    image: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=data["id"],
            name=data["name"],
            email=data["email"],
            password_hash=data.get("password", ""),
            created_at=int(data["created_at"]),
            updated_at=int(data["updated_at"]),
            image=data.get("image"),
        )

    def to_api_dict(self) -> Dict[str, Any]:
        """API representation. The password hash is never included."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "image": self.image,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


def verify_password(user: User, candidate: str) -> bool:
    return _check_password(candidate, user.password_hash)


class UserStore:
    """Create, edit, delete and list users."""

    table = USERS

    def __init__(self, db: DocumentStore, *, clock: Callable[[], int] = now_ms) -> None:
        self._db = db
        self._clock = clock

    def create(self, name: str, email: str, password: str, image: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {"name": name, "email": email, "password": password}
        if image is not None:
            payload["image"] = image
        USER_SCHEMA.check_fields(payload)

        payload["password"] = hash_password(password)
        now = self._clock()
        user_id = self._db.insert(self.table, {**payload, "created_at": now, "updated_at": now})
        logger.info("Created user %s", user_id)
        return user_id

    def edit(self, user_id: str, fields: Mapping[str, Any]) -> User:
        """Partial update; a supplied password is re-hashed.

        Raises:
            UserNotFoundError: if ``user_id`` does not exist.
            ValidationError: on blank required fields or unknown keys.
        """
        USER_SCHEMA.check_fields(fields, partial=True)

        current = self._db.get(self.table, user_id)
        if current is None:
            raise UserNotFoundError(user_id)

        changes = dict(fields)
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])
        changes["updated_at"] = max(self._clock(), int(current["updated_at"]))

        try:
            self._db.patch(self.table, user_id, changes)
        except DocumentNotFoundError:
            raise UserNotFoundError(user_id) from None

        logger.info("Updated user %s", user_id)
        return User.from_dict({**current, **changes})

    def delete(self, user_id: str) -> bool:
        # Contacts owned by this user keep their owner_id.
        deleted = self._db.delete(self.table, user_id)
        if deleted:
            logger.info("Deleted user %s", user_id)
        return deleted

    def get(self, user_id: str) -> Optional[User]:
        record = self._db.get(self.table, user_id)
        return User.from_dict(record) if record is not None else None

    def get_by_email(self, email: str) -> Optional[User]:
        records = self._db.query_named_index(self.table, "by_email", email)
        return User.from_dict(records[0]) if records else None

    def list(self) -> List[User]:
        return [User.from_dict(record) for record in self._db.collect(self.table)]
