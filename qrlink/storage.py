# qrlink/storage.py

import uuid
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from threading import Lock

from fastapi import Request

from qrlink.core.errors import ConflictError, NotFoundError
from qrlink.core.shortcode import generate_short_code
from qrlink.models import QrCode, RenderOptions, User
from qrlink.models.qr_code import utcnow


logger = logging.getLogger(__name__)


# -------------------------------
# Storage Interfaces
# -------------------------------

class UserStore(ABC):

    @abstractmethod
    def create_user(self, username: str, hashed_password: str) -> User:
        """Raises ConflictError if the username is already registered."""

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> User | None: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None: ...


class CodeRegistry(ABC):

    @abstractmethod
    def create(
        self,
        owner_id: str,
        qr_type: str,
        content: str,
        options: RenderOptions,
        title: str | None = None,
    ) -> QrCode: ...

    @abstractmethod
    def list_by_owner(self, owner_id: str) -> list[QrCode]: ...

    @abstractmethod
    def get_by_id(self, qr_id: str) -> QrCode | None: ...

    @abstractmethod
    def get_by_short_code(self, short_code: str) -> QrCode | None: ...

    @abstractmethod
    def record_click(self, qr_id: str) -> QrCode:
        """Raises NotFoundError for an unknown id."""

    def stats_by_owner(self, owner_id: str, top: int = 5) -> dict:
        codes = self.list_by_owner(owner_id)
        ranked = sorted(codes, key=lambda qr: qr.click_count, reverse=True)
        return {
            "total_codes": len(codes),
            "total_clicks": sum(qr.click_count for qr in codes),
            "top_codes": ranked[:top],
        }


# -------------------------------
# In-memory Implementations
# -------------------------------

class MemoryUserStore(UserStore):
    """
    Users keyed by id, with a unique index on username.
    Lost on restart.
    """

    def __init__(self):
        self._users: dict[str, User] = {}
        self._by_username: dict[str, str] = {}
        self._lock = Lock()

    def create_user(self, username: str, hashed_password: str) -> User:
        with self._lock:
            if username in self._by_username:
                raise ConflictError("Username already exists")
            user = User(id=str(uuid.uuid4()), username=username, hashed_password=hashed_password)
            self._users[user.id] = user
            self._by_username[username] = user.id
        return user

    def get_user_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def get_user_by_username(self, username: str) -> User | None:
        user_id = self._by_username.get(username)
        return self._users.get(user_id) if user_id else None


class MemoryCodeRegistry(CodeRegistry):
    """
    QR codes keyed by id, with a secondary index from short code to id.
    Both maps are only written under the registry lock; click counts
    are additionally serialized per record.
    Readers get copies, never the stored objects.
    """

    def __init__(self):
        self._codes: dict[str, QrCode] = {}
        self._by_short_code: dict[str, str] = {}
        self._click_locks: dict[str, Lock] = {}
        self._lock = Lock()

    def create(self, owner_id, qr_type, content, options, title=None) -> QrCode:
        with self._lock:
            short_code = generate_short_code(lambda code: code in self._by_short_code)
            now = utcnow()
            qr = QrCode(
                id=str(uuid.uuid4()),
                user_id=owner_id,
                short_code=short_code,
                type=qr_type,
                content=content,
                title=title,
                options=options,
                created_at=now,
                updated_at=now,
            )
            self._click_locks[qr.id] = Lock()
            self._codes[qr.id] = qr
            self._by_short_code[short_code] = qr.id
            logger.debug("Reserved short code %s for QR code %s", short_code, qr.id)
            return replace(qr)

    def list_by_owner(self, owner_id: str) -> list[QrCode]:
        with self._lock:
            return [replace(qr) for qr in self._codes.values() if qr.user_id == owner_id]

    def get_by_id(self, qr_id: str) -> QrCode | None:
        qr = self._codes.get(qr_id)
        return replace(qr) if qr else None

    def get_by_short_code(self, short_code: str) -> QrCode | None:
        qr_id = self._by_short_code.get(short_code)
        return self.get_by_id(qr_id) if qr_id else None

    def record_click(self, qr_id: str) -> QrCode:
        lock = self._click_locks.get(qr_id)
        if lock is None:
            raise NotFoundError("QR code not found")

        with lock:
            qr = self._codes[qr_id]
            qr.click_count += 1
            qr.updated_at = utcnow()
            return replace(qr)


# -------------------------------
# Request Dependencies
# -------------------------------

def get_user_store(request: Request) -> UserStore:
    return request.app.state.users


def get_code_registry(request: Request) -> CodeRegistry:
    return request.app.state.registry
