"""
Credential store: the single owner and writer of the user record set.

Records live in memory and are rewritten in full to a JSON file after each
mutation (temp file + rename). If that write fails the error is logged and
kept in last_persistence_error; the in-memory state stays authoritative.
"""
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Optional

from pydantic import ValidationError as PydanticValidationError

from credlocker.auth.models import InternalUser, PublicUser, Role
from credlocker.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from credlocker.core.security import hash_password, verify_password

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# DEVELOPMENT BOOTSTRAP ACCOUNTS
# Well-known credentials (admin/password, user/password). Only used when the
# store is created with seed_dev_users=True, which config never allows in
# production.
# ---------------------------------------------------------------------------
DEV_SEED_PASSWORD = "password"
DEV_SEED_ACCOUNTS = (
    {"username": "admin", "email": "admin@credlocker.com", "full_name": "System Administrator", "role": Role.ADMIN},
    {"username": "user", "email": "user@credlocker.com", "full_name": "User", "role": Role.USER},
)


class UserStore:
    def __init__(self, path, seed_dev_users: bool = False):
        self.path = Path(path)
        self.seed_dev_users = seed_dev_users
        self.last_persistence_error: Optional[PersistenceError] = None

        self._lock = threading.RLock()
        self._user_locks: dict[int, threading.Lock] = {}

        self._users: list[InternalUser] = self._load_users()
        self._next_id = max((u.id for u in self._users), default=0) + 1

    # ---------------------------------------------------------------------
    # LOAD / SAVE
    # ---------------------------------------------------------------------

    def _load_users(self) -> list[InternalUser]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            if self.seed_dev_users:
                logger.warning("[STORE] %s not found, seeding development users", self.path)
                return self._dev_seed()
            logger.info("[STORE] %s not found, starting empty", self.path)
            return []
        except OSError as exc:
            raise PersistenceError(f"Could not read users file {self.path}: {exc}") from exc

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("expected a JSON array of users")
            users = [InternalUser.model_validate(item) for item in data]
        except (ValueError, PydanticValidationError) as exc:
            # Refuse to start on a corrupt store: the next save would overwrite it
            raise PersistenceError(f"Users file {self.path} is corrupt: {exc}") from exc

        logger.info("[STORE] Loaded %d users from %s", len(users), self.path)
        return users

    def _dev_seed(self) -> list[InternalUser]:
        print(
            "[STORE] WARNING: seeding default accounts admin/password and user/password. "
            "DEVELOPMENT ONLY - change or remove them before exposing this service!",
            flush=True,
        )
        return [
            InternalUser(
                id=index,
                username=account["username"],
                email=account["email"],
                full_name=account["full_name"],
                role=account["role"],
                password_hash=hash_password(DEV_SEED_PASSWORD),
            )
            for index, account in enumerate(DEV_SEED_ACCOUNTS, start=1)
        ]

    def _save_users(self) -> None:
        """Rewrite the whole users file. Caller holds self._lock."""
        payload = json.dumps(
            [u.model_dump(mode="json", by_alias=True) for u in self._users],
            indent=2,
        )
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            self.last_persistence_error = PersistenceError(f"Could not write {self.path}: {exc}")
            logger.error("[STORE] Error saving users to file: %s", exc)
            return

        self.last_persistence_error = None

    def save(self) -> None:
        with self._lock:
            self._save_users()

    # ---------------------------------------------------------------------
    # CREATE
    # ---------------------------------------------------------------------

    def create(self, full_name: str, email: str, username: str, password: str) -> PublicUser:
        # Hash outside the lock, it is the slow part
        password_hash = hash_password(password)

        with self._lock:
            for existing in self._users:
                if existing.username == username or existing.email == email:
                    raise ConflictError("Username or email already exists")

            user = InternalUser(
                id=self._next_id,
                username=username,
                email=email,
                full_name=full_name,
                role=Role.USER,
                password_hash=password_hash,
            )
            self._next_id += 1
            self._users.append(user)
            self._save_users()

        logger.info("[STORE] Created user id=%s username=%s", user.id, user.username)
        return user.public()

    # ---------------------------------------------------------------------
    # LOOKUPS
    # ---------------------------------------------------------------------

    def _find(self, field: str, value) -> Optional[InternalUser]:
        with self._lock:
            for user in self._users:
                if getattr(user, field) == value:
                    return user
        return None

    def find_by_username(self, username: str) -> Optional[InternalUser]:
        """Full record including the hash, for login. None when missing."""
        user = self._find("username", username)
        return user.model_copy(deep=True) if user else None

    def find_by_email(self, email: str) -> Optional[InternalUser]:
        user = self._find("email", email)
        return user.model_copy(deep=True) if user else None

    def find_by_id(self, user_id: int) -> Optional[PublicUser]:
        user = self._find("id", user_id)
        return user.public() if user else None

    def get_all_users(self) -> list[PublicUser]:
        with self._lock:
            return [u.public() for u in self._users]

    def validate_password(self, user: InternalUser, password: str) -> bool:
        return verify_password(password, user.password_hash)

    # ---------------------------------------------------------------------
    # PROGRESS
    # ---------------------------------------------------------------------

    @contextmanager
    def user_lock(self, user_id: int) -> Iterator[None]:
        """Serialize read-modify-write sequences on one user's record."""
        with self._lock:
            lock = self._user_locks.setdefault(user_id, threading.Lock())
        with lock:
            yield

    def update_gamification_progress(
        self,
        user_id: int,
        level: int,
        experience_points: int,
        completed_tasks: Iterable[str],
    ) -> PublicUser:
        with self._lock:
            index = next((i for i, u in enumerate(self._users) if u.id == user_id), None)
            if index is None:
                raise NotFoundError(f"User {user_id} not found")

            # Validate the whole new record before swapping it in
            try:
                updated = InternalUser.model_validate({
                    **self._users[index].model_dump(),
                    "level": level,
                    "experience_points": experience_points,
                    "completed_tasks": list(completed_tasks),
                })
            except PydanticValidationError as exc:
                raise ValidationError(
                    f"Invalid progress for user {user_id}: {exc.error_count()} field(s) rejected"
                ) from exc
            self._users[index] = updated
            self._save_users()

        return updated.public()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)
