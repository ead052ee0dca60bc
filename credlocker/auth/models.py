"""
User records.

Two projections of the same record:
  - InternalUser: full record including password_hash (login only)
  - PublicUser:   everything except the hash (all user-facing reads)

Field names on disk and over the wire are camelCase; python attributes are
snake_case.
"""
from datetime import datetime, timezone
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PublicUser(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: int
    username: str
    email: str
    full_name: str = Field("", alias="fullName")
    role: Role = Role.USER
    level: int = Field(1, ge=1)
    experience_points: int = Field(0, ge=0, alias="experiencePoints")
    completed_tasks: list[str] = Field(default_factory=list, alias="completedTasks")
    created_at: datetime = Field(default_factory=_utcnow, alias="createdAt")

    @field_validator("completed_tasks", mode="before")
    @classmethod
    def _unique_task_ids(cls, value):
        # Stored as a list, behaves as a set: ids are strings, first occurrence wins
        if value is None:
            return []
        seen: list[str] = []
        for task_id in value:
            task_id = str(task_id)
            if task_id not in seen:
                seen.append(task_id)
        return seen

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class InternalUser(PublicUser):
    # "password" is the key used by stores written before the rename
    password_hash: str = Field(
        validation_alias=AliasChoices("passwordHash", "password", "password_hash"),
        serialization_alias="passwordHash",
    )

    def public(self) -> PublicUser:
        return PublicUser.model_validate(self.model_dump(exclude={"password_hash"}))


class LeaderboardEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    username: str
    level: int
    experience_points: int = Field(alias="experiencePoints")

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
