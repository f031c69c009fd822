"""
Bug Model
=========
Pydantic schemas for the bug record: the contract between the HTTP layer,
the record store and the client.

Fields:
    id           — opaque 32-char hex identifier, ``_id`` on the wire
    title        — required, non-empty after trimming
    description  — required, non-empty after trimming
    status       — BugStatus, default ``open``
    priority     — BugPriority, default ``medium``
    created_at   — set once at creation, ``createdAt`` on the wire
    updated_at   — refreshed on every update, ``updatedAt`` on the wire
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from bugtracker.core.constants import DESCRIPTION_REQUIRED, ID_FIELD, TITLE_REQUIRED


class BugStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class BugPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _required_text(value: Any, message: str) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(message)
    return value.strip() if isinstance(value, str) else value


def _choices(enum_cls: type[Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


class BugCreate(BaseModel):
    title: str
    description: str
    status: BugStatus = BugStatus.OPEN
    priority: BugPriority = BugPriority.MEDIUM

    @field_validator("title", mode="before")
    @classmethod
    def title_not_blank(cls, v: Any) -> Any:
        return _required_text(v, TITLE_REQUIRED)

    @field_validator("description", mode="before")
    @classmethod
    def description_not_blank(cls, v: Any) -> Any:
        return _required_text(v, DESCRIPTION_REQUIRED)


class BugUpdate(BaseModel):
    """Partial update. Only keys present in the input are applied."""

    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[BugStatus] = None
    priority: Optional[BugPriority] = None

    @field_validator("title", mode="before")
    @classmethod
    def title_not_blank(cls, v: Any) -> Any:
        return _required_text(v, TITLE_REQUIRED)

    @field_validator("description", mode="before")
    @classmethod
    def description_not_blank(cls, v: Any) -> Any:
        return _required_text(v, DESCRIPTION_REQUIRED)

    @field_validator("status", mode="before")
    @classmethod
    def status_not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError(f"Status must be one of {_choices(BugStatus)}")
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def priority_not_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError(f"Priority must be one of {_choices(BugPriority)}")
        return v

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class BugOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str = Field(validation_alias=AliasChoices("id", ID_FIELD), serialization_alias=ID_FIELD)
    title: str
    description: str
    status: BugStatus
    priority: BugPriority
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt",
    )
    updated_at: datetime = Field(
        validation_alias=AliasChoices("updated_at", "updatedAt"),
        serialization_alias="updatedAt",
    )

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes
        return v if v.tzinfo else v.replace(tzinfo=timezone.utc)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")
