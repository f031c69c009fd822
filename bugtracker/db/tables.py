"""
Bug Table
ORM mapping for the ``bugs`` collection. Enumerations are stored by value.
"""
import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from bugtracker.db.database import Base
from bugtracker.models.bug import BugPriority, BugStatus


def new_bug_id() -> str:
    return uuid.uuid4().hex


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class BugRecord(Base):
    __tablename__ = "bugs"
    __table_args__ = {"sqlite_autoincrement": True}

    # insertion counter assigned by the database; tie-break within one clock tick
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, default=new_bug_id)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[BugStatus] = mapped_column(
        Enum(BugStatus, name="bug_status", native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=BugStatus.OPEN,
    )
    priority: Mapped[BugPriority] = mapped_column(
        Enum(BugPriority, name="bug_priority", native_enum=False, values_callable=_enum_values),
        nullable=False,
        default=BugPriority.MEDIUM,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<BugRecord {self.id} {self.status.value} {self.title!r}>"
