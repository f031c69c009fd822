"""
Bug Store
=========
Record store for bug documents on top of a SQLAlchemy session.

Responsibilities:
    - schema validation of incoming field mappings (BugCreate / BugUpdate)
    - id generation and timestamping (createdAt once, updatedAt on every write)
    - newest-first listing

Failures are raised as BugStoreError subclasses (see core/errors.py):
    BugValidationError  — field → message map
    BugNotFoundError    — malformed or absent id
    BugConflictError    — uniqueness constraint violated on commit

Other driver errors propagate unchanged and end up UNCLASSIFIED.
"""
import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bugtracker.core.errors import (
    BugConflictError,
    BugNotFoundError,
    BugValidationError,
    field_messages,
)
from bugtracker.db.tables import BugRecord, new_bug_id
from bugtracker.models.bug import BugCreate, BugOut, BugUpdate

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"^[0-9a-f]{32}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def is_valid_id(bug_id: Any) -> bool:
    return isinstance(bug_id, str) and bool(_ID_RE.match(bug_id))


class BugStore:
    """
    CRUD over the ``bugs`` table.

    Usage:
        store = BugStore(session)
        bug = store.create({"title": "Crash", "description": "On save"})
        store.update(bug.id, {"status": "resolved"})
    """

    def __init__(self, session: Session, clock: Callable[[], datetime] = utcnow) -> None:
        self.session = session
        self._clock = clock

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list(self) -> List[BugOut]:
        """All records, newest first. No pagination, no filtering."""
        stmt = select(BugRecord).order_by(BugRecord.created_at.desc(), BugRecord.seq.desc())
        records = self.session.scalars(stmt).all()
        logger.debug("Listed %d bugs", len(records))
        return [BugOut.model_validate(r) for r in records]

    def get_by_id(self, bug_id: str) -> BugOut:
        return BugOut.model_validate(self._load(bug_id))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def create(self, fields: Mapping[str, Any]) -> BugOut:
        data = self._validate(BugCreate, fields)
        now = self._clock()
        record = BugRecord(
            id=new_bug_id(),
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            created_at=now,
            updated_at=now,
        )
        self.session.add(record)
        self._commit()
        logger.info("Created bug %s (priority=%s)", record.id, record.priority.value)
        return BugOut.model_validate(record)

    def update(self, bug_id: str, fields: Mapping[str, Any]) -> BugOut:
        record = self._load(bug_id)
        changes = self._validate(BugUpdate, fields).changes()

        for name, value in changes.items():
            setattr(record, name, value)
        record.updated_at = self._clock()

        self._commit()
        logger.info("Updated bug %s fields=%s", bug_id, sorted(changes))
        return BugOut.model_validate(record)

    def delete(self, bug_id: str) -> BugOut:
        record = self._load(bug_id)
        snapshot = BugOut.model_validate(record)
        self.session.delete(record)
        self._commit()
        logger.info("Deleted bug %s", bug_id)
        return snapshot

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _load(self, bug_id: str) -> BugRecord:
        if not is_valid_id(bug_id):
            raise BugNotFoundError(str(bug_id), malformed=True)
        record = self.session.scalars(
            select(BugRecord).where(BugRecord.id == bug_id)
        ).one_or_none()
        if record is None:
            raise BugNotFoundError(bug_id)
        return record

    @staticmethod
    def _validate(schema: Type[BaseModel], fields: Mapping[str, Any]):
        if not isinstance(fields, Mapping):
            raise BugValidationError({"body": "Request body must be a JSON object"})
        try:
            return schema.model_validate(dict(fields))
        except ValidationError as exc:
            raise BugValidationError(field_messages(exc.errors())) from exc

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            logger.warning("Integrity violation: %s", exc.orig)
            raise BugConflictError() from exc
