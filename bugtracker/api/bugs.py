"""
/api/v1/bugs
============
CRUD endpoints for bug records.

    GET    /bugs        → 200 {success, count, data: [Bug]}
    POST   /bugs        → 201 {success, data: Bug}
    GET    /bugs/{id}   → 200 {success, data: Bug}
    PUT    /bugs/{id}   → 200 {success, data: Bug}
    DELETE /bugs/{id}   → 200 {success, data: Bug}   (the deleted record)

Handlers only call the store and wrap the result. Failures are raised and
rendered by EnvelopeRoute (api/error_handlers.py).
"""
import logging
from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.orm import Session

from bugtracker.api.error_handlers import EnvelopeRoute
from bugtracker.db.database import get_session
from bugtracker.models.envelope import success_body
from bugtracker.services.bug_store import BugStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bugs", tags=["Bugs"], route_class=EnvelopeRoute)


def get_store(session: Session = Depends(get_session)) -> BugStore:
    return BugStore(session)


@router.get("")
def list_bugs(store: BugStore = Depends(get_store)):
    bugs = [bug.to_wire() for bug in store.list()]
    return success_body(bugs, count=len(bugs))


@router.post("", status_code=201)
def create_bug(payload: dict[str, Any] = Body(...), store: BugStore = Depends(get_store)):
    return success_body(store.create(payload).to_wire())


@router.get("/{bug_id}")
def get_bug(bug_id: str, store: BugStore = Depends(get_store)):
    return success_body(store.get_by_id(bug_id).to_wire())


@router.put("/{bug_id}")
def update_bug(
    bug_id: str,
    payload: dict[str, Any] = Body(...),
    store: BugStore = Depends(get_store),
):
    return success_body(store.update(bug_id, payload).to_wire())


@router.delete("/{bug_id}")
def delete_bug(bug_id: str, store: BugStore = Depends(get_store)):
    return success_body(store.delete(bug_id).to_wire())
