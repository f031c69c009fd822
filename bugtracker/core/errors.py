"""
Error Normalization
===================
THE SINGLE PLACE where internal failure shapes become HTTP outcomes.

Every failure the API can report is first reduced to a ``Failure`` carrying
one tag from the closed ``FailureTag`` set:

    VALIDATION    — missing/empty required field, bad enum value, bad body → 400
    MALFORMED_ID  — identifier is not well-formed                          → 404
    NOT_FOUND     — identifier well-formed but no such record              → 404
    CONFLICT      — uniqueness constraint violated                         → 400
    UNCLASSIFIED  — anything else                                          → 500

Pipeline (used by the FastAPI exception handlers):

    exception ──normalize()──► Failure ──classify()──► (status_code, message)

``classify`` is pure: it looks only at the Failure, never at exception types.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Optional

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError

from bugtracker.core.constants import DUPLICATE_VALUE, SERVER_ERROR


class FailureTag(str, Enum):
    VALIDATION = "validation"
    MALFORMED_ID = "malformed_id"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class Failure:
    tag: FailureTag
    resource_id: Optional[str] = None
    fields: dict[str, str] = field(default_factory=dict)


# ---------------------------------------------------------------------------
# Store-level exceptions
# ---------------------------------------------------------------------------
class BugStoreError(Exception):
    """Base for failures raised by the record store. Carries its Failure."""

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        super().__init__(classify(failure)[1])


class BugValidationError(BugStoreError):
    def __init__(self, fields: dict[str, str]) -> None:
        super().__init__(Failure(FailureTag.VALIDATION, fields=dict(fields)))

    @property
    def fields(self) -> dict[str, str]:
        return self.failure.fields


class BugNotFoundError(BugStoreError):
    def __init__(self, bug_id: str, malformed: bool = False) -> None:
        tag = FailureTag.MALFORMED_ID if malformed else FailureTag.NOT_FOUND
        super().__init__(Failure(tag, resource_id=bug_id))


class BugConflictError(BugStoreError):
    def __init__(self) -> None:
        super().__init__(Failure(FailureTag.CONFLICT))


# ---------------------------------------------------------------------------
# classify — pure mapping from tag to HTTP outcome
# ---------------------------------------------------------------------------
def classify(failure: Failure) -> tuple[int, str]:
    """
    Map a Failure to ``(status_code, message)``.

    Parameters
    ----------
    failure : Failure
        Normalized failure.

    Returns
    -------
    tuple[int, str]
        HTTP status and the message placed in the ``error`` slot.
    """
    tag = failure.tag
    if tag is FailureTag.VALIDATION:
        return 400, ", ".join(failure.fields.values()) or "Invalid input"
    if tag in (FailureTag.MALFORMED_ID, FailureTag.NOT_FOUND):
        return 404, f"Bug not found with id of {failure.resource_id}"
    if tag is FailureTag.CONFLICT:
        return 400, DUPLICATE_VALUE
    return 500, SERVER_ERROR


# ---------------------------------------------------------------------------
# normalize — exception shapes → Failure
# ---------------------------------------------------------------------------
def _label(field_name: str) -> str:
    return field_name[:1].upper() + field_name[1:]


def field_messages(errors: Iterable[dict[str, Any]]) -> dict[str, str]:
    """
    Collapse pydantic/FastAPI error dicts into ``{field: message}``.

    The leading ``body`` location segment is dropped; only the first message
    per field is kept.
    """
    messages: dict[str, str] = {}
    for err in errors:
        loc = [str(part) for part in err.get("loc", ())]
        if loc and loc[0] == "body":
            loc = loc[1:]
        name = ".".join(loc) or "body"
        if name in messages:
            continue

        err_type = err.get("type", "")
        msg = str(err.get("msg", "Invalid value"))
        if err_type == "missing":
            msg = f"{_label(name)} is required"
        elif err_type == "enum":
            expected = (err.get("ctx") or {}).get("expected", "")
            msg = f"{_label(name)} must be one of {expected}".rstrip()
        elif msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        messages[name] = msg
    return messages


def normalize(exc: BaseException) -> Failure:
    """Reduce any exception raised while serving a request to a Failure."""
    if isinstance(exc, BugStoreError):
        return exc.failure
    if isinstance(exc, (ValidationError, RequestValidationError)):
        return Failure(FailureTag.VALIDATION, fields=field_messages(exc.errors()))
    if isinstance(exc, IntegrityError):
        return Failure(FailureTag.CONFLICT)
    return Failure(FailureTag.UNCLASSIFIED)
