"""
Bug Form
========
Client-side form for reporting a bug.

State machine:
    EDITING ──submit()──► SUBMITTING ──► SUCCESS   (values reset, on_success called)
                                     └─► FAILED    (errors / submit_error set)
    FAILED or SUCCESS ──set_field()──► EDITING

Presence validation runs before any request; if it fails nothing is sent and
the form returns to EDITING from whatever state it was in. ``submitting``
rejects re-entrant submits.
"""
import logging
from enum import Enum
from typing import Any, Callable, Optional

import httpx

from bugtracker.client.api import ApiError, BugApiClient
from bugtracker.core.constants import DESCRIPTION_REQUIRED, SUBMIT_FAILED, TITLE_REQUIRED
from bugtracker.models.bug import BugOut, BugPriority

logger = logging.getLogger(__name__)


class FormState(str, Enum):
    EDITING = "editing"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILED = "failed"


def _initial_values() -> dict[str, str]:
    return {"title": "", "description": "", "priority": BugPriority.MEDIUM.value}


class BugForm:
    def __init__(
        self,
        api: BugApiClient,
        on_success: Optional[Callable[[BugOut], Any]] = None,
    ) -> None:
        self.api = api
        self.on_success = on_success
        self.values = _initial_values()
        self.errors: dict[str, str] = {}
        self.submit_error: Optional[str] = None
        self.submitting = False
        self.state = FormState.EDITING

    def set_field(self, name: str, value: str) -> None:
        if name not in self.values:
            raise KeyError(f"Unknown form field: {name}")
        self.values[name] = value
        self.errors.pop(name, None)
        self.submit_error = None
        if self.state in (FormState.FAILED, FormState.SUCCESS):
            self.state = FormState.EDITING

    def validate(self) -> dict[str, str]:
        errors: dict[str, str] = {}
        if not self.values["title"].strip():
            errors["title"] = TITLE_REQUIRED
        if not self.values["description"].strip():
            errors["description"] = DESCRIPTION_REQUIRED
        return errors

    def reset(self) -> None:
        self.values = _initial_values()
        self.errors = {}
        self.submit_error = None

    async def submit(self) -> Optional[BugOut]:
        """Validate, send and record the outcome. Returns the created bug or None."""
        if self.submitting:
            logger.debug("Submit ignored: request already in flight")
            return None

        self.errors = self.validate()
        self.submit_error = None
        if self.errors:
            self.state = FormState.EDITING
            return None

        self.submitting = True
        self.state = FormState.SUBMITTING
        try:
            bug = await self.api.create_bug(self.values)
        except ApiError as exc:
            if exc.fields:
                self.errors = dict(exc.fields)
            else:
                self.submit_error = exc.message or SUBMIT_FAILED
            self.state = FormState.FAILED
            return None
        except httpx.HTTPError as exc:
            logger.error("Bug submission failed: %s", exc)
            self.submit_error = SUBMIT_FAILED
            self.state = FormState.FAILED
            return None
        finally:
            self.submitting = False

        self.reset()
        self.state = FormState.SUCCESS
        if self.on_success is not None:
            self.on_success(bug)
        return bug
