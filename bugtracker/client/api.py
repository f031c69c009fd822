"""
Bug API Client
==============
Async httpx client over the REST surface. Unwraps the response envelope:
success returns ``data``; failure raises ApiError with the server's message
and, for validation failures, its per-field map.
"""
import logging
from typing import Any, List, Mapping, Optional

import httpx

from bugtracker.core.config import API_BASE_URL
from bugtracker.core.constants import SUBMIT_FAILED
from bugtracker.models.bug import BugOut

logger = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(
        self, status_code: int, message: str, fields: Optional[dict[str, str]] = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.fields = fields or {}


class BugApiClient:
    def __init__(
        self,
        base_url: str = API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=httpx.Timeout(timeout)
        )

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "BugApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _request(self, method: str, path: str, json: Any = None, many: bool = False):
        resp = await self._http.request(method, path, json=json)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if not (resp.is_success and body.get("success")):
            message = body.get("error") or f"HTTP {resp.status_code}"
            logger.warning("%s %s failed: %s %s", method, path, resp.status_code, message)
            raise ApiError(resp.status_code, message, body.get("fields"))

        # success envelopes must carry bug data
        data = body.get("data")
        try:
            if many:
                if not isinstance(data, list):
                    raise ValueError("data is not a list")
                return [BugOut.model_validate(item) for item in data]
            if data is None:
                raise ValueError("data is missing")
            return BugOut.model_validate(data)
        except ValueError as exc:
            logger.warning("%s %s returned a malformed envelope: %s", method, path, exc)
            raise ApiError(resp.status_code, SUBMIT_FAILED) from exc

    async def list_bugs(self) -> List[BugOut]:
        return await self._request("GET", "/bugs", many=True)

    async def create_bug(self, fields: Mapping[str, Any]) -> BugOut:
        return await self._request("POST", "/bugs", json=dict(fields))

    async def get_bug(self, bug_id: str) -> BugOut:
        return await self._request("GET", f"/bugs/{bug_id}")

    async def update_bug(self, bug_id: str, fields: Mapping[str, Any]) -> BugOut:
        return await self._request("PUT", f"/bugs/{bug_id}", json=dict(fields))

    async def delete_bug(self, bug_id: str) -> BugOut:
        return await self._request("DELETE", f"/bugs/{bug_id}")
