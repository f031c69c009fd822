"""
Response Envelope
Uniform JSON wrapper for every API response.

    success: {"success": true,  "data": ..., "count"?: n}
    failure: {"success": false, "error": "...", "fields"?: {field: message}}
"""
from typing import Any, Optional

from pydantic import BaseModel


class SuccessEnvelope(BaseModel):
    success: bool = True
    data: Any = None
    count: Optional[int] = None


class ErrorEnvelope(BaseModel):
    success: bool = False
    error: str
    fields: Optional[dict[str, str]] = None


def success_body(data: Any, count: Optional[int] = None) -> dict[str, Any]:
    return SuccessEnvelope(data=data, count=count).model_dump(exclude_none=True)


def error_body(message: str, fields: Optional[dict[str, str]] = None) -> dict[str, Any]:
    return ErrorEnvelope(error=message, fields=fields or None).model_dump(exclude_none=True)
