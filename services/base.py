"""
Shared request plumbing for the backend services.

Service methods never raise to their callers: every failure comes back as a
Failure result carrying the server's error or a "Failed to ..." fallback.
"""
import logging
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from models.result import Failure, ServiceResult, result_from_envelope
from services.transport import ApiTransport

logger = logging.getLogger(__name__)


def to_payload(data: Any) -> dict:
    """Serialise a form model (wire aliases) or pass a plain mapping through."""
    if isinstance(data, BaseModel):
        return data.model_dump(by_alias=True, mode="json")
    return dict(data or {})


class ApiService:
    """Base for services bound to one ApiTransport."""

    def __init__(self, transport: ApiTransport) -> None:
        self.transport = transport

    def _call(
        self,
        method: str,
        path: str,
        action: str,
        *,
        empty: Any = None,
        params: Optional[dict[str, str]] = None,
        json: Any = None,
        files: Optional[dict] = None,
    ) -> ServiceResult:
        """
        Perform one request and wrap the outcome.

        action completes the fallback message ("Failed to <action>");
        empty is the data placed on a Failure ([] for list reads).
        """
        fallback = f"Failed to {action}"
        try:
            payload = self.transport.request(method, path, params=params, json=json, files=files)
        except Exception as e:
            logger.error("Error trying to %s: %s", action, e)
            return Failure(error=str(e) or fallback, data=empty)

        try:
            result = result_from_envelope(payload, fallback)
        except ValidationError as e:
            logger.error("Malformed response while trying to %s: %s", action, e)
            return Failure(error=fallback, data=empty)
        if not result.success:
            logger.error("Backend refused to %s: %s", action, result.error)
            if result.data is None:
                result.data = empty
        return result
