from pydantic import BaseModel, ConfigDict
from typing import Any, Optional, Literal, Union


class Success(BaseModel):
    """
    A successful backend call.
    Extra envelope keys (pagination, counts from sync endpoints, ...) are kept.
    """
    model_config = ConfigDict(extra="allow")

    success: Literal[True] = True
    data: Any = None
    message: Optional[str] = None


class Failure(BaseModel):
    """A failed backend call. error is always a human-readable string."""
    model_config = ConfigDict(extra="allow")

    success: Literal[False] = False
    error: str
    data: Any = None


ServiceResult = Union[Success, Failure]


def result_from_envelope(payload: Any, fallback_error: str) -> ServiceResult:
    """
    Turn a decoded {success, data?, error?} envelope into a ServiceResult.

    Anything that is not a dict with a truthy "success" key is a Failure;
    the server's error (or message) is used when it sent one.
    """
    if isinstance(payload, dict) and payload.get("success"):
        fields = {k: v for k, v in payload.items() if k != "success"}
        if fields.get("message") is not None:
            fields["message"] = str(fields["message"])
        return Success(**fields)
    if isinstance(payload, dict):
        error = payload.get("error") or payload.get("message") or fallback_error
        extra = {k: v for k, v in payload.items() if k not in ("success", "error")}
        return Failure(error=str(error), **extra)
    return Failure(error=fallback_error)


class SyncReport(BaseModel):
    """Combined outcome of the three maintenance sync operations."""
    status_sync: ServiceResult
    prefix_sync: ServiceResult
    orphan_reset: ServiceResult

    @property
    def all_succeeded(self) -> bool:
        return all(r.success for r in (self.status_sync, self.prefix_sync, self.orphan_reset))
