"""Domain failures raised by the Engine client.

Every operation expects exactly one success status. Anything else is
reported as an ``EngineError`` carrying the received status and the raw
response body. The subclasses only refine the status for callers that want
to branch on it; catching ``EngineError`` still sees every domain failure.

Transport problems (connection refused, timeouts, websocket errors) are a
separate channel and are never wrapped here.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from docker_tenant.core.schemas import EngineResponse


class EngineError(Exception):
    """The Engine answered, but not with the expected success status."""

    def __init__(self, message: str, status: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.response = response

    @property
    def context(self) -> dict[str, Any]:
        """Structured context of the failed call."""
        return {"status": self.status, "response": self.response}

    def __str__(self) -> str:
        return f"{self.message} (status={self.status})"

    def to_json(self) -> str:
        return json.dumps({"message": self.message, **self.context}, default=str)

    @classmethod
    def from_response(cls, message: str, response: EngineResponse) -> EngineError:
        """Build the most specific error for the status in ``response``."""
        error_cls = _STATUS_ERRORS.get(response.status, UnexpectedStatus)
        return error_cls(message, status=response.status, response=response.body)


class NotFound(EngineError):
    """Container, image or exec session does not exist (404)."""


class Conflict(EngineError):
    """Name already in use or container in the wrong state (409)."""


class EngineUnavailable(EngineError):
    """Engine reported an internal error or is unavailable (500/503)."""


class UnexpectedStatus(EngineError):
    """Any other status that did not match the expected one."""


_STATUS_ERRORS: dict[int, type[EngineError]] = {
    404: NotFound,
    409: Conflict,
    500: EngineUnavailable,
    503: EngineUnavailable,
}
