"""Types exchanged over the agent API."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any

__all__ = [
    "AgentConfig",
    "ResponseStatus",
    "HttpResponse",
    "ApiResponse",
    "CraterToken",
]


def _serialize(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {key: _serialize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(item) for item in value]
    return value


@dataclass(frozen=True)
class AgentConfig:
    """The configuration handed to an agent."""

    agent_name: str
    crater_config: Any

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent-name": self.agent_name,
            "crater-config": _serialize(self.crater_config),
        }


class ResponseStatus(Enum):
    """Outcome tag of an API response."""

    SUCCESS = "success"
    INTERNAL_ERROR = "internal-error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not-found"


_HTTP_STATUS = {
    ResponseStatus.SUCCESS: HTTPStatus.OK,
    ResponseStatus.INTERNAL_ERROR: HTTPStatus.INTERNAL_SERVER_ERROR,
    ResponseStatus.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ResponseStatus.NOT_FOUND: HTTPStatus.NOT_FOUND,
}


@dataclass(frozen=True)
class HttpResponse:
    """A ready-to-send HTTP response."""

    status: HTTPStatus
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ApiResponse:
    """A response of the agent API, tagged by its status."""

    status: ResponseStatus
    result: Any = None
    error: str | None = None

    @classmethod
    def success(cls, result: Any) -> ApiResponse:
        return cls(ResponseStatus.SUCCESS, result=result)

    @classmethod
    def internal_error(cls, error: str) -> ApiResponse:
        return cls(ResponseStatus.INTERNAL_ERROR, error=error)

    @classmethod
    def unauthorized(cls) -> ApiResponse:
        return cls(ResponseStatus.UNAUTHORIZED)

    @classmethod
    def not_found(cls) -> ApiResponse:
        return cls(ResponseStatus.NOT_FOUND)

    def status_code(self) -> HTTPStatus:
        """Return the HTTP status matching this response."""
        return _HTTP_STATUS[self.status]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"status": self.status.value}
        if self.status is ResponseStatus.SUCCESS:
            data["result"] = _serialize(self.result)
        elif self.status is ResponseStatus.INTERNAL_ERROR:
            data["error"] = self.error
        return data

    def into_response(self) -> HttpResponse:
        """Serialise to a JSON HTTP response."""
        body = json.dumps(self.to_dict(), separators=(",", ":")).encode("utf-8")
        return HttpResponse(
            status=self.status_code(),
            body=body,
            headers={"Content-Type": "application/json"},
        )


@dataclass(frozen=True)
class CraterToken:
    """An API token, shown in the form used by the Authorization header."""

    token: str

    @classmethod
    def parse(cls, text: str) -> CraterToken:
        return cls(token=text)

    def __str__(self) -> str:
        return f"CraterToken {self.token}"