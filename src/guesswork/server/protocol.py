"""JSON-lines messages exchanged with a front end over stdio.

A request is ``{"id", "method", "params"}``; every request gets exactly one
response carrying either ``result`` or ``error`` (plus ``errorType``, the
exception class name, so clients can tell a bad argument from a guess sent
in the wrong phase). Notifications have no id and are never answered.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Optional


def _line(payload: dict) -> str:
    return json.dumps(payload, separators=(",", ":")) + "\n"


@dataclass
class Request:
    id: int
    method: str
    params: dict = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> Request:
        return cls(
            id=data["id"],
            method=data["method"],
            params=data.get("params") or {},
        )

    @classmethod
    def from_json_line(cls, line: str) -> Request:
        """Parse one protocol line; malformed input raises ValueError."""
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}") from e
        if not isinstance(data, dict) or not isinstance(data.get("method"), str):
            raise ValueError("Request must be an object with a string 'method'")
        if not isinstance(data.get("params") or {}, dict):
            raise ValueError("'params' must be an object")
        data.setdefault("id", 0)
        return cls.from_dict(data)


@dataclass
class Response:
    id: int
    result: Optional[dict] = None
    error: Optional[str] = None
    error_type: Optional[str] = None

    @classmethod
    def failure(cls, id: int, exc: Exception) -> Response:
        return cls(id=id, error=str(exc), error_type=type(exc).__name__)

    def to_json_line(self) -> str:
        if self.error is None:
            return _line({"id": self.id, "result": self.result})
        payload = {"id": self.id, "error": self.error}
        if self.error_type:
            payload["errorType"] = self.error_type
        return _line(payload)


@dataclass
class Notification:
    method: str
    params: dict = field(default_factory=dict)

    @classmethod
    def level_complete(cls, result: dict, metrics: dict, next_level: Optional[dict]) -> Notification:
        return cls("levelComplete", {"result": result, "metrics": metrics, "nextLevel": next_level})

    def to_json_line(self) -> str:
        return _line({"method": self.method, "params": self.params})
