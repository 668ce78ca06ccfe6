"""Uniform JSON response envelope used by every endpoint."""

from __future__ import annotations

from typing import Any

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ResponseEntity(BaseModel):
    success: bool = True
    status_code: int = 200
    message: str = "Success"
    data: Any = None

    @classmethod
    def of(cls, status_code: int, message: str, data: Any = None) -> ResponseEntity:
        """Build an envelope; ``success`` follows the 2xx range of *status_code*."""
        return cls(
            success=200 <= status_code < 300,
            status_code=status_code,
            message=message,
            data=data,
        )


def envelope(status_code: int, message: str, data: Any = None) -> JSONResponse:
    """Return a ``JSONResponse`` carrying a :class:`ResponseEntity` body."""
    body = ResponseEntity.of(status_code, message, data)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
