"""
Response envelopes shared by every handler.

Success: {"status": "success", "data": ..., "timestamp": <epoch ms>}
Failure: {"status": "failure", "message": ..., "error": {"code", "details"},
          "timestamp": <epoch ms>}

`timestamp` is captured once when a request starts (`now_millis()`) and
passed in, so every envelope for a request carries the same value.
"""

import time
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def now_millis() -> int:
    return int(time.time() * 1000)


def success(status_code: int, data: Any, timestamp: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(
            {"status": "success", "data": data, "timestamp": timestamp}
        ),
    )


def failure(status_code: int, message: str, details: str, timestamp: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "failure",
            "message": message,
            "error": {"code": status_code, "details": details},
            "timestamp": timestamp,
        },
    )


def method_not_allowed(allowed: str, timestamp: int) -> JSONResponse:
    return failure(
        405, "Method Not Allowed", f"Only {allowed} requests are allowed", timestamp
    )


def raw(status_code: int, content: Any) -> JSONResponse:
    """Un-enveloped body, used where clients expect a bare payload."""

    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))
