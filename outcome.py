"""Outcome records and the JSON envelopes returned to the webhook caller.

Every pipeline stage hands back either its value or a ``Failure``. The
orchestrator renders the first failure it sees with ``error_response`` and
everything else with ``success_response``.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from fastapi.responses import JSONResponse


class FailureKind(str, Enum):
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UPSTREAM = "upstream"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    code: str
    message: str
    status: int = 500


def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_body(code: str, message: str) -> Dict[str, Any]:
    return {"error": code, "message": message, "timestamp": utc_timestamp()}


def error_response(failure: Failure) -> JSONResponse:
    return JSONResponse(status_code=failure.status, content=error_body(failure.code, failure.message))


def success_response(message: str = "Success") -> JSONResponse:
    return JSONResponse(
        status_code=200,
        content={"success": True, "message": message, "timestamp": utc_timestamp()},
    )


INTERNAL_ERROR = Failure(
    FailureKind.UNEXPECTED,
    "INTERNAL_ERROR",
    "An unexpected error occurred while processing the webhook",
    500,
)
