"""
Structural validation of ``pull_request`` webhook payloads.

The checks run in a fixed order and the first one that fails decides the
error code. The triggering actor is read from the top-level ``sender``
field, not from ``pull_request.user``: whoever performed the action is the
account that gets classified.
"""

import math
from dataclasses import dataclass
from typing import Any, Optional, Union

from outcome import Failure, FailureKind


@dataclass(frozen=True)
class Actor:
    login: str
    type: str
    id: int


@dataclass(frozen=True)
class InboundEvent:
    action: str
    number: int
    repository_full_name: str
    sender: Actor


def _invalid(code: str, message: str) -> Failure:
    return Failure(FailureKind.VALIDATION, code, message, 400)


def _is_object(v: Any) -> bool:
    return isinstance(v, dict)


def _is_text(v: Any) -> bool:
    return isinstance(v, str) and v != ""


def _as_integer(v: Any) -> Optional[int]:
    # bool is an int subclass; JSON true/false is not a number
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    if isinstance(v, float) and (not math.isfinite(v) or not v.is_integer()):
        return None
    return int(v)


def validate_payload(payload: Any) -> Union[InboundEvent, Failure]:
    if not _is_object(payload):
        return _invalid("INVALID_PAYLOAD_TYPE", "Webhook payload must be a valid JSON object")

    if not _is_text(payload.get("action")):
        return _invalid("MISSING_ACTION", "Webhook payload missing required field: action")

    if not _is_object(payload.get("pull_request")):
        return _invalid("MISSING_PULL_REQUEST", "Webhook payload missing required field: pull_request")

    repository = payload.get("repository")
    if not _is_object(repository):
        return _invalid("MISSING_REPOSITORY", "Webhook payload missing required field: repository")

    number = _as_integer(payload.get("number"))
    if number is None:
        return _invalid("MISSING_NUMBER", "Webhook payload missing required field: number")

    sender = payload.get("sender")
    if not _is_object(sender):
        return _invalid("MISSING_SENDER", "Webhook payload missing required field: sender")

    if not _is_text(sender.get("login")):
        return _invalid("MISSING_SENDER_LOGIN", "Sender missing required field: login")

    if not _is_text(sender.get("type")):
        return _invalid("MISSING_SENDER_TYPE", "Sender missing required field: type")

    sender_id = _as_integer(sender.get("id"))
    if sender_id is None:
        return _invalid("MISSING_SENDER_ID", "Sender missing required field: id")

    if not _is_text(repository.get("full_name")):
        return _invalid("MISSING_REPO_FULL_NAME", "Repository missing required field: full_name")

    return InboundEvent(
        action=payload["action"],
        number=number,
        repository_full_name=repository["full_name"],
        sender=Actor(login=sender["login"], type=sender["type"], id=sender_id),
    )
