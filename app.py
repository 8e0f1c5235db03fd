"""
PR REVIEW TRIGGER WEBHOOK
=========================
A tiny web service (FastAPI) that listens for GitHub ``pull_request``
webhooks on "/webhook". For each delivery it:
  1) Accepts only POST with a JSON Content-Type.
  2) Parses the body and checks that the fields we rely on are present.
  3) Ignores every action except "opened" (edits, pushes, label changes...
     would otherwise spam the PR).
  4) Looks at the *sender* (whoever performed the action). Only bot accounts
     get a comment; humans are left alone.
  5) Posts one comment whose lines each wake up an AI review integration.

Every outcome, good or bad, is returned as a small JSON envelope with a
timestamp. Diagnostic detail (payloads, GitHub responses, tracebacks) goes to
the log only.

There is also a "/health" endpoint for quick health checks.

Notes:
- GITHUB_TOKEN must be set (env var or a local .env file) with permission to
  comment on the target repositories. Its absence only fails deliveries that
  would actually post a comment.
- Webhook signatures are not verified here.
"""

import os
import json
import time
import logging
from typing import Any, Dict, Union

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from dotenv import load_dotenv
load_dotenv(dotenv_path=".env")  # Load variables from .env if present (handy for local dev)

from bots import is_automated
from config import github_token, load_settings, log_payloads_enabled
from github_client import GitHubClient
from outcome import INTERNAL_ERROR, Failure, FailureKind, error_response, success_response
from payload import validate_payload
from review_comment import ReviewCommentService

# ---------------- App / Logging ----------------
app = FastAPI(title="PR Review Trigger Webhook", version="1.0.0")
log = logging.getLogger("webhook")
logging.basicConfig(level=os.getenv("LOGLEVEL", "INFO"))
BOOT_TS = time.time()

ALLOWED_ACTIONS = {"opened"}
WEBHOOK_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
_REDACTED_HEADERS = {"authorization", "cookie", "x-hub-signature", "x-hub-signature-256"}

# ---------------- Helpers ----------------

def _bad_request(code: str, message: str, status: int = 400) -> Failure:
    return Failure(FailureKind.VALIDATION, code, message, status)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant {name}")


def _parse_body(body: bytes) -> Union[Any, Failure]:
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        log.warning("payload parsing error: %s", e)
        return _bad_request("INVALID_JSON", "Failed to parse webhook payload as JSON: body is not valid UTF-8")
    if not text.strip():
        log.warning("payload parsing error: empty body")
        return _bad_request("EMPTY_PAYLOAD", "Request body is empty")
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        log.warning("payload parsing error: %s", e)
        return _bad_request("INVALID_JSON", f"Failed to parse webhook payload as JSON: {e}")


def _safe_headers(request: Request) -> Dict[str, str]:
    return {k: ("<redacted>" if k.lower() in _REDACTED_HEADERS else v) for k, v in request.headers.items()}


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException):
    # routing-level 405s (TRACE, WebDAV verbs...) never reach the webhook handler
    if exc.status_code == 405:
        resp = error_response(_bad_request("METHOD_NOT_ALLOWED", "Only POST requests are supported", 405))
        resp.headers.update(exc.headers or {})
        return resp
    return await http_exception_handler(request, exc)

# ---------------- Startup / Health ----------------

@app.on_event("startup")
def _startup_log_routes() -> None:
    try:
        from starlette.routing import Route
        for r in app.router.routes:
            if isinstance(r, Route):
                log.info("route registered: %s methods=%s", r.path, sorted(r.methods or []))
        log.info("github token configured: %s", bool(github_token()))
    except Exception as e:
        log.warning("startup route logging failed: %s", e)


@app.get("/health", include_in_schema=False)
def health() -> Dict[str, Any]:
    return {
        "ok": True,
        "service": "pr-review-trigger",
        "uptime_s": int(time.time() - BOOT_TS),
        "has_token": bool(github_token()),
    }

# ---------------- Webhook ----------------

async def _process(request: Request) -> JSONResponse:
    if request.method != "POST":
        return error_response(_bad_request("METHOD_NOT_ALLOWED", "Only POST requests are supported", 405))

    content_type = request.headers.get("content-type") or ""
    if "application/json" not in content_type.lower():
        return error_response(_bad_request("INVALID_CONTENT_TYPE", "Content-Type must be application/json"))

    body: bytes = await request.body()
    log.info("delivery=%s event=%s len=%d",
             request.headers.get("x-github-delivery"), request.headers.get("x-github-event"), len(body))

    payload = _parse_body(body)
    if isinstance(payload, Failure):
        return error_response(payload)

    event = validate_payload(payload)
    if isinstance(event, Failure):
        log.warning("payload validation error code=%s: %s", event.code, event.message)
        if log_payloads_enabled():
            log.warning("rejected payload: %s", json.dumps(payload, indent=2, default=str))
        return error_response(event)

    if event.action not in ALLOWED_ACTIONS:
        log.info("ignoring action=%s pr=%s repo=%s", event.action, event.number, event.repository_full_name)
        return success_response(f"Action '{event.action}' is not in the allow-list. No review comment posted.")

    if not is_automated(event.sender):
        log.info("sender %s (type=%s) is not a bot; pr=%s repo=%s",
                 event.sender.login, event.sender.type, event.number, event.repository_full_name)
        return success_response(f"Sender '{event.sender.login}' is not a bot. No review comment posted.")

    client = GitHubClient.create(load_settings())
    if isinstance(client, Failure):
        log.error("configuration error: %s", client.message)
        return error_response(client)

    service = ReviewCommentService(client)
    failure = await run_in_threadpool(service.post_review_comment, event.repository_full_name, event.number)
    if failure is not None:
        log.error("comment posting error repo=%s pr=%s code=%s: %s",
                  event.repository_full_name, event.number, failure.code, failure.message)
        return error_response(failure)

    return success_response(
        f"Review comment posted successfully for PR #{event.number} by {event.sender.login}"
    )


@app.api_route("/webhook", methods=WEBHOOK_METHODS)
async def webhook(request: Request) -> JSONResponse:
    try:
        return await _process(request)
    except Exception:
        log.exception("webhook handler error method=%s url=%s headers=%s",
                      request.method, request.url, _safe_headers(request))
        return error_response(INTERNAL_ERROR)
