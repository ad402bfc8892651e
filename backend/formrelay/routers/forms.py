"""
Form submission router.

Both endpoints share one handler; they differ only in their RouteConfig.

Endpoints:
  POST /lead   : inline lead form   (required: name, contact; honeypot: hp_inline)
  POST /quote  : quote request page (required: name, email;   honeypot: hp_page)

Bodies may be JSON or URL-encoded/multipart form data. Responses always use
the {ok, message} shape:

  200  {"ok": true,  "message": "Received"}
  400  {"ok": false, "message": "Spam detected"}
  400  {"ok": false, "message": "Missing fields", "missing": [...]}
  500  {"ok": false, "message": "Server error"}

A 200 is returned whether or not the notification email was delivered.
"""

import json
import logging
from typing import Any, Mapping

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from formrelay.config import settings
from formrelay.mail import mail_transport
from formrelay.models.submission import DispatchOutcome, OutboundMessage, RouteConfig
from formrelay.services.intake import (
    SubmissionFields,
    coerce_fields,
    compose_message,
    is_spam,
    missing_fields,
    normalize_fields,
)
from formrelay.services.mailer import dispatch, format_sender

logger = logging.getLogger(__name__)

router = APIRouter()

# ---------------------------------------------------------------------------
# Route configuration
# ---------------------------------------------------------------------------

LEAD_ROUTE = RouteConfig(
    required=("name", "contact"),
    honeypot="hp_inline",
    subject_prefix="Lead form",
)

QUOTE_ROUTE = RouteConfig(
    required=("name", "email"),
    honeypot="hp_page",
    subject_prefix="Quote request",
)

_FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _reply(status_code: int, ok: bool, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": ok, "message": message, **extra},
    )


async def read_submission_fields(request: Request) -> dict[str, str]:
    """
    Parse the request body into SubmissionFields.

    An empty body, or one with an unrecognised content type, yields no
    fields (and therefore a "Missing fields" response).

    Raises:
        ValueError: if a JSON body is malformed or is not an object.
    """
    content_type = request.headers.get("content-type", "").lower()

    raw: Mapping[str, Any]
    if "json" in content_type:
        body = await request.body()
        if not body.strip():
            return {}
        raw = json.loads(body)
        if not isinstance(raw, dict):
            raise ValueError(f"Expected a JSON object, got {type(raw).__name__}")
    elif content_type.startswith(_FORM_CONTENT_TYPES):
        raw = await request.form()
    else:
        return {}

    return coerce_fields(raw)


def _log_dispatch_outcome(outcome: DispatchOutcome, message: OutboundMessage) -> None:
    if outcome.status == "sent":
        logger.info(f"Submission emailed to {message.recipient}: {message.subject}")
    elif outcome.status == "failed":
        logger.error(f"Mail send failed: {outcome.error}")
    else:
        logger.info(f"Email not sent (no SMTP configured). Payload:\n{message.body}")


async def handle_form(fields: SubmissionFields, route: RouteConfig) -> JSONResponse:
    """
    Run one submission through spam check, validation, composition and dispatch.

    Delivery uses the process-wide mail_transport. Its outcome is logged and
    never changes the response.
    """
    if is_spam(fields, route):
        logger.info(f"Honeypot '{route.honeypot}' filled, rejecting submission")
        return _reply(400, False, "Spam detected")

    missing = missing_fields(fields, route)
    if missing:
        return _reply(400, False, "Missing fields", missing=missing)

    payload = normalize_fields(fields)
    message = compose_message(
        payload,
        route,
        recipient=settings.to_email,
        sender=format_sender(settings),
    )

    outcome = await dispatch(message, mail_transport, timeout=settings.smtp_timeout)
    _log_dispatch_outcome(outcome, message)

    return _reply(200, True, "Received")


async def _handle(request: Request, route: RouteConfig) -> JSONResponse:
    try:
        fields = await read_submission_fields(request)
        return await handle_form(fields, route)
    except Exception:
        logger.exception(f"Unhandled error processing {request.url.path}")
        return _reply(500, False, "Server error")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/lead")
async def submit_lead(request: Request) -> JSONResponse:
    return await _handle(request, LEAD_ROUTE)


@router.post("/quote")
async def submit_quote(request: Request) -> JSONResponse:
    return await _handle(request, QUOTE_ROUTE)
