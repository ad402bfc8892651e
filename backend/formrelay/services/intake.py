"""
Form intake steps.

Pure functions shared by every form route. The router calls them in order:

  is_spam          -> 400 "Spam detected"
  missing_fields   -> 400 "Missing fields"
  normalize_fields -> NormalizedPayload
  compose_message  -> OutboundMessage

None of these touch the network or the mail transport.
"""

from typing import Any, Mapping, Optional

from formrelay.models.submission import NormalizedPayload, OutboundMessage, RouteConfig

SubmissionFields = Mapping[str, str]

# Fallback chains used by normalize_fields; the first non-empty value wins.
_CONTACT_KEYS = ("email", "contact")
_MESSAGE_KEYS = ("message", "project")


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def coerce_fields(raw: Mapping[str, Any]) -> dict[str, str]:
    """
    Turn a parsed request body into SubmissionFields.

    JSON bodies can carry numbers or booleans; they are converted to str so
    the trimming checks below behave the same as for form-encoded bodies.
    Empty non-string values (null, false, 0) are dropped so they count as
    absent, like a blank string.
    """
    fields: dict[str, str] = {}
    for key, value in raw.items():
        if not isinstance(value, str) and not value:
            continue
        fields[str(key)] = value if isinstance(value, str) else str(value)
    return fields


def is_spam(fields: SubmissionFields, route: RouteConfig) -> bool:
    """True when the route's honeypot field holds anything but whitespace."""
    return not _is_blank(fields.get(route.honeypot))


def missing_fields(fields: SubmissionFields, route: RouteConfig) -> list[str]:
    """
    Return every required field that is absent or blank, in required order.

    The check reads the raw field names only. For the lead route an "email"
    value does not satisfy a missing "contact".
    """
    return [key for key in route.required if _is_blank(fields.get(key))]


def _first_present(fields: SubmissionFields, keys: tuple[str, ...]) -> str:
    for key in keys:
        value = fields.get(key)
        if value:
            return value
    return ""


def normalize_fields(fields: SubmissionFields) -> NormalizedPayload:
    return NormalizedPayload(
        name=fields.get("name") or "",
        contact=_first_present(fields, _CONTACT_KEYS),
        message=_first_present(fields, _MESSAGE_KEYS),
        selected_service=fields.get("selected_service") or "",
    )


def build_subject(payload: NormalizedPayload, route: RouteConfig) -> str:
    """
    Examples:
        "Lead form"                       (no service selected)
        "Quote request — Web development" (service selected)
    """
    if payload.selected_service:
        return f"{route.subject_prefix} — {payload.selected_service}"
    return route.subject_prefix


def build_body(payload: NormalizedPayload) -> str:
    return (
        "New submission\n\n"
        f"Name: {payload.name}\n"
        f"Contact: {payload.contact}\n"
        f"Service: {payload.selected_service}\n\n"
        "Message:\n"
        f"{payload.message}"
    )


def compose_message(
    payload: NormalizedPayload,
    route: RouteConfig,
    recipient: str,
    sender: str,
) -> OutboundMessage:
    """
    Compose the notification email for a normalized submission.

    Args:
        payload:   Normalized submission values.
        route:     Route the submission arrived on (supplies the subject prefix).
        recipient: Fixed delivery address.
        sender:    From header value, already formatted with a display name.
    """
    return OutboundMessage(
        subject=build_subject(payload, route),
        body=build_body(payload),
        recipient=recipient,
        sender=sender,
    )
