"""
Pydantic models for form submissions.

Models:
  RouteConfig        : per-route parameters (required fields, honeypot, subject)
  NormalizedPayload  : submission fields after the email/contact and
                       message/project fallbacks
  OutboundMessage    : the email composed from a NormalizedPayload
  DispatchOutcome    : result of one best-effort delivery attempt
"""

from typing import Literal, Optional
from pydantic import BaseModel


class RouteConfig(BaseModel):
    """
    Fixed configuration for one form endpoint.

    required is a tuple so the "missing" list in a 400 response follows
    declaration order.
    """

    model_config = {"frozen": True}

    required: tuple[str, ...]
    honeypot: str
    subject_prefix: str


class NormalizedPayload(BaseModel):
    """Submission values with every field defaulted to an empty string."""

    model_config = {"frozen": True}

    name: str = ""
    contact: str = ""
    message: str = ""
    selected_service: str = ""


class OutboundMessage(BaseModel):
    """A composed plain-text email, ready for the mail transport."""

    model_config = {"frozen": True}

    subject: str
    body: str
    recipient: str
    sender: str


class DispatchOutcome(BaseModel):
    """
    What happened to a delivery attempt.

    status:
      sent          : the transport accepted the message
      failed        : the transport raised or timed out; error holds the reason
      unconfigured  : no transport exists, nothing was attempted
    """

    model_config = {"frozen": True}

    status: Literal["sent", "failed", "unconfigured"]
    error: Optional[str] = None
