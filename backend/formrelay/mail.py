"""
Mail transport configuration.
Built once at import from the process settings; None when SMTP is not configured.
"""

from typing import Optional

from formrelay.config import settings
from formrelay.services.mailer import SMTPMailTransport, create_transport

mail_transport: Optional[SMTPMailTransport] = create_transport(settings)
