#!/usr/bin/env python3
"""
Dev helper: send a sample form submission to the local form relay backend.

Builds a lead or quote submission and POST-s it to /api/lead or /api/quote,
as JSON (default) or URL-encoded like a plain HTML form.

Usage
-----
# Basic: lead form, JSON body, targeting localhost:10000
python scripts/send_test_submission.py

# Quote form with a selected service
python scripts/send_test_submission.py --form quote --service "Web design"

# Send as an HTML form would (application/x-www-form-urlencoded)
python scripts/send_test_submission.py --form-encoded

# Fill the honeypot to check spam rejection
python scripts/send_test_submission.py --spam

# Target a different backend URL
python scripts/send_test_submission.py --url https://forms.example.com

Environment / .env
------------------
PORT   Used for the default --url (default: 10000).
"""

import argparse
import json
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

def _build_lead_payload(name: str, contact: str, message: str, service: str, spam: bool) -> dict:
    """Lead form keys: name, contact, message, selected_service, hp_inline."""
    return {
        "name": name,
        "contact": contact,
        "message": message,
        "selected_service": service,
        "hp_inline": "http://spam.example" if spam else "",
    }


def _build_quote_payload(name: str, contact: str, message: str, service: str, spam: bool) -> dict:
    """Quote form keys: name, email, project, selected_service, hp_page."""
    return {
        "name": name,
        "email": contact,
        "project": message,
        "selected_service": service,
        "hp_page": "http://spam.example" if spam else "",
    }


_PAYLOAD_BUILDERS = {
    "lead": _build_lead_payload,
    "quote": _build_quote_payload,
}


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        print(json.dumps(response.json(), indent=2))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    # scripts/ lives one level below the project root
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_submission.py",
        description="Send a sample lead or quote submission to the form relay backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_submission.py
              python scripts/send_test_submission.py --form quote --service SEO
              python scripts/send_test_submission.py --form-encoded
              python scripts/send_test_submission.py --spam
        """),
    )
    parser.add_argument(
        "--url",
        default=f"http://localhost:{os.getenv('PORT', '10000')}",
        help="Backend base URL (default: http://localhost:$PORT)",
    )
    parser.add_argument(
        "--form",
        default="lead",
        choices=list(_PAYLOAD_BUILDERS),
        help="Which form to submit (default: lead)",
    )
    parser.add_argument("--name", default="Test User", help='Submitter name (default: "Test User")')
    parser.add_argument(
        "--contact",
        default="test@example.com",
        help="Contact / email value (default: test@example.com)",
    )
    parser.add_argument(
        "--message",
        default="This is a test submission.",
        help="Message / project text",
    )
    parser.add_argument("--service", default="", help="selected_service value (default: empty)")
    parser.add_argument("--spam", action="store_true", help="Fill the honeypot field.")
    parser.add_argument(
        "--form-encoded",
        action="store_true",
        help="Send application/x-www-form-urlencoded instead of JSON.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload without sending it.",
    )

    args = parser.parse_args()

    builder = _PAYLOAD_BUILDERS[args.form]
    payload = builder(
        name=args.name,
        contact=args.contact,
        message=args.message,
        service=args.service,
        spam=args.spam,
    )

    endpoint = f"{args.url.rstrip('/')}/api/{args.form}"

    print(f"Form     : {args.form}")
    print(f"Endpoint : {endpoint}")
    print(f"Encoding : {'form' if args.form_encoded else 'json'}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2))
        return 0

    try:
        if args.form_encoded:
            response = httpx.post(endpoint, data=payload, timeout=30.0)
        else:
            response = httpx.post(endpoint, json=payload, timeout=30.0)
    except httpx.HTTPError as exc:
        print(f"ERROR: Request failed: {exc}", file=sys.stderr)
        return 1

    _print_response(response)
    return 0 if response.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
