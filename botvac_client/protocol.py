"""Request signing and envelope handling for the robot command API.

Every robot request is a JSON POST to the robot's messages endpoint:

    {"reqId": "<n>", "cmd": "<command>", "params": {...}}

and is authenticated with an HMAC-SHA256 over

    "<serial in lower case>\\n<RFC 1123 date>\\n<request body>"

keyed with the robot's secret, sent hex-encoded as
``Authorization: NEATOAPP <digest>`` alongside the same date in ``X-Date``.
"""

from __future__ import annotations

import hashlib
import hmac
import json
from collections.abc import Mapping
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any

from .const import NUCLEO_ACCEPT, NUCLEO_AUTH_SCHEME
from .exceptions import ProtocolError


def http_date(now: datetime | None = None) -> str:
    """Return an RFC 1123 date, e.g. 'Mon, 19 Oct 2026 08:00:00 GMT'."""
    if now is None:
        now = datetime.now(timezone.utc)
    return format_datetime(now.astimezone(timezone.utc), usegmt=True)


def build_request(
    req_id: int, command: str, params: Mapping[str, Any] | None = None
) -> str:
    """Serialize a robot request body.

    The exact string returned is what gets signed and sent.
    """
    body: dict[str, Any] = {"reqId": str(req_id), "cmd": command}
    if params:
        body["params"] = dict(params)
    return json.dumps(body, separators=(",", ":"))


def sign_request(serial: str, secret: str, date: str, body: str) -> str:
    """Return the hex HMAC-SHA256 signature of a robot request."""
    message = f"{serial.lower()}\n{date}\n{body}"
    return hmac.new(
        secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def build_headers(serial: str, secret: str, body: str, date: str | None = None) -> dict[str, str]:
    """Build the signed headers for a robot request."""
    if date is None:
        date = http_date()
    signature = sign_request(serial, secret, date, body)
    return {
        "Accept": NUCLEO_ACCEPT,
        "Content-Type": "application/json",
        "Date": date,
        "X-Date": date,
        "Authorization": f"{NUCLEO_AUTH_SCHEME} {signature}",
    }


def decode_json(text: str) -> Any:
    """Decode a response body.

    Raises:
        ProtocolError: If the body is not valid JSON.
    """
    try:
        return json.loads(text)
    except ValueError as err:
        raise ProtocolError(f"Response is not valid JSON: {text[:200]!r}") from err


def parse_response(text: str) -> dict[str, Any]:
    """Decode a response body into a JSON object.

    Raises:
        ProtocolError: If the body is not a JSON object.
    """
    payload = decode_json(text)
    if not isinstance(payload, dict):
        raise ProtocolError(f"Response is not a JSON object: {text[:200]!r}")
    return payload
