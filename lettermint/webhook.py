"""
Webhook signature verification

Lettermint signs every webhook delivery with

    X-Lettermint-Signature: t=<unix-seconds>,v1=<hex hmac-sha256>

where the HMAC is keyed by the endpoint's signing secret and computed over
``b"<t>." + raw_body``. The same timestamp is repeated in the
X-Lettermint-Delivery header.

Verification order matters: the tolerance check rejects stale requests before
the HMAC is computed, and the body is only parsed once the signature has been
proven, so a WebhookEvent is never built from unauthenticated data.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import time
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import httpx
from pydantic import ValidationError

from .config import get_settings
from .exceptions import (
    LettermintError,
    TransportError,
    WebhookPayloadError,
    WebhookSignatureError,
    WebhookTimestampExpiredError,
)
from .logger import logger
from .models import WebhookEvent

HEADER_SIGNATURE = "X-Lettermint-Signature"
HEADER_DELIVERY = "X-Lettermint-Delivery"

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1

Tolerance = Union[timedelta, int, float]
Payload = Union[bytes, bytearray, memoryview, str]


def _current_timestamp() -> int:
    return int(time.time())


def _parse_int(value: str) -> Optional[int]:
    """Strict base-10 int64 parse; None when value is not one."""
    if not _INT_RE.fullmatch(value):
        return None
    number = int(value)
    if number < _INT64_MIN or number > _INT64_MAX:
        return None
    return number


def _as_bytes(payload: Payload) -> bytes:
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return bytes(payload)


def _as_timedelta(tolerance: Optional[Tolerance]) -> timedelta:
    if tolerance is None:
        return get_settings().webhook_tolerance_delta
    if isinstance(tolerance, timedelta):
        return tolerance
    return timedelta(seconds=tolerance)


def _rejected(exc: LettermintError) -> LettermintError:
    logger.bind(security_event=True).warning(
        f"Webhook rejected ({exc.kind.value}): {exc.message}"
    )
    return exc


def secure_compare(a: str, b: str) -> bool:
    """
    Constant-time string comparison.

    Strings of different length compare unequal; for equal lengths the
    running time does not depend on where the first differing byte is.
    """
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def parse_signature(signature: str) -> Tuple[int, str]:
    """
    Parse a ``t=<timestamp>,v1=<hash>`` signature header.

    Keys may appear in any order and unknown keys are ignored.

    Returns:
        (timestamp, hash)

    Raises:
        WebhookSignatureError: if the header is malformed
    """
    parts = signature.split(",")
    if len(parts) < 2:
        raise WebhookSignatureError("invalid signature format, expected t={timestamp},v1={hash}")

    timestamp = 0
    sig_hash = ""
    for part in parts:
        if "=" not in part:
            continue
        key, value = part.split("=", 1)
        key = key.strip()
        value = value.strip()

        if key == "t":
            parsed = _parse_int(value)
            if parsed is None:
                raise WebhookSignatureError("invalid timestamp in signature")
            timestamp = parsed
        elif key == "v1":
            sig_hash = value

    if timestamp == 0:
        raise WebhookSignatureError("missing timestamp (t=) in signature")
    if not sig_hash:
        raise WebhookSignatureError("missing hash (v1=) in signature")

    return timestamp, sig_hash


def compute_signature(payload: Payload, signing_secret: str, timestamp: int) -> str:
    """Hex HMAC-SHA256 of ``<timestamp>.<payload>`` keyed by the secret."""
    msg = str(timestamp).encode() + b"." + _as_bytes(payload)
    return hmac.new(signing_secret.encode("utf-8"), msg=msg, digestmod=hashlib.sha256).hexdigest()


def sign_webhook(payload: Payload, signing_secret: str, timestamp: Optional[int] = None) -> str:
    """Build the X-Lettermint-Signature value for a payload."""
    ts = _current_timestamp() if timestamp is None else timestamp
    return f"t={ts},v1={compute_signature(payload, signing_secret, ts)}"


def build_webhook_headers(
    payload: Payload,
    signing_secret: str,
    timestamp: Optional[int] = None,
) -> Dict[str, str]:
    """Headers Lettermint would attach to a delivery of ``payload``."""
    ts = _current_timestamp() if timestamp is None else timestamp
    return {
        "Content-Type": "application/json",
        HEADER_SIGNATURE: sign_webhook(payload, signing_secret, ts),
        HEADER_DELIVERY: str(ts),
    }


def verify_webhook(
    signature: str,
    payload: Payload,
    signing_secret: Optional[str] = None,
    delivery_timestamp: Optional[int] = None,
    tolerance: Optional[Tolerance] = None,
) -> WebhookEvent:
    """
    Verify a webhook signature and return the parsed event.

    Args:
        signature: X-Lettermint-Signature header value
        payload: Raw request body, exactly as received
        signing_secret: Endpoint signing secret (LETTERMINT_WEBHOOK_SECRET if None)
        delivery_timestamp: X-Lettermint-Delivery value; None or 0 skips the cross-check
        tolerance: Maximum age of the signature timestamp, as a timedelta or
            seconds (LETTERMINT_WEBHOOK_TOLERANCE, default 5 minutes, if None)

    Returns:
        WebhookEvent with raw_payload set to the original body

    Raises:
        WebhookSignatureError: the sender could not be authenticated
        WebhookTimestampExpiredError: signature timestamp outside the tolerance window
        WebhookPayloadError: authentic request whose body is not a valid event
    """
    if signing_secret is None:
        configured = get_settings().webhook_secret
        signing_secret = configured.get_secret_value() if configured else ""
    if not signing_secret:
        raise _rejected(WebhookSignatureError("signing secret is required"))
    if not signature:
        raise _rejected(WebhookSignatureError("signature is required"))
    window = _as_timedelta(tolerance)
    body = _as_bytes(payload)

    try:
        sig_timestamp, sig_hash = parse_signature(signature)
    except WebhookSignatureError as exc:
        raise _rejected(exc)

    if delivery_timestamp and delivery_timestamp != sig_timestamp:
        raise _rejected(WebhookSignatureError("timestamp mismatch between signature and delivery headers"))

    # Future and past timestamps are judged on the absolute difference.
    age = abs(_current_timestamp() - sig_timestamp)
    if age > window.total_seconds():
        raise _rejected(WebhookTimestampExpiredError(sig_timestamp, age, window))

    expected = compute_signature(body, signing_secret, sig_timestamp)
    if not secure_compare(sig_hash, expected):
        raise _rejected(WebhookSignatureError("signature verification failed"))

    try:
        event = WebhookEvent.model_validate_json(body)
    except ValidationError as exc:
        logger.error(f"Authenticated webhook has an unparseable body: {exc.error_count()} error(s)")
        raise WebhookPayloadError(str(exc)) from exc

    event.raw_payload = body
    logger.debug(f"Verified webhook {event.id} ({event.event})")
    return event


def _signature_headers(headers: httpx.Headers) -> Tuple[str, int]:
    signature = headers.get(HEADER_SIGNATURE, "")
    if not signature:
        raise _rejected(WebhookSignatureError(f"missing {HEADER_SIGNATURE} header"))

    delivery_timestamp = 0
    delivery_header = headers.get(HEADER_DELIVERY, "")
    if delivery_header:
        parsed = _parse_int(delivery_header)
        if parsed is None:
            raise _rejected(WebhookSignatureError(f"invalid {HEADER_DELIVERY} header value"))
        delivery_timestamp = parsed

    return signature, delivery_timestamp


def verify_webhook_from_request(
    headers: Union[Mapping[str, str], httpx.Headers],
    body: Any,
    signing_secret: Optional[str] = None,
    tolerance: Optional[Tolerance] = None,
) -> WebhookEvent:
    """
    Verify a webhook from request headers and body.

    Header names are matched case-insensitively. ``body`` may be bytes, str
    or a readable file-like object (e.g. a WSGI ``wsgi.input`` stream), which
    is read to the end.

    Raises:
        TransportError: the body could not be read
        (plus everything verify_webhook raises)
    """
    signature, delivery_timestamp = _signature_headers(httpx.Headers(headers))

    if hasattr(body, "read"):
        try:
            body = body.read()
        except OSError as exc:
            raise TransportError(f"failed to read request body: {exc}") from exc

    return verify_webhook(signature, body, signing_secret, delivery_timestamp, tolerance)


async def verify_webhook_from_asgi_request(
    request: Any,
    signing_secret: Optional[str] = None,
    tolerance: Optional[Tolerance] = None,
) -> WebhookEvent:
    """
    Verify a webhook from a Starlette/FastAPI ``Request``.

    Example:
        @app.post("/webhooks/lettermint")
        async def lettermint_webhook(request: Request):
            try:
                event = await verify_webhook_from_asgi_request(request, secret)
            except WebhookPayloadError:
                raise HTTPException(status_code=400)
            except LettermintError:
                raise HTTPException(status_code=401)
    """
    signature, delivery_timestamp = _signature_headers(httpx.Headers(dict(request.headers)))

    try:
        body = await request.body()
    except Exception as exc:
        raise TransportError(f"failed to read request body: {exc}") from exc

    return verify_webhook(signature, body, signing_secret, delivery_timestamp, tolerance)
