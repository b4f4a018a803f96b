"""
Fluent email composition and the send request.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Dict, Optional

import httpx
from pydantic import ValidationError

from .exceptions import (
    APIError,
    DecodeError,
    ErrorKind,
    InvalidRequestError,
    TransportError,
)
from .logger import logger
from .models import Attachment, EmailPayload, SendResponse

if TYPE_CHECKING:
    from .client import Lettermint


class EmailBuilder:
    """
    Accumulates an email and sends it with send().

    Every setter returns the builder so calls can be chained. Create a new
    builder (client.email()) per message; builders are not thread-safe.
    """

    def __init__(self, client: "Lettermint"):
        self.client = client
        self.payload = EmailPayload()
        self._idempotency_key = ""

    def from_(self, email: str) -> "EmailBuilder":
        """Sender address, plain or RFC 5322 ("John Doe <john@example.com>")."""
        self.payload.from_ = email
        return self

    def to(self, *emails: str) -> "EmailBuilder":
        self.payload.to.extend(emails)
        return self

    def cc(self, *emails: str) -> "EmailBuilder":
        self.payload.cc.extend(emails)
        return self

    def bcc(self, *emails: str) -> "EmailBuilder":
        self.payload.bcc.extend(emails)
        return self

    def reply_to(self, *emails: str) -> "EmailBuilder":
        self.payload.reply_to.extend(emails)
        return self

    def subject(self, subject: str) -> "EmailBuilder":
        self.payload.subject = subject
        return self

    def html(self, html: str) -> "EmailBuilder":
        self.payload.html = html
        return self

    def text(self, text: str) -> "EmailBuilder":
        self.payload.text = text
        return self

    def header(self, key: str, value: str) -> "EmailBuilder":
        self.payload.headers[key] = value
        return self

    def headers(self, headers: Dict[str, str]) -> "EmailBuilder":
        """Merge custom headers into those already set."""
        self.payload.headers.update(headers)
        return self

    def attach(self, filename: str, content: str, content_id: Optional[str] = None) -> "EmailBuilder":
        """
        Add an attachment.

        Args:
            filename: Attachment file name
            content: Base64-encoded file content
            content_id: Content-ID for inline images referenced as cid:<id>
        """
        self.payload.attachments.append(
            Attachment(filename=filename, content=content, content_id=content_id or None)
        )
        return self

    def metadata(self, metadata: Dict[str, str]) -> "EmailBuilder":
        """Merge metadata; it is echoed back in webhook payloads, not sent as headers."""
        self.payload.metadata.update(metadata)
        return self

    def metadata_value(self, key: str, value: str) -> "EmailBuilder":
        self.payload.metadata[key] = value
        return self

    def tag(self, tag: str) -> "EmailBuilder":
        self.payload.tag = tag
        return self

    def route(self, route: str) -> "EmailBuilder":
        self.payload.route = route
        return self

    def idempotency_key(self, key: str) -> "EmailBuilder":
        """Requests repeating a key are only processed once; use it when resending."""
        self._idempotency_key = key
        return self

    def validate(self) -> None:
        """Raise InvalidRequestError if a required field is missing."""
        if not self.payload.from_:
            raise InvalidRequestError("from address is required")
        if not self.payload.to:
            raise InvalidRequestError("at least one recipient is required")
        if not self.payload.subject:
            raise InvalidRequestError("subject is required")
        if not self.payload.html and not self.payload.text:
            raise InvalidRequestError("either html or text body is required")

    def send(self) -> SendResponse:
        """
        Send the composed email.

        Returns:
            SendResponse with the message id and initial status

        Raises:
            InvalidRequestError: required fields are missing (nothing is sent)
            TransportError: timeout (kind TIMEOUT) or network failure
            APIError: the API answered with a 4xx/5xx status
            DecodeError: the success response was not the expected JSON
        """
        self.validate()

        client = self.client
        url = f"{client.base_url.rstrip('/')}/send"
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "x-lettermint-token": client.api_token,
            "User-Agent": client.user_agent,
        }
        if self._idempotency_key:
            headers["Idempotency-Key"] = self._idempotency_key

        try:
            response = client.http_client.post(url, json=self.payload.to_request_body(), headers=headers)
        except httpx.TimeoutException as exc:
            raise TransportError(f"request timeout: {exc}", kind=ErrorKind.TIMEOUT) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"request failed: {exc}") from exc

        if response.status_code >= 400:
            raise parse_api_error(response)

        try:
            result = SendResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise DecodeError(f"failed to parse response: {exc}", status_code=response.status_code) from exc

        logger.info(f"Email accepted: message_id={result.message_id} status={result.status}")
        return result


def parse_api_error(response: httpx.Response) -> APIError:
    """Convert an HTTP error response into an APIError."""
    body = response.text
    message = ""
    error_type = ""
    errors = None

    try:
        data = json.loads(body)
    except ValueError:
        message = body
    else:
        if isinstance(data, dict):
            message = data.get("message") or data.get("error") or ""
            error_type = data.get("error_type") or ""
            errors = data.get("errors") or None
        else:
            message = body

    if not message:
        message = response.reason_phrase

    logger.warning(f"Lettermint API returned {response.status_code}: {message}")
    return APIError(
        response.status_code,
        message,
        error_type=error_type,
        errors=errors,
        response_body=body,
    )
