"""
Data Models Module

Pydantic models for the send API request/response and for inbound
webhook events.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationInfo, field_validator


class BaseAPIModel(BaseModel):
    """Base model for data received from the API; unknown fields are ignored"""
    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """JSON null on a field with a default leaves the default in place."""
        if value is None and info.field_name is not None:
            field = cls.model_fields[info.field_name]
            if not field.is_required():
                return field.get_default(call_default_factory=True)
        return value


# --------------------------
# Send API
# --------------------------

class Attachment(BaseAPIModel):
    filename: str
    content: str = Field(..., description="Base64-encoded file content")
    content_id: Optional[str] = Field(None, description="Content-ID for inline (cid:) attachments")


# Always sent, even when empty; everything else is omitted when unset.
_ALWAYS_SENT = ("from", "to", "subject")


class EmailPayload(BaseAPIModel):
    """Body of POST /send, accumulated by EmailBuilder"""
    from_: str = Field("", alias="from")
    to: List[str] = Field(default_factory=list)
    subject: str = ""
    html: str = ""
    text: str = ""
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    reply_to: List[str] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)
    attachments: List[Attachment] = Field(default_factory=list)
    route: str = ""
    metadata: Dict[str, str] = Field(default_factory=dict)
    tag: str = ""

    def to_request_body(self) -> Dict[str, Any]:
        body = self.model_dump(by_alias=True, exclude_none=True)
        return {
            key: value
            for key, value in body.items()
            if key in _ALWAYS_SENT or value
        }


class SendResponse(BaseAPIModel):
    """
    Response of the send API.

    status is one of: pending, queued, processed, delivered,
    soft_bounced, hard_bounced, failed.
    """
    message_id: str = ""
    status: str = ""


# --------------------------
# Webhooks
# --------------------------

class WebhookResponse(BaseAPIModel):
    """SMTP response details for delivered/bounced events"""
    status_code: StrictInt = 0
    message: str = ""


class WebhookEventData(BaseAPIModel):
    message_id: str = ""
    recipient: str = ""
    tag: str = ""
    metadata: Dict[str, str] = Field(default_factory=dict)
    response: Optional[WebhookResponse] = None


class WebhookEvent(BaseAPIModel):
    """
    A verified webhook delivery.

    raw_payload keeps the exact request body so callers can run their own
    parsing on fields this model does not cover.
    """
    id: str = ""
    event: str = Field("", description="Event type, e.g. message.delivered")
    timestamp: StrictInt = Field(0, description="Unix time the event occurred")
    data: WebhookEventData = Field(default_factory=WebhookEventData)
    raw_payload: bytes = Field(b"", exclude=True, repr=False)
