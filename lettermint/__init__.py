"""
Lettermint Python SDK

Send email through the Lettermint API and verify the webhooks it delivers.
"""

from .client import Lettermint
from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    DEFAULT_WEBHOOK_TOLERANCE,
    VERSION,
    LettermintSettings,
    get_settings,
)
from .email import EmailBuilder
from .exceptions import (
    APIError,
    DecodeError,
    ErrorKind,
    InvalidAPITokenError,
    InvalidRequestError,
    LettermintError,
    TransportError,
    WebhookPayloadError,
    WebhookSignatureError,
    WebhookTimestampExpiredError,
)
from .logger import setup_logging
from .models import (
    Attachment,
    SendResponse,
    WebhookEvent,
    WebhookEventData,
    WebhookResponse,
)
from .webhook import (
    HEADER_DELIVERY,
    HEADER_SIGNATURE,
    build_webhook_headers,
    parse_signature,
    secure_compare,
    sign_webhook,
    verify_webhook,
    verify_webhook_from_asgi_request,
    verify_webhook_from_request,
)

__version__ = VERSION

__all__ = [
    "Lettermint",
    "EmailBuilder",
    "LettermintSettings",
    "get_settings",
    "setup_logging",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "DEFAULT_WEBHOOK_TOLERANCE",
    "VERSION",
    "ErrorKind",
    "LettermintError",
    "APIError",
    "DecodeError",
    "InvalidAPITokenError",
    "InvalidRequestError",
    "TransportError",
    "WebhookPayloadError",
    "WebhookSignatureError",
    "WebhookTimestampExpiredError",
    "Attachment",
    "SendResponse",
    "WebhookEvent",
    "WebhookEventData",
    "WebhookResponse",
    "HEADER_SIGNATURE",
    "HEADER_DELIVERY",
    "build_webhook_headers",
    "parse_signature",
    "secure_compare",
    "sign_webhook",
    "verify_webhook",
    "verify_webhook_from_request",
    "verify_webhook_from_asgi_request",
]
