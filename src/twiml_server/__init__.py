"""Twilio webhook server with dynamically generated, in-memory callback routes."""

from twilio.twiml.fax_response import FaxResponse
from twilio.twiml.messaging_response import MessagingResponse
from twilio.twiml.voice_response import VoiceResponse

from twiml_server.errors import (
    GeneratedRouteNotFoundError,
    MissingRequiredFieldsError,
    SignatureValidationError,
    WebhookError,
)
from twiml_server.responses import RequestKind
from twiml_server.routing.binder import WebhookRequest
from twiml_server.routing.kind_router import KindRouter, KindRouterConfig
from twiml_server.server.app import TwimlServer
from twiml_server.server.signature import SignatureValidationOptions

__all__ = [
    "FaxResponse",
    "GeneratedRouteNotFoundError",
    "KindRouter",
    "KindRouterConfig",
    "MessagingResponse",
    "MissingRequiredFieldsError",
    "RequestKind",
    "SignatureValidationError",
    "SignatureValidationOptions",
    "TwimlServer",
    "VoiceResponse",
    "WebhookError",
    "WebhookRequest",
]
