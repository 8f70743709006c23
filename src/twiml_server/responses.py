"""TwiML response builders for each kind of inbound webhook."""

from __future__ import annotations

from enum import Enum
from typing import Union

from twilio.twiml.fax_response import FaxResponse
from twilio.twiml.messaging_response import MessagingResponse
from twilio.twiml.voice_response import VoiceResponse

TwimlResponse = Union[VoiceResponse, MessagingResponse, FaxResponse]

TWIML_MEDIA_TYPE = "application/xml"


class RequestKind(str, Enum):
    """Kinds of webhook Twilio sends, each answered with its own TwiML vocabulary."""

    VOICE = "voice"
    MESSAGING = "messaging"
    FAX = "fax"


_RESPONSE_TYPES: dict[RequestKind, type] = {
    RequestKind.VOICE: VoiceResponse,
    RequestKind.MESSAGING: MessagingResponse,
    RequestKind.FAX: FaxResponse,
}


def create_response(kind: RequestKind) -> TwimlResponse:
    """Return a fresh, empty response builder for ``kind``."""

    return _RESPONSE_TYPES[RequestKind(kind)]()


def render_response(response: TwimlResponse) -> str:
    return response.to_xml()
