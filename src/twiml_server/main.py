"""Example voice flow served by TwimlServer.

Run with ``python -m twiml_server.main`` and point a Twilio number's voice
webhook at ``<public url>/voice/incoming``.
"""

from __future__ import annotations

import logging
import os

from twilio.twiml.voice_response import VoiceResponse

from twiml_server.config.settings import get_settings
from twiml_server.routing.binder import WebhookRequest
from twiml_server.server.app import TwimlServer

LOGGER = logging.getLogger(__name__)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

server = TwimlServer(settings=settings)
voice = server.voice
app = server.app


def menu_choice(request: WebhookRequest, twiml: VoiceResponse) -> None:
    digits = request.get("Digits") or ""
    if digits == "1":
        twiml.say("Here is the menu again.")
        twiml.redirect(voice.absolute_url(voice.action(incoming_call)), method="POST")
    else:
        twiml.say(f"You pressed {digits or 'nothing'}. Goodbye.")
        twiml.hangup()


def call_finished(request: WebhookRequest) -> None:
    LOGGER.info("Call %s ended with status %s", request.call_sid, request.get("CallStatus"))


def incoming_call(request: WebhookRequest, twiml: VoiceResponse) -> None:
    gather = twiml.gather(
        num_digits=1,
        action=voice.absolute_url(voice.action(menu_choice)),
        method="POST",
    )
    gather.say("Press 1 to hear this menu again, or any other key to hang up.")
    twiml.say("We did not receive any input. Goodbye.")


def forward_call(request: WebhookRequest, twiml: VoiceResponse) -> None:
    dial = twiml.dial()
    dial.number(
        os.environ.get("FORWARD_NUMBER", "+15005550006"),
        status_callback=voice.absolute_url(voice.callback(call_finished)),
        status_callback_event="completed",
        status_callback_method="POST",
    )


voice.register("/incoming", incoming_call)
voice.register("/forward", forward_call)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 3000))
    server.listen(port, callback=lambda: LOGGER.info("Listening on port %d", port))
