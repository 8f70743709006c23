"""Validation of the X-Twilio-Signature header on inbound webhooks."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Request
from twilio.request_validator import RequestValidator

from twiml_server.config.settings import Settings
from twiml_server.errors import SignatureValidationError

LOGGER = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Twilio-Signature"

UNVALIDATED_WARNING = (
    "WARNING! Webhooks from the Twilio API are not being validated. This is okay for "
    "development, but if you want to keep things in your TwiML, such as destination "
    "phone numbers secret, run your app in production mode with TWILIO_AUTH_TOKEN set."
)


@dataclass(frozen=True)
class SignatureValidationOptions:
    """Overrides for how the signed URL is reconstructed and checked.

    ``url`` replaces the whole reconstructed URL; ``host`` and ``protocol``
    replace only those parts of the URL the request arrived on.
    """

    auth_token: str | None = None
    url: str | None = None
    host: str | None = None
    protocol: str | None = None
    validate: bool = True


def should_validate(settings: Settings) -> bool:
    return settings.is_production and bool(settings.twilio_auth_token)


def signed_url(request: Request, options: SignatureValidationOptions, public_base_url: str | None) -> str:
    if options.url:
        return options.url
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    if public_base_url:
        return f"{public_base_url.rstrip('/')}{path}"
    protocol = options.protocol or request.url.scheme
    host = options.host or request.headers.get("host") or request.url.netloc
    return f"{protocol}://{host}{path}"


def build_signature_dependency(
    settings: Settings,
    options: SignatureValidationOptions | None = None,
) -> Callable[[Request], Awaitable[None]]:
    """Return a FastAPI dependency rejecting requests Twilio did not sign."""

    options = options or SignatureValidationOptions()
    auth_token = options.auth_token or settings.twilio_auth_token
    if not auth_token:
        raise ValueError("Twilio auth token is not configured")
    validator = RequestValidator(auth_token)

    async def verify_twilio_signature(request: Request) -> None:
        if not options.validate:
            return
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            LOGGER.warning("Missing %s header on %s", SIGNATURE_HEADER, request.url.path)
            raise SignatureValidationError()

        form = await request.form()
        params = {key: str(value) for key, value in form.items()}
        url = signed_url(request, options, settings.public_base_url)
        if not validator.validate(url, params, signature):
            LOGGER.warning("Invalid Twilio signature for %s", url)
            raise SignatureValidationError()

    return verify_twilio_signature
