"""Domain-specific exceptions raised while serving webhooks.

Every error carries the HTTP status and plain-text detail the server's
centralized exception handler renders for it.
"""

from __future__ import annotations

from collections.abc import Iterable


class WebhookError(Exception):
    status_code: int = 500
    default_detail: str = "Webhook error"

    def __init__(self, detail: str | None = None) -> None:
        super().__init__(detail or self.default_detail)
        self.detail = detail or self.default_detail


class MissingRequiredFieldsError(WebhookError):
    status_code = 400
    default_detail = "Your request did not provide all of the required body fields."

    def __init__(self, missing: Iterable[str], detail: str | None = None) -> None:
        super().__init__(detail)
        self.missing = tuple(missing)


class GeneratedRouteNotFoundError(WebhookError):
    status_code = 500
    default_detail = (
        "This generated route is no longer available. Check to make sure that it "
        "isn't set to single use if that isn't appropriate."
    )

    def __init__(self, identifier: str, category: str, detail: str | None = None) -> None:
        super().__init__(detail)
        self.identifier = identifier
        self.category = category


class SignatureValidationError(WebhookError):
    status_code = 403
    default_detail = "Twilio Request Validation Failed."
