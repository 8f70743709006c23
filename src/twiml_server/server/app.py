"""Server facade owning the transport and one router per request kind."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from twiml_server.config.settings import Settings, get_settings
from twiml_server.errors import WebhookError
from twiml_server.responses import RequestKind
from twiml_server.routing.ids import FlakeIdGenerator
from twiml_server.routing.kind_router import KindRouter, KindRouterConfig
from twiml_server.server.signature import UNVALIDATED_WARNING, build_signature_dependency, should_validate
from twiml_server.server.transport import HttpTransport

LOGGER = logging.getLogger(__name__)


async def webhook_error_handler(request: Request, exc: WebhookError) -> Response:
    if exc.status_code >= 500:
        LOGGER.error("Webhook %s %s failed: %s", request.method, request.url.path, exc.detail)
    else:
        LOGGER.warning("Webhook %s %s rejected: %s", request.method, request.url.path, exc.detail)
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


class TwimlServer:
    """Serves Twilio voice, messaging and fax webhooks from one application.

    Signature validation runs ahead of every route when the environment is
    ``prod`` and an auth token is configured. Otherwise requests are accepted
    unsigned and a warning is logged.
    """

    def __init__(
        self,
        config: KindRouterConfig | None = None,
        settings: Settings | None = None,
        *,
        app: FastAPI | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        if config is None:
            config = KindRouterConfig(
                prefix_routes_with_type=self._settings.prefix_routes_with_type,
                public_base_url=self._settings.public_base_url,
            )
        elif config.public_base_url is None and self._settings.public_base_url:
            config = replace(config, public_base_url=self._settings.public_base_url)
        self._config = config

        dependencies = []
        if should_validate(self._settings):
            dependencies.append(build_signature_dependency(self._settings, config.validation))
        else:
            LOGGER.warning(UNVALIDATED_WARNING)
        self._transport = HttpTransport(app, dependencies=dependencies)
        self._transport.app.add_exception_handler(WebhookError, webhook_error_handler)

        ids = FlakeIdGenerator()
        self.voice = KindRouter(self._transport, RequestKind.VOICE, config, id_generator=ids)
        self.messaging = KindRouter(self._transport, RequestKind.MESSAGING, config, id_generator=ids)
        self.fax = KindRouter(self._transport, RequestKind.FAX, config, id_generator=ids)

    @property
    def app(self) -> FastAPI:
        return self._transport.app

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def validates_signatures(self) -> bool:
        return should_validate(self._settings)

    def router(self, kind: RequestKind | str) -> KindRouter:
        return getattr(self, RequestKind(kind).value)

    def exception_handler(self, exc_class: type[Exception] | int) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        return self._transport.app.exception_handler(exc_class)

    def listen(self, port: int, host: str = "0.0.0.0", callback: Callable[[], None] | None = None) -> None:
        self._transport.listen(port, host=host, callback=callback)
