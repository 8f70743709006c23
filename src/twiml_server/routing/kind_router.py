"""Per-kind facade for registering webhooks and generating follow-up routes."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from twiml_server.responses import RequestKind, TwimlResponse
from twiml_server.routing.binder import (
    DEFAULT_REQUIRED_FIELDS,
    ActionHandler,
    CallbackHandler,
    Transport,
    WebhookRequest,
    bind_action,
    bind_callback,
    call_handler,
)
from twiml_server.routing.ids import FlakeIdGenerator
from twiml_server.routing.paths import (
    GENERATED_ACTION_PREFIX,
    GENERATED_CALLBACK_PREFIX,
    compose_path,
    generated_base,
    generated_path,
)
from twiml_server.routing.table import GeneratedRouteTable, RouteCategory
from twiml_server.server.signature import SignatureValidationOptions

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class KindRouterConfig:
    prefix_routes_with_type: bool = True
    required_fields: tuple[str, ...] = DEFAULT_REQUIRED_FIELDS
    validation: SignatureValidationOptions | None = None
    public_base_url: str | None = None


class KindRouter:
    """Registers webhooks for one request kind and mints one-off routes.

    ``action`` and ``callback`` return paths that resolve, through a single
    dispatcher route per category, to handlers held in memory. The number of
    routes bound on the transport does not grow with the number of generated
    handlers.
    """

    def __init__(
        self,
        transport: Transport,
        kind: RequestKind,
        config: KindRouterConfig | None = None,
        *,
        id_generator: FlakeIdGenerator | None = None,
    ) -> None:
        self._transport = transport
        self._kind = RequestKind(kind)
        self._config = config or KindRouterConfig()
        ids = id_generator or FlakeIdGenerator()
        self._actions = GeneratedRouteTable(RouteCategory.ACTION, ids)
        self._callbacks = GeneratedRouteTable(RouteCategory.CALLBACK, ids)

        prefix = self._config.prefix_routes_with_type
        action_base = generated_base(self._kind, GENERATED_ACTION_PREFIX, prefix=prefix)
        callback_base = generated_base(self._kind, GENERATED_CALLBACK_PREFIX, prefix=prefix)
        self.register(f"{action_base}/{{identifier}}", self._dispatch_action)
        bind_callback(
            self._transport,
            self.action_path(f"{callback_base}/{{identifier}}"),
            self._dispatch_callback,
        )

    @property
    def kind(self) -> RequestKind:
        return self._kind

    @property
    def config(self) -> KindRouterConfig:
        return self._config

    @property
    def pending_actions(self) -> int:
        return len(self._actions)

    @property
    def pending_callbacks(self) -> int:
        return len(self._callbacks)

    # Route registration

    def register(
        self,
        path: str,
        handler: ActionHandler,
        *,
        required_fields: Iterable[str] | None = None,
    ) -> str:
        """Bind ``handler`` at ``path``; returns the path actually bound."""

        concrete = self.action_path(path)
        bind_action(
            self._transport,
            self._kind,
            concrete,
            handler,
            required_fields=self._config.required_fields if required_fields is None else required_fields,
        )
        LOGGER.info("Registered %s webhook at %s", self._kind.value, concrete)
        return concrete

    # Generated routes

    def action(self, handler: ActionHandler, single_use: bool = True) -> str:
        """Return a path that runs ``handler`` with a fresh TwiML builder when requested."""

        identifier = self._actions.insert(handler, single_use)
        return generated_path(
            self._kind, GENERATED_ACTION_PREFIX, identifier, prefix=self._config.prefix_routes_with_type
        )

    def callback(self, handler: CallbackHandler, single_use: bool = True) -> str:
        """Return a path that runs ``handler`` for its side effects when requested."""

        identifier = self._callbacks.insert(handler, single_use)
        return generated_path(
            self._kind, GENERATED_CALLBACK_PREFIX, identifier, prefix=self._config.prefix_routes_with_type
        )

    async def _dispatch_action(self, request: WebhookRequest, twiml: TwimlResponse) -> None:
        route = self._actions.consume(request.path_params["identifier"])
        await call_handler(route.handler, request, twiml)

    async def _dispatch_callback(self, request: WebhookRequest) -> None:
        route = self._callbacks.consume(request.path_params["identifier"])
        await call_handler(route.handler, request)

    # Convenience

    def action_path(self, path: str) -> str:
        return compose_path(self._kind, path, prefix=self._config.prefix_routes_with_type)

    def absolute_url(self, path: str) -> str:
        """Join ``path`` onto the configured public base URL, if there is one."""

        if not self._config.public_base_url:
            return path
        return f"{self._config.public_base_url.rstrip('/')}/{path.lstrip('/')}"
