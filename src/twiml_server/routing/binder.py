"""Binding of webhook handlers onto the HTTP transport.

Two contracts exist:

- *action* routes check that the request carries the standard Twilio fields,
  hand the handler a fresh TwiML builder and reply with the rendered XML;
- *callback* routes run the handler for its side effects and reply with an
  empty 200.

Exceptions raised while handling a request are not caught here; they reach
the transport's exception handlers before anything is written.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

from fastapi import Request, Response
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from twiml_server.errors import MissingRequiredFieldsError
from twiml_server.responses import TWIML_MEDIA_TYPE, RequestKind, TwimlResponse, create_response, render_response

LOGGER = logging.getLogger(__name__)

DEFAULT_REQUIRED_FIELDS: tuple[str, ...] = ("ApiVersion", "From", "To", "AccountSid")


@dataclass(frozen=True)
class WebhookRequest:
    """An inbound webhook with its URL-encoded body already decoded."""

    raw: Request
    form: Mapping[str, str] = field(default_factory=dict)
    path_params: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    async def from_request(cls, request: Request) -> WebhookRequest:
        form = await request.form()
        return cls(
            raw=request,
            form={key: str(value) for key, value in form.items()},
            path_params=dict(request.path_params),
        )

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.form.get(name, default)

    @property
    def account_sid(self) -> str | None:
        return self.form.get("AccountSid")

    @property
    def call_sid(self) -> str | None:
        return self.form.get("CallSid")

    @property
    def message_sid(self) -> str | None:
        return self.form.get("MessageSid")

    @property
    def fax_sid(self) -> str | None:
        return self.form.get("FaxSid")

    @property
    def from_number(self) -> str | None:
        return self.form.get("From")

    @property
    def to_number(self) -> str | None:
        return self.form.get("To")


HandlerResult = Union[None, Awaitable[None]]
ActionHandler = Callable[[WebhookRequest, TwimlResponse], HandlerResult]
CallbackHandler = Callable[[WebhookRequest], HandlerResult]


class Transport(Protocol):
    def bind_post(self, path: str, endpoint: Callable[[Request], Awaitable[Response]]) -> None:
        ...


def missing_fields(form: Mapping[str, Any], required: Iterable[str]) -> list[str]:
    return [name for name in required if name not in form]


def check_required_fields(form: Mapping[str, Any], required: Iterable[str]) -> None:
    missing = missing_fields(form, required)
    if missing:
        raise MissingRequiredFieldsError(missing)


def _is_async_callable(handler: Callable[..., Any]) -> bool:
    return inspect.iscoroutinefunction(handler) or inspect.iscoroutinefunction(
        getattr(handler, "__call__", None)
    )


async def call_handler(handler: Callable[..., Any], *args: Any) -> None:
    """Run a sync or async handler to completion.

    Plain functions run in the threadpool, the same way FastAPI runs sync
    endpoints, so they cannot block the event loop.
    """

    if _is_async_callable(handler):
        await handler(*args)
        return
    result = await run_in_threadpool(handler, *args)
    if inspect.isawaitable(result):
        await result


def bind_action(
    transport: Transport,
    kind: RequestKind,
    path: str,
    handler: ActionHandler,
    *,
    required_fields: Iterable[str] = DEFAULT_REQUIRED_FIELDS,
) -> None:
    """Bind ``handler`` at ``path`` with the TwiML response contract."""

    required = tuple(required_fields)

    async def endpoint(request: Request) -> Response:
        webhook_request = await WebhookRequest.from_request(request)
        try:
            check_required_fields(webhook_request.form, required)
        except MissingRequiredFieldsError as exc:
            LOGGER.warning(
                "Rejected webhook %s: missing fields %s", request.url.path, ", ".join(exc.missing)
            )
            return PlainTextResponse(exc.detail, status_code=exc.status_code)

        twiml = create_response(kind)
        await call_handler(handler, webhook_request, twiml)
        return Response(content=render_response(twiml), media_type=TWIML_MEDIA_TYPE)

    transport.bind_post(path, endpoint)


def bind_callback(transport: Transport, path: str, handler: CallbackHandler) -> None:
    """Bind ``handler`` at ``path``; replies with an empty 200 once it completes."""

    async def endpoint(request: Request) -> Response:
        webhook_request = await WebhookRequest.from_request(request)
        await call_handler(handler, webhook_request)
        return Response(status_code=200)

    transport.bind_post(path, endpoint)
