"""Thin wrapper around the FastAPI application serving webhooks."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from fastapi import Depends, FastAPI, Request, Response

LOGGER = logging.getLogger(__name__)


class HttpTransport:
    """Owns the ASGI app; every bound route shares the same request dependencies."""

    def __init__(
        self,
        app: FastAPI | None = None,
        *,
        dependencies: Sequence[Callable[..., Any]] = (),
    ) -> None:
        self.app = app or FastAPI(
            title="TwiML Server",
            description="Twilio webhook server with dynamically generated callback routes.",
        )
        self._dependencies = [Depends(dependency) for dependency in dependencies]
        self._paths: list[str] = []

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    def bind_post(self, path: str, endpoint: Callable[[Request], Awaitable[Response]]) -> None:
        self.app.add_api_route(
            path,
            endpoint,
            methods=["POST"],
            dependencies=self._dependencies,
            include_in_schema=False,
        )
        self._paths.append(path)
        LOGGER.debug("Bound POST %s", path)

    def listen(self, port: int, host: str = "0.0.0.0", callback: Callable[[], None] | None = None) -> None:
        import uvicorn

        if callback is not None:
            callback()
        LOGGER.info("Starting TwiML server on %s:%d", host, port)
        uvicorn.run(self.app, host=host, port=port)
