"""In-memory registry of dynamically generated webhook routes."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from twiml_server.errors import GeneratedRouteNotFoundError
from twiml_server.routing.ids import FlakeIdGenerator

LOGGER = logging.getLogger(__name__)


class RouteCategory(str, Enum):
    """Which dispatcher a generated route is reachable through."""

    ACTION = "action"
    CALLBACK = "callback"


@dataclass(frozen=True)
class GeneratedRoute:
    identifier: str
    category: RouteCategory
    handler: Callable[..., Any]
    single_use: bool = True


class GeneratedRouteTable:
    """Maps generated identifiers to handlers for a single route category.

    The table is safe to share between threads: ``consume`` looks up and, for
    single-use routes, removes the entry under one lock so a retried or
    concurrent request for the same identifier can never run the handler twice.
    """

    def __init__(self, category: RouteCategory, id_generator: FlakeIdGenerator | None = None) -> None:
        self._category = category
        self._ids = id_generator or FlakeIdGenerator()
        self._lock = threading.Lock()
        self._routes: dict[str, GeneratedRoute] = {}

    @property
    def category(self) -> RouteCategory:
        return self._category

    def insert(self, handler: Callable[..., Any], single_use: bool = True) -> str:
        identifier = self._ids.next()
        route = GeneratedRoute(
            identifier=identifier,
            category=self._category,
            handler=handler,
            single_use=single_use,
        )
        with self._lock:
            self._routes[identifier] = route
        LOGGER.debug(
            "Generated %s route %s (single_use=%s)", self._category.value, identifier, single_use
        )
        return identifier

    def consume(self, identifier: str) -> GeneratedRoute:
        with self._lock:
            route = self._routes.get(identifier)
            if route is None:
                raise GeneratedRouteNotFoundError(identifier, self._category.value)
            if route.single_use:
                del self._routes[identifier]
        return route

    def __contains__(self, identifier: object) -> bool:
        with self._lock:
            return identifier in self._routes

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)
