"""Fragment router that activates pages.

Routes are matched in registration order and the first structural match
wins. Handlers receive the bound ``:param`` values. A handler may return an
awaitable; it is scheduled on the running loop and the router does not wait
for it. Each navigation bumps ``generation`` so handlers that capture it
synchronously can drop results that arrive after a newer navigation.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

HOME_ROUTE = "#home"

RouteParams = dict[str, str]
RouteHandler = Callable[[RouteParams], Awaitable[None] | None]
LocationListener = Callable[[str], None]

_logger = logging.getLogger(__name__)


class Location(Protocol):
    """Host location holding the routable fragment."""

    @property
    def fragment(self) -> str:
        """Return the live fragment, empty when unset."""

    def assign(self, fragment: str) -> None:
        """Set the fragment, notifying listeners when it changes."""

    def subscribe(self, listener: LocationListener) -> None:
        """Register a callback for fragment changes."""


@dataclass(frozen=True)
class Route:
    """Registered pattern and its handler."""

    pattern: str
    handler: RouteHandler


def normalize_fragment(value: str | None) -> str:
    """Return a fragment starting with ``#``; empty input means home."""
    if not value or value == "#":
        return HOME_ROUTE
    if not value.startswith("#"):
        return f"#{value}"
    return value


def match_route(pattern: str, fragment: str) -> RouteParams | None:
    """Match a fragment against a pattern, returning bound params or None."""
    if pattern == fragment:
        return {}
    pattern_parts = pattern.split("/")
    fragment_parts = fragment.split("/")
    if len(pattern_parts) != len(fragment_parts):
        return None
    params: RouteParams = {}
    for expected, actual in zip(pattern_parts, fragment_parts, strict=True):
        if expected.startswith(":"):
            params[expected[1:]] = actual
        elif expected != actual:
            return None
    return params


@dataclass
class HashRouter:
    """Navigation state machine over a host location."""

    location: Location
    current_route: str | None = None
    generation: int = 0
    _routes: list[Route] = field(default_factory=list)
    _tasks: set[asyncio.Task[None]] = field(default_factory=set)

    def __post_init__(self) -> None:
        self.location.subscribe(self._on_location_change)

    def on_route(self, pattern: str, handler: RouteHandler) -> None:
        """Register a handler for a pattern, replacing any earlier one."""
        route = Route(pattern=pattern, handler=handler)
        for index, existing in enumerate(self._routes):
            if existing.pattern == pattern:
                self._routes[index] = route
                return
        self._routes.append(route)

    def navigate(self, target: str | None) -> asyncio.Task[None] | None:
        """Navigate to a fragment and dispatch its handler.

        Returns the scheduled task when the handler is asynchronous.
        """
        fragment = normalize_fragment(target)
        if self.location.fragment == fragment and self.current_route == fragment:
            return None
        self.current_route = fragment
        self.generation += 1
        self.location.assign(fragment)
        return self._dispatch(fragment)

    def get_current_route(self) -> str:
        """Return the active route, the live fragment, or home."""
        return self.current_route or self.location.fragment or HOME_ROUTE

    def is_current(self, generation: int) -> bool:
        """Return True when no navigation happened since ``generation``."""
        return generation == self.generation

    async def wait_idle(self) -> None:
        """Wait until every scheduled handler has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _dispatch(self, fragment: str) -> asyncio.Task[None] | None:
        for route in self._routes:
            params = match_route(route.pattern, fragment)
            if params is None:
                continue
            _logger.debug(
                "Route %s matched %s with %s", route.pattern, fragment, params
            )
            result = route.handler(params)
            if inspect.isawaitable(result):
                return self._schedule(fragment, result)
            return None

        if fragment != HOME_ROUTE:
            _logger.info("No route for %s, falling back to %s", fragment, HOME_ROUTE)
            return self.navigate(HOME_ROUTE)
        _logger.warning("No handler registered for %s", HOME_ROUTE)
        return None

    def _schedule(
        self, fragment: str, awaitable: Awaitable[None]
    ) -> asyncio.Task[None] | None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.error("No running event loop, handler for %s not started", fragment)
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return None
        task = loop.create_task(_await(awaitable))
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _logger.error("Route handler failed", exc_info=exc)

    def _on_location_change(self, fragment: str) -> None:
        self.navigate(fragment)


async def _await(awaitable: Awaitable[None]) -> None:
    await awaitable
