"""Tests for the fragment router."""

import asyncio

from nutriplan.adapters.location import InMemoryLocation
from nutriplan.services.router import (
    HashRouter,
    RouteParams,
    match_route,
    normalize_fragment,
)


def _recording_router() -> tuple[HashRouter, list[tuple[str, RouteParams]]]:
    calls: list[tuple[str, RouteParams]] = []
    router = HashRouter(InMemoryLocation())
    for pattern in ("#home", "#products", "#meal/:id"):
        router.on_route(
            pattern, lambda params, pattern=pattern: calls.append((pattern, params))
        )
    return router, calls


def test_param_binding() -> None:
    router, calls = _recording_router()

    router.navigate("#meal/52772")

    assert calls == [("#meal/:id", {"id": "52772"})]
    assert router.get_current_route() == "#meal/52772"
    assert router.location.fragment == "#meal/52772"


def test_unknown_fragment_falls_back_to_home() -> None:
    router, calls = _recording_router()

    router.navigate("#bogus")

    assert calls == [("#home", {})]
    assert router.get_current_route() == "#home"
    assert router.location.fragment == "#home"


def test_same_fragment_twice_dispatches_once() -> None:
    router, calls = _recording_router()

    router.navigate("#products")
    router.navigate("#products")

    assert calls == [("#products", {})]


def test_first_registered_match_wins() -> None:
    calls: list[str] = []
    router = HashRouter(InMemoryLocation())
    router.on_route("#meal/random", lambda params: calls.append("random"))
    router.on_route("#meal/:id", lambda params: calls.append(params["id"]))

    router.navigate("#meal/random")
    router.navigate("#meal/1")

    assert calls == ["random", "1"]


def test_fragments_are_normalized() -> None:
    router, calls = _recording_router()

    router.navigate("")
    router.navigate("products")

    assert [pattern for pattern, _ in calls] == ["#home", "#products"]
    assert normalize_fragment(None) == "#home"
    assert normalize_fragment("#") == "#home"


def test_missing_home_route_does_not_loop() -> None:
    router = HashRouter(InMemoryLocation())

    assert router.navigate("#bogus") is None
    assert router.get_current_route() == "#home"


def test_match_route_segments() -> None:
    assert match_route("#meal/:id", "#meal/52772") == {"id": "52772"}
    assert match_route("#meal/:id", "#meal") is None
    assert match_route("#meal/:id", "#meal/1/extra") is None
    assert match_route("#home", "#products") is None
    assert match_route("#home", "#home") == {}


def test_back_dispatches_previous_route() -> None:
    router, calls = _recording_router()
    location = router.location
    assert isinstance(location, InMemoryLocation)

    router.navigate("#products")
    router.navigate("#meal/7")
    assert location.back()

    assert calls[-1] == ("#products", {})
    assert router.get_current_route() == "#products"
    assert location.forward()
    assert calls[-1] == ("#meal/:id", {"id": "7"})


def test_external_location_change_dispatches() -> None:
    router, calls = _recording_router()
    location = router.location
    assert isinstance(location, InMemoryLocation)

    location.assign("#meal/9")

    assert calls == [("#meal/:id", {"id": "9"})]
    assert router.get_current_route() == "#meal/9"


def test_async_handler_sees_stale_generation() -> None:
    results: dict[str, bool] = {}

    async def scenario() -> None:
        router = HashRouter(InMemoryLocation())

        def handler(params: RouteParams):  # type: ignore[no-untyped-def]
            generation = router.generation

            async def load() -> None:
                await asyncio.sleep(0)
                results[params["id"]] = router.is_current(generation)

            return load()

        router.on_route("#meal/:id", handler)
        first = router.navigate("#meal/1")
        second = router.navigate("#meal/2")
        assert first is not None
        assert second is not None
        await router.wait_idle()

    asyncio.run(scenario())

    assert results == {"1": False, "2": True}


def test_failing_async_handler_is_contained() -> None:
    async def scenario() -> str:
        router = HashRouter(InMemoryLocation())

        async def explode() -> None:
            raise RuntimeError("boom")

        router.on_route("#home", lambda params: explode())
        router.navigate("#home")
        await router.wait_idle()
        return router.get_current_route()

    assert asyncio.run(scenario()) == "#home"


def test_registering_a_pattern_again_replaces_its_handler() -> None:
    calls: list[str] = []
    router = HashRouter(InMemoryLocation())
    router.on_route("#products", lambda params: calls.append("old"))
    router.on_route("#meal/:id", lambda params: calls.append("meal"))
    router.on_route("#products", lambda params: calls.append("new"))

    router.navigate("#products")

    assert calls == ["new"]
    assert [route.pattern for route in router._routes] == ["#products", "#meal/:id"]


def test_async_handler_without_running_loop_is_not_started() -> None:
    started: list[str] = []
    router = HashRouter(InMemoryLocation())

    async def load() -> None:
        started.append("load")

    pending = load()
    router.on_route("#home", lambda params: pending)

    assert router.navigate("#home") is None
    assert router.get_current_route() == "#home"
    assert started == []
    assert pending.cr_frame is None
    assert not router._tasks
