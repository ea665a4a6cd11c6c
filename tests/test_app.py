"""Tests for wren.app — the router served through ASGI."""

import asyncio
import logging
from typing import Any

import pytest

from wren.app import App
from wren.config import AppConfig, RouterConfig
from wren.http.response import Response
from wren.routing.router import Router
from wren.testing import TestClient


def _router() -> Router:
    router = Router()
    router.get("/", lambda: "Foo!")
    router.get("/foo/{test}", lambda test: f"Foo! {test}")
    router.get("/items/{id}", lambda item_id: f"Item {item_id}").where("id", r"\d+")
    router.get("/greet/{name}", lambda name: f"Hello, {name}!")
    router.get("/quiet", lambda: None)
    router.get("/raw", lambda: b"\x89PNG")
    router.post("/things", lambda: Response("Created").with_status(201))
    router.head("/ping", lambda: "pong")
    return router


class TestRoutes:
    @pytest.mark.asyncio
    async def test_root(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.get("/")
            assert response.status == 200
            assert response.text == "Foo!"
            assert response.content_type == "text/html; charset=utf-8"

    @pytest.mark.asyncio
    async def test_path_parameter(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.get("/foo/bar")
            assert response.text == "Foo! bar"

    @pytest.mark.asyncio
    async def test_constraint(self) -> None:
        async with TestClient(App(_router())) as client:
            assert (await client.get("/items/7")).text == "Item 7"
            assert (await client.get("/items/abc")).status == 404

    @pytest.mark.asyncio
    async def test_unicode_path(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.get("/greet/Jürgen")
            assert response.text == "Hello, Jürgen!"

    @pytest.mark.asyncio
    async def test_query_string_ignored(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.get("/foo/bar?x=1")
            assert response.text == "Foo! bar"

    @pytest.mark.asyncio
    async def test_no_output_is_empty_200(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.get("/quiet")
            assert response.status == 200
            assert response.body == b""

    @pytest.mark.asyncio
    async def test_bytes_sent_verbatim(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.get("/raw")
            assert response.body == b"\x89PNG"

    @pytest.mark.asyncio
    async def test_response_returned_as_is(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.post("/things")
            assert response.status == 201
            assert response.text == "Created"

    @pytest.mark.asyncio
    async def test_head_has_no_body(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.request("HEAD", "/ping")
            assert response.status == 200
            assert response.body == b""

    @pytest.mark.asyncio
    async def test_multimatch_outputs_concatenated(self) -> None:
        router = Router(RouterConfig(multimatch=True))
        router.get("/x", lambda: "a")
        router.get("/{name}", lambda name: "b")

        async with TestClient(App(router)) as client:
            assert (await client.get("/x")).text == "ab"


class TestErrors:
    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.get("/missing")
            assert response.status == 404
            assert "/missing" in response.text
            assert response.content_type == "text/plain; charset=utf-8"

    @pytest.mark.asyncio
    async def test_method_not_allowed(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.delete("/")
            assert response.status == 405
            assert response.header("allow") == "GET"

    @pytest.mark.asyncio
    async def test_head_to_get_only_route_not_allowed(self) -> None:
        async with TestClient(App(_router())) as client:
            response = await client.request("HEAD", "/")
            assert response.status == 405
            assert response.header("allow") == "GET"
            assert response.body == b""

    @pytest.mark.asyncio
    async def test_not_found_hook(self) -> None:
        router = _router()
        router.on_path_not_found(lambda path: f"Nothing at {path}")

        async with TestClient(App(router)) as client:
            response = await client.get("/missing/")
            assert response.status == 404
            assert response.text == "Nothing at /missing"

    @pytest.mark.asyncio
    async def test_method_not_allowed_hook(self) -> None:
        router = _router()
        router.on_method_not_allowed(lambda path, method: f"No {method} for {path}")

        async with TestClient(App(router)) as client:
            response = await client.put("/")
            assert response.status == 405
            assert response.text == "No PUT for /"

    @pytest.mark.asyncio
    async def test_action_error_is_500(self, caplog: pytest.LogCaptureFixture) -> None:
        router = Router()

        def broken() -> str:
            raise ValueError("boom")

        router.get("/broken", broken)

        with caplog.at_level(logging.ERROR, logger="wren.server"):
            async with TestClient(App(router)) as client:
                response = await client.get("/broken")

        assert response.status == 500
        assert response.text == "Internal Server Error"
        assert "500 GET /broken" in caplog.text

    @pytest.mark.asyncio
    async def test_action_error_debug_shows_traceback(self) -> None:
        router = Router()

        def broken() -> str:
            raise ValueError("boom")

        router.get("/broken", broken)

        async with TestClient(App(router, AppConfig(debug=True))) as client:
            response = await client.get("/broken")

        assert response.status == 500
        assert "ValueError: boom" in response.text


class TestFreeze:
    @pytest.mark.asyncio
    async def test_router_compiled_on_first_request(self) -> None:
        router = _router()
        app = App(router)
        assert router.compiled is False

        async with TestClient(app) as client:
            await client.get("/")

        assert router.compiled is True
        with pytest.raises(RuntimeError):
            router.get("/late", lambda: "late")

    def test_default_router(self) -> None:
        app = App()
        assert isinstance(app.router, Router)
        assert app.config == AppConfig()


class TestLifespan:
    @pytest.mark.asyncio
    async def test_startup_and_shutdown(self) -> None:
        router = _router()
        app = App(router)

        receive_queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return await receive_queue.get()

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await receive_queue.put({"type": "lifespan.startup"})
        await receive_queue.put({"type": "lifespan.shutdown"})
        await app({"type": "lifespan"}, receive, send)

        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        assert router.compiled is True

    @pytest.mark.asyncio
    async def test_non_http_scope_ignored(self) -> None:
        sent: list[dict[str, Any]] = []

        async def receive() -> dict[str, Any]:
            return {"type": "websocket.connect"}

        async def send(message: dict[str, Any]) -> None:
            sent.append(message)

        await App(_router())({"type": "websocket", "path": "/"}, receive, send)
        assert sent == []
