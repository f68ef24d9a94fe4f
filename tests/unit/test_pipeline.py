"""Tests for interceptor ordering and the error chain."""

import asyncio
import dataclasses

import httpx
import pytest

from interceptor_client import Client, RequestConfig, Response
from interceptor_client.errors import NotFoundError, RequestTimeoutError
from interceptor_client.pipeline import resolve, run_error_chain
from interceptor_client.testing import json_response, mock_transport


def build_client(handler=None):
    handler = handler or (lambda request: json_response(200, {"ok": True}))
    return Client(base_url="https://api.test", transport=mock_transport(handler))


class TestHelpers:
    @pytest.mark.unit
    async def test_resolve_plain_value(self):
        assert await resolve(5) == 5

    @pytest.mark.unit
    async def test_resolve_awaitable(self):
        async def five():
            return 5

        assert await resolve(five()) == 5

    @pytest.mark.unit
    async def test_error_chain_without_handlers_reraises(self):
        error = KeyError("x")

        with pytest.raises(KeyError) as exc_info:
            await run_error_chain([], error)

        assert exc_info.value is error

    @pytest.mark.unit
    async def test_error_chain_passes_raised_errors_along(self):
        seen = []

        def first(error):
            seen.append(error)
            raise ValueError("from first")

        def second(error):
            seen.append(error)
            raise error

        original = KeyError("x")
        with pytest.raises(ValueError, match="from first"):
            await run_error_chain([first, second], original)

        assert seen[0] is original
        assert isinstance(seen[1], ValueError)

    @pytest.mark.unit
    async def test_error_chain_stops_at_first_recovery(self):
        calls = []

        async def recover(error):
            calls.append("recover")
            return "recovered"

        def never(error):
            calls.append("never")
            raise error

        assert await run_error_chain([recover, never], KeyError("x")) == "recovered"
        assert calls == ["recover"]


class TestRequestInterceptors:
    @pytest.mark.unit
    async def test_run_in_registration_order(self):
        client = build_client()
        order = []

        def tag(name):
            def handler(config):
                order.append(name)
                return config.with_headers({"X-Last": name})

            return handler

        client.interceptors.request.use(tag("h1"))
        client.interceptors.request.use(tag("h2"))
        client.interceptors.request.use(tag("h3"))

        response = await client.get("/users")

        assert order == ["h1", "h2", "h3"]
        assert response.config.headers["X-Last"] == "h3"

    @pytest.mark.unit
    async def test_each_handler_sees_previous_result(self):
        client = build_client()

        client.interceptors.request.use(lambda config: dataclasses.replace(config, url=config.url + "/a"))

        async def append_b(config):
            await asyncio.sleep(0)
            return dataclasses.replace(config, url=config.url + "/b")

        client.interceptors.request.use(append_b)

        response = await client.get("/root")

        assert response.config.url == "/root/a/b"

    @pytest.mark.unit
    async def test_use_returns_client_for_chaining(self):
        client = build_client()

        assert client.interceptors.request.use(lambda config: config) is client
        assert client.interceptors.response.use(lambda response: response) is client

    @pytest.mark.unit
    async def test_rejection_handler_can_recover_config(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return json_response(200, {"ok": True})

        client = build_client(handler)

        def broken(config):
            raise RuntimeError("interceptor failed")

        client.interceptors.request.use(broken, lambda error: RequestConfig(url="/fallback"))

        response = await client.get("/users")

        assert response.config.url == "/fallback"
        assert seen == ["https://api.test/fallback"]

    @pytest.mark.unit
    async def test_request_phase_error_reaches_response_error_handlers(self):
        client = build_client()
        seen = []

        def broken(config):
            raise RuntimeError("interceptor failed")

        def record(error):
            seen.append(error)
            raise error

        client.interceptors.request.use(broken)
        client.interceptors.response.use(on_rejected=record)

        with pytest.raises(RuntimeError, match="interceptor failed"):
            await client.get("/users")

        assert len(seen) == 1


class TestResponseInterceptors:
    @pytest.mark.unit
    async def test_run_in_registration_order(self):
        client = build_client()
        order = []

        def tag(name):
            def handler(response):
                order.append(name)
                return dataclasses.replace(response, data={**response.data, name: True})

            return handler

        client.interceptors.response.use(tag("r1"))
        client.interceptors.response.use(tag("r2"))

        response = await client.get("/users")

        assert order == ["r1", "r2"]
        assert response.data == {"ok": True, "r1": True, "r2": True}

    @pytest.mark.unit
    async def test_success_handlers_skipped_on_error(self):
        client = build_client(lambda request: json_response(404))
        called = []
        client.interceptors.response.use(lambda response: called.append(response) or response)

        with pytest.raises(NotFoundError):
            await client.get("/missing")

        assert called == []

    @pytest.mark.unit
    async def test_error_handlers_run_in_order_on_separate_sequence(self):
        client = build_client(lambda request: json_response(404))
        order = []

        def tag(name):
            def handler(error):
                order.append(name)
                raise error

            return handler

        client.interceptors.response.use(lambda response: order.append("success") or response, tag("e1"))
        client.interceptors.response.use(on_rejected=tag("e2"))

        with pytest.raises(NotFoundError):
            await client.get("/missing")

        assert order == ["e1", "e2"]

    @pytest.mark.unit
    async def test_error_handler_recovery_becomes_result(self):
        client = build_client(lambda request: json_response(503))
        fallback = Response(
            data={"cached": True},
            status=200,
            status_text="OK",
            headers=httpx.Headers(),
            config=RequestConfig(url="/cache"),
        )

        async def use_cache(error):
            return fallback

        client.interceptors.response.use(on_rejected=use_cache)

        assert await client.get("/users") is fallback

    @pytest.mark.unit
    async def test_failing_success_handler_is_routed_to_error_handlers(self):
        client = build_client()
        seen = []

        def explode(response):
            raise LookupError("bad payload")

        def record(error):
            seen.append(type(error))
            raise error

        client.interceptors.response.use(explode, record)

        with pytest.raises(LookupError):
            await client.get("/users")

        assert seen == [LookupError]

    @pytest.mark.unit
    async def test_timeout_reaches_error_handlers(self):
        class Hanging:
            async def send(self, url, *, method, headers, content=None):
                await asyncio.Event().wait()

            async def aclose(self):
                pass

        client = Client(transport=Hanging())
        seen = []

        def record(error):
            seen.append(error)
            raise error

        client.interceptors.response.use(on_rejected=record)

        with pytest.raises(RequestTimeoutError):
            await client.get("https://api.test/never", timeout=1)

        assert isinstance(seen[0], RequestTimeoutError)

    @pytest.mark.unit
    async def test_concurrent_requests_run_independent_passes(self):
        async def handler(request):
            await asyncio.sleep(0)
            return json_response(200, {"path": request.url.path})

        client = build_client(handler)

        async def stamp(config):
            await asyncio.sleep(0)
            return config.with_headers({"X-Path": config.url})

        client.interceptors.request.use(stamp)

        first, second = await asyncio.gather(client.get("/a"), client.get("/b"))

        assert first.config.headers["X-Path"] == "/a"
        assert second.config.headers["X-Path"] == "/b"
        assert first.data == {"path": "/a"}
        assert second.data == {"path": "/b"}
