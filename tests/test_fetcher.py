import asyncio
import json

import httpx
import pytest

from framecheck.core.fetcher import (
    FetchError, HeaderFetcher, RemoteHeaderFetcher, resolve_ip,
)


async def fixed_ip(host):
    return "203.0.113.7" if host else "-"


def client_for(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_fetch_lowercases_headers_and_resolves_ip():
    def handler(request):
        return httpx.Response(200, headers=[
            ("X-Frame-Options", "DENY"),
            ("Set-Cookie", "a=1"),
            ("Set-Cookie", "b=2"),
        ], text="<html></html>")

    async def scenario():
        async with client_for(handler) as client:
            fetcher = HeaderFetcher(client=client, resolver=fixed_ip)
            return await fetcher.fetch("https://a.example/")

    result = asyncio.run(scenario())
    assert result.headers["x-frame-options"] == "DENY"
    assert result.headers["set-cookie"] == "a=1, b=2"
    assert result.ip == "203.0.113.7"


def test_error_status_still_returns_headers():
    def handler(request):
        return httpx.Response(403, headers={"X-Frame-Options": "SAMEORIGIN"})

    async def scenario():
        async with client_for(handler) as client:
            return await HeaderFetcher(client=client, resolver=fixed_ip).fetch(
                "https://a.example/")

    assert asyncio.run(scenario()).headers["x-frame-options"] == "SAMEORIGIN"


def test_network_error_becomes_fetch_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async def scenario():
        async with client_for(handler) as client:
            await HeaderFetcher(client=client, resolver=fixed_ip).fetch(
                "https://a.example/")

    with pytest.raises(FetchError) as info:
        asyncio.run(scenario())
    assert "connection refused" in info.value.message


def test_remote_service_success():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        seen["url"] = str(request.url)
        return httpx.Response(200, json={
            "headers": {"Content-Security-Policy": "frame-ancestors 'none'"},
            "ip": "198.51.100.2",
        })

    async def scenario():
        async with client_for(handler) as client:
            fetcher = RemoteHeaderFetcher("http://svc.local/api/check-headers",
                                          client=client)
            return await fetcher.fetch("https://a.example/")

    result = asyncio.run(scenario())
    assert seen == {"body": {"url": "https://a.example/"},
                    "url": "http://svc.local/api/check-headers"}
    assert result.headers == {"content-security-policy": "frame-ancestors 'none'"}
    assert result.ip == "198.51.100.2"


@pytest.mark.parametrize("status,payload,message", [
    (502, {"error": "Target unreachable"}, "Target unreachable"),
    (200, {"error": "Blocked by policy"}, "Blocked by policy"),
    (500, None, "HTTP 500"),
])
def test_remote_service_errors(status, payload, message):
    def handler(request):
        if payload is None:
            return httpx.Response(status, text="oops")
        return httpx.Response(status, json=payload)

    async def scenario():
        async with client_for(handler) as client:
            await RemoteHeaderFetcher("http://svc.local/x", client=client).fetch(
                "https://a.example/")

    with pytest.raises(FetchError) as info:
        asyncio.run(scenario())
    assert info.value.message == message


def test_remote_service_missing_ip_defaults():
    def handler(request):
        return httpx.Response(200, json={"headers": {}})

    async def scenario():
        async with client_for(handler) as client:
            return await RemoteHeaderFetcher("http://svc.local/x", client=client).fetch(
                "https://a.example/")

    assert asyncio.run(scenario()).ip == "-"


def test_resolve_ip_without_host():
    assert asyncio.run(resolve_ip("")) == "-"
