"""
공용 fixture
- httpbin 흉내를 내는 MockTransport 핸들러 (네트워크 호출 없음)
"""

import httpx
import pytest
import pytest_asyncio

from sonya.httpclient import AsyncClient, Client, with_transport, with_url_prefix

BASE_URL = "https://example.test"


def httpbin_handler(request: httpx.Request) -> httpx.Response:
    """
    /status/<code> → 해당 상태 코드, 빈 body
    /html          → text/html 응답
    /echo          → 요청 body를 그대로 JSON 응답으로 반환
    그 외          → 요청 정보를 담은 JSON (method, url, headers, data)
    """
    path = request.url.path
    if path.startswith("/status/"):
        return httpx.Response(int(path.rsplit("/", 1)[1]))
    if path == "/html":
        return httpx.Response(200, text="<html></html>", headers={"Content-Type": "text/html"})
    if path == "/echo":
        return httpx.Response(
            200,
            content=request.content,
            headers={"Content-Type": "application/json"},
        )
    return httpx.Response(
        200,
        json={
            "method": request.method,
            "url": str(request.url),
            "headers": dict(request.headers),
            "data": request.content.decode(),
        },
    )


@pytest.fixture
def captured():
    """transport가 받은 요청 목록"""
    return []


@pytest.fixture
def transport(captured):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpbin_handler(request)

    return httpx.MockTransport(handler)


@pytest.fixture
def client(transport):
    """BASE_URL prefix가 걸린 동기 클라이언트"""
    with Client(with_transport(transport), with_url_prefix(BASE_URL)) as c:
        yield c


@pytest_asyncio.fixture
async def async_client(transport):
    """BASE_URL prefix가 걸린 비동기 클라이언트"""
    async with AsyncClient(with_transport(transport), with_url_prefix(BASE_URL)) as c:
        yield c
