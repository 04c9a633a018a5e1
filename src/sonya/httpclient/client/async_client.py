"""
비동기 HTTP 클라이언트
- httpx.AsyncClient 기반
- 인터셉터가 awaitable을 반환하면 await 한다 (자체 I/O를 하는 async 인터셉터 지원)
- 취소는 asyncio 태스크 취소로, 타임아웃은 요청 단위 timeout으로 처리
"""

from __future__ import annotations

import inspect
from typing import Any

import httpx

from sonya.httpclient._types import Option
from sonya.httpclient.client._base import BaseClient, Timeout


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class AsyncClient(BaseClient):
    """
    인터셉터 파이프라인을 가진 비동기 HTTP 클라이언트

    사용법:
        async with AsyncClient(with_url_prefix("https://httpbin.org")) as client:
            body = for_json(UserAgent)
            await client.get("/user-agent", expected_status_code(200), body)
    """

    def _create_http(self, http_options: dict[str, Any]) -> httpx.AsyncClient:
        return httpx.AsyncClient(**http_options)

    async def get(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return await self.execute("GET", url, *options, timeout=timeout)

    async def post(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        """POST 요청. body는 with_body / with_json 인터셉터로 설정한다."""
        return await self.execute("POST", url, *options, timeout=timeout)

    async def put(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return await self.execute("PUT", url, *options, timeout=timeout)

    async def patch(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return await self.execute("PATCH", url, *options, timeout=timeout)

    async def delete(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return await self.execute("DELETE", url, *options, timeout=timeout)

    async def execute(
        self,
        method: str,
        url: str,
        *options: Option,
        timeout: Timeout = None,
    ) -> httpx.Response:
        """method / url로 요청을 만들어 do()에 위임한다."""
        request = self.build_request(method, url, timeout=timeout)
        return await self.do(request, *options)

    async def do(self, request: httpx.Request, *options: Option) -> httpx.Response:
        """
        request에 인터셉터 체인을 적용해 전송하고 최종 응답을 반환

        Client.do()와 순서/예외 규칙이 같다. 인터셉터 사이에서는 await 하지 않으므로
        동기 인터셉터만 있는 경우 중단 지점은 transport 호출뿐이다.
        """
        options = self._check_call_options(options)
        for interceptor in self._request_chain(options):
            request = await _resolve(interceptor.intercept_request(request))

        self._attach_cookies(request)
        self._log_call(request, options)

        try:
            raw = await self._http.send(request, stream=True)
        except httpx.TransportError as e:
            self._log_transport_error(request, e)
            raise

        try:
            await raw.aread()
            response = raw
            for interceptor in self._response_chain(options):
                response = await _resolve(interceptor.intercept_response(response))
            if response is not raw:
                await response.aread()
            self._log_response(request, response)
            return response
        finally:
            await raw.aclose()

    async def close(self) -> None:
        """httpx 클라이언트 종료"""
        await self._http.aclose()

    async def __aenter__(self) -> AsyncClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()
