"""
동기 HTTP 클라이언트
- httpx.Client 기반
- 인터셉터 결과가 awaitable이면 TypeError (비동기 인터셉터는 AsyncClient 사용)
"""

from __future__ import annotations

import inspect
from typing import Any, TypeVar

import httpx

from sonya.httpclient._types import Option
from sonya.httpclient.client._base import BaseClient, Timeout

T = TypeVar("T")


def _ensure_sync(value: T, interceptor: object) -> T:
    if inspect.isawaitable(value):
        if inspect.iscoroutine(value):
            value.close()
        raise TypeError(f"{interceptor!r} returned an awaitable; use AsyncClient")
    return value


class Client(BaseClient):
    """
    인터셉터 파이프라인을 가진 동기 HTTP 클라이언트

    사용법:
        with Client(with_url_prefix("https://httpbin.org"), expected_status_code(200)) as client:
            body = for_json()
            response = client.get("/get", body)
    """

    def _create_http(self, http_options: dict[str, Any]) -> httpx.Client:
        return httpx.Client(**http_options)

    def get(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return self.execute("GET", url, *options, timeout=timeout)

    def post(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        """POST 요청. body는 with_body / with_json 인터셉터로 설정한다."""
        return self.execute("POST", url, *options, timeout=timeout)

    def put(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return self.execute("PUT", url, *options, timeout=timeout)

    def patch(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return self.execute("PATCH", url, *options, timeout=timeout)

    def delete(self, url: str, *options: Option, timeout: Timeout = None) -> httpx.Response:
        return self.execute("DELETE", url, *options, timeout=timeout)

    def execute(
        self,
        method: str,
        url: str,
        *options: Option,
        timeout: Timeout = None,
    ) -> httpx.Response:
        """method / url로 요청을 만들어 do()에 위임한다."""
        request = self.build_request(method, url, timeout=timeout)
        return self.do(request, *options)

    def do(self, request: httpx.Request, *options: Option) -> httpx.Response:
        """
        request에 인터셉터 체인을 적용해 전송하고 최종 응답을 반환

        인터셉터나 transport가 던진 첫 예외가 그대로 전파되며 이후 단계는 실행되지 않는다.
        transport가 돌려준 원본 응답은 어떤 경로로 끝나든 한 번 닫힌다.
        """
        options = self._check_call_options(options)
        for interceptor in self._request_chain(options):
            request = _ensure_sync(interceptor.intercept_request(request), interceptor)

        self._attach_cookies(request)
        self._log_call(request, options)

        try:
            raw = self._http.send(request, stream=True)
        except httpx.TransportError as e:
            self._log_transport_error(request, e)
            raise

        try:
            raw.read()
            response = raw
            for interceptor in self._response_chain(options):
                response = _ensure_sync(interceptor.intercept_response(response), interceptor)
            if response is not raw:
                response.read()
            self._log_response(request, response)
            return response
        finally:
            raw.close()

    def close(self) -> None:
        """httpx 클라이언트 종료"""
        self._http.close()

    def __enter__(self) -> Client:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
