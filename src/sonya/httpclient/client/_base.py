"""BaseClient — Client / AsyncClient 공통 베이스."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

import httpx

from sonya.httpclient._types import (
    Capability,
    Option,
    RequestInterceptor,
    ResponseInterceptor,
    Scope,
    classify,
)
from sonya.httpclient.errors import RequestConstructionError
from sonya.httpclient.logging import call_extra
from sonya.httpclient.options import ClientConfig

logger = logging.getLogger(__name__)

# RFC 9110 token
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")

Timeout = float | httpx.Timeout | None


class BaseClient(ABC):
    """HTTP 클라이언트 추상 베이스.

    - 옵션 분류(ClientConfig), 요청 생성, 인터셉터 체인 순서는 베이스에서 처리한다.
    - 서브클래스는 httpx 클라이언트 생성과 do() 실행만 구현한다.

    체인 순서:
        클라이언트 요청 인터셉터 → 호출 요청 인터셉터 → transport
        → 호출 응답 인터셉터 → 클라이언트 응답 인터셉터
    """

    def __init__(self, *options: Option) -> None:
        self._config = ClientConfig.from_options(options)
        self._http = self._create_http(dict(self._config.http_options))

    @property
    def config(self) -> ClientConfig:
        return self._config

    # --- subclass hooks ---

    @abstractmethod
    def _create_http(self, http_options: dict[str, Any]) -> httpx.Client | httpx.AsyncClient:
        """분류된 생성 인자로 httpx 클라이언트를 만든다."""

    # --- request construction ---

    def build_request(
        self,
        method: str,
        url: str | httpx.URL,
        *,
        timeout: Timeout = None,
    ) -> httpx.Request:
        """
        body가 비어 있는 새 요청을 만든다.

        httpx 클라이언트의 base_url, params, headers, cookies가 병합된다.
        base_url이 없으면 상대 URL은 상대 URL 그대로 남고, 쿠키는 인터셉터 체인이
        URL을 완성한 뒤 전송 직전에 붙는다.

        Args:
            method: HTTP 메서드 토큰
            url: 절대 또는 상대 URL (상대 URL은 with_url_prefix 등으로 보완)
            timeout: 이 요청의 타임아웃. None이면 클라이언트 기본값,
                타임아웃을 끄려면 httpx.Timeout(None)

        Raises:
            RequestConstructionError: 메서드 토큰이나 URL이 올바르지 않을 때
        """
        if not _METHOD_TOKEN.fullmatch(method):
            raise RequestConstructionError(method, str(url), "invalid method")

        try:
            url = httpx.URL(url)
            if url.is_relative_url and not self._http.base_url.is_absolute_url:
                # 쿠키 jar는 호스트 없는 URL을 다루지 못하므로 _attach_cookies에서 붙인다
                return httpx.Request(
                    method,
                    url,
                    params=self._http.params,
                    headers=self._http.headers,
                    extensions={"timeout": self._timeout(timeout).as_dict()},
                )
            return self._http.build_request(method, url, timeout=self._timeout(timeout))
        except httpx.InvalidURL as e:
            raise RequestConstructionError(method, str(url), str(e)) from e

    def _timeout(self, timeout: Timeout) -> httpx.Timeout:
        return self._http.timeout if timeout is None else httpx.Timeout(timeout)

    def _attach_cookies(self, request: httpx.Request) -> None:
        # 상대 URL로 만든 요청은 prefix 인터셉터를 거친 뒤에야 도메인이 정해진다
        if self._http.cookies and request.url.is_absolute_url and "Cookie" not in request.headers:
            self._http.cookies.set_cookie_header(request)

    # --- interceptor chain ---

    def _request_chain(self, options: Sequence[Option]) -> list[RequestInterceptor]:
        chain: list[RequestInterceptor] = list(self._config.request_interceptors)
        chain.extend(o for o in options if Capability.REQUEST in o.capabilities)
        return chain

    def _response_chain(self, options: Sequence[Option]) -> list[ResponseInterceptor]:
        chain: list[ResponseInterceptor] = [
            o for o in options if Capability.RESPONSE in o.capabilities
        ]
        chain.extend(self._config.response_interceptors)
        return chain

    @staticmethod
    def _check_call_options(options: Sequence[object]) -> Sequence[Option]:
        for option in options:
            classify(option, Scope.CALL)
        return options  # type: ignore[return-value]

    def _log_call(self, request: httpx.Request, options: Sequence[Option]) -> None:
        logger.debug(
            "호출 시작",
            extra=call_extra(
                request,
                request_interceptors=len(self._config.request_interceptors),
                response_interceptors=len(self._config.response_interceptors),
                call_options=len(options),
            ),
        )

    def _log_response(self, request: httpx.Request, response: httpx.Response) -> None:
        logger.debug("응답 수신", extra=call_extra(request, status_code=response.status_code))

    def _log_transport_error(self, request: httpx.Request, error: Exception) -> None:
        logger.warning(
            f"전송 실패: {type(error).__name__}: {error}",
            extra=call_extra(request, error=type(error).__name__),
        )
