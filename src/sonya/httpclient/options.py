"""
클라이언트/호출 옵션
- HTTPClientOption: httpx 클라이언트 생성 인자를 조정 (클라이언트 전용)
- RequestInterceptorOption / ResponseInterceptorOption: 인터셉터를 옵션으로 감싼다
- ClientConfig: 클라이언트 생성 시 옵션을 분류한 결과
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from ._types import (
    Capability,
    Option,
    RequestInterceptor,
    RequestInterceptorFunc,
    ResponseInterceptor,
    ResponseInterceptorFunc,
    Scope,
    classify,
)

DEFAULT_TIMEOUT = httpx.Timeout(30.0, connect=10.0)


class HTTPClientOption(Option):
    """
    httpx 클라이언트 생성 인자(kwargs)를 직접 수정하는 옵션

    클라이언트 생성 시에만 사용할 수 있다.

    사용법:
        HTTPClientOption(lambda kw: kw.update(follow_redirects=True))
    """

    scope = Scope.CLIENT
    capabilities = Capability.TRANSPORT

    def __init__(self, fn: Callable[[dict[str, Any]], None]):
        self.fn = fn

    def apply(self, http_options: dict[str, Any]) -> None:
        self.fn(http_options)

    def __repr__(self) -> str:
        return f"HTTPClientOption({self.fn!r})"


class RequestInterceptorOption(Option):
    """RequestInterceptor를 감싸 클라이언트 또는 개별 호출에 전달하는 옵션"""

    capabilities = Capability.REQUEST

    def __init__(self, interceptor: RequestInterceptor):
        self.interceptor = interceptor

    def intercept_request(self, request: httpx.Request) -> httpx.Request:
        return self.interceptor.intercept_request(request)

    def __repr__(self) -> str:
        return f"RequestInterceptorOption({self.interceptor!r})"


class ResponseInterceptorOption(Option):
    """ResponseInterceptor를 감싸 클라이언트 또는 개별 호출에 전달하는 옵션"""

    capabilities = Capability.RESPONSE

    def __init__(self, interceptor: ResponseInterceptor):
        self.interceptor = interceptor

    def intercept_response(self, response: httpx.Response) -> httpx.Response:
        return self.interceptor.intercept_response(response)

    def __repr__(self) -> str:
        return f"ResponseInterceptorOption({self.interceptor!r})"


def with_transport(transport: httpx.BaseTransport | httpx.AsyncBaseTransport) -> HTTPClientOption:
    """httpx 클라이언트가 사용할 transport를 지정한다."""

    def _apply(http_options: dict[str, Any]) -> None:
        http_options["transport"] = transport

    return HTTPClientOption(_apply)


def with_timeout(timeout: float | httpx.Timeout | None) -> HTTPClientOption:
    """클라이언트 기본 타임아웃을 지정한다. None이면 타임아웃 없음."""

    def _apply(http_options: dict[str, Any]) -> None:
        http_options["timeout"] = timeout

    return HTTPClientOption(_apply)


def with_request_interceptor(interceptor: RequestInterceptor) -> RequestInterceptorOption:
    if not isinstance(interceptor, RequestInterceptor):
        raise TypeError(f"{interceptor!r} does not implement intercept_request()")
    return RequestInterceptorOption(interceptor)


def with_request_interceptor_func(
    fn: Callable[[httpx.Request], httpx.Request],
) -> RequestInterceptorOption:
    return RequestInterceptorOption(RequestInterceptorFunc(fn))


def with_response_interceptor(interceptor: ResponseInterceptor) -> ResponseInterceptorOption:
    if not isinstance(interceptor, ResponseInterceptor):
        raise TypeError(f"{interceptor!r} does not implement intercept_response()")
    return ResponseInterceptorOption(interceptor)


def with_response_interceptor_func(
    fn: Callable[[httpx.Response], httpx.Response],
) -> ResponseInterceptorOption:
    return ResponseInterceptorOption(ResponseInterceptorFunc(fn))


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """
    클라이언트 생성 옵션을 분류한 결과

    생성 이후에는 변경되지 않으며 모든 호출이 읽기 전용으로 공유한다.
    """

    request_interceptors: tuple[RequestInterceptor, ...] = ()
    response_interceptors: tuple[ResponseInterceptor, ...] = ()
    http_options: Mapping[str, Any] = field(
        default_factory=lambda: {"timeout": DEFAULT_TIMEOUT}
    )

    @classmethod
    def from_options(cls, options: Iterable[Option]) -> ClientConfig:
        """
        옵션을 전달된 순서대로 분류한다.

        TRANSPORT 옵션은 httpx 생성 인자에 즉시 적용하고,
        REQUEST / RESPONSE 옵션은 각 체인 뒤에 추가한다.
        두 기능을 모두 가진 옵션은 양쪽 체인에 한 번씩 들어간다.
        """
        http_options: dict[str, Any] = {"timeout": DEFAULT_TIMEOUT}
        request_interceptors: list[RequestInterceptor] = []
        response_interceptors: list[ResponseInterceptor] = []

        for option in options:
            capabilities = classify(option, Scope.CLIENT)
            if Capability.TRANSPORT in capabilities:
                option.apply(http_options)
                continue
            if Capability.REQUEST in capabilities:
                request_interceptors.append(option)
            if Capability.RESPONSE in capabilities:
                response_interceptors.append(option)
            if not capabilities & (Capability.REQUEST | Capability.RESPONSE):
                raise TypeError(f"unexpected option: {option!r}")

        return cls(
            request_interceptors=tuple(request_interceptors),
            response_interceptors=tuple(response_interceptors),
            http_options=http_options,
        )
