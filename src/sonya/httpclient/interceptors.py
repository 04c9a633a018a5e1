"""
기본 제공 인터셉터
- 요청: 헤더 설정, body 설정, JSON body 설정, URL prefix
- 응답: 상태 코드 검증
- 요청+응답: JSON 응답 디코딩 (ForJSON)

엔진은 이 인터셉터들에 대해 아무것도 모른다. 모두 Option 프로토콜만으로 동작한다.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable
from typing import Any, Generic, TypeVar

import httpx

from ._types import Capability, Option
from .codec import decode_json, encode_json
from .errors import UnexpectedContentTypeError, UnexpectedStatusCodeError
from .options import (
    RequestInterceptorOption,
    ResponseInterceptorOption,
    with_request_interceptor_func,
    with_response_interceptor_func,
)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"

# body를 교체할 때 새로 계산해야 하는 헤더
_BODY_HEADERS = ("Content-Type", "Content-Length", "Transfer-Encoding")

RequestContent = bytes | Iterable[bytes] | AsyncIterable[bytes]


def with_request_header(header: str, value: str) -> RequestInterceptorOption:
    """요청 헤더 header를 value로 설정(덮어쓰기)한다."""

    def _set_header(request: httpx.Request) -> httpx.Request:
        request.headers[header] = value
        return request

    return with_request_interceptor_func(_set_header)


def _replace_body(
    request: httpx.Request,
    content: RequestContent,
    content_type: str,
    length: int | None,
) -> httpx.Request:
    """기존 body를 닫고 content를 body로 가진 새 요청을 만든다."""
    if isinstance(request.stream, httpx.SyncByteStream):
        request.stream.close()

    headers = request.headers.copy()
    for name in _BODY_HEADERS:
        headers.pop(name, None)
    headers["Content-Type"] = content_type
    if length is not None:
        headers["Content-Length"] = str(length)

    return httpx.Request(
        request.method,
        request.url,
        headers=headers,
        content=content,
        extensions=request.extensions,
    )


def with_body(
    content: RequestContent,
    content_type: str,
    length: int | None = None,
) -> RequestInterceptorOption:
    """
    요청 body를 content로 교체하는 인터셉터

    Args:
        content: body 바이트 또는 바이트 청크 iterable
        content_type: Content-Type 헤더 값
        length: Content-Length. None이고 content가 bytes면 자동 계산,
            그 외에는 chunked 전송

    이전 body가 닫힐 때 발생한 예외는 그대로 전파되어 호출을 중단시킨다.
    """
    if length is None and isinstance(content, bytes):
        length = len(content)

    def _set_body(request: httpx.Request) -> httpx.Request:
        return _replace_body(request, content, content_type, length)

    return with_request_interceptor_func(_set_body)


def with_json(value: Any) -> RequestInterceptorOption:
    """
    value를 JSON으로 직렬화하여 요청 body로 설정하는 인터셉터

    Content-Type: application/json 과 정확한 Content-Length를 함께 설정한다.
    직렬화 실패 시 pydantic 예외가 그대로 전파된다.
    """

    def _set_json(request: httpx.Request) -> httpx.Request:
        data = encode_json(value)
        return _replace_body(request, data, JSON_CONTENT_TYPE, len(data))

    return with_request_interceptor_func(_set_json)


def expected_status_code(*status_codes: int) -> ResponseInterceptorOption:
    """
    응답 상태 코드가 status_codes 중 하나인지 검증하는 인터셉터

    일치하면 응답을 그대로 통과시키고, 아니면 UnexpectedStatusCodeError를 던진다.
    """
    expected = frozenset(status_codes)

    def _check_status(response: httpx.Response) -> httpx.Response:
        if response.status_code in expected:
            return response
        raise UnexpectedStatusCodeError(response, sorted(expected))

    return with_response_interceptor_func(_check_status)


class ForJSON(Option, Generic[T]):
    """
    JSON 응답을 target 타입으로 디코딩해 value에 담는 요청+응답 인터셉터

    요청 단계: Accept: application/json 헤더 설정
    응답 단계: Content-Type이 application/json으로 시작하는지 확인한 뒤
              body 전체를 읽어 target 타입으로 검증

    호출마다 value를 덮어쓰므로 동시에 진행 중인 두 호출에 같은 인스턴스를
    공유하면 안 된다.

    사용법:
        body = for_json(UserAgent)
        await client.get("/user-agent", body)
        print(body.value.user_agent)
    """

    capabilities = Capability.REQUEST | Capability.RESPONSE

    def __init__(self, target: type[T] | Any = Any):
        self.target = target
        self.value: T | None = None

    def intercept_request(self, request: httpx.Request) -> httpx.Request:
        request.headers["Accept"] = JSON_CONTENT_TYPE
        return request

    def intercept_response(self, response: httpx.Response) -> httpx.Response:
        content_type = response.headers.get("Content-Type", "")
        if not content_type.startswith(JSON_CONTENT_TYPE):
            raise UnexpectedContentTypeError(response, JSON_CONTENT_TYPE)

        self.value = decode_json(response.read(), self.target)
        return response

    def __repr__(self) -> str:
        return f"ForJSON({self.target!r})"


def for_json(target: type[T] | Any = Any) -> ForJSON[T]:
    """JSON 응답 body를 target 타입으로 받아오는 ForJSON 옵션을 만든다."""
    return ForJSON(target)


def with_url_prefix(prefix: str) -> RequestInterceptorOption:
    """
    절대 URL이 아닌 요청에 공통 prefix를 붙이는 인터셉터

    prefix는 문법적으로 올바른 http(s) URL이어야 한다.
    합친 문자열이 올바른 URL이 아니면 httpx.InvalidURL이 호출 시점에 전파된다.
    """

    def _apply_prefix(request: httpx.Request) -> httpx.Request:
        if request.url.is_absolute_url:
            return request

        url = httpx.URL(prefix + str(request.url))
        request.url = url
        # 상대 URL로 만든 요청에는 Host 헤더가 없다
        if "Host" not in request.headers and url.host:
            request.headers["Host"] = url.netloc.decode("ascii")
        return request

    return with_request_interceptor_func(_apply_prefix)
