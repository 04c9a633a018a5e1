"""
HTTP 클라이언트 에러 클래스
- 요청 생성 실패, 상태 코드/Content-Type 불일치를 의미 있는 예외로 표현
- 전송 계층 에러(httpx.TransportError)와 인터셉터가 던진 예외는 래핑하지 않는다
"""

from __future__ import annotations

from collections.abc import Collection

import httpx


class HTTPClientError(Exception):
    """sonya.httpclient 예외의 베이스 클래스"""


class RequestConstructionError(HTTPClientError):
    """
    요청 객체를 만들 수 없을 때 발생하는 예외

    인터셉터가 실행되기 전에 즉시 발생한다.

    Attributes:
        method: 요청 메서드
        url: 요청 URL 문자열
        message: 에러 메시지
    """

    def __init__(self, method: str, url: str, message: str):
        self.method = method
        self.url = url
        self.message = message
        super().__init__(f"invalid request {method} {url!r}: {message}")


class UnexpectedStatusCodeError(HTTPClientError):
    """
    응답 상태 코드가 기대한 값이 아닐 때 발생하는 예외

    Attributes:
        status_code: 실제 응답 상태 코드
        expected: 허용된 상태 코드 목록
        response: 거부된 응답
    """

    def __init__(self, response: httpx.Response, expected: Collection[int]):
        self.status_code = response.status_code
        self.expected = tuple(expected)
        self.response = response
        super().__init__(f"unexpected status code: {response.status_code}")


class UnexpectedContentTypeError(HTTPClientError):
    """
    응답 Content-Type이 기대한 미디어 타입으로 시작하지 않을 때 발생하는 예외

    Attributes:
        content_type: 실제 Content-Type 헤더 값 (없으면 빈 문자열)
        expected: 기대한 미디어 타입
        response: 거부된 응답
    """

    def __init__(self, response: httpx.Response, expected: str):
        self.content_type = response.headers.get("Content-Type", "")
        self.expected = expected
        self.response = response
        label = "JSON" if expected == "application/json" else expected
        super().__init__(
            f"expected {label} response but got {self.content_type or '<none>'}"
        )
