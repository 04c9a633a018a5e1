"""Interceptor 프로토콜, Option 베이스 및 분류 함수 정의."""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol, runtime_checkable

import httpx


@runtime_checkable
class RequestInterceptor(Protocol):
    """요청 가로채기 프로토콜.

    요청을 수정해서 그대로 반환하거나, 새 요청으로 교체하거나,
    예외를 던져 호출 전체를 중단시킬 수 있다.
    """

    def intercept_request(self, request: httpx.Request) -> httpx.Request:
        ...


@runtime_checkable
class ResponseInterceptor(Protocol):
    """응답 가로채기 프로토콜.

    상태 코드나 헤더를 검증하고, 응답을 교체하거나, 예외를 던져 거부할 수 있다.
    """

    def intercept_response(self, response: httpx.Response) -> httpx.Response:
        ...


@dataclass(frozen=True, slots=True)
class RequestInterceptorFunc:
    """함수 하나로 RequestInterceptor를 구현하는 어댑터."""

    fn: Callable[[httpx.Request], httpx.Request]

    def intercept_request(self, request: httpx.Request) -> httpx.Request:
        return self.fn(request)


@dataclass(frozen=True, slots=True)
class ResponseInterceptorFunc:
    """함수 하나로 ResponseInterceptor를 구현하는 어댑터."""

    fn: Callable[[httpx.Response], httpx.Response]

    def intercept_response(self, response: httpx.Response) -> httpx.Response:
        return self.fn(response)


class Scope(enum.Flag):
    """Option을 등록할 수 있는 위치"""

    CLIENT = enum.auto()
    CALL = enum.auto()


class Capability(enum.Flag):
    """Option이 가진 기능"""

    NONE = 0
    TRANSPORT = enum.auto()
    REQUEST = enum.auto()
    RESPONSE = enum.auto()


class Option:
    """
    클라이언트 생성 시 또는 개별 호출 시 전달하는 옵션의 베이스 클래스

    서브클래스는 scope / capabilities 클래스 속성을 선언하고
    capabilities에 해당하는 훅을 구현한다:

        TRANSPORT → apply(http_options)
        REQUEST   → intercept_request(request)
        RESPONSE  → intercept_response(response)

    REQUEST | RESPONSE 를 함께 가진 옵션은 양쪽 체인에 모두 등록된다.
    """

    scope: ClassVar[Scope] = Scope.CLIENT | Scope.CALL
    capabilities: ClassVar[Capability] = Capability.NONE

    def apply(self, http_options: dict[str, Any]) -> None:
        raise NotImplementedError

    def intercept_request(self, request: httpx.Request) -> httpx.Request:
        raise NotImplementedError

    def intercept_response(self, response: httpx.Response) -> httpx.Response:
        raise NotImplementedError


def classify(option: object, scope: Scope) -> Capability:
    """
    option을 scope 위치에 등록할 수 있는지 확인하고 기능 플래그를 반환

    Option이 아니거나 scope에서 허용되지 않는 옵션은 프로그래밍 오류이므로
    TypeError를 던진다.
    """
    if not isinstance(option, Option):
        raise TypeError(f"unexpected option: {option!r}")
    if scope not in option.scope:
        raise TypeError(
            f"option {option!r} cannot be used at {scope.name.lower()} level"
        )
    return option.capabilities
