"""
sonya-httpclient: httpx 위에 요청/응답 인터셉터 파이프라인을 얹은 HTTP 클라이언트

사용법:
    async with AsyncClient(
        with_url_prefix("https://httpbin.org"),
        expected_status_code(200),
    ) as client:
        body = for_json()
        await client.post("/post", with_json("hello"), body)
"""

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
from .client import AsyncClient, BaseClient, Client
from .errors import (
    HTTPClientError,
    RequestConstructionError,
    UnexpectedContentTypeError,
    UnexpectedStatusCodeError,
)
from .interceptors import (
    ForJSON,
    expected_status_code,
    for_json,
    with_body,
    with_json,
    with_request_header,
    with_url_prefix,
)
from .logging import setup_logging
from .options import (
    ClientConfig,
    HTTPClientOption,
    RequestInterceptorOption,
    ResponseInterceptorOption,
    with_request_interceptor,
    with_request_interceptor_func,
    with_response_interceptor,
    with_response_interceptor_func,
    with_timeout,
    with_transport,
)

__version__ = "0.1.0"

__all__ = [
    "AsyncClient",
    "BaseClient",
    "Client",
    "ClientConfig",
    "Capability",
    "Option",
    "Scope",
    "classify",
    "RequestInterceptor",
    "RequestInterceptorFunc",
    "ResponseInterceptor",
    "ResponseInterceptorFunc",
    "HTTPClientOption",
    "RequestInterceptorOption",
    "ResponseInterceptorOption",
    "with_transport",
    "with_timeout",
    "with_request_interceptor",
    "with_request_interceptor_func",
    "with_response_interceptor",
    "with_response_interceptor_func",
    "ForJSON",
    "for_json",
    "with_request_header",
    "with_body",
    "with_json",
    "expected_status_code",
    "with_url_prefix",
    "HTTPClientError",
    "RequestConstructionError",
    "UnexpectedStatusCodeError",
    "UnexpectedContentTypeError",
    "setup_logging",
    "__version__",
]
