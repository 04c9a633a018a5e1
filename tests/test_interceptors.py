"""
기본 제공 인터셉터 단위 테스트
- 엔진 없이 httpx.Request / httpx.Response에 직접 적용
python -m pytest tests/test_interceptors.py -v
"""

import httpx
import pytest
from pydantic import BaseModel, Field, ValidationError
from pydantic_core import PydanticSerializationError

from sonya.httpclient import (
    Capability,
    ForJSON,
    UnexpectedContentTypeError,
    UnexpectedStatusCodeError,
    expected_status_code,
    for_json,
    with_body,
    with_json,
    with_request_header,
    with_url_prefix,
)


class UserAgent(BaseModel):
    user_agent: str = Field(alias="user-agent")


class TrackingStream(httpx.SyncByteStream):
    """close() 호출 횟수를 기록하는 요청 body 스트림"""

    def __init__(self, fail: bool = False):
        self.closed = 0
        self.fail = fail

    def __iter__(self):
        yield b"old"

    def close(self):
        self.closed += 1
        if self.fail:
            raise OSError("close failed")


def _json_response(status_code: int = 200, **kwargs) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("GET", "https://example.test"), **kwargs)


# ── 요청 인터셉터 ─────────────────────────────────────────────

class TestRequestHeader:
    def test_sets_header(self):
        request = httpx.Request("GET", "https://example.test")
        result = with_request_header("X-Trace", "abc").intercept_request(request)
        assert result is request
        assert result.headers["X-Trace"] == "abc"

    def test_overwrites_existing_value(self):
        request = httpx.Request("GET", "https://example.test", headers={"X-Trace": "old"})
        with_request_header("X-Trace", "new").intercept_request(request)
        assert request.headers.get_list("X-Trace") == ["new"]


class TestBody:
    def test_sets_content_type_and_length(self):
        request = httpx.Request("POST", "https://example.test")
        result = with_body(b"a=1", "application/x-www-form-urlencoded").intercept_request(request)

        assert result.content == b"a=1"
        assert result.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert result.headers["Content-Length"] == "3"
        assert result.method == "POST"
        assert result.url == request.url

    def test_explicit_length_is_declared(self):
        request = httpx.Request("POST", "https://example.test")
        result = with_body(iter([b"ab", b"cd"]), "text/plain", 4).intercept_request(request)
        assert result.headers["Content-Length"] == "4"
        assert "Transfer-Encoding" not in result.headers

    def test_unknown_length_uses_chunked_transfer(self):
        request = httpx.Request("POST", "https://example.test", content=b"previous")
        result = with_body(iter([b"ab"]), "text/plain").intercept_request(request)
        assert "Content-Length" not in result.headers
        assert result.headers["Transfer-Encoding"] == "chunked"

    def test_previous_body_is_closed(self):
        stream = TrackingStream()
        request = httpx.Request("POST", "https://example.test", stream=stream)
        with_body(b"new", "text/plain").intercept_request(request)
        assert stream.closed == 1

    def test_close_failure_aborts(self):
        request = httpx.Request("POST", "https://example.test", stream=TrackingStream(fail=True))
        with pytest.raises(OSError, match="close failed"):
            with_body(b"new", "text/plain").intercept_request(request)


class TestJSONBody:
    def test_serializes_string(self):
        request = httpx.Request("POST", "https://example.test")
        result = with_json("hello").intercept_request(request)

        assert result.content == b'"hello"'
        assert result.headers["Content-Type"] == "application/json"
        assert result.headers["Content-Length"] == str(len(b'"hello"'))

    def test_serializes_model_compactly(self):
        class Item(BaseModel):
            name: str
            count: int

        request = httpx.Request("POST", "https://example.test")
        result = with_json(Item(name="x", count=2)).intercept_request(request)
        assert result.content == b'{"name":"x","count":2}'

    def test_serialization_failure_aborts(self):
        request = httpx.Request("POST", "https://example.test")
        with pytest.raises(PydanticSerializationError):
            with_json(object()).intercept_request(request)


class TestURLPrefix:
    def test_relative_url_gets_prefix(self):
        request = httpx.Request("GET", "/a/b")
        result = with_url_prefix("https://host").intercept_request(request)
        assert str(result.url) == "https://host/a/b"
        assert result.headers["Host"] == "host"

    def test_query_is_kept(self):
        request = httpx.Request("GET", "/search?q=1")
        result = with_url_prefix("https://host/api").intercept_request(request)
        assert str(result.url) == "https://host/api/search?q=1"

    def test_absolute_url_is_unchanged(self):
        request = httpx.Request("GET", "https://other/x")
        result = with_url_prefix("https://host").intercept_request(request)
        assert str(result.url) == "https://other/x"
        assert result.headers["Host"] == "other"

    def test_invalid_combined_url_fails(self):
        request = httpx.Request("GET", "/a")
        with pytest.raises(httpx.InvalidURL):
            with_url_prefix("https://host:abc").intercept_request(request)


# ── 응답 인터셉터 ─────────────────────────────────────────────

class TestExpectedStatusCode:
    def test_passes_matching_status(self):
        response = _json_response(200)
        assert expected_status_code(200).intercept_response(response) is response

    def test_any_of_several_codes(self):
        response = _json_response(204)
        assert expected_status_code(200, 204).intercept_response(response) is response

    def test_rejects_other_status(self):
        response = _json_response(404)
        with pytest.raises(UnexpectedStatusCodeError, match="404") as exc_info:
            expected_status_code(200).intercept_response(response)

        assert exc_info.value.status_code == 404
        assert exc_info.value.expected == (200,)
        assert exc_info.value.response is response


class TestForJSON:
    def test_request_accepts_json(self):
        request = httpx.Request("GET", "https://example.test", headers={"Accept": "*/*"})
        for_json().intercept_request(request)
        assert request.headers["Accept"] == "application/json"

    def test_decodes_into_model(self):
        target = for_json(UserAgent)
        response = _json_response(json={"user-agent": "sonya/1.0"})

        assert target.intercept_response(response) is response
        assert target.value == UserAgent(**{"user-agent": "sonya/1.0"})

    def test_decodes_without_target_type(self):
        target = for_json()
        target.intercept_response(_json_response(json={"a": [1, 2]}))
        assert target.value == {"a": [1, 2]}

    def test_content_type_with_charset(self):
        target = for_json(list[int])
        response = _json_response(
            content=b"[1,2]", headers={"Content-Type": "application/json; charset=utf-8"}
        )
        target.intercept_response(response)
        assert target.value == [1, 2]

    def test_rejects_other_content_type(self):
        response = _json_response(text="<html></html>", headers={"Content-Type": "text/html"})
        with pytest.raises(UnexpectedContentTypeError, match="text/html") as exc_info:
            for_json().intercept_response(response)
        assert exc_info.value.content_type == "text/html"

    def test_invalid_body_fails(self):
        response = _json_response(content=b"{not json", headers={"Content-Type": "application/json"})
        with pytest.raises(ValidationError):
            for_json(dict).intercept_response(response)

    def test_type_mismatch_fails(self):
        target = for_json(UserAgent)
        with pytest.raises(ValidationError):
            target.intercept_response(_json_response(json={"other": 1}))
        assert target.value is None

    def test_is_dual_role_option(self):
        assert isinstance(for_json(), ForJSON)
        assert Capability.REQUEST in ForJSON.capabilities
        assert Capability.RESPONSE in ForJSON.capabilities
