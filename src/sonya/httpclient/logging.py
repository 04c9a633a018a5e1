"""
호출 로그 설정
- 엔진은 호출마다 method / url / 인터셉터 수 / status_code를 extra 필드로 남긴다
- setup_logging()으로 sonya.httpclient 로거 트리에 text / json 핸들러를 붙인다
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Literal

import httpx

HTTPCLIENT_LOGGER_NAME = "sonya.httpclient"

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# extra=로 전달되는 호출 필드 (출력 순서)
CALL_FIELDS = (
    "method",
    "url",
    "status_code",
    "request_interceptors",
    "response_interceptors",
    "call_options",
    "error",
)


def call_extra(request: httpx.Request, **fields: Any) -> dict[str, Any]:
    """요청 한 건에 대한 logging extra 딕셔너리"""
    return {"method": request.method, "url": str(request.url), **fields}


def _call_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {key: getattr(record, key) for key in CALL_FIELDS if hasattr(record, key)}


class TextFormatter(logging.Formatter):
    """기본 포맷 뒤에 호출 필드를 key=value로 덧붙인다."""

    def __init__(self) -> None:
        super().__init__(DEFAULT_FORMAT, datefmt=DEFAULT_DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _call_fields(record)
        if not fields:
            return line
        return line + " " + " ".join(f"{k}={v}" for k, v in fields.items())


class JSONFormatter(logging.Formatter):
    """JSON 구조화 로그 포매터. 호출 필드는 최상위 키로 들어간다."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, DEFAULT_DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_call_fields(record),
        }
        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(
    level: int | str = logging.INFO,
    format: Literal["text", "json"] = "text",
    stream: object = None,
) -> logging.Logger:
    """
    sonya.httpclient 루트 로거를 설정한다.

    호출 시작 / 응답 수신은 DEBUG, 전송 실패는 WARNING으로 남는다.

    Args:
        level: 로그 레벨 (예: logging.DEBUG, "DEBUG")
        format: 로그 포맷 ("text" 또는 "json")
        stream: 출력 스트림 (기본: sys.stderr)
    """
    logger = logging.getLogger(HTTPCLIENT_LOGGER_NAME)

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(level)

    # 중복 방지
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JSONFormatter() if format == "json" else TextFormatter())
    logger.addHandler(handler)
    return logger
