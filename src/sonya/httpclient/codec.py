"""
JSON 코덱
- pydantic 직렬화/검증을 그대로 사용 (BaseModel, dataclass, 기본 타입 모두 지원)
- 직렬화 실패: PydanticSerializationError, 역직렬화 실패: ValidationError
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter

T = TypeVar("T")

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


def encode_json(value: Any) -> bytes:
    """value를 공백 없는 JSON 바이트로 직렬화"""
    return _ANY_ADAPTER.dump_json(value)


def decode_json(data: bytes | str, target: type[T] | Any = Any) -> T:
    """JSON 데이터를 target 타입으로 검증하여 반환"""
    return _adapter(target).validate_json(data)
