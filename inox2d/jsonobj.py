"""Typed access to values of parsed JSON objects, with keyed errors."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import numpy as np

_U32_MAX = 0xFFFFFFFF

_TEMPLATES = {
    "KeyDoesNotExist": "Key {key} does not exist",
    "ValueIsNotObject": "Value at {key} is not an object",
    "ValueIsNotList": "Value at {key} is not a list",
    "ValueIsNotString": "Value at {key} is not a string",
    "ValueIsNotNumber": "Value at {key} is not a number",
    "ValueIsNotBool": "Value at {key} is not a bool",
    "ParseIntError": "Error while parsing int at {key}\n  - number out of scope",
    "ParseVec2Error": "Error while parsing vec2 at {key}\n  - {msg}",
    "ParseVec3Error": "Error while parsing vec3 at {key}\n  - {msg}",
    "ErrorInList": "Error in list at index {index}\n  - {source}",
    "ErrorInObject": "Error in object at {key}\n  - {source}",
}


def _quote(key: Optional[str]) -> str:
    return json.dumps(key, ensure_ascii=False)


class JsonError(ValueError):
    """A JSON value missing or of the wrong shape; ``kind`` names which problem."""

    def __init__(
        self,
        kind: str,
        key: Optional[str] = None,
        *,
        msg: Optional[str] = None,
        index: Optional[int] = None,
        source: Optional["JsonError"] = None,
    ) -> None:
        if kind not in _TEMPLATES:
            raise ValueError(f"unknown JSON error kind {kind!r}")
        self.kind = kind
        self.key = key
        self.msg = msg
        self.index = index
        self.source = source
        super().__init__(
            _TEMPLATES[kind].format(key=_quote(key), msg=msg, index=index, source=source)
        )

    def nested(self, key: str) -> "JsonError":
        """Wrap this error as having occurred inside the object at ``key``."""
        return JsonError("ErrorInObject", key, source=self)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class JsonObject:
    """A read-only view of a JSON object with typed getters."""

    data: Mapping[str, Any]

    def _get(self, key: str) -> Any:
        try:
            return self.data[key]
        except KeyError:
            raise JsonError("KeyDoesNotExist", key) from None

    def get_object(self, key: str) -> "JsonObject":
        """The object at ``key``."""
        value = self._get(key)
        if not isinstance(value, Mapping):
            raise JsonError("ValueIsNotObject", key)
        return JsonObject(value)

    def get_list(self, key: str) -> list:
        """The list at ``key``."""
        value = self._get(key)
        if not isinstance(value, (list, tuple)):
            raise JsonError("ValueIsNotList", key)
        return list(value)

    def get_nullable_str(self, key: str) -> Optional[str]:
        """The string at ``key``, or ``None`` if the value is null."""
        value = self._get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise JsonError("ValueIsNotString", key)
        return value

    def get_str(self, key: str) -> str:
        """The string at ``key``."""
        value = self._get(key)
        if not isinstance(value, str):
            raise JsonError("ValueIsNotString", key)
        return value

    def _get_number(self, key: str) -> float | int:
        value = self._get(key)
        if not _is_number(value):
            raise JsonError("ValueIsNotNumber", key)
        return value

    def get_f32(self, key: str) -> float:
        """The number at ``key`` as a float."""
        return float(self._get_number(key))

    def get_u32(self, key: str) -> int:
        """The number at ``key`` as an unsigned 32-bit integer."""
        value = self._get_number(key)
        if isinstance(value, float):
            if not value.is_integer():
                raise JsonError("ParseIntError", key)
            value = int(value)
        if not 0 <= value <= _U32_MAX:
            raise JsonError("ParseIntError", key)
        return value

    def get_bool(self, key: str) -> bool:
        """The boolean at ``key``."""
        value = self._get(key)
        if not isinstance(value, bool):
            raise JsonError("ValueIsNotBool", key)
        return value

    def _get_vector(self, key: str, size: int, kind: str) -> np.ndarray:
        items = self.get_list(key)
        if len(items) != size:
            raise JsonError(
                kind, key, msg=f"expected list of length {size}, but has length {len(items)}"
            )
        if not all(_is_number(item) for item in items):
            raise JsonError(kind, key, msg="expected float, but did not get a number")
        return np.array(items, dtype=float)

    def get_vec2(self, key: str) -> np.ndarray:
        """The two-number list at ``key`` as a vector."""
        return self._get_vector(key, 2, "ParseVec2Error")

    def get_vec3(self, key: str) -> np.ndarray:
        """The three-number list at ``key`` as a vector."""
        return self._get_vector(key, 3, "ParseVec3Error")