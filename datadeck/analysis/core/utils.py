from __future__ import annotations
import math
from typing import Any, Optional, Union
from .errors import ParseError

TextInput = Union[str, bytes, bytearray, memoryview]


def _ensure_text(body: TextInput, *, file_name: Optional[str] = None, source_format: Optional[str] = None) -> str:
    if isinstance(body, str):
        text = body
    elif isinstance(body, (bytes, bytearray, memoryview)):
        try:
            text = bytes(body).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(
                f"{file_name or 'file'} is not valid UTF-8 text",
                file_name=file_name,
                source_format=source_format,
            ) from exc
    else:
        raise TypeError("body must be text or bytes-like")
    return text.lstrip("\ufeff")


def _json_safe(value: Any) -> Any:
    """Replace non-finite floats (recursively) with None so the result is valid JSON."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def _format_number(value: Any, digits: int = 2) -> str:
    if value is None:
        return "—"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return "NaN"
        if isinstance(value, float) and math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return f"{value:.{digits}f}"
    return str(value)
