"""Content-derived identifiers for threads and suggestions."""

from __future__ import annotations

_FNV_OFFSET_BASIS = 0x811C9DC5
_FNV_PRIME = 0x01000193
_MASK_32 = 0xFFFFFFFF
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def hash_text(text: str) -> str:
    """32-bit FNV-1a over UTF-16 code units, rendered in base36.

    Hashing code units rather than code points keeps ids identical to the ones
    a browser-side consumer computes for the same text. Not cryptographic.
    """
    data = text.encode("utf-16-le")
    h = _FNV_OFFSET_BASIS
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * _FNV_PRIME) & _MASK_32
    return _to_base36(h)


def thread_identity(element_id: str | None, markup: str, prefix_chars: int = 512) -> str:
    if element_id:
        return element_id
    return f"frame-{hash_text(markup[:prefix_chars])}"


def suggestion_id(thread_id: str, comment_index: int, item_index: int, text: str) -> str:
    return f"{thread_id}:{comment_index}:{item_index}:{hash_text(text)}"
