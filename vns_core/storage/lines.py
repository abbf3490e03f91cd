# vns_core/storage/lines.py
from __future__ import annotations
from typing import Tuple


def line_skip(data: bytes, n: int) -> bytes:
    """
    Return what is left of ``data`` after skipping ``n`` newline-terminated
    lines. A final line without a newline counts as a line; skipping past
    the end yields b"".
    """
    for _ in range(n):
        if not data:
            return b""
        idx = data.find(b"\n")
        data = b"" if idx < 0 else data[idx + 1:]
    return data


def line_span(data: bytes, line_index: int) -> Tuple[int, int]:
    """Byte offsets [start, end) of the 1-based ``line_index`` in ``data``."""
    if line_index < 1:
        raise IndexError(f"line index must be >= 1, got {line_index}")
    rest = line_skip(data, line_index - 1)
    if not rest:
        raise IndexError(f"line {line_index} is past the end of the table")
    start = len(data) - len(rest)
    end = len(data) - len(line_skip(rest, 1))
    return start, end
