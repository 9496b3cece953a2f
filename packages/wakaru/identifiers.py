"""Deterministic transaction ids and readable fallback references.

Ids are content hashes: the same row parsed twice yields the same id, which is
what the persistence layer deduplicates on. The hash is a 32-bit rolling hash
and is not collision resistant; two distinct transactions that share date,
amount, reference and description collide by construction.
"""

from __future__ import annotations

import re
from datetime import datetime

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"
_REFERENCE_JUNK_RE = re.compile(r"[^A-Za-z0-9-]")


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits: list[str] = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def simple_hash(text: str) -> str:
    """Return the base-36 form of a 32-bit ``h * 31 + unit`` rolling hash.

    The hash runs over UTF-16 code units and wraps like a signed int32, so ids
    agree with statements exported by other tooling using the same scheme.
    """

    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


def generate_id(prefix: str, date: datetime, amount: int, *parts: str | None) -> str:
    """Build ``"<prefix>-<hash>"`` from the date, signed amount and salt parts.

    Empty or ``None`` parts are dropped before joining so that a missing
    reference does not change the id of an otherwise identical row.
    """

    hash_input = "-".join([date.isoformat(), str(amount), *(p for p in parts if p)])
    return f"{prefix}-{simple_hash(hash_input)}"


def generate_reference(date: datetime, description: str | None, max_len: int = 10) -> str:
    """``YYYYMMDD-<first max_len chars of description>``, alphanumeric and upper-cased."""

    head = (description or "")[:max_len]
    return _REFERENCE_JUNK_RE.sub("", f"{date:%Y%m%d}-{head}").upper()


__all__ = ["generate_id", "generate_reference", "simple_hash"]
