from __future__ import annotations

import re

from unidecode import unidecode

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify_source(value: str | None, separator: str = "-") -> str:
    """
    Normalize ``value`` into a URL-safe token.

    Non-ASCII text is transliterated first, ``@`` reads as "at", and every run
    of characters outside ``[a-z0-9]`` becomes a single ``separator``.
    """
    if not value:
        return ""
    text = unidecode(str(value)).replace("@", " at ").lower()
    return _NON_ALNUM.sub(separator, text).strip(separator)


def with_suffix(base: str, counter: int, max_length: int | None = None) -> str:
    """Return ``base-counter``, trimming ``base`` so the result fits ``max_length``."""
    suffix = f"-{counter}"
    if max_length is not None and len(base) + len(suffix) > max_length:
        base = base[: max(max_length - len(suffix), 0)].rstrip("-")
    return f"{base}{suffix}"
