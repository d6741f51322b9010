"""Client-side admission control for code payloads.

The executor enforces its own limits; this check only fails fast before any
network traffic is generated.
"""

from __future__ import annotations

from .errors import CodeTooLargeError

MAX_CODE_CHARS = 100_000

TOO_LARGE_MESSAGE = "Code exceeds 100KB limit."


def validate(code: str, limit: int = MAX_CODE_CHARS) -> None:
    """Raise :class:`CodeTooLargeError` if ``code`` is longer than ``limit`` characters."""
    if len(code) > limit:
        raise CodeTooLargeError(len(code), limit)
