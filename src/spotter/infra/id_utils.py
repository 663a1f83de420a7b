"""Identifier generation for stored messages.

Memory identifiers keep the ``{prefix}-{epoch millis}`` shape so they
sort by creation time, with a random suffix appended so that two messages
stored within the same millisecond never collide:

- ``msg-1718031234567-a8Kx3nQ9``
"""

import secrets
import string
import time

_ALPHABET = string.ascii_letters + string.digits  # a-z A-Z 0-9
_DEFAULT_LENGTH = 8  # ~47 bits of entropy per millisecond


def random_suffix(length: int = _DEFAULT_LENGTH) -> str:
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


def generate_timestamped_id(
    prefix: str,
    now_ms: int | None = None,
    length: int = _DEFAULT_LENGTH,
) -> str:
    """Generate a ``{prefix}-{millis}-{random}`` ID.

    Args:
        prefix: Short descriptor (e.g. ``"msg"``).
        now_ms: Epoch milliseconds; defaults to the current time.
        length: Number of random alphanumeric characters at the end.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return f"{prefix}-{now_ms}-{random_suffix(length)}"
