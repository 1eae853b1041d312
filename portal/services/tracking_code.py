from __future__ import annotations

import re
import secrets
import string
import time
from typing import Callable

TRACKING_CODE_PREFIX = "WS"
RANDOM_SUFFIX_LENGTH = 6
_ALPHABET = string.ascii_uppercase + string.digits
TRACKING_CODE_PATTERN = re.compile(r"WS-[0-9]+-[A-Z0-9]{6}")


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def generate_tracking_code(clock: Callable[[], int] = _now_ms) -> str:
    """``WS-<epoch ms>-<6 base-36 chars>``.

    Not unique by construction; the ``uq_submissions_tracking_code``
    constraint is the final arbiter.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(RANDOM_SUFFIX_LENGTH))
    return f"{TRACKING_CODE_PREFIX}-{clock()}-{suffix}"


def is_tracking_code(value: str | None) -> bool:
    return bool(value) and TRACKING_CODE_PATTERN.fullmatch(value) is not None
