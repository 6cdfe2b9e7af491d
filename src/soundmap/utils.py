import re
from collections.abc import Callable
from datetime import UTC, datetime

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
USERNAME_RE = re.compile(r"^[A-Za-z0-9_]{3,30}$")

Clock = Callable[[], datetime]


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def is_username(value: str) -> bool:
    return bool(USERNAME_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)
