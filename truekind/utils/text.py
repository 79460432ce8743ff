# truekind/utils/text.py
import math
import re

from truekind.utils.settings import WORDS_PER_MINUTE

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_SLUG = re.compile(r"[^a-z0-9]+")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def constant_case(name: str) -> str:
    """parentId / parent_id -> PARENT_ID"""
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").upper()


def slugify(value: str) -> str:
    return _NON_SLUG.sub("-", value.lower()).strip("-")


def is_email(value: str) -> bool:
    return bool(_EMAIL.match(value))


def read_time(content: str) -> int:
    """Minutes to read, rounded up; whitespace-separated words."""
    words = len(content.split())
    return math.ceil(words / WORDS_PER_MINUTE) if words else 0
