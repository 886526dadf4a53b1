"""Small value helpers shared by the session modules."""

from collections.abc import Sized
from typing import Any


def is_blank(value: Any) -> bool:
    """True for ``None``, ``False``, whitespace-only strings and empty collections."""
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def humanize(name: str) -> str:
    """Turn an attribute name into a label: ``email_address`` -> ``Email address``."""
    label = name.removesuffix("_id").replace("_", " ").strip()
    return label[:1].upper() + label[1:]
