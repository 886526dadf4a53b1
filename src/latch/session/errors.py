"""Session validation errors — an ordered collection of field messages.

Errors are attached either to a credential field (``"login"``,
``"password"``) or to ``BASE`` when they describe the attempt as a whole.
Each entry also carries the message key it was built from, so callers can
branch on ``"login_not_found"`` without parsing localized text.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from latch._internal.text import humanize

BASE = "base"


@dataclass(frozen=True, slots=True)
class SessionError:
    """A single validation error."""

    attribute: str
    message: str
    key: str | None = None

    @property
    def full_message(self) -> str:
        """Message prefixed with the humanized field name (``BASE`` is left bare)."""
        if self.attribute == BASE:
            return self.message
        return f"{humanize(self.attribute)} {self.message}"


class SessionErrors:
    """Ordered errors for one authentication attempt.

    Falsy when empty, so ``if session.errors:`` reads naturally.
    """

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[SessionError] = []

    def add(self, attribute: str, message: str, *, key: str | None = None) -> SessionError:
        error = SessionError(attribute=attribute, message=message, key=key)
        self._entries.append(error)
        return error

    def clear(self) -> None:
        self._entries.clear()

    def on(self, attribute: str) -> list[str]:
        """Messages attached to *attribute*, in insertion order."""
        return [e.message for e in self._entries if e.attribute == attribute]

    def keys(self) -> list[str | None]:
        """Message keys, in insertion order."""
        return [e.key for e in self._entries]

    def items(self) -> list[tuple[str, str]]:
        """``(attribute, message)`` pairs, in insertion order."""
        return [(e.attribute, e.message) for e in self._entries]

    def full_messages(self) -> list[str]:
        return [e.full_message for e in self._entries]

    def to_dict(self) -> dict[str, list[str]]:
        """Field -> messages, the shape form templates expect."""
        result: dict[str, list[str]] = {}
        for e in self._entries:
            result.setdefault(e.attribute, []).append(e.message)
        return result

    def __contains__(self, attribute: object) -> bool:
        return any(e.attribute == attribute for e in self._entries)

    def __iter__(self) -> Iterator[SessionError]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"SessionErrors({self.items()!r})"
