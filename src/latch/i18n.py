"""Message translation hook.

Every user-visible message is looked up by key (``error_messages.login_blank``
and friends) through a process-wide translator. Without a translator the
supplied default is returned, so applications only register one when they
localize::

    from latch.i18n import set_translator

    set_translator(lambda key, default: catalog.get(key, default))
"""

import threading
from collections.abc import Callable
from typing import TypeAlias

Translator: TypeAlias = Callable[[str, str], str]


_translator_lock = threading.Lock()
_translator: Translator | None = None


def set_translator(translator: Translator | None) -> None:
    """Set the process-wide translator.

    Pass ``None`` to restore the built-in defaults.
    """
    global _translator
    with _translator_lock:
        _translator = translator


def translate(key: str, default: str) -> str:
    """Return the message for *key*, or *default* when no translator is set."""
    with _translator_lock:
        translator = _translator
    if translator is None:
        return default
    return translator(key, default)
