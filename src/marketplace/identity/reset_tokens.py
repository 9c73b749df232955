"""Password-reset token store.

Tokens are short-lived and single-use. The store is an injected port so its
lifecycle is explicit: the in-memory adapter loses every outstanding token on
restart, which is acceptable for reset links.

Provides get_reset_token_store() / set_reset_token_store() to swap adapters.
"""

import os
import secrets
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable

DEFAULT_TTL_SECONDS = 3600


class ResetTokenStore(ABC):
    """Maps opaque reset tokens to user ids until they expire or are consumed."""

    @abstractmethod
    def issue(self, user_id: str) -> str:
        """Create and remember a token for ``user_id``."""

    @abstractmethod
    def peek(self, token: str) -> str | None:
        """Return the user id for a live token, or None if unknown or expired."""

    @abstractmethod
    def consume(self, token: str) -> None:
        """Forget a token. Unknown tokens are ignored."""


class InMemoryResetTokenStore(ResetTokenStore):
    """Process-local store with per-token expiry.

    ``clock`` returns seconds and defaults to ``time.monotonic``; tests pass
    their own to move time forward.
    """

    def __init__(self, ttl_seconds: int | None = None, clock: Callable[[], float] | None = None):
        self.ttl_seconds = ttl_seconds or int(os.getenv("RESET_TOKEN_TTL_SECONDS", DEFAULT_TTL_SECONDS))
        self._clock = clock or time.monotonic
        self._tokens: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def issue(self, user_id: str) -> str:
        token = secrets.token_hex(32)
        with self._lock:
            self._purge_expired()
            self._tokens[token] = (str(user_id), self._clock() + self.ttl_seconds)
        return token

    def peek(self, token: str) -> str | None:
        with self._lock:
            entry = self._tokens.get(token)
            if entry is None:
                return None
            user_id, expires_at = entry
            if self._clock() > expires_at:
                del self._tokens[token]
                return None
            return user_id

    def consume(self, token: str) -> None:
        with self._lock:
            self._tokens.pop(token, None)

    def __len__(self) -> int:
        return len(self._tokens)

    def _purge_expired(self) -> None:
        now = self._clock()
        for token in [t for t, (_, expires_at) in self._tokens.items() if now > expires_at]:
            del self._tokens[token]


def decoy_token() -> str:
    """A token shaped like a real one that is never stored.

    Handed out for unknown emails so the response does not reveal whether an
    account exists.
    """
    return secrets.token_hex(32)


_current_store: ResetTokenStore | None = None


def get_reset_token_store() -> ResetTokenStore:
    """Return the active reset token store. Defaults to an in-memory store."""
    global _current_store
    if _current_store is None:
        _current_store = InMemoryResetTokenStore()
    return _current_store


def set_reset_token_store(store: ResetTokenStore) -> None:
    global _current_store
    _current_store = store


def reset_reset_token_store() -> None:
    """Drop the active store (and every token it holds)."""
    global _current_store
    _current_store = None
