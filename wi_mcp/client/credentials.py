from __future__ import annotations

import threading


class CredentialHolder:
    """Single-slot holder for the default bearer token.

    ``set`` swaps the slot; readers take a snapshot with ``get`` and keep using
    it for the rest of their call.
    """

    def __init__(self, token: str | None = None) -> None:
        self._lock = threading.Lock()
        self._token = token or None

    def get(self) -> str | None:
        with self._lock:
            return self._token

    def set(self, token: str | None) -> str | None:
        """Replace the default token and return the previous one."""
        with self._lock:
            previous, self._token = self._token, (token or None)
            return previous

    @property
    def has_token(self) -> bool:
        return self.get() is not None
