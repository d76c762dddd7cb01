"""Same-origin check against the origin of the current execution context."""
from __future__ import annotations

import httpx

_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443}


def _origin_of(url: httpx.URL) -> tuple[str, str, int | None]:
    port = url.port if url.port is not None else _DEFAULT_PORTS.get(url.scheme)
    return (url.scheme, url.host, port)


class OriginChecker:
    """Compares scheme, host and effective port of a target with the current origin.

    Relative targets resolve against the current origin. Without a current
    origin (no browsing context) nothing counts as same-origin.
    """

    def __init__(self, current_origin: str | None = None) -> None:
        self._current = httpx.URL(current_origin) if current_origin else None

    @property
    def current_origin(self) -> str | None:
        return str(self._current) if self._current is not None else None

    def is_same_origin(self, url: str) -> bool:
        if self._current is None:
            return False
        try:
            target = self._current.join(url)
        except httpx.InvalidURL:
            return False
        return _origin_of(target) == _origin_of(self._current)
