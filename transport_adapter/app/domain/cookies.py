"""Cookie readers used to look up the XSRF token."""
from __future__ import annotations

import re
from urllib.parse import unquote

import httpx


class DocumentCookieReader:
    """Reads from a ``name=value; other=value`` cookie string (percent-decoded)."""

    def __init__(self, cookie_string: str = "") -> None:
        self.cookie_string = cookie_string

    def read(self, name: str) -> str | None:
        match = re.search(r"(^|;\s*)(" + re.escape(name) + r")=([^;]*)", self.cookie_string)
        return unquote(match.group(3)) if match else None


class JarCookieReader:
    """Reads from an ``httpx.Cookies`` jar, typically the client's own."""

    def __init__(self, cookies: httpx.Cookies) -> None:
        self._cookies = cookies

    def read(self, name: str) -> str | None:
        try:
            return self._cookies.get(name)
        except httpx.CookieConflict:
            # same name set for several domains/paths; take the first match
            for cookie in self._cookies.jar:
                if cookie.name == name:
                    return cookie.value
            return None
