"""Header helpers: raw response header parsing and pre-send request header preparation."""
from __future__ import annotations

from typing import Mapping

from transport_adapter.app.constants import CONTENT_TYPE_HEADER


def parse_headers(raw: str | None) -> dict[str, str]:
    """Parse a CRLF-separated header block into a name -> value mapping.

    Names are lower-cased and trimmed, values trimmed. Lines without a name are
    ignored; a repeated name keeps the last value.
    """
    parsed: dict[str, str] = {}
    if not raw:
        return parsed
    for line in raw.split("\r\n"):
        name, _, value = line.partition(":")
        name = name.strip().lower()
        if not name:
            continue
        parsed[name] = value.strip()
    return parsed


def prepare_headers(
    headers: Mapping[str, str],
    *,
    has_body: bool,
    xsrf_header: tuple[str, str] | None = None,
) -> dict[str, str]:
    """Return the header set to put on the wire.

    Adds the XSRF header when one is given and drops any content-type entry
    when no body will be sent. The input mapping is not modified.
    """
    prepared = dict(headers)
    if xsrf_header is not None:
        name, value = xsrf_header
        prepared[name] = value
    if not has_body:
        for name in [n for n in prepared if n.lower() == CONTENT_TYPE_HEADER]:
            del prepared[name]
    return prepared
