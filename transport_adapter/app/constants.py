"""Adapter-level constants shared across modules."""
from __future__ import annotations


class READY_STATE:
    UNSENT = 0
    OPENED = 1
    HEADERS_RECEIVED = 2
    LOADING = 3
    DONE = 4


class RESPONSE_TYPE:
    DEFAULT = ""
    TEXT = "text"
    JSON = "json"
    ARRAYBUFFER = "arraybuffer"
    BLOB = "blob"
    DOCUMENT = "document"


NETWORK_ERROR_MESSAGE = "Network Error"
TIMEOUT_ERROR_CODE = "ECONNABORTED"
CONTENT_TYPE_HEADER = "content-type"
DEFAULT_CANCEL_MESSAGE = "Request canceled"
