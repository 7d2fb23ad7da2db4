"""
Exception types raised while deriving transaction IDs.
"""

from typing import Optional


class XTxidError(Exception):
    """Base class for all xtxid failures."""


class MismatchedArgumentsError(XTxidError):
    """Interpolation arrays have different lengths."""

    def __init__(self):
        super().__init__("interpolation arrays have different lengths")


class ParseError(XTxidError):
    """Markup, path or frame data could not be parsed."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"parse error: {detail}")


class MissingKeyError(XTxidError):
    """A required marker, attribute or pattern was not found."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"missing required key: {key}")


class Base64Error(XTxidError):
    """The verification key is not valid base64."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"base64 decode error: {detail}")


class HttpError(XTxidError):
    """The transport failed to complete a request."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"HTTP error: {detail}")


class HttpStatusError(XTxidError):
    """A response came back with a non-200 status."""

    def __init__(self, status: int, url: str, body: Optional[str] = None):
        self.status = status
        self.url = url
        self.body = body
        super().__init__(f"{url} returned HTTP {status}")
