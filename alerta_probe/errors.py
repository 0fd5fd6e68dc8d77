"""Error types raised while polling Alerta status endpoints."""

from __future__ import annotations


class AlertaError(Exception):
    """Base error. ``url`` names the target the error belongs to, if any."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


# Fatal, probe-lifetime errors


class ConfigurationError(AlertaError):
    pass


class TLSConfigError(ConfigurationError):
    pass


# Per-target errors, accumulated and never fatal


class URLParseError(AlertaError):
    pass


class PathValidationError(AlertaError):
    pass


class RequestError(AlertaError):
    pass


class StatusError(AlertaError):
    def __init__(self, message: str, url: str | None = None, status: int = 0) -> None:
        super().__init__(message, url)
        self.status = status


class ContentTypeError(AlertaError):
    def __init__(self, message: str, url: str | None = None, content_type: str = "") -> None:
        super().__init__(message, url)
        self.content_type = content_type


class BodyReadError(AlertaError):
    pass


class DecodeError(AlertaError):
    pass


class SchemaError(AlertaError):
    pass
