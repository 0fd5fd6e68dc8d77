"""HTTP client construction shared by every poll of a collector."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass

import httpx

from .errors import ConfigurationError, TLSConfigError

logger = logging.getLogger(__name__)

MIN_TIMEOUT = 1.0
DEFAULT_TIMEOUT = 5.0


@dataclass(frozen=True)
class TLSConfig:
    ca: str | None = None
    cert: str | None = None
    key: str | None = None
    server_name: str | None = None
    insecure_skip_verify: bool = False

    def ssl_context(self) -> ssl.SSLContext:
        """Build the SSL context, raising TLSConfigError on bad material."""
        if self.key and not self.cert:
            raise TLSConfigError("TLS key given without a certificate")
        try:
            ctx = ssl.create_default_context(cafile=self.ca)
            if self.cert:
                ctx.load_cert_chain(self.cert, self.key)
        except (OSError, ssl.SSLError) as e:
            raise TLSConfigError(f"invalid TLS configuration: {e}") from e
        if self.insecure_skip_verify:
            ctx.check_hostname = False
            ctx.verify_mode = ssl.CERT_NONE
        return ctx


def effective_timeout(timeout: float | None) -> float:
    """Sub-second timeouts are treated as misconfiguration and replaced."""
    if timeout is None or timeout < MIN_TIMEOUT:
        return DEFAULT_TIMEOUT
    return float(timeout)


def create_client(
    tls: TLSConfig | None = None,
    timeout: float | None = None,
    headers: dict[str, str] | None = None,
    username: str | None = None,
    password: str | None = None,
    api_key: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    if username and api_key:
        raise ConfigurationError("configure either username/password or api_key, not both")

    tls = tls or TLSConfig()
    default_headers = dict(headers or {})
    if api_key:
        default_headers["Authorization"] = f"Bearer {api_key}"
    auth = httpx.BasicAuth(username, password or "") if username else None

    seconds = effective_timeout(timeout)
    if timeout is not None and seconds != timeout:
        logger.debug("response timeout %ss below %ss, using %ss", timeout, MIN_TIMEOUT, seconds)

    return httpx.AsyncClient(
        verify=tls.ssl_context(),
        timeout=seconds,
        headers=default_headers,
        auth=auth,
        transport=transport,
    )
