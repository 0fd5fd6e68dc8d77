"""Collector for Alerta servers exposing GET /management/status."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field

import httpx

from .base import Accumulator, AlertaMetric, AlertaStats, BaseCollector
from .client import TLSConfig, create_client, effective_timeout
from .errors import (
    AlertaError,
    BodyReadError,
    ContentTypeError,
    DecodeError,
    PathValidationError,
    RequestError,
    SchemaError,
    StatusError,
    URLParseError,
)

logger = logging.getLogger(__name__)

MEASUREMENT = "alerta"
STATUS_PATH = "/management/status"
ALERTS_GROUP = "alerts"


@dataclass
class ProbeConfig:
    name: str
    urls: list[str]
    response_timeout: float = 5.0
    poll_every: float = 10.0
    strict_path: bool = True
    tls: TLSConfig = field(default_factory=TLSConfig)
    headers: dict[str, str] = field(default_factory=dict)
    username: str | None = None
    password: str | None = None
    api_key: str | None = None


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

def _get(obj: dict, key: str, kind: type, default):
    val = obj.get(key)
    if val is None:
        return default
    # bool is an int subclass; reject it for numeric fields
    if not isinstance(val, kind) or (kind is int and isinstance(val, bool)):
        raise DecodeError(f"field '{key}' has unexpected type {type(val).__name__}")
    return val


def decode_stats(body: bytes) -> AlertaStats:
    """Parse a status document. Unknown keys are ignored."""
    try:
        doc = json.loads(body)
    except (ValueError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid JSON: {e}") from e
    except RecursionError as e:
        raise DecodeError("invalid JSON: document nested too deeply") from e
    if not isinstance(doc, dict):
        raise DecodeError(f"expected JSON object, got {type(doc).__name__}")

    metrics: list[AlertaMetric] = []
    for m in _get(doc, "metrics", list, []):
        if not isinstance(m, dict):
            raise DecodeError(f"expected metric object, got {type(m).__name__}")
        metrics.append(
            AlertaMetric(
                group=_get(m, "group", str, ""),
                name=_get(m, "name", str, ""),
                type=_get(m, "type", str, ""),
                value=_get(m, "value", int, 0),
                count=_get(m, "count", int, 0),
                total_time=_get(m, "totalTime", int, 0),
            )
        )

    return AlertaStats(
        version=_get(doc, "version", str, ""),
        uptime=_get(doc, "uptime", int, 0),
        metrics=metrics,
    )


# ---------------------------------------------------------------------------
# Mapping
# ---------------------------------------------------------------------------

def map_metrics(url: str, stats: AlertaStats) -> tuple[dict[str, int], dict[str, str]]:
    """Flatten the alerts group into ``(fields, tags)``.

    Timers yield ``<action>_alerts`` (count) and ``<action>_alerts_time``
    (total time); gauges yield ``<action>_alerts`` (value). Repeated names
    overwrite earlier ones.
    """
    tags = {"url": url, "version": stats.version}
    fields: dict[str, int] = {"uptime": stats.uptime}

    for m in stats.metrics:
        if m.group != ALERTS_GROUP:
            continue
        name = f"{m.name}_{m.group}"
        if m.type == "timer":
            fields[f"{name}_time"] = m.total_time
            fields[name] = m.count
        elif m.type == "gauge":
            fields[name] = m.value

    return fields, tags


# ---------------------------------------------------------------------------
# Collector
# ---------------------------------------------------------------------------

def parse_target(raw: str, strict_path: bool = True) -> httpx.URL:
    try:
        url = httpx.URL(raw)
    except (httpx.InvalidURL, TypeError) as e:
        raise URLParseError(f"unable to parse address '{raw}': {e}", raw) from e
    if url.scheme not in ("http", "https") or not url.host:
        raise URLParseError(f"unable to parse address '{raw}': expected http(s)://host/...", raw)
    if url.port is not None and not 0 <= url.port <= 65535:
        raise URLParseError(f"unable to parse address '{raw}': invalid port {url.port}", raw)
    if strict_path and url.path != STATUS_PATH:
        raise PathValidationError(f"expected '{STATUS_PATH}' at the end of url: '{raw}'", raw)
    return url


class AlertaCollector(BaseCollector):
    def __init__(self, config: ProbeConfig) -> None:
        super().__init__(config.name, config.poll_every)
        self.config = config
        self.urls = list(config.urls)
        # Created on first gather and reused for the collector's lifetime
        self.client: httpx.AsyncClient | None = None

    def _ensure_client(self) -> httpx.AsyncClient:
        # No await between check and set, so concurrent gathers on one loop
        # cannot build two clients.
        if self.client is None:
            cfg = self.config
            self.client = create_client(
                tls=cfg.tls,
                timeout=cfg.response_timeout,
                headers=cfg.headers,
                username=cfg.username,
                password=cfg.password,
                api_key=cfg.api_key,
            )
        return self.client

    async def fetch(self, url: str) -> bytes:
        """GET ``url`` and return the JSON body.

        httpx times each connect and read separately, so the whole exchange
        is also capped at the response timeout.
        """
        client = self._ensure_client()
        timeout = effective_timeout(self.config.response_timeout)
        try:
            return await asyncio.wait_for(self._fetch(client, url), timeout)
        except asyncio.TimeoutError as e:
            raise RequestError(
                f"error making HTTP request to {url}: no complete response within {timeout}s", url
            ) from e

    async def _fetch(self, client: httpx.AsyncClient, url: str) -> bytes:
        extensions = {}
        if self.config.tls.server_name:
            extensions["sni_hostname"] = self.config.tls.server_name

        try:
            async with client.stream("GET", url, extensions=extensions) as resp:
                if resp.status_code != httpx.codes.OK:
                    raise StatusError(
                        f"{url} returned HTTP status {resp.status_code} {resp.reason_phrase}",
                        url,
                        status=resp.status_code,
                    )

                content_type = resp.headers.get("content-type", "").split(";")[0].strip().lower()
                if content_type != "application/json":
                    raise ContentTypeError(
                        f"{url} returned unexpected content type {content_type or '(none)'}",
                        url,
                        content_type=content_type,
                    )

                try:
                    return await resp.aread()
                except httpx.HTTPError as e:
                    raise BodyReadError(f"failed to read body from {url}: {e}", url) from e
        except httpx.HTTPError as e:
            raise RequestError(f"error making HTTP request to {url}: {e}", url) from e

    async def gather_url(self, url: str, acc: Accumulator) -> None:
        body = await self.fetch(url)
        try:
            stats = decode_stats(body)
        except DecodeError as e:
            e.url = url
            raise
        if not stats.version:
            raise SchemaError(f"expected version in response: {url}", url)

        fields, tags = map_metrics(url, stats)
        acc.add_fields(MEASUREMENT, fields, tags)
        logger.debug("%s: emitted %d fields from %s", self.name, len(fields), url)

    async def _poll(self, url: str, acc: Accumulator) -> AlertaError | None:
        try:
            await self.gather_url(url, acc)
        except AlertaError as e:
            err = e
        except Exception as e:
            logger.exception("%s: unexpected failure polling %s", self.name, url)
            err = AlertaError(f"unexpected error polling {url}: {e!r}", url)
        else:
            return None
        logger.warning("%s: %s", self.name, err)
        acc.add_error(err)
        return err

    async def gather(self, acc: Accumulator) -> list[AlertaError]:
        self._ensure_client()

        errors: list[AlertaError] = []
        tasks = []
        for raw in self.urls:
            try:
                parse_target(raw, self.config.strict_path)
            except AlertaError as e:
                logger.warning("%s: %s", self.name, e)
                acc.add_error(e)
                errors.append(e)
                continue
            tasks.append(asyncio.create_task(self._poll(raw, acc)))

        for result in await asyncio.gather(*tasks):
            if result is not None:
                errors.append(result)
        return errors

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            self.client = None
