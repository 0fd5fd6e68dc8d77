"""Load probe definitions from a probes.yaml file."""

from __future__ import annotations

import re
from pathlib import Path

import yaml

from .alerta_collector import AlertaCollector, ProbeConfig
from .client import TLSConfig
from .errors import ConfigurationError

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_UNIT_SECONDS = {"s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}


def parse_duration(value: int | float | str, key: str = "duration") -> float:
    """Accept plain seconds or strings like ``"500ms"``, ``"5s"``, ``"1m"``."""
    if isinstance(value, bool):
        raise ConfigurationError(f"invalid {key}: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ConfigurationError(f"invalid {key}: {value!r}")
    amount, unit = float(match.group(1)), match.group(2)
    if unit == "ms":
        return amount / 1000
    return amount * _UNIT_SECONDS[unit]


def _tls(raw: dict | None) -> TLSConfig:
    if raw is None:
        return TLSConfig()
    if not isinstance(raw, dict):
        raise ConfigurationError("tls must be a mapping")
    return TLSConfig(
        ca=raw.get("ca"),
        cert=raw.get("cert"),
        key=raw.get("key"),
        server_name=raw.get("server_name"),
        insecure_skip_verify=bool(raw.get("insecure_skip_verify", False)),
    )


def parse_probe(srv: dict) -> ProbeConfig:
    if not isinstance(srv, dict):
        raise ConfigurationError(f"probe entry must be a mapping, got {type(srv).__name__}")
    name = srv.get("name")
    if not name:
        raise ConfigurationError("probe entry is missing 'name'")
    urls = srv.get("urls")
    if not urls or not isinstance(urls, list):
        raise ConfigurationError(f"probe '{name}' needs a non-empty 'urls' list")

    if srv.get("username") and srv.get("api_key"):
        raise ConfigurationError(f"probe '{name}': use either username/password or api_key")

    return ProbeConfig(
        name=name,
        urls=[str(u) for u in urls],
        response_timeout=parse_duration(srv.get("response_timeout", 5), "response_timeout"),
        poll_every=parse_duration(srv.get("poll_every", 10), "poll_every"),
        strict_path=bool(srv.get("strict_path", True)),
        tls=_tls(srv.get("tls")),
        headers={str(k): str(v) for k, v in (srv.get("headers") or {}).items()},
        username=srv.get("username"),
        password=srv.get("password"),
        api_key=srv.get("api_key"),
    )


def load_config(path: Path) -> list[ProbeConfig]:
    """Parse probes.yaml and return one ProbeConfig per entry."""
    try:
        with open(path) as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"cannot parse {path}: {e}") from e

    if not isinstance(config, dict):
        raise ConfigurationError(f"{path}: top level must be a mapping")
    return [parse_probe(srv) for srv in config.get("probes", [])]


def build_collectors(configs: list[ProbeConfig]) -> list[AlertaCollector]:
    return [AlertaCollector(cfg) for cfg in configs]
