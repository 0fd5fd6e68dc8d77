"""Shared fixtures: a canned status document and collectors on a mock transport."""

from __future__ import annotations

import copy
from collections.abc import Callable

import httpx
import pytest

from alerta_probe.alerta_collector import AlertaCollector, ProbeConfig
from alerta_probe.client import create_client

STATUS_DOC = {
    "application": "alerta",
    "version": "8.7.0",
    "time": 1700000000000,
    "uptime": 123000,
    "metrics": [
        {
            "group": "alerts",
            "name": "received",
            "title": "Received alerts",
            "type": "timer",
            "count": 3,
            "totalTime": 150,
        },
        {
            "group": "alerts",
            "name": "total",
            "title": "Total alerts",
            "type": "gauge",
            "value": 7,
        },
        {
            "group": "webhooks",
            "name": "prometheus",
            "title": "Prometheus webhook",
            "type": "timer",
            "count": 9,
            "totalTime": 99,
        },
    ],
}


@pytest.fixture
def status_doc() -> dict:
    return copy.deepcopy(STATUS_DOC)


def json_response(doc, status: int = 200) -> httpx.Response:
    return httpx.Response(status, json=doc)


@pytest.fixture
def make_collector() -> Callable[..., AlertaCollector]:
    """Factory for collectors whose client talks to ``handler`` instead of the network."""

    def _make(handler, urls: list[str], **config) -> AlertaCollector:
        collector = AlertaCollector(ProbeConfig(name=config.pop("name", "test"), urls=urls, **config))
        collector.client = create_client(transport=httpx.MockTransport(handler))
        return collector

    return _make
