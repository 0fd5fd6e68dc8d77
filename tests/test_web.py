"""Tests for the status API in web.py."""

import httpx
import pytest

import web
from alerta_probe.accumulator import MemoryAccumulator

from .conftest import json_response

URL_A = "http://alerta-a/management/status"
URL_B = "http://alerta-b/management/status"


@pytest.fixture(autouse=True)
def fresh_state(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(web, "_state", {})
    monkeypatch.setattr(web, "_collectors", [])
    monkeypatch.setattr(web, "_total_polls", 0)


async def get(path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=web.app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


class TestStatusAPI:
    async def test_empty_before_first_poll(self) -> None:
        resp = await get("/api/status")
        assert resp.status_code == 200
        assert resp.json()["targets"] == []

    async def test_reports_records_and_errors(self, make_collector, status_doc) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "alerta-b":
                return httpx.Response(500)
            return json_response(status_doc)

        collector = make_collector(handler, [URL_A, URL_B], name="prod")
        acc = MemoryAccumulator()
        await collector.gather(acc)
        web.record_poll(collector, acc)

        targets = {t["url"]: t for t in (await get("/api/status")).json()["targets"]}

        assert targets[URL_A]["error"] is None
        assert targets[URL_A]["record"]["tags"] == {"url": URL_A, "version": "8.7.0"}
        assert targets[URL_A]["record"]["fields"]["total_alerts"] == 7
        assert targets[URL_B]["record"] is None
        assert targets[URL_B]["error_type"] == "StatusError"
        assert targets[URL_B]["probe"] == "prod"

    async def test_self_metrics(self, make_collector, status_doc) -> None:
        collector = make_collector(lambda request: json_response(status_doc), [URL_A])
        acc = MemoryAccumulator()
        await collector.gather(acc)
        web.record_poll(collector, acc)

        metrics = {m["key"]: m["value"] for m in (await get("/metrics")).json()["metrics"]}

        assert metrics["targets_healthy"] == 1
        assert metrics["targets_errored"] == 0
        assert metrics["total_polls"] == 1
