"""Tests for the one-shot CLI mode."""

import asyncio
import io
import json

import httpx

from alerta_probe.alerta_collector import AlertaCollector, ProbeConfig
from alerta_probe.client import TLSConfig
from monitor import run_once

from .conftest import json_response

URL_A = "http://alerta-a/management/status"
URL_B = "http://alerta-b/management/status"


class TestRunOnce:
    async def test_prints_one_json_line_per_record(self, make_collector, status_doc) -> None:
        collectors = [
            make_collector(lambda request: json_response(status_doc), [URL_A], name="a"),
            make_collector(lambda request: json_response(status_doc), [URL_B], name="b"),
        ]
        out = io.StringIO()

        code = await run_once(collectors, out=out)

        lines = [json.loads(line) for line in out.getvalue().splitlines()]
        assert code == 0
        assert sorted(line["tags"]["url"] for line in lines) == [URL_A, URL_B]
        assert all(line["measurement"] == "alerta" for line in lines)
        assert all(c.client is None for c in collectors)

    async def test_exit_code_reflects_errors(self, make_collector) -> None:
        collector = make_collector(lambda request: httpx.Response(404), [URL_A])
        out = io.StringIO()

        assert await run_once([collector], out=out) == 1
        assert out.getvalue() == ""

    async def test_unbuildable_client_does_not_cut_other_probes_short(
        self, make_collector, status_doc, tmp_path
    ) -> None:
        async def slow(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(0.1)
            return json_response(status_doc)

        healthy = make_collector(slow, [URL_A], name="healthy")
        broken = AlertaCollector(
            ProbeConfig(name="broken", urls=[URL_B], tls=TLSConfig(ca=str(tmp_path / "missing.pem")))
        )
        out = io.StringIO()

        code = await run_once([broken, healthy], out=out)

        lines = [json.loads(line) for line in out.getvalue().splitlines()]
        assert code == 1
        assert [line["tags"]["url"] for line in lines] == [URL_A]
        assert healthy.client is None
