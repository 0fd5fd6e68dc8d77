#!/usr/bin/env python3
"""Alerta probe — status API over the latest poll of every target.

Usage:
    python web.py                              # default config, port 9860
    python web.py -c myconfig.yaml --port 8080 # custom config and port
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from alerta_probe.accumulator import MemoryAccumulator
from alerta_probe.alerta_collector import AlertaCollector
from alerta_probe.config import build_collectors, load_config
from alerta_probe.errors import AlertaError, ConfigurationError
from alerta_probe.log import setup_logging

logger = logging.getLogger("alerta_probe.web")


# ---------------------------------------------------------------------------
# Shared state — latest poll result per target
# ---------------------------------------------------------------------------

_state: dict[str, dict] = {}
_collectors: list[AlertaCollector] = []
_tasks: list[asyncio.Task] = []
_start_time: float = time.time()
_total_polls: int = 0


def record_poll(collector: AlertaCollector, acc: MemoryAccumulator) -> None:
    """Fold one gather's output into the per-target snapshot."""
    global _total_polls
    _total_polls += 1
    latest = acc.latest_by_url()
    errors: dict[str | None, AlertaError] = {e.url: e for e in acc.errors}
    now = time.time()
    for url in collector.urls:
        rec = latest.get(url)
        err = errors.get(url) if rec is None else None
        _state[f"{collector.name} {url}"] = {
            "probe": collector.name,
            "url": url,
            "poll_every": collector.poll_every,
            "last_updated": now,
            "record": rec.to_dict() if rec else None,
            "error": str(err) if err else None,
            "error_type": type(err).__name__ if err else None,
        }


async def _poll_loop(collector: AlertaCollector) -> None:
    """Background poll loop for a single collector."""
    while True:
        acc = MemoryAccumulator()
        try:
            await collector.gather(acc)
        except ConfigurationError as e:
            logger.error("%s: cannot create HTTP client: %s", collector.name, e)
            return
        record_poll(collector, acc)
        await asyncio.sleep(collector.poll_every)


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start collector tasks on startup, cancel on shutdown."""
    for c in _collectors:
        _tasks.append(asyncio.create_task(_poll_loop(c)))
    yield
    for t in _tasks:
        t.cancel()
    for c in _collectors:
        await c.aclose()


app = FastAPI(title="Alerta Probe", lifespan=lifespan)


@app.get("/api/status")
async def api_status():
    """Return latest snapshot of all polled targets."""
    return JSONResponse({"targets": list(_state.values()), "timestamp": time.time()})


@app.get("/metrics")
async def metrics():
    """Self-monitoring endpoint."""
    targets = list(_state.values())
    healthy = sum(1 for t in targets if t.get("record") and not t.get("error"))
    errored = sum(1 for t in targets if t.get("error"))
    return JSONResponse({
        "metrics": [
            {"key": "probes_configured", "value": len(_collectors), "unit": "count"},
            {"key": "targets_healthy", "value": healthy, "unit": "count"},
            {"key": "targets_errored", "value": errored, "unit": "count"},
            {"key": "uptime", "value": int(time.time() - _start_time), "unit": "s"},
            {"key": "total_polls", "value": _total_polls, "unit": "count"},
        ]
    })


# ---------------------------------------------------------------------------
# CLI entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Alerta Probe — Status API")
    parser.add_argument(
        "-c", "--config",
        default=str(Path(__file__).parent / "config" / "probes.yaml"),
        help="Path to probes.yaml config file",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=9860, help="Port (default: 9860)")
    parser.add_argument("--log-level", default=None, help="Log level (default: $LOG_LEVEL or INFO)")
    args = parser.parse_args()

    setup_logging(args.log_level)

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Config file not found: {config_path}")
        sys.exit(1)

    global _collectors
    try:
        _collectors = build_collectors(load_config(config_path))
    except ConfigurationError as e:
        print(f"Invalid config: {e}")
        sys.exit(1)
    if not _collectors:
        print("No probes configured. Edit config/probes.yaml")
        sys.exit(1)

    print(f"Starting status API on http://{args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port, log_level="info")


if __name__ == "__main__":
    main()
