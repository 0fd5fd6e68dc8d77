#!/usr/bin/env python3
"""Alerta probe — poll Alerta status endpoints and show the alerts metrics.

Usage:
    python monitor.py                    # dashboard, default config/probes.yaml
    python monitor.py -c myconfig.yaml   # use custom config
    python monitor.py --once             # one poll cycle, records as JSON lines
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from alerta_probe.accumulator import MemoryAccumulator
from alerta_probe.alerta_collector import AlertaCollector
from alerta_probe.config import build_collectors, load_config
from alerta_probe.errors import ConfigurationError
from alerta_probe.log import setup_logging

logger = logging.getLogger("alerta_probe.monitor")


async def run_once(collectors: list[AlertaCollector], out=sys.stdout) -> int:
    """Run one gather per collector concurrently and print what was emitted."""
    acc = MemoryAccumulator()
    # A probe whose client cannot be built must not cut the others short
    results = await asyncio.gather(*(c.gather(acc) for c in collectors), return_exceptions=True)
    for c in collectors:
        await c.aclose()

    failed = bool(acc.errors)
    for c, result in zip(collectors, results):
        if isinstance(result, ConfigurationError):
            logger.error("%s: cannot create HTTP client: %s", c.name, result)
            failed = True
        elif isinstance(result, BaseException):
            raise result

    for rec in acc.records:
        print(json.dumps(rec.to_dict(), sort_keys=True), file=out)
    for err in acc.errors:
        logger.error("%s", err)
    return 1 if failed else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Alerta probe")
    parser.add_argument(
        "-c", "--config",
        default=str(Path(__file__).parent / "config" / "probes.yaml"),
        help="Path to probes.yaml config file",
    )
    parser.add_argument("--once", action="store_true", help="Poll once and print records as JSON lines")
    parser.add_argument("--log-level", default=None, help="Log level (default: $LOG_LEVEL or INFO)")
    args = parser.parse_args()

    setup_logging(args.log_level)

    config_path = Path(args.config)
    if not config_path.exists():
        print(f"Config file not found: {config_path}")
        sys.exit(1)

    try:
        collectors = build_collectors(load_config(config_path))
    except ConfigurationError as e:
        print(f"Invalid config: {e}")
        sys.exit(1)
    if not collectors:
        print("No probes configured. Edit config/probes.yaml")
        sys.exit(1)

    if args.once:
        sys.exit(asyncio.run(run_once(collectors)))

    # Textual is only needed for the interactive dashboard
    from ui.app import DashboardApp

    app = DashboardApp(collectors)
    app.run()


if __name__ == "__main__":
    main()
