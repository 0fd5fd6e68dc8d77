"""Textual dashboard app — one card per polled Alerta URL."""

from __future__ import annotations

import asyncio
import re

from textual.app import App, ComposeResult
from textual.containers import Grid
from textual.reactive import reactive
from textual.widgets import Footer, Header, Static

from alerta_probe.accumulator import MemoryAccumulator
from alerta_probe.alerta_collector import AlertaCollector
from ui.widgets.target_card import TargetCard


class StatusBar(Static):
    """Colored status bar showing aggregate target health."""

    status: reactive[str] = reactive("waiting")
    detail: reactive[str] = reactive("")

    def render(self) -> str:
        if self.status == "ok":
            return f"[bold white on green] All Targets OK [/]  [green]{self.detail}[/]"
        elif self.status == "error":
            return f"[bold white on red] {self.detail} [/]"
        return "[dim]Waiting for first poll...[/]"


class DashboardApp(App):
    """Alerta probe dashboard."""

    CSS = """
    Screen {
        background: $surface;
    }
    #status-bar {
        height: 1;
        width: 1fr;
        padding: 0 2;
    }
    #dashboard-grid {
        grid-size: 2;
        grid-gutter: 1 2;
        padding: 1 2;
        width: 1fr;
        height: 1fr;
    }
    TargetCard {
        padding: 1 2;
        background: $panel;
        border: round $primary;
        width: 1fr;
        height: auto;
    }
    TargetCard.error-state {
        border: heavy red;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("r", "refresh", "Refresh Now"),
    ]

    def __init__(self, collectors: list[AlertaCollector]) -> None:
        super().__init__()
        self.collectors = collectors
        self._cards: dict[tuple[str, str], TargetCard] = {}
        self._tasks: list[asyncio.Task] = []
        self._status_bar: StatusBar | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._status_bar = StatusBar(id="status-bar")
        yield self._status_bar
        with Grid(id="dashboard-grid"):
            for c in self.collectors:
                for i, url in enumerate(c.urls):
                    safe_id = re.sub(r"[^a-z0-9_-]", "", c.name.lower().replace(" ", "-"))
                    card = TargetCard(c.name, url, id=f"card-{safe_id}-{i}")
                    self._cards[(c.name, url)] = card
                    yield card
        yield Footer()

    def on_mount(self) -> None:
        for collector in self.collectors:
            self._tasks.append(asyncio.create_task(self._poll_loop(collector)))

    def _update_status_bar(self) -> None:
        if self._status_bar is None:
            return
        failed: list[str] = []
        total = 0
        for card in self._cards.values():
            if card.record is None and card.last_error is None:
                continue
            total += 1
            if card.last_error is not None:
                failed.append(card.url)

        if total == 0:
            self._status_bar.status = "waiting"
            self._status_bar.detail = ""
        elif failed:
            self._status_bar.status = "error"
            self._status_bar.detail = f"{len(failed)}/{total} failing: {', '.join(failed)}"
        else:
            self._status_bar.status = "ok"
            self._status_bar.detail = f"{total}/{total} targets healthy"

    async def _poll_once(self, collector: AlertaCollector) -> None:
        acc = MemoryAccumulator()
        await collector.gather(acc)
        latest = acc.latest_by_url()
        errors = {e.url: e for e in acc.errors}
        for url in collector.urls:
            card = self._cards[(collector.name, url)]
            record = latest.get(url)
            card.update_poll(record, errors.get(url) if record is None else None)
        self._update_status_bar()

    async def _poll_loop(self, collector: AlertaCollector) -> None:
        while True:
            await self._poll_once(collector)
            await asyncio.sleep(collector.poll_every)

    def action_refresh(self) -> None:
        for collector in self.collectors:
            asyncio.create_task(self._poll_once(collector))

    async def on_unmount(self) -> None:
        for task in self._tasks:
            task.cancel()
        for collector in self.collectors:
            await collector.aclose()
