"""TargetCard — a reactive widget showing the latest poll of one Alerta URL."""

from __future__ import annotations

from rich.markup import escape
from textual.reactive import reactive
from textual.widgets import Static

from alerta_probe.base import EmittedRecord
from alerta_probe.errors import AlertaError
from ui.widgets.metric_row import format_uptime, render_metric_row


def render_target(
    probe_name: str, url: str, record: EmittedRecord | None, error: AlertaError | None
) -> str:
    """Rich markup for one card. Everything the server sent is escaped."""
    title = f"[bold]{escape(probe_name)}[/] [dim]{escape(url)}[/]"
    if error is not None:
        return f"[bold red]●[/] {title}\n  [red]{escape(str(error))}[/]"
    if record is None:
        return f"[bold cyan]●[/] {title}  [dim]waiting...[/]"

    ver = escape(record.tags.get("version", ""))
    uptime = record.fields.get("uptime", 0)
    parts = [f"[bold green]●[/] {title} [dim]v{ver} up {format_uptime(uptime)}[/]"]
    for name, value in sorted(record.fields.items()):
        if name == "uptime":
            continue
        parts.append(render_metric_row(name, value))
    return "\n".join(parts)


class TargetCard(Static):
    """Displays a target's version, uptime and alert counters, or its error."""

    record: reactive[EmittedRecord | None] = reactive(None)
    last_error: reactive[AlertaError | None] = reactive(None)

    def __init__(self, probe_name: str, url: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.probe_name = probe_name
        self.url = url

    def update_poll(self, record: EmittedRecord | None, error: AlertaError | None) -> None:
        self.record = record
        self.last_error = error
        self.set_class(error is not None, "error-state")

    def render(self) -> str:
        return render_target(self.probe_name, self.url, self.record, self.last_error)

    def watch_record(self, new_val: EmittedRecord | None) -> None:
        self.refresh()

    def watch_last_error(self, new_val: AlertaError | None) -> None:
        self.refresh()
