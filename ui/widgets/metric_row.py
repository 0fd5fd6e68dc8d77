"""Render helpers for one emitted field: label, value and color."""

from __future__ import annotations

from rich.markup import escape

# Fields whose non-zero value deserves attention
WARN_ON_NONZERO = ("rejected_alerts",)


def field_label(name: str) -> str:
    """``received_alerts_time`` -> ``received (time)``."""
    base = name
    suffix = ""
    if base.endswith("_time"):
        base = base[: -len("_time")]
        suffix = " (time)"
    if base.endswith("_alerts"):
        base = base[: -len("_alerts")]
    return f"{base}{suffix}"


def compute_color(name: str, value: int) -> str:
    if name in WARN_ON_NONZERO and value > 0:
        return "yellow"
    return "green"


def format_value(name: str, value: int) -> str:
    if name.endswith("_time"):
        return f"{value:,} ms"
    return f"{value:,}"


def format_uptime(uptime_ms: int) -> str:
    """Alerta reports uptime in milliseconds."""
    seconds = uptime_ms // 1000
    hours, rest = divmod(seconds, 3600)
    return f"{hours}h{rest // 60}m"


def render_metric_row(name: str, value: int) -> str:
    """Render one field as a Rich-markup line for a TargetCard.

    Returns a line like:
        ``  received                 [green]1,024[/]``
    """
    color = compute_color(name, value)
    return f"  [dim]{escape(field_label(name)):<24}[/] [{color}]{format_value(name, value)}[/]"
