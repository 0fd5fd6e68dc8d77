"""In-process metric sink."""

from __future__ import annotations

from .base import Accumulator, EmittedRecord
from .errors import AlertaError


class MemoryAccumulator(Accumulator):
    """Keeps every record and error handed to it, in arrival order.

    Appends happen on the event loop thread, so concurrent poll tasks can
    share one instance.
    """

    def __init__(self) -> None:
        self.records: list[EmittedRecord] = []
        self.errors: list[AlertaError] = []

    def add_fields(self, measurement: str, fields: dict[str, int], tags: dict[str, str]) -> None:
        self.records.append(EmittedRecord(measurement=measurement, tags=dict(tags), fields=dict(fields)))

    def add_error(self, err: AlertaError) -> None:
        self.errors.append(err)

    def latest_by_url(self) -> dict[str, EmittedRecord]:
        latest: dict[str, EmittedRecord] = {}
        for rec in self.records:
            latest[rec.tags.get("url", "")] = rec
        return latest
