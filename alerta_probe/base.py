"""Base collector ABC, metric sink interface and shared data types."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .errors import AlertaError


@dataclass(frozen=True)
class AlertaMetric:
    group: str = ""
    name: str = ""  # action
    type: str = ""  # "gauge" or "timer"
    value: int = 0  # gauge
    count: int = 0  # timer
    total_time: int = 0  # timer


@dataclass(frozen=True)
class AlertaStats:
    version: str = ""
    uptime: int = 0
    metrics: list[AlertaMetric] = field(default_factory=list)


@dataclass
class EmittedRecord:
    measurement: str
    tags: dict[str, str]
    fields: dict[str, int]
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "measurement": self.measurement,
            "tags": dict(self.tags),
            "fields": dict(self.fields),
            "timestamp": self.timestamp,
        }


class Accumulator(ABC):
    """Sink that receives emitted records and per-target errors."""

    @abstractmethod
    def add_fields(self, measurement: str, fields: dict[str, int], tags: dict[str, str]) -> None:
        ...

    @abstractmethod
    def add_error(self, err: AlertaError) -> None:
        ...


class BaseCollector(ABC):
    """Abstract base for all metric collectors."""

    def __init__(self, name: str, poll_every: float = 10) -> None:
        self.name = name
        self.poll_every = poll_every

    @abstractmethod
    async def gather(self, acc: Accumulator) -> list[AlertaError]:
        """Run one poll cycle. Per-target failures go to ``acc``, never raised."""
        ...

    async def aclose(self) -> None:
        """Release resources held across poll cycles."""
