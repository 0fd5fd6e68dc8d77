from .accumulator import MemoryAccumulator
from .alerta_collector import AlertaCollector, ProbeConfig, decode_stats, map_metrics
from .base import Accumulator, AlertaMetric, AlertaStats, BaseCollector, EmittedRecord
from .client import TLSConfig, create_client
from .errors import AlertaError

__all__ = [
    "Accumulator",
    "AlertaCollector",
    "AlertaError",
    "AlertaMetric",
    "AlertaStats",
    "BaseCollector",
    "EmittedRecord",
    "MemoryAccumulator",
    "ProbeConfig",
    "TLSConfig",
    "create_client",
    "decode_stats",
    "map_metrics",
]
