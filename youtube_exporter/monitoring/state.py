"""Estado das métricas exportadas.

``MetricState`` é dono de um ``CollectorRegistry`` próprio e dos três
gauges publicados no ``/metrics``. Cada gauge é atualizado de forma atômica
e independente (o ``Gauge`` do prometheus_client já protege o valor com
lock); não há atomicidade entre os três.
"""

import time
from typing import Optional

from prometheus_client import CollectorRegistry, Gauge, generate_latest
from prometheus_client.gc_collector import GCCollector
from prometheus_client.platform_collector import PlatformCollector
from prometheus_client.process_collector import ProcessCollector

from .decoder import SampleResult

VIEWERS_METRIC = "youtube_live_viewers"
LIKES_METRIC = "youtube_live_likes"
STATUS_METRIC = "youtube_live_status"

# Resultados possíveis de um ciclo de amostragem
OUTCOME_OK = "ok"
OUTCOME_NO_DATA = "no_data"
OUTCOME_CONNECTION_ERROR = "connection_error"
OUTCOME_DECODE_ERROR = "decode_error"
OUTCOME_UNEXPECTED_ERROR = "unexpected_error"


class MetricState:
    """Gauges do exporter e resultado do último ciclo.

    - registry: registry próprio (serializado pelo ``/metrics``).
    - process_metrics: registra também os coletores de processo, plataforma e GC.
    - last_outcome / last_cycle_ts: resultado e instante (epoch) do último ciclo.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None, *, process_metrics: bool = False):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.viewers = Gauge(VIEWERS_METRIC, "Number of concurrent viewers", registry=self.registry)
        self.likes = Gauge(LIKES_METRIC, "Number of likes on the livestream", registry=self.registry)
        self.status = Gauge(STATUS_METRIC, "Live status: 1=live, 0=offline", registry=self.registry)
        if process_metrics:
            ProcessCollector(registry=self.registry)
            PlatformCollector(registry=self.registry)
            GCCollector(registry=self.registry)

        self.last_outcome: Optional[str] = None
        self.last_cycle_ts: Optional[float] = None

    def set_viewers(self, value: int) -> None:
        self.viewers.set(value)

    def set_likes(self, value: int) -> None:
        self.likes.set(value)

    def set_live(self, live: bool) -> None:
        self.status.set(1 if live else 0)

    def apply(self, result: SampleResult) -> None:
        """Grava os três valores de uma amostra decodificada com sucesso."""
        self.set_viewers(result.viewers_value)
        self.set_likes(result.likes_value)
        self.set_live(result.is_live)

    def mark_offline(self) -> None:
        """Caminho de falha: só o status é zerado; viewers/likes mantêm o último valor."""
        self.set_live(False)

    def record_outcome(self, outcome: str) -> None:
        self.last_outcome = outcome
        self.last_cycle_ts = time.time()

    def get_value(self, metric: str) -> float:
        """Lê o valor atual de um gauge pelo nome (0.0 se ausente)."""
        value = self.registry.get_sample_value(metric)
        return float(value) if value is not None else 0.0

    def snapshot(self) -> dict:
        """Valores atuais dos três gauges como inteiros."""
        return {
            "viewers": int(self.get_value(VIEWERS_METRIC)),
            "likes": int(self.get_value(LIKES_METRIC)),
            "status": int(self.get_value(STATUS_METRIC)),
        }

    def render(self) -> bytes:
        """Serializa o registry no formato de exposição do Prometheus."""
        return generate_latest(self.registry)
