"""Core do exporter: ciclo de amostragem.

Orquestra cliente da YouTube API -> decoder -> estado das métricas. Um
ciclo é executado por requisição ao ``/metrics``; não há loop em
background nem cache.
"""

import logging
from typing import Callable, Optional

from .emitter import emit_summary
from ..config.settings import Settings
from ..monitoring.decoder import decode
from ..monitoring.errors import DecodeError, UpstreamConnectionError
from ..monitoring.state import (
    MetricState,
    OUTCOME_CONNECTION_ERROR,
    OUTCOME_DECODE_ERROR,
    OUTCOME_NO_DATA,
    OUTCOME_OK,
    OUTCOME_UNEXPECTED_ERROR,
)
from ..monitoring.youtube import fetch

logger = logging.getLogger(__name__)

Fetcher = Callable[[str, str], object]


class SamplingPipeline:
    """Executa ciclos de amostragem e grava o resultado em ``MetricState``.

    Parâmetros:
        settings: configuração resolvida (usa ``video_id`` e ``api_key``).
        state: dono dos gauges; compartilhado com o endpoint HTTP.
        fetcher: função ``(video_id, api_key) -> payload``; padrão ``fetch``.
        verbose_level: repassado ao emissor do resumo.
    """

    def __init__(
        self,
        settings: Settings,
        state: MetricState,
        fetcher: Optional[Fetcher] = None,
        verbose_level: int = 0,
    ):
        self.settings = settings
        self.state = state
        self._fetch = fetcher or fetch
        self.verbose_level = verbose_level

    def run_cycle(self) -> str:
        """Executa um ciclo completo e retorna o resultado (``OUTCOME_*``).

        Nenhuma exceção escapa desta função. Em falha de fetch/decode ou
        resposta sem itens, apenas o status é zerado; viewers e likes
        mantêm o último valor conhecido.
        """
        outcome = self._cycle()
        self.state.record_outcome(outcome)
        return outcome

    def _cycle(self) -> str:
        video_id = self.settings.video_id
        try:
            payload = self._fetch(video_id, self.settings.api_key)
            result = decode(payload)
        except UpstreamConnectionError as exc:
            logger.error("Failed to fetch YouTube API: %s", exc)
            self.state.mark_offline()
            return OUTCOME_CONNECTION_ERROR
        except DecodeError as exc:
            logger.error("Failed to decode YouTube API response: %s", exc)
            self.state.mark_offline()
            return OUTCOME_DECODE_ERROR
        except Exception as exc:
            logger.error("Erro inesperado no ciclo de amostragem: %s", exc, exc_info=True)
            self.state.mark_offline()
            return OUTCOME_UNEXPECTED_ERROR

        if result.no_data:
            logger.warning("No live video found or invalid YOUTUBE_VIDEO_ID: %s", video_id)
            self.state.mark_offline()
            return OUTCOME_NO_DATA

        self.state.apply(result)
        emit_summary(result, self.verbose_level)
        return OUTCOME_OK
