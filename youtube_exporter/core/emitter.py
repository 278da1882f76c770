"""Emissor da linha de resumo de cada ciclo de amostragem.

Mantido em módulo separado para reduzir responsabilidades do `core` e
facilitar testes.
"""

import logging

from ..monitoring.decoder import SampleResult

logger = logging.getLogger(__name__)


def format_summary(result: SampleResult) -> str:
    """Formata o resumo de uma amostra aplicada aos gauges."""
    return "Metrics updated: Viewers=%d, Likes=%d, Status=%d" % (
        result.viewers_value,
        result.likes_value,
        1 if result.is_live else 0,
    )


def emit_summary(result: SampleResult, verbose_level: int = 0) -> None:
    """Registra o resumo no log e, com verbose_level > 1, também no stdout."""
    summary = format_summary(result)
    logger.info(summary)
    if verbose_level > 1:
        print(summary)
