"""Ponto de entrada do exporter.

Este módulo realiza a inicialização da aplicação: parsing de argumentos CLI,
resolução da configuração, configuração de logging, criação do estado das
métricas e do servidor HTTP. A lógica de amostragem fica em `core` para
facilitar testes e reutilização.

Códigos de saída:
- 0: servidor encerrado normalmente
- 1: falha ao abrir a porta HTTP
- 2: credenciais ausentes com ``--require-credentials`` (ou erro de uso da CLI)
"""

import logging as _logging
import sys

from .config.settings import load_settings
from .core.args import parse_args
from .core.core import SamplingPipeline
from .exporter.main_http import create_http_server, run_http_server
from .monitoring.state import MetricState
from .system.logs import configure_logging

EXIT_OK = 0
EXIT_BIND_FAILED = 1
EXIT_MISSING_CREDENTIALS = 2


def main(argv: list[str] | None = None) -> int:
    """Inicializa a aplicação e atende ``/metrics`` até ser interrompida.

    Args:
        argv: Lista de argumentos (usada em testes). Quando ``None`` a função
            utiliza os argumentos de linha de comando do processo.

    Returns:
        Código de saída do processo.
    """
    args = parse_args(argv)
    # Console ativo antes de ler a configuração; o nível final vem dela.
    configure_logging(args.log_level or "INFO")
    settings = load_settings(args)
    configure_logging(settings.log_level, settings.log_root)
    logger = _logging.getLogger(__name__)

    if not settings.credentials_present:
        if settings.require_credentials:
            logger.critical(
                "YOUTUBE_API_KEY and/or YOUTUBE_VIDEO_ID are not set (via CLI, config file or environment)."
            )
            return EXIT_MISSING_CREDENTIALS
        logger.warning(
            "YOUTUBE_API_KEY and/or YOUTUBE_VIDEO_ID are not set (via CLI, config file or environment). "
            "Exporter will start, but metrics will be empty until values are provided."
        )
    else:
        logger.info("Using YOUTUBE_API_KEY and YOUTUBE_VIDEO_ID from CLI, config file or environment.")
    # O intervalo é apenas informativo: a amostragem acontece a cada scrape.
    logger.info("Scrape interval declarado: %ss (amostragem sob demanda)", settings.scrape_interval)

    state = MetricState(process_metrics=settings.process_metrics)
    logger.info("Prometheus metrics registered.")
    pipeline = SamplingPipeline(settings, state, verbose_level=getattr(args, "verbose", 0) or 0)

    try:
        server = create_http_server(pipeline, settings.addr, settings.port)
    except OSError as exc:
        logger.critical("HTTP server failed: %s", exc)
        return EXIT_BIND_FAILED

    run_http_server(server)
    return EXIT_OK


def run() -> None:
    """Entrypoint do console script ``youtube-exporter``."""
    sys.exit(main())


if __name__ == "__main__":
    run()
