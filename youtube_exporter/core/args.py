"""Parser de argumentos do exporter.

Este módulo fornece um parser que expõe:
- arquivo de configuração (--config)
- credenciais e vídeo (--api-key / --video-id)
- intervalo de scrape declarado (-i / --interval)
- endereço e porta do servidor HTTP (--addr / --port)
- verbosidade e opções de logging (-v, --log-level, --log-root)

Argumentos não informados ficam ``None`` para que ``load_settings`` consiga
distinguir "não passado" de "passado", aplicando a precedência
CLI > arquivo > ambiente > padrão.
"""

import argparse
from typing import Sequence

# ========================
# 0. Configuração do parser
# ========================


# Função principal do módulo; cria e retorna o ArgumentParser configurado
def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para o exporter."""
    parser = argparse.ArgumentParser(
        prog="youtube-exporter",
        description="Exporter Prometheus para espectadores, likes e status de uma live do YouTube",
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Caminho do arquivo YAML de configuração (padrão: config.yaml)",
    )
    parser.add_argument(
        "--api-key",
        dest="api_key",
        type=str,
        default=None,
        help="YouTube API key (sobrescreve arquivo e ambiente)",
    )
    parser.add_argument(
        "--video-id",
        dest="video_id",
        type=str,
        default=None,
        help="ID do vídeo/live no YouTube (sobrescreve arquivo e ambiente)",
    )
    parser.add_argument(
        "-i",
        "--interval",
        type=float,
        default=None,
        help="Intervalo de scrape em segundos (sobrescreve arquivo e ambiente; <= 0 é ignorado)",
    )
    parser.add_argument(
        "--addr",
        type=str,
        default=None,
        help="Endereço de bind do servidor HTTP (padrão: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Porta do servidor HTTP (padrão: 1907)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade (-v = DEBUG)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v ou configuração",
    )
    parser.add_argument(
        "--log-root",
        dest="log_root",
        type=str,
        default=None,
        help="Diretório raiz para arquivos de log (desativado se ausente)",
    )
    parser.add_argument(
        "--require-credentials",
        dest="require_credentials",
        action="store_true",
        default=None,
        help="Encerra com erro se a API key ou o video ID não estiverem configurados",
    )
    parser.add_argument(
        "--no-process-metrics",
        dest="process_metrics",
        action="store_false",
        default=None,
        help="Não expõe as métricas de processo/plataforma/GC do Python",
    )

    return parser


# ========================
# 1. Análise e validação de argumentos
# ========================


# Auxilia main; criado para analisar argv e validar argumentos
def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Analisa argv e retorna Namespace validado.

    Erros de validação são reportados pelo próprio argparse (exit code 2).
    """
    parser = configure_argparser()
    ns = parser.parse_args(argv)
    try:
        validate_args(ns)
    except ValueError as exc:
        parser.error(str(exc))
    if ns.log_level is None and ns.verbose:
        ns.log_level = "DEBUG"
    return ns


# Auxilia parse_args; criado para garantir valores corretos e seguros
def validate_args(args: argparse.Namespace) -> None:
    """Valida argumentos numéricos informados pela CLI."""
    interval = getattr(args, "interval", None)
    if interval is not None:
        try:
            args.interval = float(interval)
        except (TypeError, ValueError) as exc:
            raise ValueError("intervalo deve ser um número") from exc
        if args.interval < 0.0:
            raise ValueError("intervalo deve ser >= 0.0")

    port = getattr(args, "port", None)
    if port is not None:
        try:
            args.port = int(port)
        except (TypeError, ValueError) as exc:
            raise ValueError("porta deve ser um inteiro") from exc
        if not 0 <= args.port <= 65535:
            raise ValueError("porta deve estar entre 0 e 65535")
