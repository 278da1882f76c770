"""Pacote exporter: servidor HTTP que expõe as métricas para scraping.

Re-exports para importações curtas como
``from youtube_exporter.exporter import create_http_server``.
"""

from .main_http import create_http_server, run_http_server  # re-export

__all__ = ["create_http_server", "run_http_server"]
