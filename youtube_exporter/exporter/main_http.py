"""Servidor HTTP: expõe os endpoints /metrics e /health.

Cada ``GET /metrics`` executa um ciclo de amostragem de forma síncrona e em
seguida serializa o registry do ``MetricState``. Falhas na YouTube API não
alteram o status HTTP: o scrape sempre responde 200 e reporta status=0.
"""

import json
import logging
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

import psutil
from prometheus_client import CONTENT_TYPE_LATEST

from ..core.core import SamplingPipeline

logger = logging.getLogger(__name__)

# Instância única: cpu_percent(interval=0.0) mede desde a chamada anterior
_PROCESS = psutil.Process()


class MetricsHandler(BaseHTTPRequestHandler):
    """Handler HTTP para ``/metrics`` e ``/health``.

    O pipeline é injetado como atributo de classe por ``make_handler``.
    """

    pipeline: SamplingPipeline

    def do_GET(self):
        """Trata requisições GET.

        Endpoints suportados:
        - /metrics: executa um ciclo e devolve as métricas no formato Prometheus.
        - /health: JSON com o último ciclo, gauges atuais e métricas do processo.
        """
        path = urlsplit(self.path).path
        if path == "/metrics":
            logger.info("Fetching metrics (on /metrics request)...")
            self.pipeline.run_cycle()
            self._send(200, CONTENT_TYPE_LATEST, self.pipeline.state.render())
        elif path == "/health":
            body = json.dumps(self._health_status()).encode("utf-8")
            self._send(200, "application/json", body)
        else:
            self._send(404, "text/plain; charset=utf-8", b"not found\n")

    def _send(self, code: int, content_type: str, body: bytes) -> None:
        self.send_response(code)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _health_status(self) -> dict:
        state = self.pipeline.state
        return {
            "status": "ok",
            "last_cycle": {"outcome": state.last_outcome, "timestamp": state.last_cycle_ts},
            "metrics": state.snapshot(),
            "config": {
                "video_id": self.pipeline.settings.video_id,
                "scrape_interval_seconds": self.pipeline.settings.scrape_interval,
            },
            "process": _get_process_metrics(),
        }

    def log_message(self, format, *args):
        """Redireciona o access log do http.server para o logger (debug)."""
        logger.debug("%s - %s", self.address_string(), format % args)


def _get_process_metrics() -> dict:
    """Coleta métricas do processo em tempo real (best-effort)."""
    try:
        proc = _PROCESS
        return {
            "cpu_percent": proc.cpu_percent(interval=0.0),
            "memory_percent": proc.memory_percent(),
            "memory_rss_bytes": getattr(proc.memory_info(), "rss", 0),
            "uptime_seconds": float(max(0, (time.time() - proc.create_time()))),
            "num_threads": proc.num_threads(),
        }
    except psutil.Error as exc:
        logger.debug("Falha ao coletar métricas do processo: %s", exc, exc_info=True)
        return {}


def make_handler(pipeline: SamplingPipeline) -> type:
    """Cria uma subclasse de ``MetricsHandler`` ligada ao pipeline informado."""
    return type("BoundMetricsHandler", (MetricsHandler,), {"pipeline": pipeline})


def create_http_server(pipeline: SamplingPipeline, addr: str = "0.0.0.0", port: int = 1907) -> ThreadingHTTPServer:  # nosec B104
    """Cria (e faz bind) do servidor HTTP.

    Levanta ``OSError`` se a porta não puder ser aberta; o chamador decide
    encerrar o processo.
    """
    server = ThreadingHTTPServer((addr, port), make_handler(pipeline))
    server.daemon_threads = True
    return server


def run_http_server(server: ThreadingHTTPServer) -> None:
    """Atende requisições até KeyboardInterrupt e fecha o socket."""
    host, port = server.server_address[:2]
    logger.info("Exporter running on %s:%d/metrics", host, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Recebido KeyboardInterrupt, saindo...")
    finally:
        server.server_close()
