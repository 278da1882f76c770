"""Exporter Prometheus para métricas de lives do YouTube.

Consulta a YouTube Data API v3 para um único vídeo e republica três gauges
(espectadores, likes e status da live) no endpoint ``/metrics``.
"""

__version__ = "1.0.0"
