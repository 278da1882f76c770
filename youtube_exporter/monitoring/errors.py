"""Taxonomia de erros do ciclo de amostragem.

Todos os erros são recuperáveis na fronteira do pipeline: resultam em uma
mensagem de log e em um estado de gauges degradado, nunca em falha do
``/metrics``.
"""

import reprlib


class ExporterError(Exception):
    """Base para os erros do exporter."""


class UpstreamConnectionError(ExporterError):
    """A YouTube API não pôde ser contactada (erro de transporte)."""


class DecodeError(ExporterError):
    """O corpo da resposta não é JSON válido ou não tem o formato esperado."""


class NoDataError(ExporterError):
    """A resposta não contém nenhum item para o vídeo configurado."""


class FieldParseError(ExporterError):
    """Um campo numérico veio com valor não numérico."""

    def __init__(self, field: str, raw):
        self.field = field
        self.raw = raw
        super().__init__(f"{field}: valor inválido {reprlib.repr(raw)}")
