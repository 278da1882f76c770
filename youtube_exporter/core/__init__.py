"""Pacote core: orquestração do ciclo de amostragem e parsing de argumentos.

Re-exports para importações curtas.
"""

from .core import SamplingPipeline
from .emitter import emit_summary

__all__ = ["SamplingPipeline", "emit_summary"]
