"""Pacote system: configuração de logging e helpers de ficheiro.

Re-exports úteis para o entrypoint.
"""

from .logs import configure_logging, get_debug_file_path

__all__ = ["configure_logging", "get_debug_file_path"]
