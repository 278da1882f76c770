"""Configuração de logging do exporter.

Sempre configura o logger root para o console. Quando uma raiz de logs é
informada, adiciona também dois handlers de ficheiro diários: um legível
por humanos (texto) e um JSONL para ingestão.
"""

import logging
import sys
import types as _types
from dataclasses import dataclass
from pathlib import Path

from .log_helpers import LOG_FORMAT, JSONFormatter, ensure_dir_writable, format_date_for_log

logger = logging.getLogger(__name__)

DEBUG_LOG_FILENAME = "debug_log"


@dataclass(frozen=True)
class LogPaths:
    """Diretórios usados pelo subsistema de logs."""

    root: Path
    debug_dir: Path


def get_log_paths(root: str | Path) -> LogPaths:
    """Resolve a raiz de logs e garante o diretório de debug criado."""
    log_root = Path(root)
    ensure_dir_writable(log_root)
    debug_dir = log_root / "debug"
    ensure_dir_writable(debug_dir)
    return LogPaths(log_root, debug_dir)


# Retorna o caminho do arquivo de debug do dia
def get_debug_file_path(root: str | Path) -> Path:
    """Retorna caminho do arquivo de debug diário.

    Nomeia o arquivo com a data atual no diretório de debug.
    """
    date_str = format_date_for_log(None)
    return get_log_paths(root).debug_dir / f"{DEBUG_LOG_FILENAME}-{date_str}.txt"


def configure_logging(level: str = "INFO", log_root: str | Path | None = None) -> None:
    """Configura o logging do processo.

    Args:
        level: nome do nível (DEBUG/INFO/WARNING/ERROR/CRITICAL).
        log_root: quando informado, ativa os handlers de ficheiro em
            ``<log_root>/debug``.
    """
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(lvl, int):
        lvl = logging.INFO
    logging.basicConfig(level=lvl, format=LOG_FORMAT)
    # basicConfig não altera o nível se o root já tiver handlers
    logging.getLogger().setLevel(lvl)

    if log_root:
        try:
            setup_file_handlers(log_root)
        except OSError as exc:
            logger.warning("Falha ao configurar logs em ficheiro em %s: %s", log_root, exc)


def setup_file_handlers(log_root: str | Path) -> None:
    """Instala handlers de ficheiro (texto + JSONL) e hook global de exceções.

    Evita duplicar handlers se já existirem handlers de ficheiro com os
    mesmos caminhos. O método ``emit`` de cada handler é substituído por uma
    versão que suprime exceções do próprio handler.
    """
    debug_path = get_debug_file_path(log_root)

    fh = logging.FileHandler(str(debug_path), encoding="utf-8")
    fh.setFormatter(logging.Formatter(LOG_FORMAT))

    jfh = logging.FileHandler(str(debug_path.with_suffix(".jsonl")), encoding="utf-8")
    jfh.setFormatter(JSONFormatter())

    root = logging.getLogger()
    if _has_existing_file_handler(root, fh, jfh):
        fh.close()
        jfh.close()
    else:
        _wrap_emit_safe(fh)
        _wrap_emit_safe(jfh)
        root.addHandler(fh)
        root.addHandler(jfh)

    def _exc_hook(exc_type, exc_value, exc_tb):
        try:
            root.error("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))
        except Exception:
            sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _exc_hook


def _has_existing_file_handler(root, fh, jfh) -> bool:
    bases = (getattr(fh, "baseFilename", None), getattr(jfh, "baseFilename", None))
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) in bases:
            return True
    return False


def _wrap_emit_safe(handler):
    orig = handler.emit

    def _emit_safe(self, record):
        try:
            return orig(record)
        except Exception:
            self.handleError(record)

    handler.emit = _types.MethodType(_emit_safe, handler)  # type: ignore[assignment]
