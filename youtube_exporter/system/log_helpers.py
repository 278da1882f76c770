"""Helpers de baixo nível para o subsistema de logging.

Fornece formatação de datas para nomes de ficheiro, o formatter JSONL e a
verificação de diretórios graváveis.
"""

import json as _json
import logging
import os
import traceback as _tb
from datetime import date, datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# -----------------------
# Formatação
# -----------------------
def format_date_for_log(dt=None) -> str:
    """Retorna data no formato YYYY-MM-DD (segura para nomes)."""
    try:
        if dt is None:
            return date.today().isoformat()
        if isinstance(dt, datetime):
            return dt.date().isoformat()
        if isinstance(dt, date):
            return dt.isoformat()
        return dt.date().isoformat()
    except (AttributeError, TypeError):
        return datetime.now(timezone.utc).date().isoformat()


class JSONFormatter(logging.Formatter):
    """Formata cada registro como uma linha JSON ``{ts, level, name, msg[, exc]}``."""

    def format(self, record):
        try:
            ts = self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ")
        except Exception:
            ts = ""
        obj = {
            "ts": ts,
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            try:
                obj["exc"] = "".join(_tb.format_exception(*record.exc_info))
            except Exception:
                logger.warning("Falha ao formatar exc_info para JSON", exc_info=True)
        return _json.dumps(obj, ensure_ascii=False)


# -----------------------
# Diretórios
# -----------------------
def ensure_dir_writable(p: Path) -> bool:
    """Garante, em melhor esforço, que `p` existe e é gravável."""
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("ensure_dir_writable: failed for %s: %s", p, exc, exc_info=True)
        return False
    if not os.access(p, os.W_OK):
        logger.error("ensure_dir_writable: permission denied writing to %s", p)
        return False
    return True
