"""Configurações do exporter.

Este módulo resolve a configuração efetiva a partir de camadas, da menor
para a maior prioridade:

1. ``DEFAULTS``;
2. arquivo ``.env`` (``EXPORTER_ENV_FILE``) e variáveis de ambiente do
   processo (o ambiente sobrescreve o ``.env``);
3. arquivo YAML (``--config`` / ``EXPORTER_CONFIG_FILE``, padrão
   ``config.yaml``), lido apenas quando existe;
4. argumentos de linha de comando.

A função pública principal é ``load_settings()``, que devolve um
``Settings`` imutável. Valores inválidos vindos de ambiente/arquivo geram
warning e o valor padrão é usado.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

# ========================
# Constantes e padrões globais
# ========================

DEFAULT_CONFIG_FILE = "config.yaml"
DEFAULT_ENV_FILE = ".env"
DEFAULT_PORT = 1907
DEFAULT_SCRAPE_INTERVAL = 30.0
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULTS: dict[str, Any] = {
    "YOUTUBE_API_KEY": "",
    "YOUTUBE_VIDEO_ID": "",
    "SCRAPE_INTERVAL_SECONDS": DEFAULT_SCRAPE_INTERVAL,
    "EXPORTER_ADDR": "0.0.0.0",  # nosec B104
    "EXPORTER_PORT": DEFAULT_PORT,
    "EXPORTER_LOG_LEVEL": "INFO",
    "EXPORTER_LOG_ROOT": None,
    "EXPORTER_REQUIRE_CREDENTIALS": False,
    "EXPORTER_PROCESS_METRICS": True,
}

SETTING_KEYS = tuple(DEFAULTS)

# Mapeamento atributo do argparse -> chave de configuração
CLI_KEYS = {
    "api_key": "YOUTUBE_API_KEY",
    "video_id": "YOUTUBE_VIDEO_ID",
    "interval": "SCRAPE_INTERVAL_SECONDS",
    "addr": "EXPORTER_ADDR",
    "port": "EXPORTER_PORT",
    "log_level": "EXPORTER_LOG_LEVEL",
    "log_root": "EXPORTER_LOG_ROOT",
    "require_credentials": "EXPORTER_REQUIRE_CREDENTIALS",
    "process_metrics": "EXPORTER_PROCESS_METRICS",
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    """Configuração resolvida, criada uma vez no startup e somente leitura."""

    api_key: str = ""
    video_id: str = ""
    scrape_interval: float = DEFAULT_SCRAPE_INTERVAL
    addr: str = "0.0.0.0"  # nosec B104
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    log_root: Optional[str] = None
    config_path: Optional[str] = None
    require_credentials: bool = False
    process_metrics: bool = True

    @property
    def credentials_present(self) -> bool:
        return bool(self.api_key) and bool(self.video_id)

    def describe(self) -> dict:
        """Resumo para logs e /health; nunca inclui a chave da API."""
        return {
            "video_id": self.video_id,
            "api_key_set": bool(self.api_key),
            "scrape_interval_seconds": self.scrape_interval,
            "addr": self.addr,
            "port": self.port,
            "config_path": self.config_path,
        }


# ========================
# 1. Carregamento das configurações
# ========================


# Função principal do módulo; combina todas as camadas de configuração
def load_settings(cli: Any = None, *, env_file: str | Path | None = None) -> Settings:
    """Carrega configurações combinando DEFAULTS + .env + ambiente + YAML + CLI.

    ``cli`` pode ser um ``argparse.Namespace`` ou um mapeamento com os
    atributos de ``CLI_KEYS`` (mais ``config``). Valores ``None`` ou vazios
    da CLI não sobrescrevem as outras camadas.
    """
    raw: dict[str, Any] = dict(DEFAULTS)

    env_path = Path(env_file or os.getenv("EXPORTER_ENV_FILE", DEFAULT_ENV_FILE))
    env_items = _merge_env_items(env_path)
    raw.update({k: v for k, v in env_items.items() if k in SETTING_KEYS})

    cli_values = _cli_mapping(cli)
    config_path = cli_values.get("config") or env_items.get("EXPORTER_CONFIG_FILE") or DEFAULT_CONFIG_FILE
    file_items = read_config_file(config_path)
    raw.update({k: v for k, v in file_items.items() if k in SETTING_KEYS})

    _apply_cli_overrides(cli_values, raw)

    settings = _coerce_settings(raw, config_path if file_items else None)
    logger.debug("Configurações resolvidas: %s", settings.describe())
    return settings


# ========================
# 2. Funções auxiliares para ambiente e arquivos
# ========================


# Auxilia load_settings; criado para centralizar leitura do .env
def read_env_file(path: Path | str) -> dict:
    """Lê um arquivo `.env` e devolve um dicionário chave->valor.

    Linhas vazias e comentários (começando com '#') são ignorados.
    """
    result: dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return result
    try:
        with p.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, val = line.split("=", 1)
                key = key.strip()
                if key.startswith("export "):
                    key = key[len("export ") :].strip()
                val = val.strip().strip('"').strip("'")
                result[key] = val
    except OSError as exc:
        logger.debug("Falha ao ler .env em %s: %s", p, exc)
        return {}
    return result


# Auxilia load_settings; criado para unir variáveis do ambiente e .env
def _merge_env_items(env_path: Path) -> dict:
    """Retorna um mapeamento combinado de `.env` e env vars do processo.

    As variáveis do processo sobrescrevem o arquivo `.env`.
    """
    env_items = read_env_file(env_path)
    if env_items == {} and env_path.exists():
        logger.warning("Erro ou ficheiro .env vazio em %s", env_path)
    env_items.update(os.environ)
    return env_items


def read_config_file(path: Path | str) -> dict:
    """Lê o arquivo YAML de configuração quando ele existe.

    Retorna {} se o arquivo não existir. Falhas de leitura/parsing ou um
    documento que não seja mapeamento geram warning e também retornam {}.
    """
    p = Path(path)
    if not p.exists():
        return {}
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        logger.warning("Could not read %s: %s", p, exc)
        return {}
    except yaml.YAMLError as exc:
        logger.warning("Could not parse %s: %s", p, exc)
        return {}
    if data is None:
        data = {}
    if not isinstance(data, dict):
        logger.warning("Could not parse %s: documento não é um mapeamento", p)
        return {}
    unknown = sorted(str(k) for k in data if k not in SETTING_KEYS)
    if unknown:
        logger.debug("Chaves desconhecidas ignoradas em %s: %s", p, unknown)
    logger.info("Loaded configuration from %s", p)
    return {str(k): v for k, v in data.items()}


def _cli_mapping(cli: Any) -> dict:
    if cli is None:
        return {}
    if isinstance(cli, Mapping):
        return dict(cli)
    return dict(vars(cli))


# Auxilia load_settings; CLI tem a maior precedência
def _apply_cli_overrides(cli_values: dict, raw: dict) -> None:
    """Aplica valores da CLI, ignorando os não informados.

    Strings vazias e intervalo <= 0 não sobrescrevem as camadas inferiores.
    """
    for attr, key in CLI_KEYS.items():
        value = cli_values.get(attr)
        if value is None or value == "":
            continue
        if attr == "interval":
            try:
                if float(value) <= 0:
                    continue
            except (TypeError, ValueError):
                continue
        raw[key] = value


# ========================
# 3. Validação e normalização
# ========================


def _as_bool(key: str, value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    sv = str(value).strip().lower()
    if sv in _TRUE:
        return True
    if sv in _FALSE:
        return False
    logger.warning("%s inválido: %s", key, value)
    return default


def _as_port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        logger.warning("EXPORTER_PORT inválido: %s", value)
        return DEFAULT_PORT
    if not 0 <= port <= 65535:
        logger.warning("EXPORTER_PORT fora do intervalo: %s", value)
        return DEFAULT_PORT
    return port


def _as_interval(value: Any) -> float:
    try:
        interval = float(value)
    except (TypeError, ValueError):
        logger.warning("SCRAPE_INTERVAL_SECONDS inválido: %s", value)
        return DEFAULT_SCRAPE_INTERVAL
    if interval <= 0:
        logger.warning("SCRAPE_INTERVAL_SECONDS deve ser > 0: %s", value)
        return DEFAULT_SCRAPE_INTERVAL
    return interval


def _as_log_level(value: Any) -> str:
    level = str(value or "").strip().upper()
    if level not in LOG_LEVELS:
        logger.warning("EXPORTER_LOG_LEVEL inválido: %s", value)
        return "INFO"
    return level


def _as_str(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _coerce_settings(raw: dict, config_path: Optional[str]) -> Settings:
    """Converte o dicionário bruto em ``Settings`` validado."""
    log_root = raw.get("EXPORTER_LOG_ROOT")
    return Settings(
        api_key=_as_str(raw.get("YOUTUBE_API_KEY")),
        video_id=_as_str(raw.get("YOUTUBE_VIDEO_ID")),
        scrape_interval=_as_interval(raw.get("SCRAPE_INTERVAL_SECONDS")),
        addr=_as_str(raw.get("EXPORTER_ADDR")) or DEFAULTS["EXPORTER_ADDR"],
        port=_as_port(raw.get("EXPORTER_PORT")),
        log_level=_as_log_level(raw.get("EXPORTER_LOG_LEVEL")),
        log_root=_as_str(log_root) or None,
        config_path=str(config_path) if config_path else None,
        require_credentials=_as_bool(
            "EXPORTER_REQUIRE_CREDENTIALS", raw.get("EXPORTER_REQUIRE_CREDENTIALS"), False
        ),
        process_metrics=_as_bool("EXPORTER_PROCESS_METRICS", raw.get("EXPORTER_PROCESS_METRICS"), True),
    )
