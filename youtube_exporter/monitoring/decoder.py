"""Decodificação da resposta do endpoint ``videos`` em uma amostra normalizada.

A API devolve os campos numéricos como strings; o decoder não assume tipos
numéricos do JSON. Campos ausentes ou inválidos degradam para "sem valor"
(``None``), que é exportado como 0. Apenas o primeiro item é considerado,
já que o exporter acompanha um único vídeo.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from .errors import DecodeError, FieldParseError, NoDataError

logger = logging.getLogger(__name__)

_DIGITS = re.compile(r"[0-9]+")
# Limite de um inteiro de 64 bits com sinal
MAX_COUNT = 2**63 - 1
_MAX_COUNT_DIGITS = len(str(MAX_COUNT))


@dataclass(frozen=True)
class SampleResult:
    """Amostra normalizada de um ciclo.

    ``viewers``/``likes`` valem ``None`` quando não há valor disponível
    (campo ausente ou inválido), o que é diferente de zero observado.
    ``no_data`` indica que a resposta não trouxe nenhum item.
    """

    viewers: Optional[int]
    likes: Optional[int]
    is_live: bool
    no_data: bool = False

    @classmethod
    def empty(cls) -> "SampleResult":
        """Resultado para resposta sem itens: offline, sem contagens."""
        return cls(viewers=None, likes=None, is_live=False, no_data=True)

    @property
    def viewers_value(self) -> int:
        return self.viewers if self.viewers is not None else 0

    @property
    def likes_value(self) -> int:
        return self.likes if self.likes is not None else 0


def _first_item(items: list) -> dict:
    if not items:
        raise NoDataError("resposta sem items")
    item = items[0]
    if not isinstance(item, dict):
        raise DecodeError(f"items[0] não é um objeto JSON: {type(item).__name__}")
    return item


def _section(item: dict, name: str) -> dict:
    """Retorna a sub-seção do item (``liveStreamingDetails``/``statistics``) ou {}."""
    value = item.get(name)
    return value if isinstance(value, dict) else {}


def _to_count(field: str, raw: Any) -> int:
    """Converte o valor bruto em contagem inteira >= 0 ou levanta FieldParseError."""
    # bool é subclasse de int; não é uma contagem válida
    if isinstance(raw, bool):
        raise FieldParseError(field, raw)
    if isinstance(raw, int):
        if not 0 <= raw <= MAX_COUNT:
            raise FieldParseError(field, raw)
        return raw
    if isinstance(raw, str) and _DIGITS.fullmatch(raw):
        # zeros à esquerda não contam para o limite de dígitos
        digits = raw.lstrip("0") or "0"
        if len(digits) > _MAX_COUNT_DIGITS:
            raise FieldParseError(field, raw)
        value = int(digits)
        if value > MAX_COUNT:
            raise FieldParseError(field, raw)
        return value
    raise FieldParseError(field, raw)


def parse_count(section: dict, field: str) -> Optional[int]:
    """Lê um campo de contagem; ausente ou inválido resulta em ``None``.

    Valores inválidos geram um warning; ausência é registrada apenas em debug.
    """
    raw = section.get(field)
    if raw is None or raw == "":
        logger.debug("%s ausente na resposta", field)
        return None
    try:
        return _to_count(field, raw)
    except FieldParseError as exc:
        logger.warning("Failed to parse %s: %s", field, exc)
        return None


def is_live(details: dict) -> bool:
    """Live se e somente se ``actualStartTime`` for uma string não vazia."""
    start = details.get("actualStartTime")
    return isinstance(start, str) and start != ""


def decode(payload: Any) -> SampleResult:
    """Converte o JSON da API em ``SampleResult``.

    Levanta ``DecodeError`` quando o documento não tem o formato esperado
    (não é objeto, ``items`` não é lista ou ``items[0]`` não é objeto).
    """
    if not isinstance(payload, dict):
        raise DecodeError(f"payload não é um objeto JSON: {type(payload).__name__}")
    items = payload.get("items")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise DecodeError(f"items não é uma lista: {type(items).__name__}")

    try:
        item = _first_item(items)
    except NoDataError as exc:
        logger.debug("decode: %s", exc)
        return SampleResult.empty()

    details = _section(item, "liveStreamingDetails")
    stats = _section(item, "statistics")
    return SampleResult(
        viewers=parse_count(details, "concurrentViewers"),
        likes=parse_count(stats, "likeCount"),
        is_live=is_live(details),
    )
