"""Cliente da YouTube Data API v3 (endpoint ``videos``).

Funções principais:
- fetch: faz um GET síncrono e devolve o JSON decodificado da resposta

Erros de transporte e de decodificação são levantados como exceções
distintas (``UpstreamConnectionError`` e ``DecodeError``) para que o
pipeline consiga registrar cada caso separadamente.

Nota: não há retries nem timeout próprio; vale o padrão do ``requests``
quando ``timeout`` não é informado.
"""

import logging

import requests  # type: ignore[import-untyped]

from .errors import DecodeError, UpstreamConnectionError

logger = logging.getLogger(__name__)

YOUTUBE_VIDEOS_URL = "https://www.googleapis.com/youtube/v3/videos"
VIDEO_PARTS = "liveStreamingDetails,statistics"

_REDACTED = "***"


def build_params(video_id: str, api_key: str) -> dict:
    """Monta os parâmetros de query do endpoint ``videos``."""
    return {"part": VIDEO_PARTS, "id": video_id, "key": api_key}


def _redact(text: str, api_key: str) -> str:
    """Remove a chave da API de mensagens (URLs de erro do requests a incluem)."""
    if api_key:
        return text.replace(api_key, _REDACTED)
    return text


def _api_error_message(payload) -> str | None:
    """Extrai ``error.message`` do corpo de erro padrão das APIs Google."""
    if not isinstance(payload, dict):
        return None
    err = payload.get("error")
    if isinstance(err, dict):
        msg = err.get("message")
        if msg:
            return str(msg)
    return None


def fetch(video_id: str, api_key: str, *, url: str = YOUTUBE_VIDEOS_URL, timeout: float | None = None) -> dict:
    """Consulta a YouTube API para o vídeo informado.

    Retorna o JSON decodificado (normalmente um dict com ``items``).

    Levanta:
        UpstreamConnectionError: falha de conexão/transporte.
        DecodeError: o corpo não pôde ser decodificado como JSON.
    """
    params = build_params(video_id, api_key)
    try:
        resp = requests.get(url, params=params, timeout=timeout)
    except requests.RequestException as exc:
        raise UpstreamConnectionError(_redact(str(exc), api_key)) from None

    try:
        try:
            payload = resp.json()
        except ValueError as exc:
            raise DecodeError(_redact(str(exc), api_key)) from None
    finally:
        resp.close()

    if resp.status_code >= 400:
        logger.warning(
            "YouTube API respondeu HTTP %s: %s",
            resp.status_code,
            _redact(_api_error_message(payload) or "sem detalhes", api_key),
        )
    return payload
