# conftest.py
# Configuração global para pytest: garante a raiz do projeto no sys.path e
# fornece respostas falsas da YouTube API.
import sys
from pathlib import Path

import pytest

ROOT_PATH = Path(__file__).parent
if str(ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(ROOT_PATH))

from youtube_exporter.config.settings import Settings  # noqa: E402
from youtube_exporter.monitoring.state import MetricState  # noqa: E402


def make_item(viewers=None, start=None, likes=None) -> dict:
    """Monta um item no formato do endpoint ``videos``; ``None`` omite o campo."""
    details = {}
    if viewers is not None:
        details["concurrentViewers"] = viewers
    if start is not None:
        details["actualStartTime"] = start
    stats = {}
    if likes is not None:
        stats["likeCount"] = likes
    return {"id": "abc123", "liveStreamingDetails": details, "statistics": stats}


class FakeResponse:
    """Resposta mínima compatível com o uso de ``requests.Response`` no cliente."""

    def __init__(self, payload=None, status_code=200, json_error=None):
        self._payload = payload
        self.status_code = status_code
        self._json_error = json_error
        self.closed = False

    def json(self):
        if self._json_error is not None:
            raise self._json_error
        return self._payload

    def close(self):
        self.closed = True


@pytest.fixture
def settings():
    return Settings(api_key="test-key", video_id="abc123", process_metrics=False)


@pytest.fixture
def state():
    return MetricState()


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Evita que variáveis/arquivos do ambiente real vazem para os testes."""
    for key in (
        "YOUTUBE_API_KEY",
        "YOUTUBE_VIDEO_ID",
        "SCRAPE_INTERVAL_SECONDS",
        "EXPORTER_ADDR",
        "EXPORTER_PORT",
        "EXPORTER_LOG_LEVEL",
        "EXPORTER_LOG_ROOT",
        "EXPORTER_REQUIRE_CREDENTIALS",
        "EXPORTER_PROCESS_METRICS",
        "EXPORTER_CONFIG_FILE",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("EXPORTER_ENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.chdir(tmp_path)
