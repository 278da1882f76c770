import logging
import threading

from conftest import make_item
from youtube_exporter.core.core import SamplingPipeline
from youtube_exporter.monitoring.errors import DecodeError, UpstreamConnectionError
from youtube_exporter.monitoring.state import (
    OUTCOME_CONNECTION_ERROR,
    OUTCOME_DECODE_ERROR,
    OUTCOME_NO_DATA,
    OUTCOME_OK,
    OUTCOME_UNEXPECTED_ERROR,
)


def _pipeline(settings, state, payload=None, exc=None):
    calls = []

    def fake_fetch(video_id, api_key):
        calls.append((video_id, api_key))
        if exc is not None:
            raise exc
        return payload

    return SamplingPipeline(settings, state, fetcher=fake_fetch), calls


def _seed(state, viewers=500, likes=40):
    state.set_viewers(viewers)
    state.set_likes(likes)
    state.set_live(True)


def test_scenario_live_stream(settings, state):
    """Live com contagens válidas atualiza os três gauges."""
    payload = {"items": [make_item("1532", "2024-01-01T00:00:00Z", "87")]}
    pipe, calls = _pipeline(settings, state, payload)

    assert pipe.run_cycle() == OUTCOME_OK
    assert state.snapshot() == {"viewers": 1532, "likes": 87, "status": 1}
    assert calls == [("abc123", "test-key")]
    assert state.last_outcome == OUTCOME_OK


def test_scenario_empty_items_keeps_counts(settings, state, caplog):
    """Sem itens: status 0, viewers/likes inalterados, um warning."""
    _seed(state)
    pipe, _ = _pipeline(settings, state, {"items": []})
    caplog.set_level(logging.INFO)

    assert pipe.run_cycle() == OUTCOME_NO_DATA
    assert state.snapshot() == {"viewers": 500, "likes": 40, "status": 0}
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "abc123" in warnings[0].getMessage()


def test_scenario_empty_fields(settings, state):
    """Campos vazios: viewers 0, likes do payload, offline."""
    _seed(state)
    pipe, _ = _pipeline(settings, state, {"items": [make_item("", "", "42")]})

    assert pipe.run_cycle() == OUTCOME_OK
    assert state.snapshot() == {"viewers": 0, "likes": 42, "status": 0}


def test_scenario_connection_failure(settings, state, caplog):
    """Falha de conexão: status 0, contagens preservadas, um único erro."""
    _seed(state)
    pipe, _ = _pipeline(settings, state, exc=UpstreamConnectionError("unreachable"))
    caplog.set_level(logging.DEBUG)

    assert pipe.run_cycle() == OUTCOME_CONNECTION_ERROR
    assert state.snapshot() == {"viewers": 500, "likes": 40, "status": 0}
    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert len(errors) == 1
    assert "Failed to fetch" in errors[0].getMessage()


def test_scenario_non_numeric_viewers(settings, state, caplog):
    """Viewers inválido vira 0 com warning; likes e status seguem o payload."""
    _seed(state)
    pipe, _ = _pipeline(settings, state, {"items": [make_item("abc", "2024-01-01", "10")]})
    caplog.set_level(logging.DEBUG)

    assert pipe.run_cycle() == OUTCOME_OK
    assert state.snapshot() == {"viewers": 0, "likes": 10, "status": 1}
    assert any(r.levelno == logging.WARNING and "concurrentViewers" in r.getMessage() for r in caplog.records)


def test_live_with_zero_counts(settings, state):
    """Start time presente implica status 1 mesmo com zero viewers/likes."""
    pipe, _ = _pipeline(settings, state, {"items": [make_item("0", "2024-01-01", "0")]})
    pipe.run_cycle()
    assert state.snapshot() == {"viewers": 0, "likes": 0, "status": 1}


def test_decode_error_paths(settings, state, caplog):
    """Erro de decodificação (fetch ou formato) só derruba o status."""
    _seed(state)
    caplog.set_level(logging.DEBUG)
    pipe, _ = _pipeline(settings, state, exc=DecodeError("Expecting value"))
    assert pipe.run_cycle() == OUTCOME_DECODE_ERROR
    assert state.snapshot() == {"viewers": 500, "likes": 40, "status": 0}

    _seed(state)
    pipe, _ = _pipeline(settings, state, payload={"items": "nope"})
    assert pipe.run_cycle() == OUTCOME_DECODE_ERROR
    assert state.snapshot() == {"viewers": 500, "likes": 40, "status": 0}
    assert any("Failed to decode" in r.getMessage() for r in caplog.records)


def test_unexpected_exception_never_propagates(settings, state):
    """Qualquer exceção inesperada é registrada e o ciclo termina em estado seguro."""
    _seed(state)
    pipe, _ = _pipeline(settings, state, exc=RuntimeError("boom"))
    assert pipe.run_cycle() == OUTCOME_UNEXPECTED_ERROR
    assert state.snapshot()["status"] == 0
    assert state.snapshot()["viewers"] == 500


def test_identical_responses_are_idempotent(settings, state):
    """Duas execuções com a mesma resposta produzem o mesmo texto exportado."""
    payload = {"items": [make_item("12", "2024-01-01", "3")]}
    pipe, _ = _pipeline(settings, state, payload)
    pipe.run_cycle()
    first = state.render()
    pipe.run_cycle()
    assert state.render() == first


def test_summary_line_logged(settings, state, caplog):
    """Um ciclo bem-sucedido gera uma linha de resumo."""
    pipe, _ = _pipeline(settings, state, {"items": [make_item("7", "t", "8")]})
    caplog.set_level(logging.INFO)
    pipe.run_cycle()
    summaries = [r.getMessage() for r in caplog.records if r.getMessage().startswith("Metrics updated")]
    assert summaries == ["Metrics updated: Viewers=7, Likes=8, Status=1"]


def test_concurrent_cycles(settings, state):
    """Ciclos concorrentes não levantam e deixam um estado consistente."""
    pipe, calls = _pipeline(settings, state, {"items": [make_item("5", "t", "6")]})
    threads = [threading.Thread(target=pipe.run_cycle) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(calls) == 8
    assert state.snapshot() == {"viewers": 5, "likes": 6, "status": 1}


def test_default_fetcher_is_youtube_fetch(settings, state, monkeypatch):
    """Sem fetcher explícito o pipeline usa o cliente da YouTube API."""
    from youtube_exporter.monitoring import youtube
    from conftest import FakeResponse

    monkeypatch.setattr(
        youtube.requests, "get", lambda url, params=None, timeout=None: FakeResponse({"items": [make_item("1", "t", "2")]})
    )
    pipe = SamplingPipeline(settings, state)
    assert pipe.run_cycle() == OUTCOME_OK
    assert state.snapshot() == {"viewers": 1, "likes": 2, "status": 1}


def test_huge_viewer_count_does_not_abort_cycle(settings, state):
    """Contagem com milhares de dígitos vira 0; likes e status seguem o payload."""
    _seed(state)
    payload = {"items": [make_item("9" * 5000, "2024-01-01T00:00:00Z", "10")]}
    pipe, _ = _pipeline(settings, state, payload)

    assert pipe.run_cycle() == OUTCOME_OK
    assert state.snapshot() == {"viewers": 0, "likes": 10, "status": 1}


def test_invalid_like_count_updates_other_gauges(settings, state, caplog):
    """likeCount não numérico: likes 0 com warning, viewers e status atualizados."""
    _seed(state)
    payload = {"items": [make_item("25", "2024-01-01T00:00:00Z", "xyz")]}
    pipe, _ = _pipeline(settings, state, payload)
    caplog.set_level(logging.WARNING)

    assert pipe.run_cycle() == OUTCOME_OK
    assert state.snapshot() == {"viewers": 25, "likes": 0, "status": 1}
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "likeCount" in warnings[0].getMessage()


def test_log_messages_have_no_level_prefix(settings, state, caplog):
    """O nível vem do formatter; a mensagem não repete [ERROR]/[WARN]."""
    caplog.set_level(logging.DEBUG)
    _pipeline(settings, state, exc=UpstreamConnectionError("unreachable"))[0].run_cycle()
    _pipeline(settings, state, {"items": []})[0].run_cycle()

    messages = [r.getMessage() for r in caplog.records]
    assert messages
    assert not [m for m in messages if m.startswith("[")]
