"""Fluxo HTTP completo de uma sessão de qualificação."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from leadgen_chat.ai.text_backend import ScriptedTextBackend
from leadgen_chat.api.app import create_app
from leadgen_chat.config.settings import Settings
from leadgen_chat.domain.validation import MSG_PHONE
from tests.helpers.fakes import RecordingAnalytics


def _start(client: TestClient) -> dict:
    response = client.post("/sessions")
    assert response.status_code == 201
    return response.json()


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["service"] == "leadgen_chat"


def test_correlation_id_is_propagated(client: TestClient) -> None:
    response = client.get("/health", headers={"x-correlation-id": "corr-42"})
    assert response.headers["x-correlation-id"] == "corr-42"

    generated = client.get("/health")
    assert generated.headers["x-correlation-id"]


def test_start_session_returns_greeting(client: TestClient) -> None:
    session = _start(client)

    assert session["step"] == "WELCOME"
    assert session["progress"] == 15
    assert session["completed"] is False
    assert session["summary"] == []
    assert len(session["history"]) == 1
    assert session["history"][0]["role"] == "bot"
    assert session["quick_replies"] == ["Да, интересно", "Расскажите подробнее"]


def test_full_flow_collects_lead(client: TestClient, analytics: RecordingAnalytics) -> None:
    session_id = _start(client)["session_id"]

    quick = client.post(f"/sessions/{session_id}/quick-replies", json={"text": "Да, интересно"})
    assert quick.status_code == 200
    assert quick.json()["session"]["step"] == "BENEFITS"

    for text in ["Недвижимость", "Недв", "50000", "Расширение", "Иван"]:
        response = client.post(f"/sessions/{session_id}/messages", json={"text": text})
        assert response.status_code == 200

    rejected = client.post(f"/sessions/{session_id}/messages", json={"text": "12"})
    body = rejected.json()
    assert body["session"]["step"] == "CONTACT_COLLECTION"
    assert body["appended"][-1]["content"] == MSG_PHONE

    final = client.post(f"/sessions/{session_id}/messages", json={"text": "+79991234567"})
    session = final.json()["session"]
    assert session["completed"] is True
    assert session["progress"] == 100
    assert session["final_lead"] == {
        "niche": "Недв",
        "budget": "50000",
        "plans": "Расширение",
        "name": "Иван",
        "phone": "+79991234567",
    }
    assert session["summary"] == [
        ["Ниша", "Недв"],
        ["Бюджет", "50000"],
        ["Имя", "Иван"],
        ["Телефон", "+79991234567"],
    ]
    assert "lead_submitted" in analytics.names

    state = client.get(f"/sessions/{session_id}").json()
    assert state["step"] == "COMPLETED"


def test_blank_message_appends_nothing(client: TestClient) -> None:
    session_id = _start(client)["session_id"]

    response = client.post(f"/sessions/{session_id}/messages", json={"text": "   "})

    assert response.status_code == 200
    assert response.json()["appended"] == []
    assert len(response.json()["session"]["history"]) == 1


def test_message_after_completion_is_conflict(client: TestClient) -> None:
    session_id = _start(client)["session_id"]
    for text in ["Да", "Да", "Недв", "50000", "Расширение", "Иван", "+79991234567"]:
        client.post(f"/sessions/{session_id}/messages", json={"text": text})

    response = client.post(f"/sessions/{session_id}/messages", json={"text": "ещё"})

    assert response.status_code == 409
    assert response.json()["detail"]["error"] == "session_completed"


def test_unknown_session_is_404(client: TestClient) -> None:
    assert client.get("/sessions/nope").status_code == 404
    response = client.post("/sessions/nope/messages", json={"text": "Да"})
    assert response.status_code == 404
    assert response.json()["detail"] == "session_not_found"


def test_delete_session(client: TestClient) -> None:
    session_id = _start(client)["session_id"]

    assert client.delete(f"/sessions/{session_id}").status_code == 204
    assert client.get(f"/sessions/{session_id}").status_code == 404
    assert client.delete(f"/sessions/{session_id}").status_code == 404


def test_message_too_long_is_rejected(client: TestClient) -> None:
    session_id = _start(client)["session_id"]
    response = client.post(f"/sessions/{session_id}/messages", json={"text": "x" * 2001})
    assert response.status_code == 422


class TestCreateApp:
    def test_invalid_configuration_fails_fast(self) -> None:
        with pytest.raises(ValueError, match="Configuração inválida"):
            create_app(Settings(analytics_backend="kafka"))

    def test_llm_without_key_fails_fast(self) -> None:
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            create_app(Settings(llm_enabled=True, analytics_backend="none"))

    def test_injected_backend_skips_llm_check(self) -> None:
        app = create_app(
            Settings(llm_enabled=True, analytics_backend="none"),
            backend=ScriptedTextBackend(),
        )
        assert app.state.session_registry is not None
