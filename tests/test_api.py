"""Tests for the HTTP surface: request validation, status mapping, lifespan."""

import logging

import pytest
from fastapi.testclient import TestClient
from uvicorn.logging import DefaultFormatter

from specieschat.api.models import EMPTY_MESSAGE_ERROR, INTERNAL_ERROR, INVALID_MESSAGE_ERROR
from specieschat.app import get_app
from specieschat.configs.config import AppConfig
from specieschat.configs.system import APIConfig, LLMConfig, LoggingConfig
from specieschat.core.deps import get_chat_orchestrator
from specieschat.core.errors import MissingCredentialError
from specieschat.core.guardrail import REFUSAL_MESSAGE
from specieschat.core.orchestrator import ChatOrchestrator


def _config(**llm) -> AppConfig:
    return AppConfig(llm=LLMConfig(**llm), api=APIConfig(metrics_enabled=False))


class _ExplodingOrchestrator:
    async def respond(self, message, history):
        raise RuntimeError("unexpected")


@pytest.fixture
def backend(make_backend):
    return make_backend("Koalas eat eucalyptus leaves.")


@pytest.fixture
def app(backend, fake_sleep):
    app = get_app(_config())
    orchestrator = ChatOrchestrator(backend, model_name="test-model", sleep=fake_sleep)
    app.dependency_overrides[get_chat_orchestrator] = lambda: orchestrator
    return app


@pytest.fixture
def client(app) -> TestClient:
    # No context manager: the lifespan (and its key check) is skipped.
    return TestClient(app)


class TestChatEndpoint:
    def test_returns_orchestrator_reply(self, client, backend):
        resp = client.post("/api/chat", json={"message": "What do koalas eat?"})

        assert resp.status_code == 200
        assert resp.json() == {"response": "Koalas eat eucalyptus leaves."}
        assert len(backend.calls) == 1

    def test_message_is_trimmed(self, client, backend):
        client.post("/api/chat", json={"message": "  What do koalas eat?\n"})
        assert backend.calls[0]["messages"][-1]["content"] == "What do koalas eat?"

    def test_history_is_forwarded(self, client, backend):
        history = [
            {"role": "user", "content": "Hi"},
            {"role": "assistant", "content": "Hello!"},
        ]
        client.post("/api/chat", json={"message": "What do koalas eat?", "history": history})

        assert backend.calls[0]["messages"][1:3] == history

    def test_null_history_is_accepted(self, client):
        resp = client.post("/api/chat", json={"message": "What do koalas eat?", "history": None})
        assert resp.status_code == 200

    def test_off_topic_question_is_refused_with_200(self, client, backend):
        resp = client.post("/api/chat", json={"message": "Best pizza recipe?"})

        assert resp.status_code == 200
        assert resp.json() == {"response": REFUSAL_MESSAGE}
        assert backend.calls == []

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"message": 42},
            {"message": "hi", "history": [{"role": "system", "content": "x"}]},
            {"message": "hi", "history": "not a list"},
        ],
    )
    def test_invalid_body_is_400(self, client, body):
        resp = client.post("/api/chat", json=body)

        assert resp.status_code == 400
        assert resp.json() == {"error": INVALID_MESSAGE_ERROR}

    def test_malformed_json_is_400(self, client):
        resp = client.post(
            "/api/chat",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )

        assert resp.status_code == 400
        assert resp.json() == {"error": INVALID_MESSAGE_ERROR}

    @pytest.mark.parametrize("message", ["", "   ", "\n\t"])
    def test_blank_message_is_400(self, client, backend, message):
        resp = client.post("/api/chat", json={"message": message})

        assert resp.status_code == 400
        assert resp.json() == {"error": EMPTY_MESSAGE_ERROR}
        assert backend.calls == []

    def test_unexpected_failure_is_502(self, app, client):
        app.dependency_overrides[get_chat_orchestrator] = lambda: _ExplodingOrchestrator()

        resp = client.post("/api/chat", json={"message": "What do koalas eat?"})

        assert resp.status_code == 502
        assert resp.json() == {"error": INTERNAL_ERROR}


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestLifespan:
    def test_startup_fails_without_api_key(self):
        app = get_app(_config())

        with pytest.raises(MissingCredentialError):
            with TestClient(app):
                pass

    def test_startup_builds_orchestrator(self):
        app = get_app(_config(api_key="sk-test", model_name="gpt-4o"))

        with TestClient(app) as client:
            orchestrator = app.state.chat_orchestrator
            assert isinstance(orchestrator, ChatOrchestrator)
            assert orchestrator.model_name == "gpt-4o"
            assert client.get("/health").status_code == 200

    def test_startup_installs_configured_logging(self):
        config = AppConfig(
            llm=LLMConfig(api_key="sk-test"),
            api=APIConfig(metrics_enabled=False),
            logging=LoggingConfig(level="DEBUG", json_output=False),
        )
        app = get_app(config)

        with TestClient(app):
            root = logging.getLogger()
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, DefaultFormatter)
            assert root.level == logging.DEBUG
