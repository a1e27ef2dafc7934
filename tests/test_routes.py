"""
Tests for the HTTP API.

Tests:
- JSON shapes and status codes of every endpoint
- Error bodies use the ``error`` field
- A full round over HTTP
- Middleware headers, rate limiting, and sanitized 500s
"""

import pytest
from fastapi.testclient import TestClient

from commons import limiter
from conftest import FakeOracle, FakeValidator, similar
from configs.config import get_config
from main import create_app
from src.game.manager import SessionManager

cfg = get_config()


@pytest.fixture(autouse=True)
def no_rate_limits():
    """Rate limits are exercised explicitly in TestRateLimiting."""
    limiter.reset()
    limiter.enabled = False
    yield
    limiter.enabled = cfg.RATE_LIMIT_ENABLED
    limiter.reset()


@pytest.fixture
def client(manager) -> TestClient:
    return TestClient(create_app(manager))


@pytest.fixture
def open_client(client) -> TestClient:
    """Client whose game already has a valid key."""
    response = client.post("/api/configure-secret", json={"key": "gsk_test"})
    assert response.status_code == 200
    return client


def submit(client, player, word):
    return client.post("/api/submit", json={"player": player, "word": word})


class TestStatus:
    """Tests for GET /api/status."""

    def test_initial_status(self, client, monkeypatch):
        monkeypatch.setattr(cfg, "RENDER_EXTERNAL_URL", "https://empire.example.com")

        response = client.get("/api/status")

        assert response.status_code == 200
        assert response.json() == {
            "phase": "setup",
            "submissionCount": 0,
            "hasSecret": False,
            "playerUrl": "https://empire.example.com",
        }

    def test_status_after_submissions(self, open_client):
        submit(open_client, "Ann", "lion")

        body = open_client.get("/api/status").json()

        assert body["phase"] == "submission"
        assert body["submissionCount"] == 1
        assert body["hasSecret"] is True
        assert "gsk_test" not in str(body)


class TestConfigureSecret:
    """Tests for POST /api/configure-secret."""

    @pytest.mark.parametrize("payload", [{}, {"key": ""}, {"key": "   "}, {"key": None}])
    def test_missing_key(self, client, validator, payload):
        response = client.post("/api/configure-secret", json=payload)

        assert response.status_code == 400
        assert response.json() == {"error": "Key required"}
        assert validator.calls == []

    def test_invalid_key(self, oracle):
        manager = SessionManager(validator=FakeValidator(False), oracle=oracle)
        client = TestClient(create_app(manager))

        response = client.post("/api/configure-secret", json={"key": "gsk_bad"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid API key"}
        assert client.get("/api/status").json()["phase"] == "setup"

    def test_valid_key(self, client, validator):
        response = client.post("/api/configure-secret", json={"key": " gsk_good "})

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert validator.calls == ["gsk_good"]
        assert client.get("/api/status").json()["phase"] == "submission"

    def test_malformed_body_is_400(self, client):
        response = client.post(
            "/api/configure-secret",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert "error" in response.json()


class TestSubmit:
    """Tests for POST /api/submit."""

    def test_closed_before_setup(self, client):
        response = submit(client, "Ann", "lion")

        assert response.status_code == 400
        assert response.json() == {"error": "Not accepting submissions right now."}

    def test_accepts_word(self, open_client):
        response = submit(open_client, "Ann", "Lion")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "playerCount": 1}

    def test_missing_fields(self, open_client):
        response = open_client.post("/api/submit", json={"player": "Ann"})

        assert response.status_code == 400
        assert response.json() == {"error": "Name and word are required."}

    def test_duplicate_player_message(self, open_client):
        submit(open_client, "Ann", "lion")

        response = submit(open_client, "ANN", "tiger")

        assert response.status_code == 400
        assert response.json() == {"error": "ANN has already submitted a word."}

    def test_duplicate_word_message(self, open_client):
        submit(open_client, "Ann", "lion")

        response = submit(open_client, "Bob", "lion")

        assert response.status_code == 400
        assert response.json() == {
            "error": "That word has already been submitted. Try another!"
        }

    def test_similar_word_message(self, validator):
        oracle = FakeOracle(verdicts={"drizzy": similar("drake", "alias")})
        client = TestClient(create_app(SessionManager(validator, oracle)))
        client.post("/api/configure-secret", json={"key": "gsk_test"})
        submit(client, "Ann", "Drake")

        response = submit(client, "Bob", "Drizzy")

        assert response.status_code == 400
        assert response.json() == {
            "error": "Your word is too similar to a previously submitted word. Try another!"
        }

    def test_overlong_word_is_rejected(self, open_client):
        response = submit(open_client, "Ann", "x" * (cfg.WORD_MAX_LENGTH + 1))

        assert response.status_code == 400
        assert "error" in response.json()
        assert open_client.get("/api/status").json()["submissionCount"] == 0


class TestRound:
    """Tests for start-round, words, attribution and resets."""

    def test_start_needs_two_players(self, open_client):
        submit(open_client, "Ann", "lion")

        response = open_client.post("/api/start-round")

        assert response.status_code == 400
        assert response.json() == {"error": "Need at least 2 players."}

    @pytest.mark.parametrize("path", ["/api/words", "/api/attribution"])
    def test_reads_before_start(self, open_client, path):
        response = open_client.get(path)

        assert response.status_code == 400
        assert response.json() == {"error": "Game not started yet."}

    def test_full_round(self, client):
        assert client.post("/api/configure-secret", json={"key": "gsk_test"}).json() == {"ok": True}
        assert submit(client, "Ann", "lion").json()["playerCount"] == 1
        assert submit(client, "Bob", "lion").status_code == 400
        assert submit(client, "ann", "tiger").status_code == 400
        assert submit(client, "Bob", "tiger").json()["playerCount"] == 2

        assert client.post("/api/start-round").json() == {"ok": True}

        assert client.get("/api/status").json()["phase"] == "playing"
        assert sorted(client.get("/api/words").json()["words"]) == ["lion", "tiger"]
        assert client.get("/api/attribution").json() == {
            "attribution": [
                {"player": "Ann", "word": "lion"},
                {"player": "Bob", "word": "tiger"},
            ]
        }

        again = client.post("/api/start-round")
        assert again.status_code == 400
        assert again.json() == {"error": "Round already started."}

    def test_new_round_keeps_key(self, open_client):
        submit(open_client, "Ann", "lion")
        submit(open_client, "Bob", "tiger")
        open_client.post("/api/start-round")

        response = open_client.post("/api/new-round")

        assert response.json() == {"ok": True}
        status = open_client.get("/api/status").json()
        assert status["phase"] == "submission"
        assert status["submissionCount"] == 0
        assert status["hasSecret"] is True

    def test_full_reset_forgets_key(self, open_client):
        response = open_client.post("/api/full-reset")

        assert response.json() == {"ok": True}
        status = open_client.get("/api/status").json()
        assert status["phase"] == "setup"
        assert status["hasSecret"] is False


class TestMiddleware:
    """Tests for headers and error rendering."""

    def test_request_id_is_echoed(self, client):
        response = client.get("/api/status", headers={"X-Request-ID": "abc-123"})
        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_generated(self, client):
        assert client.get("/api/status").headers.get("X-Request-ID")

    def test_security_headers(self, client):
        headers = client.get("/api/status").headers
        assert headers["X-Content-Type-Options"] == "nosniff"
        assert headers["X-Frame-Options"] == "DENY"
        assert "fonts.googleapis.com" not in headers["Content-Security-Policy"]
        assert "default-src 'self'" in headers["Content-Security-Policy"]

    def test_unknown_route_uses_error_field(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert "error" in response.json()

    def test_unexpected_failure_is_sanitized(self, validator, oracle):
        class BrokenManager(SessionManager):
            async def start_round(self):
                raise RuntimeError("boom")

        client = TestClient(create_app(BrokenManager(validator, oracle)))

        response = client.post("/api/start-round")

        assert response.status_code == 500
        assert "start_round" in response.json()["error"]
        assert client.post("/api/new-round").json() == {"ok": True}


class TestCollaboratorFailures:
    """Failures of the key check and the similarity check."""

    def test_oracle_failure_accepts_word(self, validator):
        oracle = FakeOracle(error=ConnectionError("groq unreachable"))
        client = TestClient(create_app(SessionManager(validator, oracle)))
        client.post("/api/configure-secret", json={"key": "gsk_test"})
        submit(client, "Ann", "lion")

        response = submit(client, "Bob", "tiger")

        assert response.status_code == 200
        assert response.json() == {"ok": True, "playerCount": 2}

    def test_validator_failure_is_invalid_key(self, oracle):
        validator = FakeValidator(error=ConnectionError("groq unreachable"))
        client = TestClient(create_app(SessionManager(validator, oracle)))

        response = client.post("/api/configure-secret", json={"key": "gsk_test"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid API key"}
        assert client.get("/api/status").json()["phase"] == "setup"


class TestRateLimiting:
    """Tests for the slowapi limits."""

    def test_configure_secret_is_limited(self, manager):
        limiter.enabled = True
        client = TestClient(create_app(manager))

        codes = [
            client.post("/api/configure-secret", json={"key": "gsk_test"}).status_code
            for _ in range(11)
        ]

        assert codes[:10] == [200] * 10
        assert codes[10] == 429

    def test_limits_are_per_forwarded_client(self, manager, monkeypatch):
        monkeypatch.setattr(cfg, "FORWARDED_ALLOW_IPS", "*")
        limiter.enabled = True
        client = TestClient(create_app(manager))

        def configure(player_ip):
            return client.post(
                "/api/configure-secret",
                json={"key": "gsk_test"},
                headers={"X-Forwarded-For": player_ip},
            ).status_code

        first = [configure("203.0.113.10") for _ in range(11)]
        second = configure("203.0.113.11")

        assert first[10] == 429
        assert second == 200


class TestFrontend:
    """Tests for the optional static frontend mount."""

    def test_frontend_served_beside_api(self, manager, monkeypatch, tmp_path):
        (tmp_path / "index.html").write_text("<h1>Empire</h1>", encoding="utf-8")
        monkeypatch.setattr(cfg, "PUBLIC_DIR", str(tmp_path))
        client = TestClient(create_app(manager))

        page = client.get("/")
        status = client.get("/api/status")

        assert page.status_code == 200
        assert "Empire" in page.text
        assert status.json()["phase"] == "setup"

    def test_api_only_without_frontend(self, manager, monkeypatch, tmp_path):
        monkeypatch.setattr(cfg, "PUBLIC_DIR", str(tmp_path / "missing"))
        client = TestClient(create_app(manager))

        assert client.get("/").status_code == 404
        assert client.get("/api/status").status_code == 200
