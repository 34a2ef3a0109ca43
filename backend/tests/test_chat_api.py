from fastapi.testclient import TestClient

from conftest import FakeRecordStore
from finassist.main import app
from finassist.routers.chat import get_record_store


def _client(rows=None) -> TestClient:
    app.dependency_overrides[get_record_store] = lambda: FakeRecordStore(rows)
    return TestClient(app)


def test_chat_returns_answer(snapshot) -> None:
    client = _client(snapshot)

    response = client.post("/api/ai-chat", json={"message": "What's my balance?", "userId": "user-1"})

    assert response.status_code == 200
    assert "💵 Total Balance: $2,600.00" in response.json()["response"]
    assert response.headers["access-control-allow-origin"] == "*"
    app.dependency_overrides.clear()


def test_chat_with_empty_store() -> None:
    client = _client()

    response = client.post("/api/ai-chat", json={"message": "What's my balance?", "userId": "user-1"})

    assert response.status_code == 200
    assert response.json() == {
        "response": "You don't have any accounts set up yet. Add an account to start tracking your balance!"
    }
    app.dependency_overrides.clear()


def test_chat_requires_message_and_user() -> None:
    client = _client()

    for payload in ({"userId": "user-1"}, {"message": "hi"}, {"message": "   ", "userId": "user-1"}, {}):
        response = client.post("/api/ai-chat", json=payload)
        assert response.status_code == 400
        assert response.json() == {"error": "Message and userId are required"}
    app.dependency_overrides.clear()


def test_chat_rejects_malformed_json() -> None:
    client = _client()

    response = client.post(
        "/api/ai-chat",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Message and userId are required"
    app.dependency_overrides.clear()


def test_chat_rejects_other_methods() -> None:
    client = TestClient(app)

    response = client.get("/api/ai-chat")

    assert response.status_code == 405
    assert response.json() == {"error": "Method not allowed"}
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"


def test_chat_preflight() -> None:
    client = TestClient(app)

    response = client.options("/api/ai-chat")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-headers"] == "Content-Type, Authorization"


def test_chat_reports_unexpected_failure(monkeypatch) -> None:
    async def _fake_aggregate(store, user_id, now):
        raise RuntimeError("store exploded")

    monkeypatch.setattr("finassist.routers.chat.aggregate", _fake_aggregate)
    client = _client()

    response = client.post("/api/ai-chat", json={"message": "balance", "userId": "user-1"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "An error occurred while processing your request",
        "message": "store exploded",
    }
    app.dependency_overrides.clear()


def test_health() -> None:
    client = TestClient(app)

    assert client.get("/health").json() == {"status": "ok"}


class _FakeConnection:
    def __init__(self) -> None:
        self.statements: list[str] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    async def execute(self, statement) -> None:
        self.statements.append(str(statement))


class _FakeEngine:
    def __init__(self) -> None:
        self.connection = _FakeConnection()

    def connect(self) -> _FakeConnection:
        return self.connection


def test_ready_pings_database(monkeypatch) -> None:
    fake_engine = _FakeEngine()
    monkeypatch.setattr("finassist.main.engine", fake_engine)
    client = TestClient(app)

    response = client.get("/ready")

    assert response.status_code == 200
    assert response.json() == {"status": "ready"}
    assert fake_engine.connection.statements == ["SELECT 1"]
