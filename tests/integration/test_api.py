"""HTTP contract tests (in-memory UoW via dependency override)."""
from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from room_chat.api.deps import get_uow
from room_chat.app import create_app
from room_chat.application.exceptions import StoreUnavailableError
from room_chat.domain.value_objects.enums import MessageType
from tests.conftest import FakeClock, FakeUoW, make_message


@pytest.fixture
def app_with_uow():
    app = create_app()
    uow = FakeUoW()

    async def _override():
        yield uow

    app.dependency_overrides[get_uow] = _override
    app.state.clock = FakeClock()
    return app, uow


@pytest.fixture
def client(app_with_uow):
    app, _ = app_with_uow
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def uow(app_with_uow):
    _, uow = app_with_uow
    return uow


def _register(client: TestClient, name: str) -> None:
    resp = client.post("/participants", json={"name": name})
    assert resp.status_code == 201, resp.text


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.headers["X-Request-ID"]


def test_register_participant(client, uow):
    resp = client.post("/participants", json={"name": "  <b>Ana</b> "})

    assert resp.status_code == 201
    assert resp.json() == {"name": "Ana"}
    assert "Ana" in uow.participants._store


@pytest.mark.parametrize(
    "body",
    [{}, {"name": ""}, {"name": "<i></i>"}, {"name": 42}, {"name": "Ana", "extra": 1}],
)
def test_register_validation_errors(client, body):
    resp = client.post("/participants", json=body)
    assert resp.status_code == 422


def test_register_duplicate_conflicts(client, uow):
    _register(client, "Ana")

    resp = client.post("/participants", json={"name": "Ana"})

    assert resp.status_code == 409
    assert list(uow.participants._store) == ["Ana"]


def test_list_participants_excludes_viewer(client):
    _register(client, "Ana")
    _register(client, "Beto")

    resp = client.get("/participants", headers={"User": "Ana"})

    assert resp.status_code == 200
    [entry] = resp.json()
    assert entry["name"] == "Beto"
    assert isinstance(entry["lastStatus"], int)


def test_list_participants_requires_identity(client):
    assert client.get("/participants").status_code == 401


def test_post_message(client, uow):
    _register(client, "Ana")

    resp = client.post(
        "/messages",
        headers={"User": "Ana"},
        json={"to": "Todos", "text": "<em>hi</em>", "type": "message"},
    )

    assert resp.status_code == 201
    assert resp.content == b""
    last = uow.messages._messages[-1]
    assert (last.from_name, last.to, last.text, last.type) == ("Ana", "Todos", "hi", "message")


@pytest.mark.parametrize(
    "body",
    [
        {"to": "Todos", "text": "hi"},
        {"to": "Todos", "text": "hi", "type": "status"},
        {"to": "", "text": "hi", "type": "message"},
        {"to": "Todos", "text": "   ", "type": "message"},
        {"to": "Todos", "text": "hi", "type": "message", "from": "Beto"},
    ],
)
def test_post_message_schema_violations(client, body):
    _register(client, "Ana")

    resp = client.post("/messages", headers={"User": "Ana"}, json=body)

    assert resp.status_code == 422


@pytest.mark.parametrize("headers", [{"User": "Ghost"}, {}])
def test_post_message_from_unregistered_sender(client, uow, headers):
    resp = client.post(
        "/messages", headers=headers, json={"to": "Todos", "text": "hi", "type": "message"},
    )

    assert resp.status_code == 422
    assert uow.messages._messages == []


def test_list_messages_requires_identity(client):
    assert client.get("/messages").status_code == 401


def test_list_messages_shape(client, uow):
    msg = uow.add_message(make_message(from_name="Ana", text="hi"))

    resp = client.get("/messages", headers={"User": "Beto"})

    assert resp.status_code == 200
    assert resp.json() == [
        {
            "id": str(msg.id),
            "from": "Ana",
            "to": "Todos",
            "text": "hi",
            "type": "message",
            "time": "12:00:00",
        }
    ]


def test_list_messages_with_limit(client, uow):
    for i in range(1, 6):
        uow.add_message(make_message(text=f"m{i}"))

    resp = client.get("/messages", params={"limit": 2}, headers={"User": "Beto"})

    assert resp.status_code == 200
    assert [m["text"] for m in resp.json()] == ["m4", "m5"]


@pytest.mark.parametrize("limit", ["0", "-1", "abc"])
def test_list_messages_invalid_limit(client, limit):
    resp = client.get("/messages", params={"limit": limit}, headers={"User": "Beto"})
    assert resp.status_code == 422


def test_heartbeat(client, uow, app_with_uow):
    app, _ = app_with_uow
    _register(client, "Ana")
    app.state.clock.advance(8)

    resp = client.post("/status", headers={"User": "Ana"})

    assert resp.status_code == 200
    assert uow.participants._store["Ana"].last_seen == app.state.clock.now()


@pytest.mark.parametrize("headers", [{"User": "Ghost"}, {}])
def test_heartbeat_unknown_participant(client, headers):
    assert client.post("/status", headers=headers).status_code == 404


def test_edit_message(client, uow):
    _register(client, "Ana")
    msg = uow.add_message(make_message(from_name="Ana", text="hi"))

    resp = client.put(
        f"/messages/{msg.id}",
        headers={"User": "Ana"},
        json={"to": "Beto", "text": "psst", "type": "private_message"},
    )

    assert resp.status_code == 201
    stored = uow.messages._messages[-1]
    assert (stored.id, stored.to, stored.text, stored.type) == (
        msg.id, "Beto", "psst", MessageType.PRIVATE_MESSAGE,
    )


def test_edit_message_not_owner(client, uow):
    _register(client, "Beto")
    msg = uow.add_message(make_message(from_name="Ana", text="hi"))

    resp = client.put(
        f"/messages/{msg.id}",
        headers={"User": "Beto"},
        json={"to": "Todos", "text": "hacked", "type": "message"},
    )

    assert resp.status_code == 401
    assert uow.messages._messages[-1] == msg


def test_edit_unknown_message(client):
    _register(client, "Ana")

    resp = client.put(
        f"/messages/{uuid.uuid4()}",
        headers={"User": "Ana"},
        json={"to": "Todos", "text": "x", "type": "message"},
    )

    assert resp.status_code == 404


def test_edit_message_schema_violation(client, uow):
    _register(client, "Ana")
    msg = uow.add_message(make_message(from_name="Ana"))

    resp = client.put(
        f"/messages/{msg.id}",
        headers={"User": "Ana"},
        json={"to": "Todos", "text": "x", "type": "status"},
    )

    assert resp.status_code == 422


def test_delete_message(client, uow):
    msg = uow.add_message(make_message(from_name="Ana"))

    resp = client.delete(f"/messages/{msg.id}", headers={"User": "Ana"})

    assert resp.status_code == 200
    assert uow.messages._messages == []


def test_delete_message_not_owner(client, uow):
    msg = uow.add_message(make_message(from_name="Ana"))

    assert client.delete(f"/messages/{msg.id}", headers={"User": "Beto"}).status_code == 401
    assert client.delete(f"/messages/{msg.id}").status_code == 401
    assert uow.messages._messages == [msg]


def test_delete_unknown_message(client):
    resp = client.delete(f"/messages/{uuid.uuid4()}", headers={"User": "Ana"})
    assert resp.status_code == 404


def test_arrival_and_broadcast_scenario(client, uow):
    _register(client, "Ana")
    assert [(m.from_name, m.type) for m in uow.messages._messages] == [("Ana", "status")]

    resp = client.post(
        "/messages",
        headers={"User": "Ana"},
        json={"to": "Todos", "text": "hi", "type": "message"},
    )
    assert resp.status_code == 201

    assert client.get("/messages").status_code == 401

    _register(client, "Beto")
    resp = client.get("/messages", headers={"User": "Beto"})

    assert resp.status_code == 200
    assert [(m["from"], m["type"], m["text"]) for m in resp.json()] == [
        ("Ana", "status", "entra na sala..."),
        ("Ana", "message", "hi"),
        ("Beto", "status", "entra na sala..."),
    ]


def test_direct_message_scenario(client):
    for name in ("Ana", "Beto", "Caio"):
        _register(client, name)

    resp = client.post(
        "/messages",
        headers={"User": "Ana"},
        json={"to": "Beto", "text": "segredo", "type": "private_message"},
    )
    assert resp.status_code == 201

    def texts(viewer: str) -> list[str]:
        return [m["text"] for m in client.get("/messages", headers={"User": viewer}).json()]

    assert "segredo" in texts("Ana")
    assert "segredo" in texts("Beto")
    assert "segredo" not in texts("Caio")


def test_store_failure_is_reported_as_generic_error(client, uow):
    async def _unreachable(name):
        raise StoreUnavailableError("connection refused")

    uow.participants.list_except = _unreachable

    resp = client.get("/participants", headers={"User": "Ana"})

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


class _UnreachableSession:
    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def execute(self, stmt):
        raise OperationalError("SELECT 1", {}, ConnectionRefusedError("connection refused"))

    async def rollback(self):
        return None


def test_database_outage_is_reported_as_generic_error():
    app = create_app()
    app.state.session_factory = lambda: _UnreachableSession()
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.get("/participants", headers={"User": "Ana"})

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}
