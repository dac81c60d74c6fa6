import pytest

from extensions import socketio
from service.notification_service import order_room
from util.constant import ADMIN_ROOM


@pytest.fixture
def socket_client(app):
    client = socketio.test_client(app)
    yield client
    if client.is_connected():
        client.disconnect()


def _events(socket_client, name):
    return [msg["args"][0] for msg in socket_client.get_received() if msg["name"] == name]


def test_socket_events_update_membership(app, socket_client):
    hub = app.extensions["notification_hub"]
    assert len(hub.connections) == 1
    sid = next(iter(hub.connections))

    socket_client.emit("joinAdmin")
    socket_client.emit("trackOrder", "HE-20250101-ABC123")
    assert hub.rooms_of(sid) == {ADMIN_ROOM, order_room("HE-20250101-ABC123")}

    socket_client.emit("leaveOrder", "HE-20250101-ABC123")
    assert hub.rooms_of(sid) == {ADMIN_ROOM}

    socket_client.disconnect()
    assert hub.connections == set()


def test_admin_socket_receives_new_order(client, socket_client, order_payload):
    socket_client.emit("joinAdmin")
    socket_client.get_received()

    resp = client.post("/api/orders", json=order_payload)

    received = _events(socket_client, "newOrder")
    assert received == [resp.get_json()["data"]]


def test_tracking_socket_receives_its_order_update(client, socket_client, admin, order_payload):
    order = client.post("/api/orders", json=order_payload).get_json()["data"]
    socket_client.emit("trackOrder", order["order_number"])
    socket_client.get_received()

    client.put(f"/api/orders/{order['id']}/status", json={"status": "confirmed"}, headers=admin["headers"])

    received = socket_client.get_received()
    names = [msg["name"] for msg in received]
    assert names.count("orderUpdate") == 1
    assert names.count("orderStatusUpdate") == 1
    update = next(msg["args"][0] for msg in received if msg["name"] == "orderUpdate")
    assert update["order"]["status"] == "confirmed"


def test_handlers_work_for_every_app_in_process(app, tmp_path):
    from app import create_app

    second = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "LOG_DIR": str(tmp_path / "second-logs"),
        }
    )
    client = socketio.test_client(second)
    client.emit("joinAdmin")
    client.emit("trackOrder", "HE-20250101-XYZ789")

    hub = second.extensions["notification_hub"]
    assert len(hub.members(ADMIN_ROOM)) == 1
    assert len(hub.members(order_room("HE-20250101-XYZ789"))) == 1

    client.disconnect()
    assert hub.connections == set()
