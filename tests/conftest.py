import pytest
from werkzeug.security import generate_password_hash

from app import create_app
from database_init import db
from models.user import User
from service.notification_service import NotificationHub
from util.auth import generate_token
from util.constant import USER_ROLE


class RecordingSender:
    """Thay cho socketio.emit: ghi lại (event, payload, sid) để kiểm tra."""

    def __init__(self):
        self.sent = []

    def __call__(self, event, payload, sid):
        self.sent.append((event, payload, sid))

    def events_for(self, sid, event=None):
        return [
            (e, p) for e, p, s in self.sent if s == sid and (event is None or e == event)
        ]


@pytest.fixture
def app(tmp_path):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite://",
            "SECRET_KEY": "test-secret",
            "JWT_SECRET": "test-jwt-secret",
            "GOOGLE_CLIENT_ID": "test-google-client",
            "ORDER_CONFIRMATION_EMAILS": False,
            "DB_RETRY_DELAY": 0,
            "LOG_DIR": str(tmp_path / "logs"),
        }
    )
    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sender(app):
    recorder = RecordingSender()
    app.extensions["notification_hub"] = NotificationHub(recorder)
    return recorder


@pytest.fixture
def hub(app, sender):
    return app.extensions["notification_hub"]


def _create_user(app, email, role, password="secret123", full_name="Test User"):
    with app.app_context():
        user = User(
            email=email,
            password=generate_password_hash(password),
            full_name=full_name,
            role=role,
        )
        db.session.add(user)
        db.session.commit()
        return user.id, generate_token(user.id)


@pytest.fixture
def admin(app):
    user_id, token = _create_user(app, "admin@hoodeatery.com", USER_ROLE.admin.value, full_name="Admin User")
    return {"id": user_id, "token": token, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def customer(app):
    user_id, token = _create_user(app, "jane@example.com", USER_ROLE.customer.value, full_name="Jane Doe")
    return {"id": user_id, "token": token, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def other_customer(app):
    user_id, token = _create_user(app, "bob@example.com", USER_ROLE.customer.value, full_name="Bob")
    return {"id": user_id, "token": token, "headers": {"Authorization": f"Bearer {token}"}}


@pytest.fixture
def order_payload():
    return {
        "customerName": "Jane Doe",
        "customerEmail": "jane@example.com",
        "customerPhone": "+233200000000",
        "deliveryAddress": "12 Liberation Rd, Accra",
        "deliveryLat": 5.6037,
        "deliveryLng": -0.187,
        "paymentMethod": "cash",
        "notes": "Extra napkins",
        "items": [
            {"id": 1, "name": "Jollof Rice", "price": 10, "quantity": 2},
            {"id": 2, "name": "Kelewele", "price": 5, "quantity": 1},
        ],
    }
