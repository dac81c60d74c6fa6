import logging
from logging.handlers import RotatingFileHandler

from database_init import db
from log import setup_logging
from models.category import Category
from models.user import User
from seeder.seed import run_seeders
from util.constant import DEFAULT_CATEGORIES


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "message": "Hood Eatery API is running"}


def test_unknown_route_uses_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"]


def test_unexpected_error_hides_details(app, client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("secret connection string")

    monkeypatch.setattr("routes.order.get_order_by_number", boom)

    resp = client.get("/api/orders/track/HE-20250101-ABC123")

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Server error"}


def test_seeders_are_idempotent(app, monkeypatch):
    monkeypatch.setenv("ADMIN_EMAIL", "owner@hoodeatery.com")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret!")

    run_seeders(app)
    run_seeders(app)

    with app.app_context():
        admins = User.query.filter_by(email="owner@hoodeatery.com").all()
        assert len(admins) == 1
        assert admins[0].is_admin
        assert Category.query.count() == len(DEFAULT_CATEGORIES)


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    setup_logging(str(tmp_path))
    setup_logging(str(tmp_path))

    log_file = str(tmp_path / "app.log")
    root = logging.getLogger()
    file_handlers = [
        h for h in root.handlers if isinstance(h, RotatingFileHandler) and h.baseFilename == log_file
    ]
    assert len(file_handlers) == 1
    assert sum(1 for h in root.handlers if type(h) is logging.StreamHandler) == 1
