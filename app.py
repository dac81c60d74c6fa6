import logging
import os
from decimal import Decimal

import jwt
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from database_init import db
from extensions import login_manager, migrate, socketio
from log import setup_logging
from routes.realtime import register_socket_handlers
from service.image_service import init_cloudinary
from service.notification_service import NotificationHub, socketio_sender
from util.auth import decode_token, get_bearer_token
from util.db_retry import retry_db

load_dotenv()
logger = logging.getLogger(__name__)


def _env_bool(name, default="false"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def create_app(config=None):
    app = Flask(__name__)

    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", "dev-secret-key")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.getenv(
        "DATABASE_URL", "sqlite:///hood_eatery.db"
    )
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    # Neon/serverless hay đóng kết nối rảnh, kiểm tra trước khi dùng
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {"pool_pre_ping": True}
    app.config["JWT_SECRET"] = os.getenv("JWT_SECRET", app.config["SECRET_KEY"])
    app.config["JWT_EXPIRES_DAYS"] = int(os.getenv("JWT_EXPIRES_DAYS", "30"))
    app.config["GOOGLE_CLIENT_ID"] = os.getenv("GOOGLE_CLIENT_ID")
    app.config["CLOUDINARY_CLOUD_NAME"] = os.getenv("CLOUDINARY_CLOUD_NAME")
    app.config["CLOUDINARY_API_KEY"] = os.getenv("CLOUDINARY_API_KEY")
    app.config["CLOUDINARY_API_SECRET"] = os.getenv("CLOUDINARY_API_SECRET")
    app.config["CLOUDINARY_FOLDER"] = os.getenv("CLOUDINARY_FOLDER", "hood-eatery/menu")
    app.config["FRONTEND_URL"] = os.getenv("FRONTEND_URL", "http://localhost:5173")
    app.config["ORDER_CONFIRMATION_EMAILS"] = _env_bool("ORDER_CONFIRMATION_EMAILS")
    app.config["DELIVERY_FEE"] = Decimal(os.getenv("DELIVERY_FEE", "5.00"))
    app.config["DB_RETRY_ATTEMPTS"] = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
    app.config["DB_RETRY_DELAY"] = float(os.getenv("DB_RETRY_DELAY", "2.0"))
    app.config["LOG_DIR"] = os.getenv("LOG_DIR")
    app.config["MAX_CONTENT_LENGTH"] = 6 * 1024 * 1024
    if config:
        app.config.update(config)

    # Cấu hình logging
    setup_logging(app.config["LOG_DIR"])

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["FRONTEND_URL"]}},
        supports_credentials=True,
    )
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    socketio.init_app(app, cors_allowed_origins=app.config["FRONTEND_URL"])
    register_socket_handlers(socketio)
    init_cloudinary(app)

    # Bảng room realtime thuộc về app, không dùng biến global
    app.extensions["notification_hub"] = NotificationHub(socketio_sender(socketio))

    from models.user import User

    # Xác thực bằng Bearer token thay cho session cookie
    @login_manager.request_loader
    def load_user_from_request(req):
        token = get_bearer_token(req)
        if not token:
            return None
        try:
            payload = decode_token(token)
        except jwt.InvalidTokenError:
            return None
        user_id = payload.get("id")
        if user_id is None:
            return None
        return retry_db(lambda: db.session.get(User, user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return (
            jsonify({"success": False, "message": "Not authorized to access this route"}),
            401,
        )

    from routes.home import home_bp
    from routes.auth import auth_bp
    from routes.menu import menu_bp
    from routes.order import order_bp
    from routes.support import support_bp

    app.register_blueprint(home_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(menu_bp)
    app.register_blueprint(order_bp)
    app.register_blueprint(support_bp)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"success": False, "message": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception(f"Lỗi không xử lý được tại {request.method} {request.path}")
        return jsonify({"success": False, "message": "Server error"}), 500

    return app


if __name__ == "__main__":
    from seeder.seed import run_seeders

    app = create_app()
    with app.app_context():
        db.create_all()
        run_seeders(app)
    socketio.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=True)
