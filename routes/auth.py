import logging

from flask import Blueprint, abort, current_app, jsonify
from flask_login import current_user, login_required
from google.auth.exceptions import GoogleAuthError
from werkzeug.security import check_password_hash, generate_password_hash

from database_init import db
from Form.forms import GoogleAuthForm, LoginForm, RegisterForm, first_error, load_form
from models.user import User
from util.auth import generate_token, user_to_dict
from util.constant import USER_ROLE
from util.db_retry import retry_db
from util.google_oauth import verify_google_credential

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")
logger = logging.getLogger(__name__)


def _find_user_by_email(email):
    return retry_db(lambda: User.query.filter_by(email=email).first())


def _auth_response(user, status=200):
    return (
        jsonify(
            {"success": True, "token": generate_token(user.id), "user": user_to_dict(user)}
        ),
        status,
    )


# Đăng ký
@auth_bp.route("/register", methods=["POST"])
def register():
    form = load_form(RegisterForm)
    if not form.validate():
        abort(400, description=first_error(form))

    email = form.email.data.strip().lower()
    if _find_user_by_email(email):
        abort(400, description="User already exists")

    user = User(
        email=email,
        password=generate_password_hash(form.password.data),
        full_name=form.fullName.data.strip(),
        phone=form.phone.data or None,
        role=USER_ROLE.customer.value,
    )
    db.session.add(user)
    db.session.commit()
    logger.info(f"Đăng ký tài khoản mới: {user.email}")
    return _auth_response(user, 201)


# Đăng nhập
@auth_bp.route("/login", methods=["POST"])
def login():
    form = load_form(LoginForm)
    if not form.validate():
        abort(400, description=first_error(form))

    user = _find_user_by_email(form.email.data.strip().lower())
    # Tài khoản Google không có mật khẩu thì không đăng nhập bằng mật khẩu được
    if not user or not user.password or not check_password_hash(
        user.password, form.password.data
    ):
        abort(401, description="Invalid credentials")
    return _auth_response(user)


# Đăng nhập bằng Google
@auth_bp.route("/google", methods=["POST"])
def google_auth():
    form = load_form(GoogleAuthForm)
    if not form.validate():
        abort(400, description=first_error(form))

    try:
        email, name, google_id = verify_google_credential(
            form.credential.data, current_app.config.get("GOOGLE_CLIENT_ID")
        )
    except (ValueError, GoogleAuthError) as e:
        logger.warning(f"Google auth error: {e}")
        abort(401, description="Google authentication failed")

    email = email.strip().lower()
    user = _find_user_by_email(email)
    if user:
        # Đã có tài khoản: gắn google_id nếu chưa có
        if not user.google_id:
            user.google_id = google_id
            db.session.commit()
    else:
        user = User(
            email=email,
            full_name=name,
            google_id=google_id,
            password="",
            role=USER_ROLE.customer.value,
        )
        db.session.add(user)
        db.session.commit()
        logger.info(f"Tạo tài khoản Google mới: {email}")
    return _auth_response(user)


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify({"success": True, "user": user_to_dict(current_user)})
