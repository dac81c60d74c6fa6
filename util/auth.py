from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from flask import abort, current_app
from flask_login import current_user, login_required

JWT_ALGORITHM = "HS256"


def generate_token(user_id):
    expires_days = current_app.config.get("JWT_EXPIRES_DAYS", 30)
    payload = {
        "id": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(days=expires_days),
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=JWT_ALGORITHM)


def decode_token(token):
    """Giải mã JWT, raise jwt.InvalidTokenError nếu sai chữ ký hoặc hết hạn."""
    return jwt.decode(
        token, current_app.config["JWT_SECRET"], algorithms=[JWT_ALGORITHM]
    )


def get_bearer_token(request):
    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer"):
        return None
    parts = header.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def admin_required(view):
    """Giống login_required nhưng chỉ cho role admin, sai role trả 403."""

    @wraps(view)
    @login_required
    def wrapper(*args, **kwargs):
        if not current_user.is_admin:
            abort(
                403,
                description=f"User role {current_user.role} is not authorized to access this route",
            )
        return view(*args, **kwargs)

    return wrapper


def user_to_dict(user):
    return {
        "id": user.id,
        "email": user.email,
        "fullName": user.full_name,
        "phone": user.phone,
        "role": user.role,
    }
