from google.auth.transport import requests as google_requests
from google.oauth2 import id_token


def verify_google_credential(credential, client_id):
    """
    Xác thực ID token Google, trả về (email, name, google_id).
    Token sai/hết hạn -> ValueError, sai issuer hoặc không tải được cert -> GoogleAuthError.
    """
    payload = id_token.verify_oauth2_token(
        credential, google_requests.Request(), client_id
    )
    email = payload.get("email")
    if not email:
        raise ValueError("Google token không có email")
    return email, payload.get("name") or email, payload["sub"]
