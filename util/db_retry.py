import errno
import logging
import socket
import time

logger = logging.getLogger(__name__)

DEFAULT_RETRIES = 3
DEFAULT_DELAY = 2.0  # giây, backoff tuyến tính: 2s, 4s, 6s...

# Chuỗi nhận diện lỗi tạm thời trong message của driver/proxy
TRANSIENT_MESSAGES = (
    "Control plane request failed",  # database serverless đang ngủ
    "ENOTFOUND",  # lỗi DNS
    "could not translate host name",
    "Name or service not known",
    "ETIMEDOUT",  # timeout kết nối
    "timeout expired",
    "fetch failed",  # lỗi mạng chung
    "server closed the connection unexpectedly",
    "ECONNREFUSED",  # bị từ chối kết nối
    "Connection refused",
)
TRANSIENT_CODES = ("UND_ERR_CONNECT_TIMEOUT", errno.ETIMEDOUT)


def _error_chain(error):
    """Duyệt lỗi gốc: error -> .orig (SQLAlchemy DBAPIError) -> __cause__/__context__."""
    seen = set()
    stack = [error]
    while stack:
        current = stack.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.append(getattr(current, "orig", None))
        stack.append(current.__cause__)
        stack.append(current.__context__)


def is_transient_error(error):
    for err in _error_chain(error):
        if isinstance(err, (socket.gaierror, ConnectionRefusedError, TimeoutError)):
            return True
        code = getattr(err, "code", None)
        if code is None:
            code = getattr(err, "errno", None)
        if code in TRANSIENT_CODES:
            return True
        message = str(err)
        if any(signature in message for signature in TRANSIENT_MESSAGES):
            return True
    return False


def retry_query(query_fn, retries=DEFAULT_RETRIES, delay=DEFAULT_DELAY, before_retry=None):
    """
    Chạy query_fn (không tham số), thử lại khi gặp lỗi kết nối tạm thời.

    - Thành công: trả kết quả ngay.
    - Lỗi tạm thời và còn lượt: chờ delay * (lần thử) rồi chạy lại.
    - Lỗi khác hoặc hết lượt: raise lại đúng lỗi gốc.
    before_retry (tuỳ chọn) được gọi trước mỗi lần thử lại, ví dụ rollback session.
    """
    retries = max(1, retries)
    for attempt in range(1, retries + 1):
        try:
            return query_fn()
        except Exception as error:
            if not is_transient_error(error) or attempt >= retries:
                raise
            logger.warning(
                f"Database connection issue detected, retrying... "
                f"(attempt {attempt}/{retries}): {error}"
            )
            if before_retry is not None:
                before_retry()
            time.sleep(delay * attempt)


def retry_db(query_fn):
    """retry_query theo cấu hình app (DB_RETRY_ATTEMPTS, DB_RETRY_DELAY), rollback session giữa các lần thử."""
    from flask import current_app
    from database_init import db

    return retry_query(
        query_fn,
        retries=current_app.config.get("DB_RETRY_ATTEMPTS", DEFAULT_RETRIES),
        delay=current_app.config.get("DB_RETRY_DELAY", DEFAULT_DELAY),
        before_retry=db.session.rollback,
    )
