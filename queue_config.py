import os

import redis
from rq import Queue

EMAIL_QUEUE = "emails"
# Job gửi mail qua HTTP, quá 2 phút coi như treo
EMAIL_JOB_TIMEOUT = 120

_redis_conn = None


def get_redis_connection():
    """Kết nối Redis tạo lần đầu khi cần, web không chạm Redis nếu tắt email xác nhận."""
    global _redis_conn
    if _redis_conn is None:
        _redis_conn = redis.from_url(os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    return _redis_conn


def get_email_queue():
    return Queue(
        EMAIL_QUEUE,
        connection=get_redis_connection(),
        default_timeout=EMAIL_JOB_TIMEOUT,
    )
