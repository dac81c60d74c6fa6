# Chạy: python worker.py  (xử lý job gửi email xác nhận đơn hàng)
import logging

from rq import Worker

from app import create_app
from queue_config import get_email_queue, get_redis_connection

logger = logging.getLogger("cronjob")


def run_worker():
    app = create_app()
    with app.app_context():
        queue = get_email_queue()
        logger.info(f"Worker lắng nghe queue '{queue.name}'")
        Worker([queue], connection=get_redis_connection()).work(with_scheduler=False)


if __name__ == "__main__":
    run_worker()
