import logging
from logging.handlers import RotatingFileHandler
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Thư viện log mỗi request/packet ở INFO, chỉ giữ WARNING trở lên
NOISY_LOGGERS = ("werkzeug", "engineio.server", "socketio.server", "urllib3")


def setup_logging(log_dir=None):
    """
    Gắn console + file xoay vòng (logs/app.log) vào logger gốc.
    Gọi nhiều lần (mỗi create_app) vẫn không bị nhân đôi handler.
    """
    if not log_dir:
        log_dir = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    # RotatingFileHandler cũng là StreamHandler nên so type chính xác
    if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if not any(
        isinstance(h, RotatingFileHandler) and h.baseFilename == log_file
        for h in root_logger.handlers
    ):
        file_handler = RotatingFileHandler(
            log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
