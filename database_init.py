from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


@contextmanager
def unit_of_work():
    """Gom nhiều câu lệnh ghi vào một transaction, lỗi thì rollback toàn bộ."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
