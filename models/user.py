from datetime import datetime

from flask_login import UserMixin

from database_init import db
from util.constant import USER_ROLE


class User(UserMixin, db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    # Tài khoản tạo qua Google không có mật khẩu (chuỗi rỗng)
    password = db.Column(db.String(255), nullable=False, default="")
    full_name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(20), nullable=True)
    google_id = db.Column(db.String(255), unique=True, nullable=True)
    role = db.Column(db.String(20), nullable=False, default=USER_ROLE.customer.value)
    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    orders = db.relationship("Order", back_populates="user", lazy=True)

    @property
    def is_admin(self):
        return self.role == USER_ROLE.admin.value

    def get_id(self):
        return str(self.id)

    def __repr__(self):
        return f"<User {self.id} - {self.email}>"
