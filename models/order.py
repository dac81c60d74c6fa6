from datetime import datetime

from database_init import db
from util.constant import ORDER_STATUS, PAYMENT_METHOD


class Order(db.Model):
    __tablename__ = "orders"
    id = db.Column(db.Integer, primary_key=True)
    # Khách vãng lai thì user_id để trống
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True, index=True)
    order_number = db.Column(db.String(50), unique=True, nullable=False, index=True)
    customer_name = db.Column(db.String(255), nullable=False)
    customer_email = db.Column(db.String(255), nullable=True)
    customer_phone = db.Column(db.String(20), nullable=False)
    delivery_address = db.Column(db.Text, nullable=False)
    delivery_lat = db.Column(db.Numeric(10, 8), nullable=True)
    delivery_lng = db.Column(db.Numeric(11, 8), nullable=True)
    subtotal = db.Column(db.Numeric(10, 2), nullable=False)
    delivery_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total = db.Column(db.Numeric(10, 2), nullable=False)
    status = db.Column(
        db.String(50), nullable=False, default=ORDER_STATUS.pending.value, index=True
    )
    payment_method = db.Column(
        db.String(50), nullable=False, default=PAYMENT_METHOD.cash.value
    )
    notes = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.now, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.now)

    user = db.relationship("User", back_populates="orders")
    order_items = db.relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
        lazy=True,
    )

    def __repr__(self):
        return f"<Order {self.id} - {self.order_number}>"
