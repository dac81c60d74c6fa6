from database_init import db


class OrderItem(db.Model):
    __tablename__ = "order_items"
    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(
        db.Integer,
        db.ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Tên và giá được chụp lại lúc đặt hàng, sửa menu sau này không ảnh hưởng đơn cũ
    menu_item_id = db.Column(
        db.Integer, db.ForeignKey("menu_items.id", ondelete="SET NULL"), nullable=True
    )
    menu_item_name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    subtotal = db.Column(db.Numeric(10, 2), nullable=False)

    order = db.relationship("Order", back_populates="order_items")

    def __repr__(self):
        return f"<OrderItem {self.id} - Order {self.order_id} - Item {self.menu_item_id}>"
