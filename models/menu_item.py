from datetime import datetime

from database_init import db


class MenuItem(db.Model):
    __tablename__ = "menu_items"
    id = db.Column(db.Integer, primary_key=True)
    category_id = db.Column(
        db.Integer,
        db.ForeignKey("menu_categories.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    original_price = db.Column(db.Numeric(10, 2), nullable=True)
    image_url = db.Column(db.Text, nullable=True)
    is_available = db.Column(db.Boolean, default=True)
    is_featured = db.Column(db.Boolean, default=False)

    # [{"id": 1, "name": "egg", "price": 2.5, "originalPrice": 5.0}]
    extras = db.Column(db.JSON, default=list)
    # [{"id": "individual", "name": "Individual", "price": 0}]
    portions = db.Column(db.JSON, default=list)

    created_at = db.Column(db.DateTime, default=datetime.now)
    updated_at = db.Column(db.DateTime, default=datetime.now, onupdate=datetime.now)

    category = db.relationship("Category", back_populates="items")

    def __repr__(self):
        return f"<MenuItem {self.id} - {self.name}>"
