from datetime import datetime

from database_init import db


class Category(db.Model):
    __tablename__ = "menu_categories"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    display_order = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.now)

    # Xoá category thì xoá luôn các món thuộc category đó
    items = db.relationship(
        "MenuItem",
        back_populates="category",
        cascade="all, delete-orphan",
        lazy=True,
    )

    def __repr__(self):
        return f"<Category {self.id} - {self.name}>"
