from models.category import Category
from database_init import db
from util.constant import DEFAULT_CATEGORIES


def seed_categories(app):
    """Tạo các category mặc định nếu bảng đang trống."""
    with app.app_context():
        if Category.query.first():
            print("⚠️ Menu categories đã tồn tại, bỏ qua.")
            return

        for name, description, display_order in DEFAULT_CATEGORIES:
            db.session.add(
                Category(name=name, description=description, display_order=display_order)
            )
        db.session.commit()
        print(f"✅ Đã thêm {len(DEFAULT_CATEGORIES)} category mặc định.")
