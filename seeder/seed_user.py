# seeder/seed_user.py
import os
from werkzeug.security import generate_password_hash
from dotenv import load_dotenv

from models.user import User
from database_init import db
from util.constant import USER_ROLE

load_dotenv()


def seed_admin_user(app):
    with app.app_context():
        email = os.getenv("ADMIN_EMAIL", "admin@hoodeatery.com")
        raw_password = os.getenv("ADMIN_PASSWORD", "admin123")

        if not User.query.filter_by(email=email).first():
            user = User(
                email=email,
                password=generate_password_hash(raw_password),
                full_name="Admin User",
                role=USER_ROLE.admin.value,
            )
            db.session.add(user)
            db.session.commit()
            print(f"✅ Đã tạo user admin: {email}")
        else:
            print("⚠️ User admin đã tồn tại, bỏ qua.")
