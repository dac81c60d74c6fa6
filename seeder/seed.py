# seed.py
from database_init import db
from seeder.seed_user import seed_admin_user
from seeder.seed_category import seed_categories


def run_seeders(app):
    seed_admin_user(app)
    seed_categories(app)


if __name__ == "__main__":
    from app import create_app

    app = create_app()
    with app.app_context():
        db.create_all()
        run_seeders(app)
