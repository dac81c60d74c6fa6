from app import create_app
from database_init import db
from extensions import socketio

app = create_app()

if __name__ == "__main__":
    from seeder.seed import run_seeders

    with app.app_context():
        db.create_all()
        run_seeders(app)

    socketio.run(app, host="0.0.0.0", port=5000)
