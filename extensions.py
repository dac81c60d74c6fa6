from flask_login import LoginManager
from flask_migrate import Migrate
from flask_socketio import SocketIO

migrate = Migrate()
login_manager = LoginManager()
socketio = SocketIO()
