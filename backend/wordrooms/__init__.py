from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
import click
from config import Config

db = SQLAlchemy()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    CORS(flask_app, origins=allowed_origins)

    # Import and register blueprints here
    from wordrooms.main import main
    flask_app.register_blueprint(main)

    from wordrooms.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api/rooms')

    # Ensure models are registered on the metadata before create_all
    from wordrooms import models  # noqa: F401

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the room table."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('rooms-reap')
    def rooms_reap_command():
        """Deletes rooms older than ROOM_TTL_SEC."""
        from wordrooms.services.rooms.reaper import cleanup
        with flask_app.app_context():
            removed = cleanup()
            print(f'Reaped {removed} room(s).')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(rooms_reap_command)

    from wordrooms.services.rooms.reaper import start_reaper
    start_reaper(flask_app)

    return flask_app
