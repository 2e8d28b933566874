from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

SAMPLE_QUIZ = {
    'id': 'sample-capitals',
    'title': 'European capitals',
    'questions': [
        {'text': 'Where is Stockholm?', 'correctLat': 59.3293, 'correctLng': 18.0686, 'maxDistance': 500},
        {'text': 'Where is Paris?', 'correctLat': 48.8566, 'correctLng': 2.3522, 'maxDistance': 500},
        {'text': 'Where is Rome?', 'correctLat': 41.9028, 'correctLng': 12.4964, 'maxDistance': 500,
         'timeLimit': 30},
    ],
}


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Room state lives in memory for the life of this app; the quiz catalog in the database
    from kartquiz.services.rooms.registry import RoomRegistry
    from kartquiz.services.quizzes import QuizStore
    registry = RoomRegistry()
    quiz_store = QuizStore(db)
    flask_app.extensions['room_registry'] = registry
    flask_app.extensions['quiz_store'] = quiz_store

    from kartquiz.main import main
    flask_app.register_blueprint(main)

    from kartquiz.api.quizzes import quizzes
    flask_app.register_blueprint(quizzes, url_prefix='/api/quizzes')

    # Register Socket.IO event handlers on the freshly initialized server
    from kartquiz.socketio_events import RoomEventGateway, register_socketio_handlers
    gateway = RoomEventGateway(
        registry,
        quiz_store,
        surface_rejections=flask_app.config.get('SURFACE_REJECTIONS', True),
        allow_room_replace=flask_app.config.get('ALLOW_ROOM_REPLACE', False),
        default_host_name=flask_app.config.get('DEFAULT_HOST_NAME', 'Quiz Master'),
    )
    register_socketio_handlers(gateway, namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))
    flask_app.extensions['room_gateway'] = gateway

    import kartquiz.models  # noqa: F401
    if flask_app.config.get('AUTO_CREATE_TABLES'):
        with flask_app.app_context():
            db.create_all()

    from kartquiz.services.rooms.reaper import start_room_reaper
    start_room_reaper(flask_app, registry)

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the quiz catalog."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            quiz_store.save(SAMPLE_QUIZ['id'], SAMPLE_QUIZ['title'], SAMPLE_QUIZ['questions'])
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
