from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        ping_interval=flask_app.config.get('PING_INTERVAL_SEC', 25),
        ping_timeout=flask_app.config.get('PING_TIMEOUT_SEC', 10),
    )

    from imposter.routes import main
    flask_app.register_blueprint(main)

    from imposter.api.rooms import rooms
    flask_app.register_blueprint(rooms, url_prefix='/api')

    # One room service per app; handlers reach it through current_app
    from imposter.services.rooms.service import RoomService
    from imposter.socketio_events import SocketIOTransport, register_socketio_handlers
    flask_app.extensions['imposter'] = RoomService.from_config(
        flask_app.config,
        transport=SocketIOTransport(socketio),
        start_task=socketio.start_background_task,
        sleep=socketio.sleep,
        logger=flask_app.logger,
    )
    register_socketio_handlers()

    return flask_app
