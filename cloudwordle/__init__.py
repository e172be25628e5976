"""
Cloud Wordle Server Application Package

Flask + Socket.IO server for a Wordle game with session restore,
cloud stats and a global leaderboard.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Args:
        config_class: Configuration class to use

    Returns:
        Flask application instance and its SocketIO server
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode="threading",
                        logger=False, engineio_logger=False)

    # Register blueprints
    from .controllers.game_controller import game_bp
    from .controllers.profile_controller import profile_bp

    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(profile_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio


def init_services(config_class, socketio=None, storage_factory=None, cloud_client=None, **game_options):
    """
    Initialize the global services the blueprints and socket handlers use.

    Args:
        config_class: Configuration class to read settings from
        socketio: SocketIO server; when given, players get a SocketRenderer
            and guesses run as Socket.IO background tasks
        storage_factory: player_id -> local storage (defaults to JSON files in STORAGE_DIR)
        cloud_client: Ready-made MongoDB client for the cloud store
        **game_options: Passed through to every PlayerGame

    Returns:
        Tuple of (auth_service, cloud_store, game_service); cloud_store may be None
    """
    from .services.auth_service import initialize_auth_service
    from .services.cloud_service import PlayerProfileStore, PlayerStatsStore, initialize_cloud_store
    from .services.collaborators import Collaborators
    from .services.dictionary_service import WordListValidator
    from .services.game_service import initialize_game_service, json_file_storage_factory

    auth_service = initialize_auth_service(config_class.JWT_SECRET, config_class.JWT_EXPIRATION_DAYS)

    cloud_store = None
    if cloud_client is not None or config_class.MONGO_URI:
        cloud_store = initialize_cloud_store(config_class.MONGO_URI, config_class.MONGO_DB_NAME, client=cloud_client)
    else:
        initialize_cloud_store(None)

    word_validator = WordListValidator(allowed_words_file=getattr(config_class, 'ALLOWED_WORDS_FILE', None))

    def collaborators_factory(player_id):
        return Collaborators(
            word_validator=word_validator,
            stats_store=PlayerStatsStore(cloud_store, player_id) if cloud_store else None,
            profile_store=PlayerProfileStore(cloud_store, player_id) if cloud_store else None,
        )

    renderer_factory = None
    if socketio is not None:
        from .websocket.renderer import SocketRenderer

        def renderer_factory(player_id):
            return SocketRenderer(socketio, player_id)

        game_options.setdefault('spawn', socketio.start_background_task)
        game_options.setdefault('sleep', socketio.sleep)

    game_service = initialize_game_service(
        storage_factory or json_file_storage_factory(config_class.STORAGE_DIR),
        collaborators_factory=collaborators_factory,
        renderer_factory=renderer_factory,
        **game_options
    )
    return auth_service, cloud_store, game_service
