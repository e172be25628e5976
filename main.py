"""
Cloud Wordle Server - Main Entry Point

This is the main entry point for the Wordle game server.
It initializes all services and starts the Flask-SocketIO application.
"""

import os
from cloudwordle import create_app, init_services
from cloudwordle.config import config, validate_word_list_integrity
from cloudwordle.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    # APP_ENV picks development, production or testing settings
    config_class = config.get(os.getenv("APP_ENV", "production"), config["default"])

    try:
        validate_word_list_integrity()

        # Create Flask app
        print("Creating Flask application...")
        app, socketio = create_app(config_class)
        print("✓ Flask application created successfully")

        # Initialize all services
        print("Initializing services...")
        auth_service, cloud_store, game_service = init_services(config_class, socketio)
        print("✓ Player token service initialized successfully")
        print("✓ Game service initialized successfully")
        if cloud_store:
            print("✓ Cloud store initialized successfully")
        elif config_class.MONGO_URI:
            print("✗ Failed to connect to the cloud store, running local-only")
        else:
            print("✗ MongoDB URI not configured, running local-only")

        # Log server startup
        game_logger.logger.info(
            f"Cloud Wordle Server starting - cloud store {'enabled' if cloud_store else 'disabled'}, "
            f"local storage in '{config_class.STORAGE_DIR}'"
        )

        print(f"\nStarting Cloud Wordle Server on {config_class.HOST}:{config_class.PORT}")
        print(f"Debug mode: {config_class.DEBUG}")
        print(f"Cloud available: {cloud_store is not None}")
        print("=" * 50)

        # Start the server
        socketio.run(app, host=config_class.HOST, port=config_class.PORT, debug=config_class.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Cloud Wordle Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise


if __name__ == '__main__':
    main()
