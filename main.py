"""
Daily Wordle Server - Main Entry Point

This is the main entry point for the daily puzzle server.
It initializes all services and starts the Flask-SocketIO application.
"""

from wordle_daily import create_app
from wordle_daily.config import Config, validate_word_list_integrity
from wordle_daily.services.game_service import initialize_game_service
from wordle_daily.services.storage import StateWriter, build_store
from wordle_daily.services.word_provider import WordProvider
from wordle_daily.utils.game_logger import game_logger


def build_game_service(config_class=Config):
    """Wire store, writer and word provider into the global game service."""
    validate_word_list_integrity()

    store = build_store(config_class)
    writer = StateWriter(store, asynchronous=config_class.PERSIST_ASYNC)

    return initialize_game_service(
        writer,
        WordProvider(),
        tries=config_class.MAX_TRIES,
        state_key=config_class.STATE_KEY,
        strict=config_class.STRICT_INVARIANTS,
        share_title=config_class.SHARE_TITLE,
    )


def main():
    """Main function to initialize services and start the server."""
    game_service = None
    try:
        print("Initializing services...")

        game_service = build_game_service(Config)
        print(f"✓ Game service initialized ({Config.STORAGE_BACKEND} storage)")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        game_logger.logger.info(
            f"Daily Wordle Server starting - storage={Config.STORAGE_BACKEND}, "
            f"async_saves={Config.PERSIST_ASYNC}, strict={Config.STRICT_INVARIANTS}"
        )

        print(f"\nStarting Daily Wordle Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Daily Wordle Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if game_service is not None:
            game_service.writer.close()


if __name__ == '__main__':
    main()
