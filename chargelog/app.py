"""
ChargeLog - Flask Application

Personal log of electric-vehicle charging sessions: a JSON API to record
sessions, list them, summarise them and move them in and out of CSV.
"""

import logging
from typing import Any, Mapping, Optional

from flask import Flask, jsonify

from .config import Config
from .exceptions import ConfigurationError, PersistenceError
from .extensions import STORE_EXTENSION_KEY, limiter
from .routes import register_blueprints
from .services import RecordStore, build_adapter, seed_store
from .utils.csv_codec import header_mode_or_default

logger = logging.getLogger(__name__)


def configure_logging(level: str = Config.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def init_store(app: Flask, store: Optional[RecordStore] = None) -> RecordStore:
    """
    Attach a record store to the app, loading any saved snapshot.

    When nothing was saved and SEED_ON_START is set, the store is seeded from
    SEED_SOURCE.
    """
    if store is None:
        store = RecordStore(build_adapter(app.config))
        try:
            store.load()
        except PersistenceError as e:
            # Start empty rather than refuse to serve; the error stays visible on /api/status
            store.last_persist_error = e
            logger.error(f"Could not load saved records: {e}", exc_info=True)

        if store.is_empty() and app.config.get('SEED_ON_START'):
            seed_store(
                store,
                app.config['SEED_SOURCE'],
                header_mode=app.config['CSV_HEADER_MODE'],
                timeout=app.config['SEED_TIMEOUT_SECONDS'],
            )

    app.extensions[STORE_EXTENSION_KEY] = store
    return store


def create_app(
    config_overrides: Optional[Mapping[str, Any]] = None,
    store: Optional[RecordStore] = None
) -> Flask:
    """
    Build the Flask application.

    Args:
        config_overrides: Values layered over Config (e.g. for tests)
        store: Use this record store instead of building one from config
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    app.config.setdefault('SEED_ON_START', True)
    if config_overrides:
        app.config.update(config_overrides)

    try:
        app.config['CSV_HEADER_MODE'] = header_mode_or_default(app.config.get('CSV_HEADER_MODE'))
    except ValueError as e:
        raise ConfigurationError(str(e), config_key='CSV_HEADER_MODE') from e

    limiter.init_app(app)
    init_store(app, store)
    register_blueprints(app)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(429)
    def rate_limited(error):
        return jsonify({'error': 'Too many requests', 'detail': str(error.description)}), 429

    return app


if __name__ == '__main__':
    configure_logging()
    application = create_app()
    application.run(host=Config.FLASK_HOST, port=Config.FLASK_PORT, debug=Config.DEBUG)
