import os


class Config:
    """Application configuration from environment variables."""

    # Flask
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
    FLASK_ENV = os.environ.get('FLASK_ENV', 'production')
    DEBUG = FLASK_ENV == 'development'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Persistence
    STORAGE_BACKEND = os.environ.get('STORAGE_BACKEND', 'json')  # json, sql or memory
    SNAPSHOT_PATH = os.environ.get('SNAPSHOT_PATH', 'chargelog_records.json')
    DATABASE_URL = os.environ.get('DATABASE_URL', 'sqlite:///chargelog.db')
    # Bump the suffix when the schema changes so old snapshots are not read
    STORAGE_KEY = os.environ.get('STORAGE_KEY', 'chargeLogRecords_v1')

    # Seeding
    SEED_SOURCE = os.environ.get('SEED_SOURCE', 'initial_data.csv')
    SEED_TIMEOUT_SECONDS = float(os.environ.get('SEED_TIMEOUT_SECONDS', 5))

    # CSV
    CSV_HEADER_MODE = os.environ.get('CSV_HEADER_MODE', 'positional')  # positional or header
    EXPORT_FILENAME = os.environ.get('EXPORT_FILENAME', 'charging_records.csv')
    GSHEETS_EXPORT_FILENAME = os.environ.get(
        'GSHEETS_EXPORT_FILENAME', 'charging_records_gsheets.csv'
    )

    # API Configuration
    FLASK_HOST = os.environ.get('FLASK_HOST', '127.0.0.1')
    FLASK_PORT = int(os.environ.get('FLASK_PORT', 8080))
    RATE_LIMIT_STORAGE_URI = os.environ.get('RATE_LIMIT_STORAGE_URI', 'memory://')
