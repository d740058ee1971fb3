import os
from dotenv import load_dotenv

basedir = os.path.abspath(os.path.dirname(__file__))
load_dotenv(os.path.join(basedir, '.env'))

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        'sqlite:///' + os.path.join(basedir, 'libraryhub.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Connection pooling (recycled so idle Postgres connections don't go stale)
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_recycle': 300,
        'pool_pre_ping': True
    }

    # Session cookie used by the dashboard SPA
    PERMANENT_SESSION_LIFETIME = 8 * 3600
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'

    # Comma separated list of dashboard origins allowed by CORS
    CORS_ORIGINS = [o.strip() for o in os.environ.get('CORS_ORIGINS', 'http://localhost:5173').split(',') if o.strip()]

    # Timezone used to decide the "current month" of a payment
    TIMEZONE = os.environ.get('TIMEZONE', 'Asia/Kolkata')

    # Reporting windows
    EXPIRING_SOON_DAYS = int(os.environ.get('EXPIRING_SOON_DAYS', 7))
    ADVANCE_STATS_DAYS = int(os.environ.get('ADVANCE_STATS_DAYS', 30))

    # Default admin created by reset_data.py
    DEFAULT_ADMIN_USERNAME = os.environ.get('DEFAULT_ADMIN_USERNAME', 'admin')
    DEFAULT_ADMIN_PASSWORD = os.environ.get('DEFAULT_ADMIN_PASSWORD')
    APP_NAME = os.environ.get('APP_NAME', 'LibraryHub')

class DevelopmentConfig(Config):
    DEBUG = True

class ProductionConfig(Config):
    DEBUG = False
    SESSION_COOKIE_SECURE = True

class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SECRET_KEY = 'testing-secret-key'
    TIMEZONE = 'Asia/Kolkata'
    DEFAULT_ADMIN_PASSWORD = None

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
