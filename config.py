import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'

    # Request limits
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 16 * 1024 * 1024))  # 16MB default
    MAX_EVENTS_PER_REQUEST = int(os.environ.get('MAX_EVENTS_PER_REQUEST', 10000))

    # Timezone used when a request does not name one
    DEFAULT_TIMEZONE = os.environ.get('DEFAULT_TIMEZONE', 'UTC')

    # Intervention sessions held in memory while they run
    MAX_RUNNING_SESSIONS = int(os.environ.get('MAX_RUNNING_SESSIONS', 1000))
    # Seconds before a running session counts as abandoned
    MAX_SESSION_AGE = int(os.environ.get('MAX_SESSION_AGE', 3600))

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT', 'False').lower() == 'true'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    LOG_FILE = os.environ.get('LOG_FILE', 'logs/craving_insights.log')

    DEBUG = os.environ.get('FLASK_ENV', 'development').lower() == 'development'
    TESTING = False

class ProductionConfig(Config):
    DEBUG = False


class DevelopmentConfig(Config):
    DEBUG = True

class TestingConfig(Config):
    TESTING = True
    DEBUG = True
    DEFAULT_TIMEZONE = 'UTC'
    MAX_EVENTS_PER_REQUEST = 500
    MAX_RUNNING_SESSIONS = 10

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': Config
}

def get_config():
    """Get configuration based on environment variable"""
    env = os.environ.get('FLASK_ENV', 'development').lower()
    return config.get(env, config['default'])
