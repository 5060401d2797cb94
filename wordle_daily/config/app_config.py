"""
Configuration Management Module

Centralized configuration management following the 12-factor app methodology.
All configuration is loaded from environment variables with sensible defaults.
"""

import os
from dotenv import load_dotenv

# Load environment variables from config.env next to this module
load_dotenv(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.env'))


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Config:
    """Base configuration class with all settings."""
    
    # Flask Settings
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = _env_flag('DEBUG', 'False')
    
    # Server Settings
    HOST = os.getenv('HOST', '127.0.0.1')
    PORT = int(os.getenv('PORT', 5000))
    
    # Storage Settings
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'memory')  # "memory" or "mongo"
    MONGO_URI = os.getenv('MONGO_URI')
    MONGO_DB = os.getenv('MONGO_DB', 'wordle_game')
    PERSIST_ASYNC = _env_flag('PERSIST_ASYNC', 'True')
    STATE_KEY = os.getenv('STATE_KEY', '@game')
    
    # Game Settings
    MAX_TRIES = int(os.getenv('MAX_TRIES', 6))
    STRICT_INVARIANTS = _env_flag('STRICT_INVARIANTS', str(DEBUG))
    SHARE_TITLE = os.getenv('SHARE_TITLE', 'Wordle')
    
    # Logging Settings
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    STRICT_INVARIANTS = True


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    STRICT_INVARIANTS = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    STORAGE_BACKEND = 'memory'
    PERSIST_ASYNC = False
    STRICT_INVARIANTS = True


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
