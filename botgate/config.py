"""
Configuration Module for botgate

This module defines configuration classes for different environments:
- DevelopmentConfig: Local development with debug logging
- ProductionConfig: Production deployment behind a proxy
- TestingConfig: Automated testing configuration
"""

import os


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration with common settings"""

    SECRET_KEY = os.environ.get('SECRET_KEY')

    # Bot guard
    # Diagnostic detail (IP, User-Agent, matched rule, DNS results) goes to
    # app.logger only when this is on. Absent any configuration it stays off.
    BOT_GUARD_VERBOSE = _env_flag('BOT_GUARD_VERBOSE', False)
    # Turning the guard off removes the request hook entirely.
    BOT_GUARD_ENABLED = _env_flag('BOT_GUARD_ENABLED', True)

    # SEO Configuration (robots.txt / sitemap)
    SITE_NAME = os.environ.get('SITE_NAME', 'botgate')
    SITE_URL = os.environ.get('SITE_URL', 'http://localhost:5000')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class DevelopmentConfig(Config):
    """Development environment configuration"""

    DEBUG = True
    TESTING = False

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production environment configuration"""

    DEBUG = False
    TESTING = False


class TestingConfig(Config):
    """Testing environment configuration"""

    TESTING = True
    DEBUG = True

    SECRET_KEY = 'test-secret-key'
    BOT_GUARD_VERBOSE = False
    BOT_GUARD_ENABLED = True
    SITE_URL = 'http://localhost'


# Configuration dictionary for easy access
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
