"""
Livestock News Finder Flask Application Factory
"""
import logging
import os
from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

# Silence per-request httpx logging
logging.getLogger('httpx').setLevel(logging.WARNING)


def _cors_origins(value: str):
    """'*' or a comma-separated list of origins."""
    value = (value or '*').strip()
    if value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def create_app(config=None):
    """
    Flask application factory

    Args:
        config: Optional configuration dictionary. NEWS_ADAPTERS overrides
            the source adapters used by /api/search.

    Returns:
        Flask application instance
    """
    # Load environment variables
    load_dotenv()

    app = Flask(__name__)

    # Default configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key')
    app.config['CORS_ORIGINS'] = os.environ.get('CORS_ORIGINS', '*')
    app.config['NEWS_ADAPTERS'] = None

    # Load custom configuration
    if config:
        app.config.from_mapping(config)

    CORS(app, resources={
        r"/api/*": {
            "origins": _cors_origins(app.config['CORS_ORIGINS']),
            "methods": ["GET", "POST", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    # Register blueprints
    from livestock_news.routes import main
    app.register_blueprint(main)

    return app
