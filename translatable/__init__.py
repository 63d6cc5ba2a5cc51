from flask import Flask
from flask_sqlalchemy import SQLAlchemy
import os
import logging
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

db = SQLAlchemy()

from translatable.extension import Translations, get_translator  # noqa: E402

translations = Translations(session=db.session)


def create_app(config_name='development'):
    app = Flask(__name__)

    # Config
    if config_name == 'testing':
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite://'
    else:
        app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv(
            'DATABASE_URL',
            'sqlite:///translatable.db'
        )

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['TRANSLATABLE_DEFAULT_LOCALE'] = os.getenv('TRANSLATABLE_DEFAULT_LOCALE', 'en')
    app.config['TRANSLATABLE_LOCALE'] = os.getenv('TRANSLATABLE_LOCALE')
    app.config['TRANSLATABLE_AUTO_LOAD'] = os.getenv('TRANSLATABLE_AUTO_LOAD', 'true')
    app.config['TRANSLATABLE_AUTO_SAVE'] = os.getenv('TRANSLATABLE_AUTO_SAVE', 'true')

    # Initialize extensions
    db.init_app(app)
    translations.init_app(app)

    # Create tables with error handling
    with app.app_context():
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app


from translatable.exceptions import NotTranslatableAttribute  # noqa: E402
from translatable.models import (  # noqa: E402
    HasTranslations,
    SoftDeleteMixin,
    Translation,
    translatable,
)

__all__ = [
    'db',
    'translations',
    'create_app',
    'get_translator',
    'HasTranslations',
    'SoftDeleteMixin',
    'Translation',
    'translatable',
    'NotTranslatableAttribute',
]
