"""
Pytest configuration and fixtures for testing record translations.
"""

import os
import sys
import pytest
from faker import Faker
from sqlalchemy import event

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from translatable import create_app, db, get_translator
from support import Post, Book

fake = Faker()


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    os.environ['FLASK_ENV'] = 'testing'
    os.environ['TRANSLATABLE_DEFAULT_LOCALE'] = 'en'
    os.environ.pop('TRANSLATABLE_LOCALE', None)

    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        yield db.session
        db.session.rollback()


@pytest.fixture
def translator(db_session):
    """The app translator, back on the default locale after each test."""
    translator = get_translator()
    translator.set_locale(translator.get_default_locale())
    yield translator
    translator.set_locale(translator.get_default_locale())


@pytest.fixture
def not_found(translator):
    """Collect translation-not-found notifications."""
    notifications = []

    def observer(owner, attribute, locale):
        notifications.append((owner, attribute, locale))

    translator.add_not_found_observer(observer)
    yield notifications
    translator.remove_not_found_observer(observer)


@pytest.fixture
def sql_statements(db_session):
    """Record every SQL statement sent to the database."""
    statements = []

    def before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    event.listen(db.engine, 'before_cursor_execute', before_cursor_execute)
    yield statements
    event.remove(db.engine, 'before_cursor_execute', before_cursor_execute)


def _create_post(**overrides):
    """Helper to create a post with sensible defaults."""
    data = {
        'title': fake.sentence(nb_words=4),
        'body': fake.paragraph(),
        'slug': fake.slug(),
    }
    data.update(overrides)
    post = Post(**data)
    db.session.add(post)
    db.session.commit()
    return post


@pytest.fixture
def post(translator):
    """Create a persisted post with a known body and slug."""
    return _create_post(body='Hello world', slug='hello-world')


@pytest.fixture
def second_post(translator):
    return _create_post(body='Second post', slug='second-post')


@pytest.fixture
def book(translator):
    """Create a persisted book titled 'Hello'."""
    book = Book(
        title='Hello',
        description=fake.paragraph(),
        pages=fake.pyint(min_value=50, max_value=900),
    )
    db.session.add(book)
    db.session.commit()
    return book


@pytest.fixture
def make_post(translator):
    return _create_post
