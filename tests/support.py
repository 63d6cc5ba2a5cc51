"""Translatable models used by the test suite."""

from datetime import datetime
from sqlalchemy.orm import validates
from translatable import db, HasTranslations, SoftDeleteMixin, translatable


class Post(SoftDeleteMixin, HasTranslations, db.Model):
    """Soft-deletable post with a translatable title, body and slug."""

    __tablename__ = 'posts'
    __translatable__ = ('title', 'body', 'slug')

    id = db.Column(db.Integer, primary_key=True)
    _title = db.Column('title', db.String(255), nullable=True)
    _body = db.Column('body', db.Text, nullable=True)
    _slug = db.Column('slug', db.String(255), nullable=True, index=True)
    status = db.Column(db.String(20), default='draft', nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    title = translatable('_title')
    body = translatable('_body')
    slug = translatable('_slug')

    def __repr__(self):
        return f'<Post {self.id}>'


class Book(HasTranslations, db.Model):
    """Book whose description is never auto loaded or auto saved."""

    __tablename__ = 'books'
    __translatable__ = ('title', 'description')
    __translatable_options__ = {
        'description': {'auto_load': False, 'auto_save': False},
    }

    id = db.Column(db.Integer, primary_key=True)
    _title = db.Column('title', db.String(255), nullable=False)
    _description = db.Column('description', db.Text, nullable=True)
    pages = db.Column(db.Integer, nullable=True)

    title = translatable('_title')
    description = translatable('_description')

    @validates('_title')
    def strip_title(self, key, value):
        return value.strip() if isinstance(value, str) else value

    def __repr__(self):
        return f'<Book {self.id}>'


def touches_translations(statements):
    """Statements that read or write the translations table."""
    return [s for s in statements if 'translations' in s]
