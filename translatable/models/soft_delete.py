"""Soft delete support for models."""
from datetime import datetime

from sqlalchemy.orm import object_session

from translatable import db


class SoftDeleteMixin:
    """Marks rows as deleted instead of removing them.

    ``force_delete`` removes the row for real, and with it any translations.
    ``is_force_deleting`` tells delete hooks which of the two is running.
    """

    deleted_at = db.Column(db.DateTime, nullable=True, index=True)

    @property
    def is_trashed(self) -> bool:
        return self.deleted_at is not None

    def is_force_deleting(self) -> bool:
        return self.__dict__.get('_force_deleting', False)

    def _session(self):
        return object_session(self) or db.session

    def soft_delete(self):
        """Set deleted_at and commit."""
        session = self._session()
        self.deleted_at = datetime.utcnow()
        session.add(self)
        session.commit()

    def restore(self):
        session = self._session()
        self.deleted_at = None
        session.add(self)
        session.commit()

    def force_delete(self):
        """Delete the row permanently."""
        session = self._session()
        self.__dict__['_force_deleting'] = True
        try:
            session.delete(self)
            session.commit()
        finally:
            self.__dict__['_force_deleting'] = False
