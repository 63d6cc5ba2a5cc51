"""Translation model storing per-locale attribute values of other records."""
from datetime import datetime
from translatable import db


class Translation(db.Model):
    """One translated value of one attribute of one owner record."""
    __tablename__ = 'translations'

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, nullable=False)
    owner_type = db.Column(db.String(100), nullable=False)
    attribute = db.Column(db.String(100), nullable=False)
    locale = db.Column(db.String(10), nullable=False, index=True)
    value = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('owner_type', 'owner_id', 'attribute', 'locale', name='unique_translation'),
        db.Index('ix_translations_owner', 'owner_type', 'owner_id'),
    )

    @classmethod
    def for_owner(cls, owner):
        return cls.query.filter_by(owner_type=owner.translation_type(), owner_id=owner.id)

    def to_dict(self):
        """Convert translation to dictionary."""
        return {
            'id': self.id,
            'owner_id': self.owner_id,
            'owner_type': self.owner_type,
            'attribute': self.attribute,
            'locale': self.locale,
            'value': self.value,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Translation {self.owner_type}:{self.owner_id} {self.attribute}[{self.locale}]>'
