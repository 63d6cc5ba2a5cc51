"""Translator service: fetches and persists translation rows for owner records.

The service never caches on its own; per-record caching lives on the record's
translation capability. Store errors are left to propagate to the caller so the
record can keep its staged values and retry.
"""
import logging
from datetime import datetime

from sqlalchemy import bindparam, delete, inspect, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import object_session

from translatable.models.translation import Translation

logger = logging.getLogger(__name__)

# Dialects with a native INSERT .. ON CONFLICT DO UPDATE
UPSERT_DIALECTS = {
    'postgresql': postgresql_insert,
    'sqlite': sqlite_insert,
}
UNIQUE_COLUMNS = ['owner_type', 'owner_id', 'attribute', 'locale']

MISSING = object()


class ModelTranslator:
    """Reads and writes translations for records mixing in ``HasTranslations``.

    Args:
        resolver: LocaleResolver answering active/default locale questions
        config: TranslatableConfig (defaults to the resolver's)
        session: Session used when an owner is not attached to one
    """

    def __init__(self, resolver, config=None, session=None):
        self.resolver = resolver
        self.config = config or resolver.config
        self.session = session
        self._not_found_observers = []

    # ------------------------------------------------------------------
    # Locale
    # ------------------------------------------------------------------

    def get_locale(self) -> str:
        return self.resolver.get_locale()

    def set_locale(self, locale: str):
        self.resolver.set_locale(locale)

    def get_default_locale(self) -> str:
        return self.resolver.get_default_locale()

    def is_default_locale(self, locale: str = None) -> bool:
        return self.resolver.is_default_locale(locale)

    def using_locale(self, locale: str):
        return self.resolver.using_locale(locale)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, owner, attribute: str, locale: str):
        """Get the stored translation value, or None when there is none."""
        value = self._get_from_loaded(owner, attribute, locale)
        if value is not MISSING:
            return value

        logger.debug(f"Querying translation {owner.translation_type()}:{owner.id} {attribute}[{locale}]")
        translation = self._session_for(owner).query(Translation).filter_by(
            owner_type=owner.translation_type(),
            owner_id=owner.id,
            attribute=attribute,
            locale=locale,
        ).first()
        return translation.value if translation else None

    def _get_from_loaded(self, owner, attribute, locale):
        """Look the value up in an already loaded ``translations`` collection."""
        if 'translations' in inspect(owner).unloaded:
            return MISSING

        for translation in owner.translations:
            if translation.attribute == attribute and translation.locale == locale:
                return translation.value

        # The collection was prefetched for exactly this locale, so a miss is final
        if owner.translation_capability.eager_locale == locale:
            return None

        return MISSING

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def save(self, owner, translations: dict, connection=None) -> int:
        """Upsert buffered ``{locale: {attribute: value}}`` translations in one batch.

        Returns:
            Number of rows written (0 when the buffer is empty, without a query)
        """
        rows = self._rows(owner, translations)
        if not rows:
            return 0

        if connection is None:
            connection = self._session_for(owner).connection()

        insert = UPSERT_DIALECTS.get(connection.dialect.name)
        if insert is not None:
            statement = insert(Translation.__table__)
            statement = statement.on_conflict_do_update(
                index_elements=UNIQUE_COLUMNS,
                set_={
                    'value': statement.excluded['value'],
                    'updated_at': statement.excluded['updated_at'],
                },
            )
            connection.execute(statement, rows)
        else:
            self._save_without_upsert(connection, owner, rows)

        logger.debug(f"Saved {len(rows)} translation(s) for {owner.translation_type()}:{owner.id}")
        return len(rows)

    def _rows(self, owner, translations):
        now = datetime.utcnow()
        return [
            {
                'owner_type': owner.translation_type(),
                'owner_id': owner.id,
                'attribute': attribute,
                'locale': locale,
                'value': value,
                'created_at': now,
                'updated_at': now,
            }
            for locale, attributes in translations.items()
            for attribute, value in attributes.items()
        ]

    def _save_without_upsert(self, connection, owner, rows):
        """Select-then-write for dialects lacking ON CONFLICT support."""
        table = Translation.__table__
        result = connection.execute(
            select(table.c.id, table.c.attribute, table.c.locale).where(
                table.c.owner_type == owner.translation_type(),
                table.c.owner_id == owner.id,
            )
        )
        existing = {(row.attribute, row.locale): row.id for row in result}

        updates = []
        inserts = []
        for row in rows:
            translation_id = existing.get((row['attribute'], row['locale']))
            if translation_id is None:
                inserts.append(row)
            else:
                updates.append({
                    '_id': translation_id,
                    '_value': row['value'],
                    '_updated_at': row['updated_at'],
                })

        if updates:
            connection.execute(
                update(table)
                .where(table.c.id == bindparam('_id'))
                .values(value=bindparam('_value'), updated_at=bindparam('_updated_at')),
                updates,
            )
        if inserts:
            connection.execute(table.insert(), inserts)

    def delete_all(self, owner, connection=None) -> None:
        """Delete every translation row of the owner."""
        if connection is None:
            connection = self._session_for(owner).connection()

        table = Translation.__table__
        connection.execute(
            delete(table).where(
                table.c.owner_type == owner.translation_type(),
                table.c.owner_id == owner.id,
            )
        )
        logger.debug(f"Deleted translations for {owner.translation_type()}:{owner.id}")

    def save_owner(self, owner) -> None:
        """Persist the owner record (and, through its hooks, its translations)."""
        session = self._session_for(owner)
        session.add(owner)
        session.commit()

    def _session_for(self, owner):
        session = object_session(owner)
        if session is None:
            session = self.session
        return session

    # ------------------------------------------------------------------
    # Missing translation notifications
    # ------------------------------------------------------------------

    def add_not_found_observer(self, callback):
        """Register ``callback(owner, attribute, locale)`` for missing translations."""
        self._not_found_observers.append(callback)
        return callback

    def remove_not_found_observer(self, callback):
        if callback in self._not_found_observers:
            self._not_found_observers.remove(callback)

    def notify_not_found(self, owner, attribute: str, locale: str) -> None:
        """Tell observers a translation is missing. Observer errors are logged only."""
        logger.debug(f"Translation not found: {owner.translation_type()}:{owner.id} {attribute}[{locale}]")
        for callback in list(self._not_found_observers):
            try:
                callback(owner, attribute, locale)
            except Exception:
                logger.exception(f"Translation-not-found observer {callback!r} failed")
