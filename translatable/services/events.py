"""SQLAlchemy event hooks tying translatable records to the session lifecycle.

- before_update / after_insert: write the record's staged translations
- after_delete: remove translations of permanently deleted records
- do_orm_execute, load / refresh: prefetch translations of the active locale
- after_commit / after_rollback: drain staged translations only once committed
"""
import logging

from sqlalchemy import event
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from translatable.models.translatable import FLUSHED_KEY, HasTranslations
from translatable.services.eager_load import LOCALE_OPTION, TranslationsEagerLoadPolicy

logger = logging.getLogger(__name__)


@event.listens_for(HasTranslations, 'before_update', propagate=True)
def save_translations_before_update(mapper, connection, target):
    target.translation_capability.flush(connection)


@event.listens_for(HasTranslations, 'after_insert', propagate=True)
def save_translations_after_insert(mapper, connection, target):
    # New rows have no id before the INSERT
    target.translation_capability.flush(connection)


@event.listens_for(HasTranslations, 'after_delete', propagate=True)
def delete_translations_after_delete(mapper, connection, target):
    target.translation_capability.handle_deleted(connection)


@event.listens_for(HasTranslations, 'load', propagate=True)
def remember_eager_locale(target, context):
    locale = context.execution_options.get(LOCALE_OPTION)
    if locale is not None:
        target.translation_capability.eager_locale = locale


@event.listens_for(HasTranslations, 'refresh', propagate=True)
def remember_eager_locale_on_refresh(target, context, attrs):
    # Expired records already in the identity map are refreshed, not loaded
    remember_eager_locale(target, context)


@event.listens_for(Session, 'do_orm_execute')
def eager_load_translations(execute_state):
    if not execute_state.is_select:
        return
    if execute_state.is_column_load or execute_state.is_relationship_load:
        return

    statement = execute_state.statement
    if not isinstance(statement, Select):
        return

    from translatable.extension import get_translator
    policy = TranslationsEagerLoadPolicy(get_translator())

    for description in statement.column_descriptions:
        entity = description.get('entity')
        # Full entities only, not columns of them
        if description.get('expr') is not entity or not isinstance(entity, type):
            continue
        if issubclass(entity, HasTranslations):
            statement = policy.apply(statement, entity)

    if statement is not execute_state.statement:
        execute_state.statement = statement
        execute_state.update_execution_options(**{LOCALE_OPTION: policy.translator.get_locale()})


@event.listens_for(Session, 'after_commit')
def drain_committed_translations(session):
    flushed = session.info.pop(FLUSHED_KEY, {})
    for record, snapshot in flushed.values():
        record.translation_capability.drain(snapshot)
    if flushed:
        logger.debug(f"Drained staged translations of {len(flushed)} record(s)")


@event.listens_for(Session, 'after_rollback')
def forget_flushed_translations(session):
    # Staged values stay pending so a later save retries them
    session.info.pop(FLUSHED_KEY, None)
