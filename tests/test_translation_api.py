"""
Tests for the explicit translation API (translate, get_translation, ...).
"""

import pytest
from translatable import db, Translation, NotTranslatableAttribute
from support import Post, touches_translations


class TestNotTranslatableGuard:
    """Explicit calls with undeclared attributes must fail loudly."""

    def test_get_translation(self, post):
        with pytest.raises(NotTranslatableAttribute) as exc_info:
            post.get_translation('nonexistent_attr', 'fr')

        assert exc_info.value.attribute == 'nonexistent_attr'
        assert exc_info.value.model is Post

    def test_get_raw_translation(self, post):
        with pytest.raises(NotTranslatableAttribute):
            post.get_raw_translation('status', 'fr')

    def test_set_translation(self, post):
        with pytest.raises(NotTranslatableAttribute):
            post.set_translation('status', 'publié', 'fr')

    def test_translate(self, post):
        with pytest.raises(NotTranslatableAttribute):
            post.translate('status', 'publié', 'fr')

    def test_translate_many_stages_nothing(self, post):
        with pytest.raises(NotTranslatableAttribute):
            post.translate_many({'body': 'Bonjour', 'status': 'publié'}, 'fr')

        assert post.translation_capability.pending == {}
        assert Translation.query.count() == 0


class TestGetTranslation:
    """Tests for get_translation / get_raw_translation"""

    def test_round_trip_through_fresh_load(self, post):
        post.set_translation('body', 'bonjour', 'fr')
        post.save()
        post_id = post.id
        db.session.expunge_all()

        fresh = db.session.get(Post, post_id)

        assert fresh is not post
        assert fresh.get_translation('body', 'fr') == 'bonjour'

    def test_default_locale_returns_own_value(self, post, sql_statements):
        sql_statements.clear()

        assert post.get_translation('body', 'en') == 'Hello world'
        assert post.get_raw_translation('body', 'en') == 'Hello world'
        assert touches_translations(sql_statements) == []

    def test_uses_active_locale_by_default(self, post, translator):
        post.translate('body', 'Hallo Welt', 'de')
        translator.set_locale('de')

        assert post.get_translation('body') == 'Hallo Welt'

    def test_missing_translation_notifies(self, post, not_found):
        assert post.get_translation('slug', 'fr') is None
        assert not_found == [(post, 'slug', 'fr')]

    def test_raw_translation_does_not_notify(self, post, not_found):
        assert post.get_raw_translation('slug', 'fr') is None
        assert not_found == []

    def test_failing_observer_does_not_break_lookup(self, post, translator):
        def broken(owner, attribute, locale):
            raise RuntimeError('reporting is down')

        translator.add_not_found_observer(broken)
        try:
            assert post.get_translation('slug', 'fr') is None
        finally:
            translator.remove_not_found_observer(broken)

    def test_get_translations(self, post):
        post.translate('body', 'Bonjour', 'fr')

        assert post.get_translations('fr') == {
            'title': None,
            'body': 'Bonjour',
            'slug': None,
        }


class TestTranslate:
    """Tests for translate / translate_many"""

    def test_translate_saves_immediately(self, post):
        post.translate('slug', 'bonjour-le-monde', 'fr')

        translation = Translation.for_owner(post).one()
        assert translation.owner_type == 'posts'
        assert translation.owner_id == post.id
        assert translation.attribute == 'slug'
        assert translation.locale == 'fr'
        assert translation.value == 'bonjour-le-monde'

    def test_translate_default_locale_writes_own_column(self, post):
        post.translate('body', 'Hello again', 'en')

        assert post.get_default_attribute('body') == 'Hello again'
        assert Translation.query.count() == 0

    def test_translate_many_writes_once(self, post, translator, monkeypatch):
        calls = []
        original_save = translator.save

        def save(owner, translations, connection=None):
            calls.append(translations)
            return original_save(owner, translations, connection)

        monkeypatch.setattr(translator, 'save', save)

        post.translate_many({
            'title': 'Titre',
            'body': 'Corps',
            'slug': 'titre',
        }, 'fr')

        assert calls == [{'fr': {'title': 'Titre', 'body': 'Corps', 'slug': 'titre'}}]
        assert Translation.for_owner(post).count() == 3

    def test_translating_twice_updates_one_row(self, post):
        post.translate('body', 'Bonjour', 'fr')
        post.translate('body', 'Salut', 'fr')

        rows = Translation.for_owner(post).all()
        assert len(rows) == 1
        assert rows[0].value == 'Salut'

    def test_translating_from_another_instance_updates_one_row(self, post):
        post.translate('body', 'Bonjour', 'fr')
        post_id = post.id
        db.session.expunge_all()

        other = db.session.get(Post, post_id)
        other.translate('body', 'Coucou', 'fr')

        rows = Translation.query.filter_by(owner_id=post_id).all()
        assert len(rows) == 1
        assert rows[0].value == 'Coucou'

    def test_empty_save_issues_no_query(self, post, translator, sql_statements):
        sql_statements.clear()

        assert translator.save(post, {}) == 0
        assert sql_statements == []

    def test_translation_staged_on_new_record_saved_after_insert(self, translator):
        post = Post(body='Hello', slug='hello')
        post.set_translation('body', 'Bonjour', 'fr')
        db.session.add(post)
        db.session.commit()

        translation = Translation.for_owner(post).one()
        assert translation.value == 'Bonjour'
        assert post.translation_capability.pending == {}


class TestToDict:
    """Tests for to_dict serialization"""

    def test_translated_values_take_precedence(self, post, translator):
        post.translate('body', 'Bonjour', 'fr')
        translator.set_locale('fr')

        data = post.to_dict()

        assert data['id'] == post.id
        assert data['body'] == 'Bonjour'
        assert data['slug'] == 'hello-world'
        assert '_body' not in data
        assert isinstance(data['created_at'], str)

    def test_default_locale_uses_own_values(self, post):
        data = post.to_dict()

        assert data['body'] == 'Hello world'
        assert data['status'] == 'draft'
        assert data['deleted_at'] is None
