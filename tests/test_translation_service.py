"""
Tests for TranslationService: tag resolution and the export cache tier.
"""

from translation_api.models import Tag, Translation
from translation_api.services import TranslationService


class TestCreateAndUpdate:
    """Tests for create_translation / update_translation."""

    def test_create_with_tag_names(self, service):
        translation = service.create_translation({
            'key': 'app.name',
            'locale': 'en',
            'content': 'Application',
            'tags': ['Mobile', 'web', 'mobile'],
        })

        assert sorted(t['slug'] for t in translation['tags']) == ['mobile', 'web']
        assert Tag.query.count() == 2

    def test_update_without_tags_keeps_them(self, service, make_translation):
        created = make_translation(key='app.name', tags=['mobile'])

        assert service.update_translation(created['id'], {'content': 'Renamed'})

        found = service.get_translation(created['id'])
        assert found['content'] == 'Renamed'
        assert [t['slug'] for t in found['tags']] == ['mobile']

    def test_update_replaces_tags(self, service, make_translation):
        created = make_translation(key='app.name', tags=['mobile'])

        service.update_translation(created['id'], {'tags': ['web', 'desktop']})

        found = service.get_translation(created['id'])
        assert [t['slug'] for t in found['tags']] == ['desktop', 'web']

    def test_update_with_empty_tags_clears(self, service, make_translation):
        created = make_translation(key='app.name', tags=['mobile'])

        service.update_translation(created['id'], {'tags': []})

        assert service.get_translation(created['id'])['tags'] == []

    def test_update_with_null_tags_clears(self, service, make_translation):
        created = make_translation(key='app.name', tags=['mobile'])

        service.update_translation(created['id'], {'tags': None})

        assert service.get_translation(created['id'])['tags'] == []

    def test_update_missing_creates_no_tags(self, service):
        assert service.update_translation(99999, {'tags': ['brand-new']}) is False
        assert Tag.query.count() == 0

    def test_delete(self, service, make_translation):
        created = make_translation()

        assert service.delete_translation(created['id'])
        assert service.get_translation(created['id']) is None
        assert service.delete_translation(created['id']) is False

    def test_import_returns_count(self, service):
        rows = [{'key': f'k.{i}', 'locale': 'en', 'content': str(i)} for i in range(4)]

        assert service.import_translations(rows) == 4
        assert Translation.live().count() == 4


class TestExportCacheKey:
    """Tests for build_export_cache_key."""

    def test_keys(self):
        build = TranslationService.build_export_cache_key

        assert build() == 'export'
        assert build('en') == 'export.locale.en'
        assert build(tags=['web', 'mobile']) == 'export.tags.mobile.web'
        assert build('fr', ['web', 'mobile']) == 'export.locale.fr.tags.mobile.web'


class TestExport:
    """Tests for export_translations."""

    def test_export_locale(self, service, make_translation):
        make_translation(key='app.name', locale='en', content='Application')
        make_translation(key='app.title', locale='en', content='Title')
        make_translation(key='app.name', locale='fr', content='Appli')

        assert service.export_translations('en') == {
            'app.name': 'Application',
            'app.title': 'Title',
        }

    def test_export_all_groups_by_locale(self, service, make_translation):
        make_translation(key='app.name', locale='en', content='Application')
        make_translation(key='app.name', locale='fr', content='Appli')

        assert service.export_translations() == {
            'en': {'app.name': 'Application'},
            'fr': {'app.name': 'Appli'},
        }

    def test_export_empty(self, service):
        assert service.export_translations() == {}
        assert service.export_translations('en') == {}

    def test_export_by_tags(self, service, make_translation):
        make_translation(key='app.name', locale='en', content='Application', tags=['mobile'])
        make_translation(key='app.name', locale='fr', content='Appli', tags=['mobile'])
        make_translation(key='web.title', locale='en', content='Web', tags=['web'])

        assert service.export_translations(tags=['mobile']) == {
            'en': {'app.name': 'Application'},
            'fr': {'app.name': 'Appli'},
        }
        assert service.export_translations('en', ['mobile', 'web']) == {
            'app.name': 'Application',
            'web.title': 'Web',
        }

    def test_export_is_cached(self, service, make_translation, cache):
        make_translation(key='app.name', locale='en', content='Application')
        service.export_translations('en')

        assert cache.get('export.locale.en') == {'app.name': 'Application'}

        cache.set('export.locale.en', {'app.name': 'Stale'})
        assert service.export_translations('en') == {'app.name': 'Stale'}

    def test_writes_drop_locale_and_full_exports(self, service, make_translation):
        created = make_translation(key='app.name', locale='en', content='Application')
        service.export_translations('en')
        service.export_translations()

        service.update_translation(created['id'], {'content': 'Renamed'})

        assert service.export_translations('en') == {'app.name': 'Renamed'}
        assert service.export_translations() == {'en': {'app.name': 'Renamed'}}

    def test_create_drops_exports(self, service, make_translation):
        make_translation(key='a', locale='en', content='A')
        service.export_translations('en')

        make_translation(key='b', locale='en', content='B')

        assert service.export_translations('en') == {'a': 'A', 'b': 'B'}

    def test_locale_change_drops_both_exports(self, service, make_translation):
        created = make_translation(key='a', locale='en', content='A')
        service.export_translations('en')
        service.export_translations('fr')

        service.update_translation(created['id'], {'locale': 'fr'})

        assert service.export_translations('en') == {}
        assert service.export_translations('fr') == {'a': 'A'}

    def test_delete_drops_exports(self, service, make_translation):
        created = make_translation(key='a', locale='en', content='A')
        service.export_translations('en')

        service.delete_translation(created['id'])

        assert service.export_translations('en') == {}

    def test_invalidate_one_locale(self, service, cache):
        cache.set('export.locale.en', {'a': 'A'})
        cache.set('export.locale.fr', {'a': 'A'})

        service.invalidate_export_cache('en')

        assert not cache.has('export.locale.en')
        assert cache.has('export.locale.fr')

    def test_invalidate_everything(self, service, cache):
        cache.set('export.locale.en', {'a': 'A'})
        cache.set('translation.1', {'id': 1})

        service.invalidate_export_cache()

        assert not cache.has('export.locale.en')
        assert not cache.has('translation.1')

    def test_create_drops_tag_exports(self, service, make_translation):
        assert service.export_translations(tags=['mobile']) == {}
        assert service.export_translations('en', ['mobile']) == {}

        make_translation(key='app.name', locale='en', content='Application', tags=['mobile'])

        assert service.export_translations(tags=['mobile']) == {'en': {'app.name': 'Application'}}
        assert service.export_translations('en', ['mobile']) == {'app.name': 'Application'}

    def test_untagging_drops_tag_exports(self, service, make_translation):
        created = make_translation(key='app.name', locale='en', content='Application', tags=['mobile', 'web'])
        service.export_translations(tags=['mobile'])
        service.export_translations(tags=['mobile', 'web'])

        service.update_translation(created['id'], {'tags': []})

        assert service.export_translations(tags=['mobile']) == {}
        assert service.export_translations(tags=['mobile', 'web']) == {}

    def test_tagging_drops_new_tag_exports(self, service, make_translation):
        created = make_translation(key='app.name', locale='en', content='Application')
        assert service.export_translations(tags=['web']) == {}

        service.update_translation(created['id'], {'tags': ['web']})

        assert service.export_translations(tags=['web']) == {'en': {'app.name': 'Application'}}


class TestLocales:
    def test_available_locales(self, service, make_translation):
        make_translation(locale='fr')
        make_translation(locale='en')
        make_translation(locale='fr')

        assert service.get_available_locales() == ['en', 'fr']
