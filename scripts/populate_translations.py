#!/usr/bin/env python3
"""Populate the database with fake translations for load testing.

Creates the default tags, then `count` translation keys in every supported
locale, inserted in batches through TranslationRepository.bulk_insert.
Some rows get 1-3 random tags.

Usage:
    python scripts/populate_translations.py [count]    (default: 100000 keys)
"""

import os
import random
import sys
import time

# Add parent directory to path to import app modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from faker import Faker
from sqlalchemy import insert

from translation_api import create_app, db
from translation_api.constants import DEFAULT_TAGS, SUPPORTED_LOCALES
from translation_api.models import Translation, translation_tags
from translation_api.repositories import TagData, TagRepository, TranslationRepository
from translation_api.services import get_cache

DEFAULT_COUNT = 100000
KEYS_PER_BATCH = 1000
TAGGED_SHARE = 0.7

KEY_PREFIXES = [
    'app',
    'auth',
    'common',
    'messages',
    'navigation',
    'buttons',
    'validation',
    'forms',
    'errors',
    'success',
    'pages',
    'components',
]

fake = Faker()


def create_tags(tag_repository):
    """Make sure the default tags exist; returns their ids."""
    tag_ids = []
    for name in DEFAULT_TAGS:
        tag = tag_repository.find_by_slug(name)
        if tag is None:
            tag = tag_repository.create(TagData(
                name=name.capitalize(),
                slug=name,
                description=f"Translations for {name} context"
            ))
            print(f"  Added tag: {tag['name']}")
        tag_ids.append(tag['id'])
    return tag_ids


def attach_random_tags(keys, tag_ids):
    """Link a share of the given keys' translations to 1-3 random tags."""
    rows = Translation.live().with_entities(Translation.id).filter(Translation.key.in_(keys)).all()

    links = []
    for (translation_id,) in rows:
        if random.random() < TAGGED_SHARE:
            for tag_id in random.sample(tag_ids, random.randint(1, min(3, len(tag_ids)))):
                links.append({'translation_id': translation_id, 'tag_id': tag_id})

    if links:
        db.session.execute(insert(translation_tags), links)
        db.session.commit()
    return len(links)


def populate(count):
    app = create_app(os.getenv('FLASK_ENV', 'development'))

    with app.app_context():
        cache = get_cache()
        tag_repository = TagRepository(cache)
        translation_repository = TranslationRepository(cache)

        print(f"Populating {count} keys x {len(SUPPORTED_LOCALES)} locales...")
        start = time.time()

        print("Creating tags...")
        tag_ids = create_tags(tag_repository)

        print("Creating translations...")
        batches = (count + KEYS_PER_BATCH - 1) // KEYS_PER_BATCH
        run_id = fake.pystr(min_chars=6, max_chars=6).lower()
        inserted = 0
        linked = 0

        for batch in range(batches):
            batch_size = min(KEYS_PER_BATCH, count - batch * KEYS_PER_BATCH)
            keys = [
                f"{random.choice(KEY_PREFIXES)}.{fake.slug()}.{run_id}{batch * KEYS_PER_BATCH + i}"
                for i in range(batch_size)
            ]

            rows = [
                {'key': key, 'locale': locale, 'content': fake.sentence()}
                for key in keys
                for locale in SUPPORTED_LOCALES
            ]
            translation_repository.bulk_insert(rows)
            inserted += len(rows)

            if batch % 10 == 0:
                linked += attach_random_tags(keys, tag_ids)

            print(f"  Batch {batch + 1}/{batches}: {inserted} rows")

        # Tag links were added after bulk_insert cleared the cache
        cache.clear_all()

        duration = round(time.time() - start, 2)
        print("\n" + "=" * 50)
        print(f"Inserted {inserted} translations and {linked} tag links in {duration}s")
        print("=" * 50)


if __name__ == '__main__':
    if len(sys.argv) > 2:
        print("Usage: python scripts/populate_translations.py [count]")
        sys.exit(1)

    try:
        count = int(sys.argv[1]) if len(sys.argv) == 2 else DEFAULT_COUNT
    except ValueError:
        print("count must be an integer")
        sys.exit(1)

    populate(count)
