# tests/conftest.py
"""
Shared fixtures: an in-memory stand-in for MongoVerseStore and a small
seeded verse set.
"""

import copy
import random
from datetime import datetime, timedelta

import pytest

from models.bible import BibleVerse
from utils.errors import StoreError
from utils.importer import build_verse_record
from utils.search import BibleSearchService


SAMPLE_VERSES = [
    ('요3:16', '하나님이 세상을 이처럼 사랑하사 독생자를 주셨으니 이는 그를 믿는 자마다 멸망하지 않고 영생을 얻게 하려 하심이라'),
    ('시23:1', '여호와는 나의 목자시니 내게 부족함이 없으리로다'),
    ('고후1:4', '우리의 모든 환난 중에서 우리를 위로하사 우리로 하여금 하나님께 받는 위로로써 모든 환난 중에 있는 자들을 능히 위로할 수 있게 하시는 이로다'),
    ('롬15:13', '소망의 하나님이 모든 기쁨과 평강을 믿음 안에서 너희에게 충만하게 하사 성령의 능력으로 소망이 넘치게 하시기를 원하노라'),
    ('전9:10', '네 손이 일을 얻는 대로 힘을 다하여 할지어다'),
    ('잠3:5', '너는 마음을 다하여 여호와를 신뢰하고 네 명철을 의지하지 말라'),
    ('빌4:6', '아무 것도 염려하지 말고 다만 모든 일에 기도와 간구로 너희 구할 것을 감사함으로 하나님께 아뢰라'),
    ('사41:10', '두려워하지 말라 내가 너와 함께 함이라 놀라지 말라 나는 네 하나님이 됨이라'),
]

COMFORT_REFERENCES = {'고후1:4', '롬15:13'}
WORK_REFERENCES = {'전9:10', '잠3:5', '빌4:6'}


class InMemoryVerseStore:
    """Dict-backed store with the same surface as MongoVerseStore.

    Rows are kept as plain dicts and every read hands out fresh BibleVerse
    objects, like documents coming back from MongoDB.
    """

    def __init__(self):
        self.rows = {}
        self.calls = []
        self.fail = False
        self.fail_on = set()

    def _check(self, operation):
        self.calls.append(operation)
        if self.fail or operation in self.fail_on:
            raise StoreError(operation, 'simulated outage')

    def _load(self, row):
        return BibleVerse._from_son(copy.deepcopy(row))

    def _matches(self, row, filters):
        return all(row.get(key) == value for key, value in filters.items())

    def ping(self):
        return not self.fail

    def ensure_indexes(self):
        self._check('ensure_indexes')

    def insert_verses(self, verses):
        self._check('insert_verses')
        inserted = 0
        for verse in verses:
            row = verse.to_mongo().to_dict()
            if row['reference'] in self.rows:
                continue
            self.rows[row['reference']] = row
            inserted += 1
        return inserted

    def text_search(self, query, category=None, testament=None, limit=10):
        self._check('text_search')
        terms = query.split()
        filters = {key: value for key, value in
                   (('category', category), ('testament', testament)) if value}
        scored = []
        for row in self.rows.values():
            if not self._matches(row, filters):
                continue
            score = sum(1 for term in terms if term in row['search_text'])
            if score:
                scored.append((score, row))
        scored.sort(key=lambda item: (item[0], item[1]['usage_count']), reverse=True)
        return [self._load(row) for _, row in scored[:limit]]

    def find_by_themes(self, themes, limit=10):
        self._check('find_by_themes')
        wanted = set(themes)
        rows = [row for row in self.rows.values() if wanted & set(row['themes'])]
        rows.sort(key=lambda row: (row['usage_count'], row['created_at']), reverse=True)
        return [self._load(row) for row in rows[:limit]]

    def find_popular(self, limit=10):
        self._check('find_popular')
        rows = sorted(self.rows.values(), key=lambda row: row['usage_count'], reverse=True)
        return [self._load(row) for row in rows[:limit]]

    def find_by_reference(self, reference):
        self._check('find_by_reference')
        row = self.rows.get(reference)
        return self._load(row) if row else None

    def sample(self, size, category=None):
        self._check('sample')
        pool = [row for row in self.rows.values() if not category or row['category'] == category]
        return [self._load(row) for row in random.sample(pool, min(size, len(pool)))]

    def increment_usage(self, references, now=None):
        self._check('increment_usage')
        now = now or datetime.utcnow()
        updated = 0
        for reference in references:
            row = self.rows.get(reference)
            if row:
                row['usage_count'] += 1
                row['last_used'] = now
                updated += 1
        return updated

    def count(self, **filters):
        self._check('count')
        return sum(1 for row in self.rows.values() if self._matches(row, filters))

    def category_counts(self):
        self._check('category_counts')
        counts = {}
        for row in self.rows.values():
            counts[row['category']] = counts.get(row['category'], 0) + 1
        return [{'category': category, 'count': count}
                for category, count in sorted(counts.items(), key=lambda item: item[1], reverse=True)]

    def top_themes(self, limit=10):
        self._check('top_themes')
        stats = {}
        for row in self.rows.values():
            for theme in row['themes']:
                entry = stats.setdefault(theme, {'theme': theme, 'verse_count': 0, 'usage_count': 0})
                entry['verse_count'] += 1
                entry['usage_count'] += row['usage_count']
        ranked = sorted(stats.values(), key=lambda e: (e['usage_count'], e['verse_count']), reverse=True)
        return ranked[:limit]

    def distinct(self, field):
        self._check('distinct')
        values = set()
        for row in self.rows.values():
            value = row.get(field)
            if isinstance(value, list):
                values.update(value)
            elif value is not None:
                values.add(value)
        return list(values)

    def delete_all(self):
        self._check('delete_all')
        deleted = len(self.rows)
        self.rows.clear()
        return deleted


def seed(store, verses=SAMPLE_VERSES, usage=None):
    """Insert verses with strictly increasing created_at, optional usage counts."""
    base = datetime(2024, 1, 1)
    records = []
    for index, (reference, text) in enumerate(verses):
        verse = build_verse_record(reference, text)
        verse.created_at = base + timedelta(minutes=index)
        if usage:
            verse.usage_count = usage.get(reference, 0)
        records.append(verse)
    store.insert_verses(records)
    store.calls.clear()
    return store


def usage_counts(store):
    return {reference: row['usage_count'] for reference, row in store.rows.items()}


@pytest.fixture
def store():
    return InMemoryVerseStore()


@pytest.fixture
def seeded_store(store):
    return seed(store)


@pytest.fixture
def service(seeded_store):
    return BibleSearchService(seeded_store)
