# utils/store.py
from contextlib import contextmanager
from datetime import datetime
import logging

from mongoengine.connection import ConnectionFailure
from mongoengine.errors import OperationError
from pymongo.errors import BulkWriteError, PyMongoError

from database import ping_db
from models.bible import BibleVerse
from utils.errors import StoreError

logger = logging.getLogger(__name__)

DUPLICATE_KEY_ERROR = 11000


class MongoVerseStore:
    """Verse persistence on top of the BibleVerse mongoengine document.

    Every pymongo/mongoengine failure leaves this class as a StoreError.
    Timeouts come from the client-wide ``timeoutMS`` set in ``init_db``.
    """

    def __init__(self, document=BibleVerse):
        self.document = document

    @contextmanager
    def _operation(self, name):
        try:
            yield
        except (PyMongoError, OperationError, ConnectionFailure) as e:
            logger.error(f"MongoDB error during {name}: {str(e)}")
            raise StoreError(name, e) from e

    def ping(self):
        return ping_db()

    def ensure_indexes(self):
        with self._operation('ensure_indexes'):
            self.document.ensure_indexes()

    def insert_verses(self, verses):
        """Unordered bulk insert. Duplicate references are skipped, not fatal.

        Returns the number of newly inserted documents.
        """
        docs = [verse.to_mongo().to_dict() for verse in verses]
        if not docs:
            return 0

        with self._operation('insert_verses'):
            collection = self.document._get_collection()
            try:
                result = collection.insert_many(docs, ordered=False)
                return len(result.inserted_ids)
            except BulkWriteError as e:
                details = e.details or {}
                write_errors = details.get('writeErrors', [])
                fatal = [err for err in write_errors if err.get('code') != DUPLICATE_KEY_ERROR]
                if fatal:
                    raise StoreError('insert_verses', fatal[0].get('errmsg')) from e
                logger.info(f"Skipped {len(write_errors)} duplicate references")
                return details.get('nInserted', 0)

    def text_search(self, query, category=None, testament=None, limit=10):
        filters = {}
        if category:
            filters['category'] = category
        if testament:
            filters['testament'] = testament

        with self._operation('text_search'):
            queryset = self.document.objects(**filters).search_text(query)
            return list(queryset.order_by('$text_score', '-usage_count').limit(limit))

    def find_by_themes(self, themes, limit=10):
        with self._operation('find_by_themes'):
            queryset = self.document.objects(themes__in=list(themes))
            return list(queryset.order_by('-usage_count', '-created_at').limit(limit))

    def find_popular(self, limit=10):
        with self._operation('find_popular'):
            return list(self.document.objects.order_by('-usage_count').limit(limit))

    def find_by_reference(self, reference):
        with self._operation('find_by_reference'):
            return self.document.objects(reference=reference).first()

    def sample(self, size, category=None):
        queryset = self.document.objects(category=category) if category else self.document.objects
        with self._operation('sample'):
            docs = queryset.aggregate([{'$sample': {'size': size}}])
            return [self.document._from_son(doc) for doc in docs]

    def increment_usage(self, references, now=None):
        """Bump usage_count once per listed reference and stamp last_used."""
        references = list(references)
        if not references:
            return 0
        now = now or datetime.utcnow()
        with self._operation('increment_usage'):
            return self.document.objects(reference__in=references).update(
                inc__usage_count=1,
                set__last_used=now,
                set__updated_at=now
            )

    def count(self, **filters):
        with self._operation('count'):
            return self.document.objects(**filters).count()

    def category_counts(self):
        pipeline = [
            {'$group': {'_id': '$category', 'count': {'$sum': 1}}},
            {'$sort': {'count': -1}}
        ]
        with self._operation('category_counts'):
            return [
                {'category': row['_id'], 'count': row['count']}
                for row in self.document.objects.aggregate(pipeline)
            ]

    def top_themes(self, limit=10):
        pipeline = [
            {'$unwind': '$themes'},
            {'$group': {
                '_id': '$themes',
                'count': {'$sum': 1},
                'usage_count': {'$sum': '$usage_count'}
            }},
            {'$sort': {'usage_count': -1, 'count': -1}},
            {'$limit': limit}
        ]
        with self._operation('top_themes'):
            return [
                {'theme': row['_id'], 'verse_count': row['count'], 'usage_count': row['usage_count']}
                for row in self.document.objects.aggregate(pipeline)
            ]

    def distinct(self, field):
        with self._operation('distinct'):
            return self.document.objects.distinct(field)

    def delete_all(self):
        with self._operation('delete_all'):
            return self.document.objects.delete()
