# utils/search.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional
import logging

from config import Config
from schemas.verse_schemas import CounselingContext, Emotion, CounselingTopic, Testament, VerseRead
from utils.classifier import CATEGORIES, THEMES
from utils.errors import ParseError, StoreError, ValidationError
from utils.reference import format_reference, parse_reference

logger = logging.getLogger(__name__)

EMOTION_THEMES = {
    'sad': ['위로', '소망', '평안'],
    'anxious': ['평화', '신뢰', '위로'],
    'angry': ['용서', '평화', '겸손'],
    'hopeful': ['소망', '믿음', '기쁨'],
    'grateful': ['감사', '찬양', '기쁨'],
    'confused': ['지혜', '인도', '분별'],
    'lonely': ['사랑', '위로', '동행'],
    'peaceful': ['평안', '감사', '기쁨'],
}
DEFAULT_EMOTION_THEMES = ['위로', '소망']

TOPIC_THEMES = {
    'relationship': ['사랑', '용서', '화해', '이해'],
    'family': ['가족', '사랑', '순종', '존경'],
    'work': ['일', '성실', '지혜', '인내'],
    'health': ['치유', '회복', '신뢰', '평안'],
    'financial': ['공급', '신뢰', '지혜', '만족'],
    'faith': ['믿음', '확신', '성장', '순종'],
    'decision': ['지혜', '인도', '분별', '기도'],
}
DEFAULT_TOPIC_THEMES = ['지혜', '인도']

# High-urgency counseling leads with comfort verses
COMFORT_THEMES = ['위로', '소망']
URGENT_COMFORT_COUNT = 3

PRAYER_DEFAULT_THEMES = ['위로', '소망', '감사']
PRAYER_VERSE_COUNT = 3

DAILY_PRAYER_THEMES = ['감사', '인도', '평안']
DAILY_PRAYER_VERSE_COUNT = 5

CONTEXT_KEYWORD_LIMIT = 5
CONTEXT_EMOTION_LIMIT = 5
CONTEXT_RANDOM_LIMIT = 3
NEUTRAL_EMOTION = 'neutral'


@dataclass
class SearchResult:
    """Verses returned by a search, plus whether the store answered at all.

    Behaves like a list of VerseRead, so callers that only care about the
    verses can ignore ``ok``/``error``.
    """
    verses: List[VerseRead] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self):
        return self.error is None

    def __iter__(self):
        return iter(self.verses)

    def __len__(self):
        return len(self.verses)

    def __getitem__(self, index):
        return self.verses[index]

    @property
    def references(self):
        return [verse.reference for verse in self.verses]


def _plain(value):
    return value.value if isinstance(value, Enum) else value


def _dedupe_by_reference(verses):
    seen = set()
    unique = []
    for verse in verses:
        if verse.reference not in seen:
            seen.add(verse.reference)
            unique.append(verse)
    return unique


def _clean_terms(terms):
    if isinstance(terms, str):
        terms = terms.split(',')
    return [term.strip() for term in (terms or []) if term and term.strip()]


def format_verses_for_prompt(verses):
    """One '- reference: text' line per verse, for the counseling prompt."""
    return '\n'.join(f"- {verse.reference}: {verse.text}" for verse in verses)


class BibleSearchService:
    def __init__(self, store, max_limit=None):
        self.store = store
        self.max_limit = max_limit or Config.MAX_LIMIT

    # -- argument checks -------------------------------------------------

    def _check_limit(self, limit):
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError('limit', f"limit must be an integer, got {limit!r}")
        if limit < 1:
            raise ValidationError('limit', 'limit must be at least 1')
        return min(limit, self.max_limit)

    def _check_category(self, category):
        category = _plain(category)
        if category and category not in CATEGORIES:
            raise ValidationError('category', f"Unknown category: {category}")
        return category or None

    def _check_testament(self, testament):
        testament = _plain(testament)
        if testament and testament not in (Testament.OLD.value, Testament.NEW.value):
            raise ValidationError('testament', f"Unknown testament: {testament}")
        return testament or None

    # -- result handling -------------------------------------------------

    def _mark_used(self, verses):
        """Increment usage on the verses about to be returned and project them."""
        if not verses:
            return []
        now = datetime.utcnow()
        try:
            self.store.increment_usage([verse.reference for verse in verses], now=now)
            incremented = True
        except StoreError as e:
            logger.error(f"Usage increment failed for {len(verses)} verses: {str(e)}")
            incremented = False

        projected = []
        for verse in verses:
            record = VerseRead.model_validate(verse)
            if incremented:
                record = record.model_copy(update={
                    'usage_count': record.usage_count + 1,
                    'last_used': now
                })
            projected.append(record)
        return projected

    def _run(self, operation, fetch):
        try:
            verses = fetch()
        except StoreError as e:
            logger.warning(f"{operation} degraded to an empty result: {str(e)}")
            return SearchResult(error=str(e))
        return SearchResult(verses=self._mark_used(verses))

    # -- search operations -----------------------------------------------

    def search_by_keywords(self, query, category=None, testament=None, limit=10):
        """Full-text search ranked by relevance, then by usage."""
        if not isinstance(query, str) or not query.strip():
            raise ValidationError('query', '검색어를 입력해주세요.')
        query = query.strip()
        category = self._check_category(category)
        testament = self._check_testament(testament)
        limit = self._check_limit(limit)

        logger.info(f"Keyword search: '{query}' (category={category}, testament={testament}, limit={limit})")
        return self._run(
            'search_by_keywords',
            lambda: self.store.text_search(query, category=category, testament=testament, limit=limit)
        )

    def search_by_themes(self, themes, limit=10):
        """Verses sharing any of ``themes``, most used first, newest on ties."""
        themes = _clean_terms(themes)
        if not themes:
            raise ValidationError('themes', '주제를 선택해주세요.')
        limit = self._check_limit(limit)
        return self._run('search_by_themes', lambda: self.store.find_by_themes(themes, limit))

    def get_verses_for_emotion(self, emotion, limit=5):
        emotion = _plain(emotion)
        themes = EMOTION_THEMES.get(emotion)
        if themes is None:
            logger.info(f"Unknown emotion {emotion!r}, using default themes")
            themes = DEFAULT_EMOTION_THEMES
        return self.search_by_themes(themes, limit)

    def get_verses_for_counseling(self, topic, urgency='medium', limit=8):
        topic = _plain(topic)
        urgency = _plain(urgency)
        limit = self._check_limit(limit)
        themes = TOPIC_THEMES.get(topic)
        if themes is None:
            logger.info(f"Unknown counseling topic {topic!r}, using default themes")
            themes = DEFAULT_TOPIC_THEMES

        def fetch():
            verses = self.store.find_by_themes(themes, limit)
            if urgency == 'high':
                comfort = self.store.find_by_themes(COMFORT_THEMES, URGENT_COMFORT_COUNT)
                verses = _dedupe_by_reference(comfort + verses)[:limit]
            return verses

        return self._run('get_verses_for_counseling', fetch)

    def get_popular_verses(self, limit=10):
        limit = self._check_limit(limit)
        return self._run('get_popular_verses', lambda: self.store.find_popular(limit))

    def get_random_verses(self, category=None, limit=5):
        category = self._check_category(category)
        limit = self._check_limit(limit)
        # Oversample, then cut back to the requested size; $sample may repeat
        return self._run(
            'get_random_verses',
            lambda: _dedupe_by_reference(self.store.sample(limit * 2, category=category))[:limit]
        )

    def get_verse(self, reference):
        """Lookup by reference. Empty result when it does not exist.

        Parseable references are looked up in their stored form, so '창01:001'
        finds '창1:1'. Anything else is looked up as given.
        """
        if not isinstance(reference, str) or not reference.strip():
            raise ValidationError('reference', 'reference is required')
        reference = reference.strip()
        try:
            parsed = parse_reference(reference)
        except ParseError:
            parsed = None
        if parsed:
            reference = format_reference(parsed.book_abbr, parsed.chapter, parsed.verse)

        def fetch():
            verse = self.store.find_by_reference(reference)
            return [verse] if verse else []

        return self._run('get_verse', fetch)

    # -- chat / prayer helpers -------------------------------------------

    def get_verses_for_context(self, context):
        """Pick supporting verses for a counseling reply.

        Detected topics first, then the detected emotion, then a few random
        verses so the reply always has something to quote.
        """
        if not isinstance(context, CounselingContext):
            context = CounselingContext.model_validate(context or {})

        result = SearchResult()
        topics = _clean_terms(context.topics)
        if topics:
            result = self.search_by_keywords(' '.join(topics), limit=CONTEXT_KEYWORD_LIMIT)

        if not result and context.emotion != NEUTRAL_EMOTION:
            result = self.get_verses_for_emotion(context.emotion, CONTEXT_EMOTION_LIMIT)

        if not result:
            result = self.get_random_verses(limit=CONTEXT_RANDOM_LIMIT)
        return result

    def get_verses_for_prayer(self, include_topics=None):
        topics = _clean_terms(include_topics)
        result = SearchResult()
        if topics:
            result = self.search_by_themes(topics, PRAYER_VERSE_COUNT)
        if not result:
            result = self.search_by_themes(PRAYER_DEFAULT_THEMES, PRAYER_VERSE_COUNT)
        return result

    def get_verses_for_daily_prayer(self):
        """Verses for the daily prayer: gratitude, guidance and peace."""
        return self.search_by_themes(DAILY_PRAYER_THEMES, DAILY_PRAYER_VERSE_COUNT)

    # -- collection overview ---------------------------------------------

    def get_stats(self):
        """Collection statistics, or None when the store is unavailable."""
        try:
            return {
                'total_verses': self.store.count(),
                'testament': {
                    'old': self.store.count(testament='old'),
                    'new': self.store.count(testament='new')
                },
                'categories': self.store.category_counts(),
                'top_themes': self.store.top_themes(10)
            }
        except StoreError as e:
            logger.warning(f"Stats unavailable: {str(e)}")
            return None

    def get_options(self):
        try:
            categories = sorted(self.store.distinct('category'))
            themes = sorted(self.store.distinct('themes'))
            books = sorted(self.store.distinct('book'))
        except StoreError as e:
            logger.warning(f"Filter options unavailable: {str(e)}")
            return None
        return {
            'categories': categories,
            'themes': themes,
            'books': books,
            'known_themes': list(THEMES),
            'emotions': [emotion.value for emotion in Emotion],
            'counseling_topics': [topic.value for topic in CounselingTopic],
            'testaments': [testament.value for testament in Testament]
        }

    def ping(self):
        return self.store.ping()
