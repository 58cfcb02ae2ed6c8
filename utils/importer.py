# utils/importer.py
from collections.abc import Mapping
import json
import logging

from mongoengine.errors import ValidationError as DocumentValidationError

from config import Config
from models.bible import BibleVerse
from utils.classifier import classify
from utils.errors import ParseError, StoreError, ValidationError
from utils.reference import format_reference, parse_reference

logger = logging.getLogger(__name__)


def clean_verse_text(text):
    """Trim surrounding whitespace."""
    return text.strip()


def build_verse_record(reference, text):
    """Parse and classify one verse into an unsaved BibleVerse.

    Raises ParseError for a malformed reference and ValidationError for an
    empty body, so nothing half-parsed reaches the store.
    """
    parsed = parse_reference(reference)
    if not isinstance(text, str) or not clean_verse_text(text):
        raise ValidationError('text', f"Empty text for {reference}")

    text = clean_verse_text(text)
    classification = classify(text)
    verse = BibleVerse(
        reference=format_reference(parsed.book_abbr, parsed.chapter, parsed.verse),
        text=text,
        book=parsed.book,
        chapter=parsed.chapter,
        verse=parsed.verse,
        keywords=classification.keywords,
        themes=classification.themes,
        category=classification.category,
        testament=parsed.testament.value,
        search_text=classification.search_text,
        usage_count=0
    )
    try:
        verse.validate()
    except DocumentValidationError as e:
        raise ValidationError('verse', f"{reference}: {e}") from e
    return verse


def _insert_batch(store, batch):
    try:
        return store.insert_verses(batch)
    except StoreError as e:
        logger.error(f"Batch of {len(batch)} verses failed: {str(e)}")
        return 0


def load_bible_data(data, store, batch_size=None):
    """Import verses from a {reference: text} mapping or (reference, text) pairs.

    Bad items are logged and skipped, a failed batch does not stop the rest.
    Returns the number of verses actually stored.
    """
    batch_size = batch_size or Config.IMPORT_BATCH_SIZE
    items = data.items() if isinstance(data, Mapping) else data

    logger.info("Starting verse import...")
    processed = 0
    skipped = 0
    inserted = 0
    batch = []

    for item in items:
        try:
            reference, text = item
        except (TypeError, ValueError):
            skipped += 1
            logger.warning(f"Skipping malformed item: {item!r}")
            continue

        try:
            batch.append(build_verse_record(reference, text))
        except (ParseError, ValidationError) as e:
            skipped += 1
            logger.warning(f"Skipping {reference!r}: {str(e)}")
            continue

        processed += 1
        if len(batch) >= batch_size:
            inserted += _insert_batch(store, batch)
            batch = []
            logger.info(f"Processed {processed} verses...")

    if batch:
        inserted += _insert_batch(store, batch)

    logger.info(f"Import complete: {inserted} stored, {processed} parsed, {skipped} skipped")
    return inserted


def load_bible_file(json_path, store, batch_size=None):
    """Import a UTF-8 JSON file holding a {reference: text} object."""
    logger.info(f"Reading verses from: {json_path}")
    with open(json_path, 'r', encoding='utf-8') as f:
        verses_data = json.load(f)
    return load_bible_data(verses_data, store, batch_size=batch_size)
