# scripts/import_verses.py
import logging
import sys
from pathlib import Path

# Add the parent directory to the Python path properly
current_dir = Path(__file__).resolve().parent
backend_dir = current_dir.parent
sys.path.insert(0, str(backend_dir))

from config import Config
from database import init_db, close_db
from utils.errors import StoreError
from utils.importer import load_bible_file
from utils.search import BibleSearchService
from utils.store import MongoVerseStore

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def import_verses(json_path, replace=False):
    """Import Korean verse data from a JSON file into MongoDB"""
    init_db()
    store = MongoVerseStore()

    try:
        existing = store.count()
        if existing:
            logger.info(f"Found {existing} existing verses")
            if replace:
                deleted = store.delete_all()
                logger.info(f"Cleared {deleted} existing verses from database")

        store.ensure_indexes()
        loaded = load_bible_file(json_path, store)
        logger.info(f"Loaded {loaded} verses")

        total = store.count()
        logger.info(f"Collection now holds {total} verses")

        # Smoke check the text index
        sample = BibleSearchService(store).search_by_keywords('사랑', limit=3)
        for verse in sample:
            logger.info(f"  {verse.reference}: {verse.text[:50]}...")
        return loaded
    except StoreError as e:
        logger.error(f"Import aborted: {str(e)}")
        return None
    finally:
        close_db()


if __name__ == '__main__':
    args = [arg for arg in sys.argv[1:] if not arg.startswith('--')]
    if len(args) != 1:
        print("Usage: python import_verses.py <path_to_verses.json> [--replace]")
        sys.exit(1)

    loaded = import_verses(args[0], replace='--replace' in sys.argv)
    sys.exit(1 if loaded is None else 0)
