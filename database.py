from mongoengine import connect, disconnect, get_db as get_mongo_db
from mongoengine.connection import ConnectionFailure
from pymongo.errors import PyMongoError
import logging
import re

from config import Config

logger = logging.getLogger(__name__)

DB_ALIAS = 'default'

_connected = False


def mask_connection_string(uri):
    """Hide the password part of a MongoDB URI for logging."""
    return re.sub(r'(://)([^:/]+):([^@]+)(@)', r'\1\2:***\4', uri or '')


def init_db(uri=None, db=None, timeout_ms=None):
    """Connect mongoengine to MongoDB.

    The connection is lazy: pymongo only reaches the server on the first
    operation, so this never blocks. ``timeout_ms`` bounds both server
    selection and every individual operation.
    """
    global _connected
    uri = (uri or Config.MONGODB_URI).strip()
    db = db or Config.MONGODB_DB
    timeout_ms = timeout_ms or Config.MONGODB_TIMEOUT_MS

    # Some hosting dashboards paste the variable name along with the value
    if uri.startswith('MONGODB_URI='):
        logger.warning("Stripping variable name from MONGODB_URI value")
        uri = uri[len('MONGODB_URI='):]

    if _connected:
        disconnect(alias=DB_ALIAS)

    logger.info(f"Connecting to MongoDB at {mask_connection_string(uri)} (db={db})")
    connect(
        db=db,
        host=uri,
        alias=DB_ALIAS,
        serverSelectionTimeoutMS=timeout_ms,
        timeoutMS=timeout_ms,
        maxPoolSize=10,
        minPoolSize=1,
        maxIdleTimeMS=30000,
        retryWrites=True,
    )
    _connected = True


def close_db():
    global _connected
    if _connected:
        disconnect(alias=DB_ALIAS)
        _connected = False
        logger.info("MongoDB connection closed")


def ping_db():
    """Return True when the server answers a ping."""
    try:
        get_mongo_db(alias=DB_ALIAS).command('ping')
        return True
    except (PyMongoError, ConnectionFailure) as e:
        logger.error(f"MongoDB ping failed: {str(e)}")
        return False
