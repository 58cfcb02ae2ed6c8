# config.py
import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    MONGODB_URI = os.getenv('MONGODB_URI', 'mongodb://localhost:27017/ai-bible-assistant')
    MONGODB_DB = os.getenv('MONGODB_DB', 'ai-bible-assistant')
    # Applies to server selection and to every operation (pymongo timeoutMS)
    MONGODB_TIMEOUT_MS = int(os.getenv('MONGODB_TIMEOUT_MS', 10000))

    MAX_LIMIT = int(os.getenv('MAX_LIMIT', 50))
    IMPORT_BATCH_SIZE = int(os.getenv('IMPORT_BATCH_SIZE', 1000))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    PORT = int(os.getenv('PORT', 5001))
