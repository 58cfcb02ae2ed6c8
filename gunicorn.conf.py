# gunicorn.conf.py
import os
import logging
import sys
import multiprocessing

wsgi_app = "app:create_app()"

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = os.getenv('LOG_LEVEL', 'info').lower()

port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# Verse lookups are short MongoDB round trips; a few sync workers are enough
cores = multiprocessing.cpu_count()
workers = min(cores * 2 + 1, 4)
threads = 2

def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} workers on port {port}")

# Store calls carry their own MongoDB timeout, well under this
timeout = 30
keepalive = 5
worker_class = "sync"

proc_name = "bible_verse_engine"

graceful_timeout = 30
