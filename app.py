# app.py
from flask import Flask, jsonify, request, g
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix
import logging
import sys
import time

from config import Config
from database import init_db
from routes.bible import bible_bp
from utils.search import BibleSearchService
from utils.store import MongoVerseStore

# Configure logging to output to stdout
logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)


def create_app(service=None):
    """Build the Flask app. Pass ``service`` to run against another store."""
    app = Flask(__name__)

    # Use ProxyFix to handle proxy headers properly
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)

    app.json.sort_keys = False  # Preserve order of keys in JSON responses
    app.json.ensure_ascii = False  # Korean text stays readable
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024

    CORS(app, resources={
        r"/api/*": {
            "origins": "*",
            "methods": ["GET", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"]
        }
    })

    # Ensure URLs with or without trailing slashes are handled the same way
    app.url_map.strict_slashes = False

    if service is None:
        logger.info("Initializing MongoDB connection...")
        init_db()
        service = BibleSearchService(MongoVerseStore())
    app.extensions['bible_service'] = service

    app.register_blueprint(bible_bp, url_prefix='/api/bible')

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        duration = time.time() - g.get('start_time', time.time())
        logger.info(f"Request to {request.path} took {duration:.2f} seconds")
        return response

    @app.route('/health', methods=['GET'])
    def health():
        """Health check endpoint that also verifies the MongoDB connection"""
        db_ok = app.extensions['bible_service'].ping()
        return jsonify({
            'status': 'healthy' if db_ok else 'unhealthy',
            'mongodb': 'connected' if db_ok else 'error',
            'timestamp': time.time()
        }), 200 if db_ok else 503

    return app


if __name__ == '__main__':
    print("Starting Flask server...")
    create_app().run(debug=True, port=Config.PORT)
