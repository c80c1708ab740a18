import os
import logging
from typing import Any, Optional
from dotenv import load_dotenv

# Initialize environment configuration from local or project-level .env files
dotenv_paths = [
    os.path.join(os.path.dirname(__file__), '.env'),
    os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env'),
    os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env.example')
]

for path in dotenv_paths:
    if os.path.exists(path):
        load_dotenv(path)
        break

from flask import Flask, jsonify
from flask_cors import CORS
from sqlalchemy.exc import SQLAlchemyError
from db import database_url_from_env, init_db, make_engine, make_session_factory
from routes.products import products_bp
from services.product_store import ProductStore, build_store

def resolve_log_level(name: Optional[str]) -> str:
    """
    Normalizes a LOG_LEVEL setting, falling back to INFO for unknown level names.
    """
    level = (name or "INFO").strip().upper()
    return level if isinstance(logging.getLevelName(level), int) else "INFO"

# Configure high-level logging defaults for the backend application
logging.basicConfig(
    level=resolve_log_level(os.environ.get("LOG_LEVEL")),
    format="%(asctime)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(store: Optional[ProductStore] = None, database_url: Optional[str] = None) -> Flask:
    """
    Builds the Flask application and wires the product store into it.

    Args:
        store: A ready-made store to serve. When omitted, one is built from the
            PRODUCT_STORE backend setting ('sql' or 'memory').
        database_url: SQLAlchemy URL for the 'sql' backend; defaults to DATABASE_URL.

    Returns:
        The configured Flask application.
    """
    app = Flask(__name__)
    CORS(app, origins=os.environ.get("CORS_ORIGINS", "*"))

    if store is None:
        kind = os.environ.get("PRODUCT_STORE", "sql").lower()
        session_factory = None
        if kind == "sql":
            engine = make_engine(database_url or database_url_from_env())
            # Ensure the database schema is initialized before accepting requests
            init_db(engine)
            session_factory = make_session_factory(engine)
        store = build_store(kind, session_factory)

    app.extensions["product_store"] = store
    logger.info(f"Serving products from {type(store).__name__}")

    app.register_blueprint(products_bp, url_prefix="/api")

    @app.route("/api/health")
    def health() -> Any:
        """
        Verifies the operational status of the Flask application.

        Returns:
            A JSON response indicating the service is healthy.
        """
        return jsonify({"status": "ok"})

    @app.errorhandler(SQLAlchemyError)
    def storage_failure(e):
        logger.exception(f"Storage operation failed: {e}")
        return jsonify({"error": "Storage failure"}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    debug = os.environ.get("FLASK_DEBUG", "false").lower() == "true"
    app.run(port=int(os.environ.get("PORT", "8000")), debug=debug)
