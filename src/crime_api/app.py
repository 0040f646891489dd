"""
app.py: Flask application for the St. Paul crime API.

Serves the St. Paul crime database (incidents, crime codes, neighborhoods):
- GET /codes, /neighborhoods, /incidents with comma-separated filters.
- PUT /new-incident and DELETE /remove-incident for incident records.
- /health, plus Open API (Swagger) documentation at /swagger.

Run with: python -m crime_api.app (starts on port 8000).
"""

import atexit
import logging

from flask import Flask, jsonify
from flask_cors import CORS

from crime_api import config
from crime_api.api.incidents import create_incidents_blueprint
from crime_api.api.lookups import create_lookups_blueprint
from crime_api.api.swagger import create_swagger_blueprints
from crime_api.db.gateway import Gateway
from crime_api.db.session import make_engine
from crime_api.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings=None, engine=None):
    """
    Build the Flask app.

    Args:
        settings: overrides for config.as_dict() (DATABASE_URL, DEFAULT_INCIDENT_LIMIT, ...)
        engine: an existing SQLAlchemy engine; built from DATABASE_URL when omitted
    """
    cfg = config.as_dict()
    cfg.update(settings or {})

    app = Flask(__name__)
    app.config.update(cfg)

    # Use Flask CORS to allow connections from other sites
    CORS(app)

    if engine is None:
        engine = make_engine(cfg["DATABASE_URL"], echo=cfg["SQL_ECHO"])
    gateway = Gateway(engine)
    app.extensions["gateway"] = gateway

    app.register_blueprint(create_lookups_blueprint(gateway))
    app.register_blueprint(create_incidents_blueprint(
        gateway,
        default_limit=cfg["DEFAULT_INCIDENT_LIMIT"],
        max_limit=cfg["MAX_INCIDENT_LIMIT"],
    ))
    for bp in create_swagger_blueprints():
        app.register_blueprint(bp)

    @app.route('/health', methods=['GET'])
    def health():
        """
        Health check: verifies the database answers.
        Returns: {"status": "ok", "service": "crime_api", "database": true}
        """
        database_status = gateway.ping()
        body = {
            "status": "ok" if database_status else "error",
            "service": "crime_api",
            "database": database_status,
        }
        return jsonify(body), 200 if database_status else 503

    # Error handler for 404
    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Endpoint not found"}), 404

    # Error handler for 405
    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405

    # Error handler for 500
    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Unhandled error: {error}")
        return jsonify({"error": "Internal server error"}), 500

    return app


def main():
    setup_logging(config.LOG_LEVEL)
    app = create_app()
    atexit.register(app.extensions["gateway"].dispose)

    logger.info(f"Now listening on port {config.PORT}")
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == '__main__':
    main()
