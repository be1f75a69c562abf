# ==============================================================================
# commission_report/__init__.py
# ------------------------------------------------------------------------------
# Application factory for creating and configuring the Flask app instance.
# ==============================================================================

import logging
from flask import Flask
from config import Config
from commission_report.models import SessionStore

# Initialize extensions globally to be accessible by other modules
store = SessionStore()

def create_app(config_class=Config):
    """
    Application factory function. Creates and configures the Flask application.

    Args:
        config_class (class): The configuration class to use.

    Returns:
        Flask: The configured Flask application instance.
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure logging
    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'),
                        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s')

    # The session store keeps every uploaded table in memory only
    store.init_app(app)

    # Register blueprints with the application
    from commission_report.main import bp as main_bp
    app.register_blueprint(main_bp)

    app.logger.info('Agent commission report startup complete')

    return app
