import importlib
import pkgutil

from flask import Blueprint, Flask

from config import settings
from config.logging_config import setup_logging
from repositories.country_repository import CountryRepository
from utils.initial_data import check_and_import_data


def create_app() -> Flask:
    """Flask application factory."""
    app = Flask(__name__)
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    """Registration of error handlers."""
    from middleware.handlers import register_error_handlers
    register_error_handlers(app)

    # Auto-register all blueprints defined in routes/*.py
    from routes import __path__ as routes_path

    for _, module_name, _ in pkgutil.iter_modules(routes_path):
        module = importlib.import_module(f"routes.{module_name}")
        for attr_name in dir(module):
            obj = getattr(module, attr_name)
            if isinstance(obj, Blueprint):
                app.register_blueprint(obj)

    if settings.BOOTSTRAP_INDEXES:
        CountryRepository().ensure_indexes()

    # Initial import (skips itself when no seed file is configured or data exists)
    with app.app_context():
        check_and_import_data()
    return app


if __name__ == "__main__":
    from os import getenv

    app = create_app()
    app.run(
        host="0.0.0.0",
        port=int(getenv("PORT", 5000)),
        debug=getenv("FLASK_DEBUG", "0") == "1",
        use_reloader=False,
    )
