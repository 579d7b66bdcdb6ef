import logging

from flask import Flask, jsonify
from .extensions import db, migrate, login_manager
from .config import Config
from .errors import AuthError, register_error_handlers

from .blueprints.auth.routes import auth_bp
from .blueprints.budgets.routes import budgets_bp
from .blueprints.dashboard.routes import dashboard_bp
from .blueprints.expenses.routes import expenses_bp


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return AuthError("Login required").to_response()

    # Ensure tables exist for a smooth first run
    if app.config.get("STORE_ENABLED", True):
        with app.app_context():
            from . import models  # noqa: F401  register tables
            db.create_all()
    else:
        app.logger.warning("Store disabled: reads return empty results and writes fail")

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(budgets_bp)
    app.register_blueprint(dashboard_bp)
    register_error_handlers(app)

    @app.route("/")
    def root():
        return jsonify({"status": "ok", "service": "spendwise"})

    return app
