from flask import Flask
from .extensions import db, migrate, login_manager
from .config import get_config
from .errors import register_error_handlers
from .responses import failure, success

from .blueprints.auth.routes import auth_bp
from .blueprints.expenses.routes import expenses_bp
from .blueprints.budgets.routes import budgets_bp


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or get_config())
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def unauthorized():
        return failure("Authentication required", 401)

    # Ensure tables exist for a smooth first run
    with app.app_context():
        from . import models  # noqa: F401
        db.create_all()

    # Register blueprints
    app.register_blueprint(auth_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(budgets_bp)
    register_error_handlers(app)

    from .cli import seed_demo
    app.cli.add_command(seed_demo)

    @app.route("/api/health")
    def health():
        return success({"status": "OK"}, "Expense Tracker API is running!")

    app.logger.info("Expense tracker started with %s", app.config["SQLALCHEMY_DATABASE_URI"].split("://")[0])
    return app
