import os
from flask import Flask, render_template
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.middleware.proxy_fix import ProxyFix

# Load .env only for local/dev. In prod, env vars come from the platform.
if os.getenv("APP_ENV", "development") != "production":
    from dotenv import load_dotenv
    load_dotenv(".env")


from .config import BoardSettings, get_config
from .extensions import db
from .security import init_security
from .observability import init_logging, init_sentry

def create_app(config_overrides=None):
    app = Flask(__name__, template_folder="templates", static_folder="static")

    # Config: clean, explicit, class-based
    app.config.from_object(get_config())
    if config_overrides:
        app.config.update(config_overrides)

    # --- Required env validation for prod-like envs (staging/production) ---
    def _require(name: str):
        val = os.getenv(name) or app.config.get(name)
        if not val:
            raise RuntimeError(f"Missing required environment variable: {name}")
        return val

    app_env = (os.getenv("APP_ENV", "development") or "development").lower()
    app.config.setdefault("APP_ENV", app_env)
    if app_env in ("staging", "production"):
        _require("SECRET_KEY")
        _require("DATABASE_URL")

    init_logging(app)
    init_sentry(app)

    if app_env in ("staging", "production"):
        init_security(app)

    if app.config.get("TRUST_PROXY"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    # Board settings are resolved once and injected into the pipelines from here
    app.extensions["messageboard"] = BoardSettings.from_config(app.config)

    db.init_app(app)

    from .blueprints.board import bp as board_bp
    app.register_blueprint(board_bp)

    from .utils.rendering import autolink, format_timestamp

    @app.template_filter("autolink")
    def _autolink_filter(text):
        return autolink(text)

    @app.template_filter("local_time")
    def _local_time_filter(value):
        return format_timestamp(value, app.extensions["messageboard"].timezone)

    @app.context_processor
    def inject_globals():
        """Inject global template variables."""
        return {"board": app.extensions["messageboard"]}

    # Health
    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}, 200

    # Error handlers (minimal)
    @app.errorhandler(404)
    def not_found(e):
        return ("Not Found", 404)

    @app.errorhandler(SQLAlchemyError)
    def database_error(e):
        # Never echo the exception: it can carry the connection URL
        app.logger.exception("database_error", extra={"event": "database_error"})
        try:
            db.session.rollback()
        except SQLAlchemyError:
            app.logger.warning("Rollback after database error failed")
        return render_template("errors/500.html"), 500

    @app.errorhandler(500)
    def server_error(e):
        return render_template("errors/500.html"), 500

    # CLI commands (ops-grade utilities)
    from .cli import register_cli
    register_cli(app)

    return app
