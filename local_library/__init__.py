"""
Local library catalog: authors, genres, books and book copies.

Run:
    pip install -e .
    flask --app local_library init-db --seed
    flask --app local_library run

Open http://127.0.0.1:5000/catalog/
"""
import logging
import os

from flask import Flask, redirect, url_for
from flask_talisman import Talisman
from flask_wtf import CSRFProtect

from .cli import init_db_command
from .config import Config
from .errors import register_error_handlers
from .models import db
from .views import register_blueprints

csrf = CSRFProtect()

CONTENT_SECURITY_POLICY = {
    "default-src": ["'self'"],
    "style-src": ["'self'", "https://cdn.jsdelivr.net", "'unsafe-inline'"],
    "img-src": ["'self'", "data:"],
}


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(config_overrides=None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.from_mapping(config_overrides)
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        os.makedirs(app.instance_path, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///" + os.path.join(app.instance_path, "catalog.db")

    configure_logging(app.config["LOG_LEVEL"])

    db.init_app(app)
    csrf.init_app(app)
    Talisman(
        app,
        force_https=app.config["FORCE_HTTPS"],
        session_cookie_secure=app.config["FORCE_HTTPS"],
        content_security_policy=CONTENT_SECURITY_POLICY,
    )

    register_blueprints(app)
    register_error_handlers(app)
    app.cli.add_command(init_db_command)

    @app.route("/")
    def home():
        return redirect(url_for("catalog.index"))

    app.logger.info("Catalog app created (database %s)", app.config["SQLALCHEMY_DATABASE_URI"].split(":", 1)[0])
    return app
