import logging
import os
from typing import Any

from flask import Flask
from sqlalchemy.pool import StaticPool

from .blueprints_registry import register_blueprints
from .config import ENV_DIAGNOSTICS
from .extensions import cache, db, limiter, migrate
from .logging_config import configure_logging
from .resilience import register_resilience_handlers

logger = logging.getLogger(__name__)


def create_app(config: dict[str, Any] | None = None) -> Flask:
    app = Flask(__name__)
    os.makedirs(app.instance_path, exist_ok=True)
    app.json.sort_keys = False

    _load_base_config(app, config)
    _apply_sqlalchemy_env_overrides(app)
    _configure_sqlite_engine_options(app)

    db.init_app(app)
    migrate.init_app(app, db)
    _configure_cache(app)
    limiter.init_app(app)

    from . import models  # noqa: F401  # ensure models registered for Alembic
    from .services.building_service import init_building_service

    init_building_service(app)
    register_blueprints(app)
    configure_logging(app)
    register_resilience_handlers(app)

    from .management import register_commands

    register_commands(app)
    _run_optional_create_all(app)

    return app


def _load_base_config(app: Flask, config: dict[str, Any] | None) -> None:
    app.config.from_object("footprints.config.Config")
    if config:
        app.config.update(config)
    app.config["ENV_DIAGNOSTICS"] = ENV_DIAGNOSTICS
    for warning in ENV_DIAGNOSTICS.get("warnings", ()):
        logger.warning("Environment configuration warning: %s", warning)

    if config and "DATABASE_URL" in config:
        app.config["SQLALCHEMY_DATABASE_URI"] = config["DATABASE_URL"]
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL must be set for staging and production environments.")


def _apply_sqlalchemy_env_overrides(app: Flask) -> None:
    engine_opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}) or {})
    changed = False

    def _apply_int(env_key: str, option_key: str):
        nonlocal changed
        value = os.environ.get(env_key)
        if value in (None, ""):
            return
        try:
            engine_opts[option_key] = int(value)
            changed = True
        except ValueError:
            logger.warning("Invalid integer for %s: %s", env_key, value)

    _apply_int("SQLALCHEMY_POOL_SIZE", "pool_size")
    _apply_int("SQLALCHEMY_MAX_OVERFLOW", "max_overflow")

    if changed:
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_opts


def _configure_sqlite_engine_options(app: Flask) -> None:
    """Configure SQLite engine options for testing/memory databases"""
    uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
    if app.config.get("TESTING") or uri.startswith("sqlite"):
        opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS", {}))
        # SQLite does not accept pool sizing arguments
        opts.pop("pool_size", None)
        opts.pop("max_overflow", None)
        opts.pop("pool_timeout", None)
        if uri == "sqlite:///:memory:":
            opts["poolclass"] = StaticPool
            opts["connect_args"] = {"check_same_thread": False}
        app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts


def _configure_cache(app: Flask) -> None:
    redis_url = app.config.get("REDIS_URL")
    cache_config = {
        "CACHE_DEFAULT_TIMEOUT": app.config.get("CACHE_DEFAULT_TIMEOUT", 300),
    }

    if redis_url and not app.config.get("TESTING"):
        cache_config["CACHE_TYPE"] = "RedisCache"
        cache_config["CACHE_REDIS_URL"] = redis_url
        logger.info("Redis cache configured for building aggregates")
    else:
        cache_config["CACHE_TYPE"] = app.config.get("CACHE_TYPE") or "SimpleCache"
        logger.info("Using %s for building aggregates", cache_config["CACHE_TYPE"])

    cache.init_app(app, config=cache_config)


def _run_optional_create_all(app: Flask) -> None:
    def _env_flag(key: str):
        value = os.environ.get(key)
        if value is None:
            return None
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        return None

    create_all_flag = _env_flag("SQLALCHEMY_CREATE_ALL")
    if create_all_flag is None:
        logger.debug("db.create_all() not enabled; Alembic migrations are the source of truth")
        return
    if create_all_flag is False:
        logger.info("db.create_all() disabled via SQLALCHEMY_CREATE_ALL=0")
        return
    logger.info("Local dev: creating tables via db.create_all()")
    with app.app_context():
        db.create_all()
        logger.info("Database tables created/verified")


def run_startup_bootstrap(app: Flask) -> None:
    """Populate the collection on first start when BOOTSTRAP_ON_STARTUP is set.

    A failed load is logged and re-raised so the process does not serve an
    empty collection.
    """
    if not app.config.get("BOOTSTRAP_ON_STARTUP"):
        logger.info("Startup bootstrap disabled; run `flask buildings bootstrap` to load data")
        return

    from .services.building_service import run_bootstrap

    with app.app_context():
        try:
            run_bootstrap()
        except Exception:
            logger.exception("Startup bootstrap load failed")
            raise
        finally:
            # Forked workers must not inherit pooled connections.
            db.session.remove()
            db.engine.dispose()
