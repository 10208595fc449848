# mandir_forms/__init__.py
# Mandir forms service: Flask app factory
# Goals:
# - one JSON API for every public temple form
# - proxy-correct behind a reverse proxy
# - request-id aware logging, JSON error shape under /api

from __future__ import annotations

import logging
import os
import time
from typing import Any, List, Optional, Tuple, Type, Union
from uuid import uuid4

import sentry_sdk
from dotenv import load_dotenv
from flask import Blueprint, Flask, g, request
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from werkzeug.exceptions import HTTPException, InternalServerError
from werkzeug.middleware.proxy_fix import ProxyFix

# Never override real env vars
load_dotenv(override=False)

from mandir_forms.config import CONFIG_BY_NAME  # noqa: E402
from mandir_forms.extensions import cors, db, mail, migrate  # noqa: E402
from mandir_forms.responses import error_response  # noqa: E402

ConfigLike = Union[str, Type[Any]]


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _env_bool(name: str) -> Optional[bool]:
    v = os.getenv(name)
    if v is None:
        return None
    s = str(v).strip().lower()
    if s in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "f", "no", "n", "off"}:
        return False
    return None


def _env_mode(app: Optional[Flask] = None) -> str:
    """
    Determine environment mode.
    Priority:
      1) app.config["ENV"] (if present and meaningful)
      2) APP_ENV / ENV / FLASK_ENV env vars
      3) default "development"
    """
    if app is not None:
        v = str(app.config.get("ENV") or "").strip().lower()
        if v and v not in {"?", "base"}:
            return v

    for key in ("APP_ENV", "ENV", "FLASK_ENV"):
        val = (os.getenv(key) or "").strip().lower()
        if val:
            if val == "prod":
                return "production"
            if val == "dev":
                return "development"
            return val

    return "development"


def _resolve_config(target: Optional[ConfigLike]) -> Type[Any]:
    """
    Choose the config class.
    - An explicit class or name ("testing", "production", ...) wins.
    - Else FLASK_CONFIG, else ProductionConfig when env says production,
      otherwise DevelopmentConfig.
    """
    if target is None:
        target = (os.getenv("FLASK_CONFIG") or "").strip() or _env_mode(None)

    if isinstance(target, str):
        cfg = CONFIG_BY_NAME.get(target.strip().lower())
        if cfg is None:
            raise RuntimeError(f"Unknown config '{target}' (expected one of {', '.join(CONFIG_BY_NAME)})")
        return cfg
    return target


def _wants_json_response() -> bool:
    path = request.path or ""
    if path.startswith("/api/"):
        return True
    accept = (request.headers.get("Accept") or "").lower()
    return ("application/json" in accept) or bool(request.is_json)


def _parse_cors_origins(env: str) -> Union[str, List[str]]:
    raw = (os.getenv("CORS_ORIGINS") or ("*" if env != "production" else "")).strip()
    if raw in {"", "*"}:
        return raw
    if "," in raw:
        return [o.strip() for o in raw.split(",") if o.strip()]
    return raw


# -----------------------------------------------------------------------------
# Logging with request_id
# -----------------------------------------------------------------------------
class _RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        try:
            record.request_id = getattr(g, "request_id", "-")
        except RuntimeError:
            # outside app/request context (background jobs, CLI)
            record.request_id = "-"
        return True


def _configure_logging(app: Flask) -> None:
    fmt = "%(asctime)s [%(levelname)s] %(name)s [rid=%(request_id)s]: %(message)s"
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler.addFilter(_RequestIDFilter())
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if not any(isinstance(f, _RequestIDFilter) for f in h.filters):
                h.addFilter(_RequestIDFilter())
            if not getattr(h, "formatter", None) or "%(request_id)s" not in getattr(h.formatter, "_fmt", ""):
                h.setFormatter(logging.Formatter(fmt))

    root.setLevel(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    logging.getLogger("werkzeug").setLevel(str(app.config.get("WERKZEUG_LOG_LEVEL", "WARNING")).upper())
    app.logger.info("Loaded config: ENV=%s DEBUG=%s", app.config.get("ENV", "?"), app.debug)


# -----------------------------------------------------------------------------
# ProxyFix (reverse proxy)
# -----------------------------------------------------------------------------
def _apply_proxyfix(app: Flask) -> None:
    trust = _env_bool("TRUST_PROXY")
    if trust is None:
        trust = bool(app.config.get("TRUST_PROXY", False))

    if not trust:
        return

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1, x_prefix=1)
    app.logger.info("ProxyFix enabled (trusting X-Forwarded-* headers).")


# -----------------------------------------------------------------------------
# Integrations
# -----------------------------------------------------------------------------
def _init_sentry(app: Flask) -> None:
    dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not dsn:
        return
    try:
        sentry_sdk.init(
            dsn=dsn,
            integrations=[
                FlaskIntegration(),
                LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
                SqlalchemyIntegration(),
            ],
            traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
            send_default_pii=False,
            environment=app.config.get("ENV", "development"),
            release=os.getenv("GIT_COMMIT"),
        )
        app.logger.info("Sentry initialized")
    except Exception as e:
        app.logger.warning("Sentry init failed: %s", e)


def _init_cors(app: Flask, cors_origins: Union[str, List[str]]) -> None:
    if not cors_origins:
        app.logger.info("CORS disabled (CORS_ORIGINS not set)")
        return

    cors.init_app(
        app,
        supports_credentials=False,
        resources={r"/api/*": {"origins": cors_origins}},
        expose_headers=["X-Request-ID"],
        allow_headers=["Content-Type", "X-API-Key", "X-Request-ID"],
        methods=["GET", "POST", "OPTIONS"],
    )


def _maybe_create_sqlite_tables(app: Flask) -> None:
    uri = (app.config.get("SQLALCHEMY_DATABASE_URI") or "").strip()
    if not uri.startswith("sqlite"):
        return
    if app.config.get("AUTO_CREATE_SQLITE", True) is not True:
        return

    # models must be imported so their tables are in the metadata
    from mandir_forms import models  # noqa: F401

    try:
        with app.app_context():
            db.create_all()
    except Exception:
        app.logger.exception("SQLite create_all failed (continuing)")


# -----------------------------------------------------------------------------
# Request lifecycle + errors
# -----------------------------------------------------------------------------
def _register_request_lifecycle(app: Flask) -> None:
    @app.before_request
    def _bootstrap_request():
        g.request_id = request.headers.get("X-Request-ID") or uuid4().hex
        g._start_ts = time.perf_counter()

    @app.after_request
    def _attach_request_headers(resp):
        resp.headers["X-Request-ID"] = getattr(g, "request_id", "-")
        start = getattr(g, "_start_ts", None)
        if start:
            resp.headers["X-Response-Time-ms"] = str(int((time.perf_counter() - start) * 1000))
        return resp


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http_err(err: HTTPException):
        if _wants_json_response():
            return error_response(err.description or err.name, err.code or 500)
        return err

    @app.errorhandler(Exception)
    def _uncaught(err: Exception):
        app.logger.exception("Unhandled error")

        if _wants_json_response():
            return error_response("Internal server error", 500)
        return InternalServerError()


# -----------------------------------------------------------------------------
# Blueprint registration
# -----------------------------------------------------------------------------
def _register_blueprints(app: Flask, env: str) -> None:
    from mandir_forms.blueprints.health import bp as health_bp
    from mandir_forms.routes.forms import bp as forms_bp

    core: List[Tuple[Blueprint, str]] = [
        (forms_bp, "/api/v1/forms"),
        (health_bp, "/api"),
    ]

    if env == "development":
        from mandir_forms.routes.dev import bp as dev_bp

        core.append((dev_bp, "/api/dev"))

    for blueprint, prefix in core:
        app.register_blueprint(blueprint, url_prefix=prefix)
        app.logger.info("Registered blueprint: %-8s → %s", blueprint.name, prefix)


# -----------------------------------------------------------------------------
# App Factory
# -----------------------------------------------------------------------------
def create_app(config_class: Optional[ConfigLike] = None) -> Flask:
    app = Flask(__name__)

    # ---- Config loading
    cfg = _resolve_config(config_class)
    app.config.from_object(cfg)

    env = _env_mode(app)
    app.config["ENV"] = env

    init_cfg = getattr(cfg, "init_app", None)
    if callable(init_cfg):
        init_cfg(app)

    app.url_map.strict_slashes = False
    app.json.sort_keys = False

    # ---- Proxy handling first
    _apply_proxyfix(app)

    # ---- Logging / integrations
    _configure_logging(app)
    _init_sentry(app)
    _init_cors(app, _parse_cors_origins(env))

    # ---- Core extensions
    db.init_app(app)
    _maybe_create_sqlite_tables(app)

    migrate.init_app(app, db, compare_type=True, render_as_batch=True)
    mail.init_app(app)

    # ---- Request lifecycle / errors
    _register_request_lifecycle(app)
    _register_error_handlers(app)

    # ---- Blueprints
    _register_blueprints(app, env)

    return app


__all__ = ["create_app"]
