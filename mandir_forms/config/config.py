# mandir_forms/config/config.py
# Canonical form-service configuration (env-first, production-safe)

from __future__ import annotations

import os
from typing import Optional


# ----------------------------
# Env helpers
# ----------------------------
_TRUTHY = {"1", "true", "yes", "on", "y"}
_FALSY = {"0", "false", "no", "off", "n"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    s = str(v).strip()
    return s if s else default


def _bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    s = v.strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    return default


def _int(name: str, default: int) -> int:
    v = _env(name)
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def _float(name: str, default: float) -> float:
    v = _env(name)
    if v is None:
        return default
    try:
        return float(str(v).strip())
    except ValueError:
        return default


def _clean_base_url(v: Optional[str]) -> str:
    s = (v or "").strip().rstrip("/")
    return s


# ----------------------------
# Config classes
# ----------------------------
class BaseConfig:
    """
    Env-first config:
    - every deploy-specific setting can be overridden via environment variables
    - safe defaults for local dev (no CMS token, no admin address)
    """

    ENV = (_env("APP_ENV") or _env("ENV") or _env("FLASK_ENV") or "base").strip().lower()

    DEBUG = _bool("FLASK_DEBUG", False)
    TESTING = _bool("TESTING", False)

    SECRET_KEY = _env("SECRET_KEY", "dev-change-me")
    PUBLIC_BASE_URL = _clean_base_url(_env("PUBLIC_BASE_URL", ""))

    TRUST_PROXY = _bool("TRUST_PROXY", False)

    LOG_LEVEL = _env("LOG_LEVEL", "INFO")
    WERKZEUG_LOG_LEVEL = _env("WERKZEUG_LOG_LEVEL", "WARNING")

    # Multipart uploads: 10MB attachment + form fields
    MAX_CONTENT_LENGTH = _int("MAX_CONTENT_LENGTH", 12 * 1024 * 1024)

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = _env("SQLALCHEMY_DATABASE_URI", _env("DATABASE_URL", "sqlite:///mandir-forms-dev.db"))
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    AUTO_CREATE_SQLITE = _bool("AUTO_CREATE_SQLITE", True)

    # CMS (Strapi) mirror
    CMS_API_URL = _clean_base_url(_env("CMS_API_URL", "http://localhost:1337/api"))
    CMS_API_TOKEN = _env("CMS_API_TOKEN", "")
    CMS_SYNC_TIMEOUT = _float("CMS_SYNC_TIMEOUT", 10.0)

    # Transactional email (Flask-Mail / SMTP)
    MAIL_SERVER = _env("MAIL_SERVER", "localhost")
    MAIL_PORT = _int("MAIL_PORT", 25)
    MAIL_USE_TLS = _bool("MAIL_USE_TLS", False)
    MAIL_USE_SSL = _bool("MAIL_USE_SSL", False)
    MAIL_USERNAME = _env("MAIL_USERNAME")
    MAIL_PASSWORD = _env("MAIL_PASSWORD")
    MAIL_SUPPRESS_SEND = _bool("MAIL_SUPPRESS_SEND", False)
    SENDER_EMAIL_ADDRESS = _env("SENDER_EMAIL_ADDRESS", "")
    ADMIN_EMAIL_ADDRESS = _env("ADMIN_EMAIL_ADDRESS", "")

    # Email copy
    ORG_NAME = _env("ORG_NAME", "Vishnu Mandir")
    ORG_SIGNATURE = _env("ORG_SIGNATURE", "Vishnu Mandir, Tampa")

    # Public form API guard (open when unset)
    FORMS_API_KEY = _env("FORMS_API_KEY", _env("API_KEY", ""))

    @classmethod
    def init_app(cls, app) -> None:
        """
        Optional hook for factory boot hardening.
        Call this from create_app() after app.config.from_object(...)
        """
        uri = str(app.config.get("SQLALCHEMY_DATABASE_URI") or "")

        if uri.startswith("sqlite:"):
            opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
            connect_args = dict(opts.get("connect_args") or {})
            connect_args.setdefault("check_same_thread", False)
            opts["connect_args"] = connect_args
            opts.setdefault("pool_pre_ping", True)
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts


class DevelopmentConfig(BaseConfig):
    ENV = "development"
    DEBUG = True

    SQLALCHEMY_DATABASE_URI = _env("SQLALCHEMY_DATABASE_URI", "sqlite:///mandir-forms-dev.db")
    TRUST_PROXY = _bool("TRUST_PROXY", False)


class TestingConfig(BaseConfig):
    ENV = "testing"
    TESTING = True
    DEBUG = False

    SQLALCHEMY_DATABASE_URI = "sqlite://"
    MAIL_SUPPRESS_SEND = True
    SENDER_EMAIL_ADDRESS = "noreply@mandir.test"
    ADMIN_EMAIL_ADDRESS = "office@mandir.test"
    CMS_API_URL = "http://cms.test/api"
    CMS_API_TOKEN = ""
    FORMS_API_KEY = ""
    LOG_LEVEL = "DEBUG"


class ProductionConfig(BaseConfig):
    ENV = "production"
    DEBUG = False

    TRUST_PROXY = _bool("TRUST_PROXY", True)

    @classmethod
    def init_app(cls, app) -> None:
        super().init_app(app)

        # ---- Production guardrails (fail fast) ----
        sk = app.config.get("SECRET_KEY")
        if not sk or sk == "dev-change-me":
            raise RuntimeError("SECRET_KEY must be set to a strong random value in production.")

        base = (app.config.get("PUBLIC_BASE_URL") or "").strip()
        if base and base.startswith("http://"):
            raise RuntimeError("PUBLIC_BASE_URL must be https:// in production.")

        if _bool("FLASK_DEBUG", False):
            raise RuntimeError("FLASK_DEBUG must be 0 in production.")
