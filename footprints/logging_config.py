from __future__ import annotations

import logging
import re
from typing import Iterable

from flask import Flask

DEV_FORMAT = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
PROD_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
SECRET_PATTERNS = {
    "app_token": re.compile(r"(\$\$app_token|x-app-token)\s*[:=]\s*([^\s&,;'\"}]+)", re.IGNORECASE),
    "token": re.compile(r"(token|api[_-]?key|secret|password|passwd|authorization)\s*[:=]\s*([^\s,;]+)", re.IGNORECASE),
    "db_password": re.compile(r"(://[^:/@\s]+:)([^@\s]+)(@)"),
}


class SecretRedactionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - formatting guard
        try:
            msg = record.getMessage()
            msg = SECRET_PATTERNS["app_token"].sub(lambda m: f"{m.group(1)}=[REDACTED]", msg)
            msg = SECRET_PATTERNS["token"].sub(lambda m: f"{m.group(1)}=[REDACTED]", msg)
            msg = SECRET_PATTERNS["db_password"].sub(r"\1[REDACTED]\3", msg)
            record.msg = msg
            record.args = None
        except Exception:
            pass
        return True


def configure_logging(app: Flask) -> None:
    level = _coerce_level(app.config.get("LOG_LEVEL", "DEBUG" if app.debug else "INFO"))
    logging.getLogger().setLevel(level)
    app.logger.setLevel(level)

    package_logger = logging.getLogger("footprints")
    package_logger.setLevel(level)

    if level > logging.DEBUG:
        for noisy in ("werkzeug", "flask_limiter", "sqlalchemy.engine", "urllib3.connectionpool"):
            logging.getLogger(noisy).setLevel(logging.WARNING)

    is_production = app.config.get("ENV") == "production" and not app.debug
    formatter = logging.Formatter(PROD_FORMAT if is_production else DEV_FORMAT)
    redact = app.config.get("LOG_REDACT_SECRETS", True)
    _apply_formatter(logging.getLogger().handlers, formatter, redact)
    _apply_formatter(app.logger.handlers, formatter, redact)


def _apply_formatter(handlers: Iterable[logging.Handler], formatter: logging.Formatter, redact: bool) -> None:
    for handler in handlers:
        try:
            handler.setFormatter(formatter)
            if redact and not any(isinstance(f, SecretRedactionFilter) for f in handler.filters):
                handler.addFilter(SecretRedactionFilter())
        except Exception:  # pragma: no cover
            continue


def _coerce_level(raw_level) -> int:
    if isinstance(raw_level, int):
        return raw_level
    if isinstance(raw_level, str):
        candidate = raw_level.strip().upper()
        level = getattr(logging, candidate, logging.INFO)
        return level if isinstance(level, int) else logging.INFO
    return logging.INFO
