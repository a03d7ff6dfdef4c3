from __future__ import annotations

import logging
import multiprocessing
import os
import sys
from typing import Final

LOGGER: Final = logging.getLogger("gunicorn.config")


def _env_int(key: str, default: int) -> int:
    """Parse integer environment values with sane fallbacks."""
    try:
        return int(os.environ.get(key, default))
    except (TypeError, ValueError):
        return default


def _configured_workers() -> int:
    """Respect explicit worker counts while preventing overcommit."""
    cpu_count = max(multiprocessing.cpu_count(), 1)
    auto_workers = max(2, min(8, cpu_count * 2))

    if "GUNICORN_WORKERS" in os.environ:
        return _env_int("GUNICORN_WORKERS", auto_workers)
    if "WEB_CONCURRENCY" in os.environ:
        return _env_int("WEB_CONCURRENCY", auto_workers)
    return auto_workers


def _log_runtime_configuration() -> None:
    summary = (
        f"Gunicorn bind={bind} class={worker_class} workers={workers} "
        f"threads={threads} timeout={timeout}s preload={preload_app}"
    )
    if LOGGER.handlers:
        LOGGER.info(summary)
    else:
        sys.stderr.write(summary + "\n")


# Server socket
bind = f"0.0.0.0:{os.environ.get('PORT', 5000)}"
backlog = _env_int("GUNICORN_BACKLOG", 2048)

# Worker processes
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = _configured_workers()
threads = _env_int("GUNICORN_THREADS", 4)

# The bootstrap load in wsgi.py can take a while on first start.
timeout = _env_int("GUNICORN_TIMEOUT", 120)
keepalive = _env_int("GUNICORN_KEEPALIVE", 5)

max_requests = _env_int("GUNICORN_MAX_REQUESTS", 2000)
max_requests_jitter = _env_int("GUNICORN_MAX_REQUESTS_JITTER", 100)

# Load the app (and run the bootstrap) once in the master before forking
preload_app = True

# Logging
access_log_format = '%(h)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'
errorlog = "-"
accesslog = "-"
loglevel = os.environ.get("GUNICORN_LOG_LEVEL", "info")

proc_name = "footprints"

limit_request_line = 8192
limit_request_fields = 100
limit_request_field_size = 8192

_log_runtime_configuration()
