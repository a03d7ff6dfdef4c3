from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

_DEFAULT_ENV = "development"
_ENV_KEY = "FLASK_ENV"
_VALID_ENVS = {"development", "testing", "staging", "production"}
_FORBIDDEN_ENV_KEYS = ("APP_ENV", "FOOTPRINTS_ENV", "ENVIRONMENT")
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_OPEN_DATA_URL = "https://data.cityofnewyork.us/resource/k8ez-gyqp.json"
FIELD_TYPINGS = ("string", "numeric")
QUERY_STRATEGIES = ("store", "memory")


@dataclass(frozen=True)
class EnvironmentInfo:
    name: str
    source: str
    raw_value: str


class EnvReader:
    def __init__(self, data: Mapping[str, str] | None = None):
        self._data = dict(data if data is not None else os.environ)
        self.warnings: list[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def _value(self, key: str) -> str | None:
        value = self._data.get(key)
        if value is None:
            return None
        stripped = value.strip()
        return stripped if stripped else None

    def str(self, key: str, default: str | None = None) -> str | None:
        value = self._value(key)
        return value if value is not None else default

    def int(self, key: str, default: int = 0) -> int:
        value = self._value(key)
        if value is None:
            return default
        try:
            return int(value)
        except ValueError:
            self.warn(f"{key} expected integer but received {value!r}; falling back to {default}.")
            return default

    def float(self, key: str, default: float = 0.0) -> float:
        value = self._value(key)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            self.warn(f"{key} expected float but received {value!r}; falling back to {default}.")
            return default

    def bool(self, key: str, default: bool = False) -> bool:
        value = self._value(key)
        if value is None:
            return default
        lowered = value.lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        self.warn(f"{key} expected boolean but received {value!r}; falling back to {default}.")
        return default

    def choice(self, key: str, choices: tuple[str, ...], default: str) -> str:
        value = self._value(key)
        if value is None:
            return default
        normalized = value.lower()
        if normalized not in choices:
            raise RuntimeError(f"Invalid {key}={value!r}. Expected one of {list(choices)}.")
        return normalized

    def raw(self, key: str) -> str | None:
        return self._data.get(key)


def _normalized_env(value: str | None, *, default: str = _DEFAULT_ENV) -> str:
    if not value:
        return default
    return value.strip().lower() or default


def _normalize_db_url(url: str | None) -> str | None:
    if not url:
        return None
    return 'postgresql://' + url[len('postgres://'):] if url.startswith('postgres://') else url


def _resolve_ratelimit_uri(reader: EnvReader) -> str:
    candidate = reader.str('RATELIMIT_STORAGE_URI') or reader.str('RATELIMIT_STORAGE_URL')
    if candidate:
        return candidate
    redis_url = reader.str('REDIS_URL')
    if redis_url:
        return redis_url
    return 'memory://'


def _resolve_environment(reader: EnvReader) -> EnvironmentInfo:
    for key in _FORBIDDEN_ENV_KEYS:
        if reader.raw(key) not in (None, ""):
            raise RuntimeError(
                f"{key} is not supported. Set {_ENV_KEY} to one of {sorted(_VALID_ENVS)} instead."
            )

    raw_value = reader.str(_ENV_KEY, _DEFAULT_ENV) or _DEFAULT_ENV
    normalized = _normalized_env(raw_value)
    if normalized not in _VALID_ENVS:
        raise RuntimeError(
            f"Invalid {_ENV_KEY}={raw_value!r}. Expected one of {sorted(_VALID_ENVS)}."
        )
    return EnvironmentInfo(name=normalized, source=_ENV_KEY, raw_value=raw_value)


env = EnvReader()
ENV_INFO = _resolve_environment(env)


class BaseConfig:
    FLASK_ENV = ENV_INFO.name
    SECRET_KEY = env.str('FLASK_SECRET_KEY', 'devkey-please-change-in-production')

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    OPEN_DATA_URL = env.str('OPEN_DATA_URL', DEFAULT_OPEN_DATA_URL)
    OPEN_DATA_APP_TOKEN = env.str('OPEN_DATA_APP_TOKEN')
    OPEN_DATA_TIMEOUT_SECONDS = env.float('OPEN_DATA_TIMEOUT_SECONDS', 30.0)
    OPEN_DATA_PAGE_SIZE = env.int('OPEN_DATA_PAGE_SIZE', 1000)
    OPEN_DATA_MAX_RECORDS = env.int('OPEN_DATA_MAX_RECORDS', 1000)
    OPEN_DATA_USER_AGENT = env.str('OPEN_DATA_USER_AGENT', 'FootprintsAPI/1.0')

    BUILDING_FIELD_TYPING = env.choice('BUILDING_FIELD_TYPING', FIELD_TYPINGS, 'string')
    BUILDING_QUERY_STRATEGY = env.choice('BUILDING_QUERY_STRATEGY', QUERY_STRATEGIES, 'store')
    BOOTSTRAP_ON_STARTUP = env.bool('BOOTSTRAP_ON_STARTUP', True)

    RATELIMIT_STORAGE_URI = _resolve_ratelimit_uri(env)
    RATELIMIT_ENABLED = env.bool('RATELIMIT_ENABLED', True)
    RATELIMIT_DEFAULT = env.str('RATELIMIT_DEFAULT', '5000 per hour;1000 per minute')

    REDIS_URL = env.str('REDIS_URL')
    CACHE_TYPE = env.str('CACHE_TYPE', 'SimpleCache')
    CACHE_DEFAULT_TIMEOUT = env.int('CACHE_DEFAULT_TIMEOUT', 300)

    LOG_LEVEL = env.str('LOG_LEVEL', 'WARNING') or 'WARNING'
    LOG_REDACT_SECRETS = env.bool('LOG_REDACT_SECRETS', True)


class DevelopmentConfig(BaseConfig):
    ENV = 'development'
    DEBUG = True
    LOG_LEVEL = env.str('LOG_LEVEL', 'INFO') or 'INFO'

    _db_url = _normalize_db_url(env.str('DATABASE_URL'))
    if _db_url:
        SQLALCHEMY_DATABASE_URI = _db_url
    else:
        instance_path = os.path.join(os.path.abspath(os.path.dirname(__file__)), '..', 'instance')
        os.makedirs(instance_path, exist_ok=True)
        SQLALCHEMY_DATABASE_URI = 'sqlite:///' + os.path.join(instance_path, 'footprints.db')

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 3600,
    }


class TestingConfig(BaseConfig):
    ENV = 'testing'
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
    }
    BOOTSTRAP_ON_STARTUP = False
    RATELIMIT_STORAGE_URI = 'memory://'
    CACHE_TYPE = 'SimpleCache'


class StagingConfig(BaseConfig):
    ENV = 'staging'
    DEBUG = False
    TESTING = False
    SQLALCHEMY_DATABASE_URI = _normalize_db_url(env.str('DATABASE_URL'))
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'max_overflow': 20,
        'pool_pre_ping': True,
        'pool_recycle': 1800,
    }


class ProductionConfig(BaseConfig):
    ENV = 'production'
    DEBUG = False
    TESTING = False
    SQLALCHEMY_DATABASE_URI = _normalize_db_url(env.str('DATABASE_URL'))
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': env.int('SQLALCHEMY_POOL_SIZE', 20),
        'max_overflow': env.int('SQLALCHEMY_MAX_OVERFLOW', 10),
        'pool_pre_ping': True,
        'pool_recycle': 1800,
        'pool_timeout': env.int('SQLALCHEMY_POOL_TIMEOUT', 30),
    }
    LOG_LEVEL = env.str('LOG_LEVEL', 'INFO') or 'INFO'


config_map = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'staging': StagingConfig,
    'production': ProductionConfig,
}


Config = config_map[ENV_INFO.name]
ENV_DIAGNOSTICS = {
    'active': ENV_INFO.name,
    'source': ENV_INFO.source,
    'variables': {ENV_INFO.source: ENV_INFO.raw_value},
    'warnings': tuple(env.warnings),
}
