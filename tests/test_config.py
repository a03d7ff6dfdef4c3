import logging

import pytest

from footprints import create_app
from footprints.config import ENV_DIAGNOSTICS, ENV_INFO, Config, EnvReader, config_map
from footprints.logging_config import SecretRedactionFilter


def test_env_reader_falls_back_with_warning():
    reader = EnvReader({"OPEN_DATA_PAGE_SIZE": "lots", "BOOTSTRAP_ON_STARTUP": "maybe"})

    assert reader.int("OPEN_DATA_PAGE_SIZE", 1000) == 1000
    assert reader.bool("BOOTSTRAP_ON_STARTUP", True) is True
    assert len(reader.warnings) == 2


def test_env_reader_parses_values():
    reader = EnvReader({"TIMEOUT": " 12.5 ", "FLAG": "off", "EMPTY": "  "})

    assert reader.float("TIMEOUT") == 12.5
    assert reader.bool("FLAG", True) is False
    assert reader.str("EMPTY", "default") == "default"
    assert reader.warnings == []


def test_env_reader_choice_rejects_unknown_value():
    reader = EnvReader({"BUILDING_FIELD_TYPING": "Numeric", "BUILDING_QUERY_STRATEGY": "cache"})

    assert reader.choice("BUILDING_FIELD_TYPING", ("string", "numeric"), "string") == "numeric"
    with pytest.raises(RuntimeError):
        reader.choice("BUILDING_QUERY_STRATEGY", ("store", "memory"), "store")


def test_create_app_rejects_unknown_query_strategy():
    with pytest.raises(ValueError):
        create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
            "BUILDING_QUERY_STRATEGY": "graph",
        })


def test_redaction_filter_masks_secrets():
    record = logging.LogRecord(
        "footprints", logging.INFO, __file__, 1,
        "GET %s with X-App-Token: %s via postgresql://svc:hunter2@db/footprints",
        ("https://data.example.test", "abc123"), None,
    )

    SecretRedactionFilter().filter(record)
    message = record.getMessage()

    assert "abc123" not in message
    assert "hunter2" not in message
    assert "[REDACTED]" in message


def test_startup_bootstrap_respects_flag(app_factory, fake_source):
    from footprints import run_startup_bootstrap

    app = app_factory(BOOTSTRAP_ON_STARTUP=False)
    run_startup_bootstrap(app)
    assert fake_source.calls == []

    app = app_factory(BOOTSTRAP_ON_STARTUP=True)
    run_startup_bootstrap(app)
    assert len(fake_source.calls) == 1


def test_active_config_follows_flask_env():
    assert Config is config_map[ENV_INFO.name]
    assert ENV_DIAGNOSTICS["active"] == ENV_INFO.name
