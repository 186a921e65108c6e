"""Unit tests for application settings configuration."""

import logging
from pathlib import Path

import pytest

from agency_admin.config import Settings
from agency_admin.infrastructure.gateway import GatewayFactory, RestDataGateway, SQLAlchemyDataGateway
from agency_admin.infrastructure.logging.log_config import CHANNELS, setup_logging


def test_settings_uses_backend_env_file_independent_of_cwd():
    """Settings should always include backend/.env as an env source."""
    env_files = Settings.model_config.get("env_file")
    assert env_files is not None

    normalized = {str(Path(item)) for item in env_files}
    expected_backend_env = str(Path(__file__).resolve().parents[2] / ".env")

    assert expected_backend_env in normalized
    assert str(Path(".env")) in normalized


def test_settings_read_gateway_options_from_environment(monkeypatch):
    monkeypatch.setenv("GATEWAY_BACKEND", "sql")
    monkeypatch.setenv("BULK_CONCURRENCY", "4")
    monkeypatch.setenv("DEMO_ANALYTICS", "true")

    settings = Settings(_env_file=None)

    assert settings.gateway_backend == "sql"
    assert settings.bulk_concurrency == 4
    assert settings.demo_analytics is True


def test_gateway_factory_builds_backend_specific_gateways():
    rest = GatewayFactory(Settings(_env_file=None, gateway_backend="rest"))
    sql = GatewayFactory(
        Settings(_env_file=None, gateway_backend="sql"), session_factory=object()
    )

    assert isinstance(rest.for_token("jwt"), RestDataGateway)
    assert isinstance(sql.for_token("jwt"), SQLAlchemyDataGateway)


def test_gateway_factory_rejects_unknown_backend():
    with pytest.raises(ValueError):
        GatewayFactory(Settings(_env_file=None, gateway_backend="graphql"))


@pytest.fixture
def restore_logger_levels():
    names = [name for group in CHANNELS.values() for name in group]
    saved = {name: logging.getLogger(name).level for name in names}
    root_level = logging.getLogger().level
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)
    logging.getLogger().setLevel(root_level)


def test_setup_logging_applies_channel_levels(restore_logger_levels):
    settings = Settings(
        _env_file=None,
        log_level="WARNING",
        log_level_stores="DEBUG",
        log_level_auth="ERROR",
        log_level_gateway="bogus",
    )

    setup_logging(settings)

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("agency_admin.stores.profiles").getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger("agency_admin.application.services.entity_store").getEffectiveLevel() == logging.DEBUG
    assert logging.getLogger("agency_admin.application.services.auth_service").level == logging.ERROR
    assert logging.getLogger("agency_admin.infrastructure.gateway.rest_gateway").getEffectiveLevel() == logging.INFO
