"""Tests for Settings parsing."""

from pydantic import ValidationError
import pytest

from app.core.config import Settings, settings


def test_test_database_is_used_under_pytest():
    assert settings.get_database_url() == "sqlite://"


def test_late_arrival_time_is_normalized():
    assert Settings(late_arrival_time="8:5").late_arrival_time == "08:05"


@pytest.mark.parametrize("value", ["0900", "25:00", "09:60", "nine"])
def test_late_arrival_time_rejects_bad_values(value):
    with pytest.raises(ValidationError):
        Settings(late_arrival_time=value)


def test_maintenance_secret_from_env(monkeypatch):
    monkeypatch.setenv("MAINTENANCE_SECRET", "s3cret")

    configured = Settings()

    assert configured.maintenance_secret is not None
    assert configured.maintenance_secret.get_secret_value() == "s3cret"


def test_is_production():
    assert Settings(ENVIRONMENT="Production").is_production is True
    assert Settings(ENVIRONMENT="test").is_production is False


def test_default_capacity_pools():
    assert Settings().default_class_capacity == {
        "potters_wheel": 8,
        "molding": 22,
        "introductory_class": 8,
    }
