"""Settings — tests for environment-driven configuration."""

from hypermodel.config import Settings


def test_postgres_url_is_converted_to_asyncpg():
    settings = Settings(database_url="postgresql://u:p@host:5432/db")
    assert settings.database_url == "postgresql+asyncpg://u:p@host:5432/db"


def test_sqlite_url_is_left_alone():
    settings = Settings(database_url="sqlite+aiosqlite:///:memory:")
    assert settings.database_url == "sqlite+aiosqlite:///:memory:"


def test_production_flag():
    assert Settings(environment="production").is_production
    assert not Settings(environment="development").is_production


def test_api_prefix_from_environment(monkeypatch):
    monkeypatch.setenv("API_PREFIX", "/v2")
    assert Settings().api_prefix == "/v2"


def test_api_prefix_is_normalized():
    assert Settings(api_prefix="api/rest/").api_prefix == "/api/rest"
    assert Settings(api_prefix="/").api_prefix == ""


def test_error_stack_hidden_only_in_production():
    assert Settings(environment="staging").expose_error_stack
    assert not Settings(environment="Production").expose_error_stack
