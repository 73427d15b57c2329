import pytest

from siteserver.service.api import ApiError, default_api
from siteserver.service.config import Settings, resolve_target
from siteserver.service.errors import status_code_for, status_message
from siteserver.service.observability import LoggingHook, NoopHook, build_hook

ENV_VARS = [
    "ENVIRONMENT", "CANONICAL_HOST", "PORT", "HTTP_ORIGIN", "PROJECT_ROOT",
    "SESSION_SECRET_KEY", "SHARE_TARGET", "STATIC_MAX_AGE", "SESSION_STORE",
    "API_TARGET", "OBSERVABILITY_TARGET", "TRUST_PROXY", "STATIC_DIR",
    "CSS_FRAMEWORK_DIR", "DOCS_DIR", "VIEWS_DIR", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PROJECT_ROOT", str(tmp_path))
    monkeypatch.setenv("SESSION_SECRET_KEY", "s3cret")
    return monkeypatch


def test_development_defaults(clean_env, tmp_path):
    settings = Settings.from_env()
    assert settings.is_prod is False
    assert settings.http_origin == "http://localhost:5000"
    assert settings.max_age == 0
    assert settings.static_dir == tmp_path.resolve() / "static"
    assert settings.session_secret.get_secret_value() == "s3cret"
    assert "s3cret" not in repr(settings)


def test_production_settings(clean_env):
    clean_env.setenv("ENVIRONMENT", "production")
    clean_env.setenv("CANONICAL_HOST", "example.com")
    clean_env.setenv("SHARE_TARGET", "mypkg.share:post")
    settings = Settings.from_env()
    assert settings.is_prod is True
    assert settings.http_origin == "https://example.com"
    assert settings.max_age == 7200


def test_missing_secret_is_fatal(clean_env):
    clean_env.delenv("SESSION_SECRET_KEY")
    with pytest.raises(ValueError, match="SESSION_SECRET_KEY"):
        Settings.from_env()


def test_production_requires_share_target(clean_env):
    clean_env.setenv("ENVIRONMENT", "production")
    with pytest.raises(ValueError, match="SHARE_TARGET"):
        Settings.from_env()


def test_resolve_target():
    assert resolve_target(None) is None
    assert resolve_target("siteserver.service.api:default_api") is default_api


def test_build_hook():
    assert isinstance(build_hook(None), NoopHook)
    assert isinstance(build_hook(LoggingHook), LoggingHook)
    hook = LoggingHook()
    assert build_hook(hook) is hook
    with pytest.raises(TypeError):
        build_hook(5)


@pytest.mark.parametrize("exc, expected", [
    (ApiError("x", code=403), 403),
    (ApiError("x"), 500),
    (FileNotFoundError(2, "missing"), 500),
    (type("E", (Exception,), {"code": "ENOENT"})(), 500),
    (type("E", (Exception,), {"code": True})(), 500),
    (ApiError("x", code=999), 500),
])
def test_status_code_for(exc, expected):
    assert status_code_for(exc) == expected


def test_status_message():
    assert status_message(404) == "404: Not Found"
    assert status_message(500) == "500: Internal Server Error"
