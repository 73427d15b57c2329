import logging

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from siteserver.service import Settings, create_app
from siteserver.service.api import ApiError, ApiRegistry

BUNDLE_JS = b"console.log(1)\n"
STYLE_CSS = b"body{}"


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """Configure logging for tests."""
    logging.basicConfig(level=logging.INFO)


@pytest.fixture
def site_root(tmp_path):
    """A project root with static assets, a CSS framework directory and docs."""
    static = tmp_path / "static"
    static.mkdir()
    (static / "bundle.js").write_bytes(BUNDLE_JS)
    (static / "style.css").write_bytes(STYLE_CSS)

    css = tmp_path / "node_modules" / "tachyons" / "css"
    css.mkdir(parents=True)
    (css / "tachyons.min.css").write_text(".f1{font-size:3rem}")

    docs = tmp_path / "docs"
    (docs / "guide").mkdir(parents=True)
    (docs / "index.html").write_text("<h1>Docs</h1>")
    (docs / "guide" / "install.html").write_text("<p>Install it</p>")
    return tmp_path


@pytest.fixture
def make_settings(site_root):
    def _make(**overrides) -> Settings:
        values = dict(
            root=site_root,
            static_dir=site_root / "static",
            css_framework_dir=site_root / "node_modules" / "tachyons" / "css",
            docs_dir=site_root / "docs",
            session_secret="test-secret",
        )
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def prod_overrides():
    return dict(
        is_prod=True,
        host="example.com",
        http_origin="https://example.com",
        max_age=7200,
    )


@pytest.fixture
def test_api():
    api = ApiRegistry()

    @api.register()
    def echo(params):
        return params

    @api.register()
    def forbidden(params):
        raise ApiError("nope", code=403)

    @api.register()
    def broken(params):
        raise ApiError("nope")

    @api.register()
    def crash(params):
        raise KeyError("missing")

    @api.register("async-echo")
    async def async_echo(params):
        return {"async": True, **params}

    return api


def client_for(app, base_url: str = "http://localhost:5000") -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url=base_url)


@pytest_asyncio.fixture
async def client(make_settings, test_api):
    app = create_app(make_settings(), api=test_api)
    async with client_for(app) as client:
        yield client


@pytest_asyncio.fixture
async def prod_client(make_settings, prod_overrides, test_api):
    app = create_app(make_settings(**prod_overrides), api=test_api, share=lambda: None)
    async with client_for(app, base_url="https://example.com") as client:
        yield client
