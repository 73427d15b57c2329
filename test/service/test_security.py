import pytest

from siteserver.service import create_app
from siteserver.service.middleware.security import HSTS_HEADER
from conftest import client_for

SECURITY_HEADERS = {
    "x-content-type-options": "nosniff",
    "x-frame-options": "DENY",
    "x-xss-protection": "1; mode=block",
}


def assert_security_headers(response):
    for name, value in SECURITY_HEADERS.items():
        assert response.headers.get(name) == value


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/500", "/does-not-exist", "/bundle.js", "/api/echo", "/api/forbidden", "/docs"])
async def test_security_headers_on_every_response(client, path):
    response = await client.get(path)
    assert_security_headers(response)
    assert "strict-transport-security" not in response.headers


@pytest.mark.asyncio
async def test_no_redirect_outside_production(make_settings, test_api):
    app = create_app(make_settings(host="example.com"), api=test_api)
    async with client_for(app, base_url="http://other.example.org") as client:
        response = await client.get("/", follow_redirects=False)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_insecure_get_redirects_to_canonical_origin(make_settings, prod_overrides, test_api):
    app = create_app(make_settings(**prod_overrides), api=test_api, share=lambda: None)
    async with client_for(app, base_url="http://example.com") as client:
        response = await client.get("/api/echo?x=1", follow_redirects=False)

    assert response.status_code == 301
    assert response.headers["location"] == "https://example.com/api/echo?x=1"
    assert "result" not in response.text
    assert_security_headers(response)
    assert response.headers["strict-transport-security"] == HSTS_HEADER


@pytest.mark.asyncio
async def test_wrong_host_redirects_to_canonical_origin(make_settings, prod_overrides, test_api):
    app = create_app(make_settings(**prod_overrides), api=test_api, share=lambda: None)
    async with client_for(app, base_url="https://www.example.com") as client:
        response = await client.get("/docs/guide/install", follow_redirects=False)

    assert response.status_code == 301
    assert response.headers["location"] == "https://example.com/docs/guide/install"


@pytest.mark.asyncio
async def test_canonical_https_request_is_served_with_hsts(prod_client):
    response = await prod_client.get("/", follow_redirects=False)
    assert response.status_code == 200
    assert response.headers["strict-transport-security"] == HSTS_HEADER
    assert_security_headers(response)


@pytest.mark.asyncio
async def test_non_get_is_never_redirected(make_settings, prod_overrides, test_api):
    app = create_app(make_settings(**prod_overrides), api=test_api, share=lambda: None)
    async with client_for(app, base_url="http://example.com") as client:
        response = await client.post("/api/echo?x=1", follow_redirects=False)

    assert response.status_code == 200
    assert response.json() == {"result": {"x": "1"}}
    assert response.headers["strict-transport-security"] == HSTS_HEADER


@pytest.mark.asyncio
async def test_forwarded_headers_from_proxy_are_trusted(make_settings, prod_overrides, test_api):
    app = create_app(make_settings(**prod_overrides), api=test_api, share=lambda: None)
    async with client_for(app, base_url="http://127.0.0.1:5000") as client:
        response = await client.get(
            "/",
            headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "example.com"},
            follow_redirects=False,
        )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_forwarded_headers_ignored_without_trust_proxy(make_settings, prod_overrides, test_api):
    settings = make_settings(trust_proxy=False, **prod_overrides)
    app = create_app(settings, api=test_api, share=lambda: None)
    async with client_for(app, base_url="http://example.com") as client:
        response = await client.get("/", headers={"X-Forwarded-Proto": "https"}, follow_redirects=False)
    assert response.status_code == 301
