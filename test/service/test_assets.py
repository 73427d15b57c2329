import pytest

from siteserver.service import create_app
from siteserver.service.assets import AssetHashes, compute_asset_hashes, create_hash


def test_create_hash_known_values():
    assert create_hash(b"a") == "ypeBEsobvcr6wjGzmiPc"
    assert create_hash(b"console.log(1)\n") == "OHml2TCuGZmyeKOkmPfe"


def test_create_hash_strips_unsafe_characters():
    # base64 prefixes "LPJNul+wow4m6Dsqxbni" and "ofzkNjhU/4iM/0uOeHXW"
    assert create_hash(b"hello") == "LPJNulwow4m6Dsqxbni"
    assert create_hash(b"y") == "ofzkNjhU4iM0uOeHXW"


@pytest.mark.parametrize("data", [b"", b"a", b"hello", b"y", b"x" * 4096, bytes(range(256))])
def test_create_hash_is_deterministic_and_url_safe(data):
    token = create_hash(data)
    assert token == create_hash(bytes(data))
    assert len(token) <= 20
    assert not set(token) & set("+/=")


def test_create_hash_changes_with_content():
    assert create_hash(b"body{}") != create_hash(b"body{ }")


def test_hashes_empty_outside_production(make_settings, tmp_path):
    settings = make_settings(static_dir=tmp_path / "nowhere")
    assert compute_asset_hashes(settings) == AssetHashes(bundle="", style="")


def test_hashes_in_production(make_settings, prod_overrides):
    hashes = compute_asset_hashes(make_settings(**prod_overrides))
    assert hashes.bundle == "?h=OHml2TCuGZmyeKOkmPfe"
    assert hashes.style == "?h=" + create_hash(b"body{}")
    assert hashes.as_dict() == {"bundle": hashes.bundle, "style": hashes.style}


def test_missing_asset_aborts_production_startup(make_settings, prod_overrides, site_root):
    (site_root / "static" / "style.css").unlink()
    with pytest.raises(FileNotFoundError):
        create_app(make_settings(**prod_overrides), share=lambda: None)
