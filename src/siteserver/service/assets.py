import base64
import hashlib
import logging
import re
from dataclasses import dataclass

from .config import Settings

logger = logging.getLogger('siteserver.service.assets')

HASH_LENGTH = 20

_UNSAFE_CHARS = re.compile(r"[+/=]")


def create_hash(data: bytes) -> str:
    """
    Create a cache-busting hash for static assets like ``bundle.js`` and ``style.css``.

    The sha256 digest is base64 encoded, cut to 20 characters and stripped of
    characters that are not URL safe, so the result is at most 20 characters.
    """
    digest = hashlib.sha256(data).digest()
    encoded = base64.b64encode(digest).decode("ascii")
    return _UNSAFE_CHARS.sub("", encoded[:HASH_LENGTH])


@dataclass(frozen=True)
class AssetHashes:
    """Query-string suffixes appended to asset URLs in templates."""
    bundle: str = ""
    style: str = ""

    def as_dict(self) -> dict[str, str]:
        return {"bundle": self.bundle, "style": self.style}


def compute_asset_hashes(settings: Settings) -> AssetHashes:
    """
    Hash the bundle and stylesheet once at startup.

    Outside production nothing is read and both suffixes are empty. A missing
    asset in production raises and aborts startup.
    """
    if not settings.is_prod:
        return AssetHashes()

    bundle = (settings.static_dir / "bundle.js").read_bytes()
    style = (settings.static_dir / "style.css").read_bytes()

    hashes = AssetHashes(
        bundle="?h=" + create_hash(bundle),
        style="?h=" + create_hash(style),
    )
    logger.info(f"Asset hashes computed: bundle{hashes.bundle} style{hashes.style}")
    return hashes
