"""
Product image URL resolution.

Orders store images either as absolute URLs or as paths inside the
public product-images bucket. Both are turned into something a renderer
or page can load; anything unusable becomes an empty string.
"""

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote, urlparse

from . import invoice_config as cfg


def public_image_url(
    path: Any,
    base_url: Optional[str] = None,
    bucket: Optional[str] = None,
) -> str:
    """Return a loadable URL for a stored image reference ("" if none)."""
    if isinstance(path, (list, tuple)):
        for candidate in path:
            if isinstance(candidate, str) and candidate.strip():
                return public_image_url(candidate, base_url, bucket)
        return ""

    if not isinstance(path, str):
        return ""
    text = path.strip()
    if not text:
        return ""

    if text.startswith(("http://", "https://")):
        parsed = urlparse(text)
        return text if parsed.netloc else ""

    base_url = (cfg.IMAGE_PUBLIC_BASE_URL if base_url is None else base_url).rstrip("/")
    if not base_url:
        return ""
    bucket = cfg.IMAGE_BUCKET if bucket is None else bucket
    clean_path = text.lstrip("/")
    return f"{base_url}/storage/v1/object/public/{bucket}/{quote(clean_path)}"
