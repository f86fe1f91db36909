"""
Remote file download helpers (httpx).

Used by the catalog sync to pull product images that are referenced by
absolute URL into local storage.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import urlsplit

import httpx


# Download failures are explicit and separable from storage errors.
class DownloadError(RuntimeError):
    pass


def is_remote_url(value: str | None) -> bool:
    raw = (value or "").strip().lower()
    return raw.startswith("http://") or raw.startswith("https://")


def url_extension(url: str) -> str:
    """
    File extension of the URL path ("" when there is none).

    Query strings and fragments are ignored.
    """
    return Path(urlsplit(url).path).suffix.lower()


async def fetch_bytes(
    client: httpx.AsyncClient,
    url: str,
    *,
    max_bytes: int,
) -> bytes:
    """
    GET `url` and return the body, enforcing a maximum size.

    The client's timeout bounds the request; a timeout surfaces as
    DownloadError like any other transport failure.
    """
    if not is_remote_url(url):
        raise DownloadError(f"Not an http(s) URL: {url!r}")

    try:
        async with client.stream("GET", url, follow_redirects=True) as resp:
            if resp.status_code != 200:
                raise DownloadError(f"Download failed: {resp.status_code} {url}")

            buf = bytearray()
            async for chunk in resp.aiter_bytes():
                buf.extend(chunk)
                if len(buf) > max_bytes:
                    raise DownloadError(f"Download exceeds {max_bytes} bytes: {url}")
    except httpx.HTTPError as exc:
        raise DownloadError(f"Download failed: {exc.__class__.__name__} {url}") from exc

    if not buf:
        raise DownloadError(f"Download returned an empty body: {url}")
    return bytes(buf)
