from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import requests
from bs4 import BeautifulSoup

from ..config.loader import BulletinSourceConfig

"""Weekly Oil Bulletin page fetcher.

Finds the "Prices with taxes" workbook link on the bulletin page and
downloads it. An HTTP session may be passed in by the caller (the run shares
one, tests hand in a mock); without one ``requests.get`` is used.
"""

__all__ = [
    "FetchError",
    "fetch_html",
    "find_latest_workbook_url",
    "get_latest_workbook_url",
    "download_file",
]

logger = logging.getLogger(__name__)

WORKBOOK_LINKS = 'a[href*=".xlsx"], a[href*="/document/download/"]'
XLSX_LINKS = 'a[href*=".xlsx"]'
CHUNK_SIZE = 64 * 1024


class FetchError(Exception):
    """Raised when the bulletin page or workbook cannot be retrieved."""


def _http(session: requests.Session | None) -> Any:
    return session if session is not None else requests


def fetch_html(url: str, timeout: float = 30.0, session: requests.Session | None = None) -> str:
    try:
        response = _http(session).get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"failed to fetch {url}: {e}") from e
    return response.text


def absolutize(href: str, base_url: str) -> str:
    """Resolve a page link against the bulletin site root."""
    base = base_url.rstrip("/")
    if href.startswith("/"):
        return f"{base}{href}"
    if href.startswith("http"):
        return href
    return f"{base}/{href}"


def find_latest_workbook_url(html: str, base_url: str, link_text: str = "prices with taxes") -> str:
    """Pick the workbook link out of the bulletin page HTML.

    Preference: first .xlsx / document-download link whose text or
    ``data-untranslated-label`` mentions ``link_text``; otherwise the first
    .xlsx link of any kind.

    Raises:
        FetchError: no candidate link on the page
    """
    soup = BeautifulSoup(html, "html.parser")
    needle = link_text.lower()

    for a in soup.select(WORKBOOK_LINKS):
        href = a.get("href")
        if not href:
            continue
        text = a.get_text().lower()
        label = (a.get("data-untranslated-label") or "").lower()
        if needle in text or needle in label:
            return absolutize(href, base_url)

    for a in soup.select(XLSX_LINKS):
        href = a.get("href")
        if href:
            logger.warning(f"no '{link_text}' link found, falling back to first .xlsx link")
            return absolutize(href, base_url)

    raise FetchError("could not find a workbook download link on the bulletin page")


def get_latest_workbook_url(source: BulletinSourceConfig, timeout: float = 30.0,
                            session: requests.Session | None = None) -> str:
    html = fetch_html(source.page_url, timeout=timeout, session=session)
    return find_latest_workbook_url(html, source.base_url, source.link_text)


def download_file(url: str, dest: Path, timeout: float = 30.0,
                  session: requests.Session | None = None) -> Path:
    """Stream ``url`` into ``dest``; a partial file is removed on failure."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    try:
        with _http(session).get(url, timeout=timeout, stream=True) as response:
            response.raise_for_status()
            with dest.open("wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
    except (requests.RequestException, OSError) as e:
        dest.unlink(missing_ok=True)
        raise FetchError(f"failed to download {url}: {e}") from e
    logger.debug(f"downloaded {url} -> {dest} ({dest.stat().st_size} bytes)")
    return dest
