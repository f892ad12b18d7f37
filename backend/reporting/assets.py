"""
Asset hydration: replace remote image references with inline data: URIs.

The rendered document and the print engine must never need live network access
while laying out or paginating. Every distinct reference in a report is fetched
concurrently; a failed fetch leaves the field unset and the render degrades
(text title instead of header image, no logo) instead of failing.

Logging: host + path only, never query strings.
"""
from __future__ import annotations

import asyncio
import base64
import logging
import os
from typing import Optional
from urllib.parse import urlparse

import httpx

from models import ImageComponent, Report

from .errors import AssetUnavailable

logger = logging.getLogger(__name__)

ASSET_FETCH_TIMEOUT_S = float(os.environ.get("ASSET_FETCH_TIMEOUT_S", "15"))
DEFAULT_CONTENT_TYPE = "image/png"

_ASSET_FIELDS = ("logo", "headerImage", "footerImage", "backgroundImage")


def is_inline(ref: Optional[str]) -> bool:
    return bool(ref) and ref.startswith("data:")


def _safe_url(url: str) -> str:
    try:
        parsed = urlparse(url)
    except ValueError:
        return url.split("?", 1)[0][:200]
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


def to_data_uri(payload: bytes, content_type: Optional[str]) -> str:
    ct = (content_type or "").strip() or DEFAULT_CONTENT_TYPE
    return f"data:{ct};base64,{base64.b64encode(payload).decode('ascii')}"


async def fetch_data_uri(client: httpx.AsyncClient, url: str) -> str:
    """Fetch one image and return it as a data: URI. Raises AssetUnavailable."""
    if is_inline(url):
        return url
    try:
        response = await client.get(url, follow_redirects=True)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
        raise AssetUnavailable(_safe_url(url), f"{e.__class__.__name__}: {str(e)[:200]}") from e
    if not response.is_success:
        raise AssetUnavailable(_safe_url(url), f"HTTP {response.status_code}")
    return to_data_uri(response.content, response.headers.get("content-type"))


async def _resolve(client: httpx.AsyncClient, url: str) -> Optional[str]:
    try:
        return await fetch_data_uri(client, url)
    except AssetUnavailable as e:
        logger.warning("Asset unavailable, rendering without it: %s", e)
        return None


def collect_refs(report: Report) -> list[str]:
    """Distinct remote references in document order (inline ones are skipped)."""
    refs: list[str] = []
    candidates = [getattr(report.assets, name) for name in _ASSET_FIELDS]
    candidates += [c.props.url for c in report.components if isinstance(c, ImageComponent)]
    for ref in candidates:
        if ref and not is_inline(ref) and ref not in refs:
            refs.append(ref)
    return refs


async def hydrate_report(report: Report, client: Optional[httpx.AsyncClient] = None) -> Report:
    """Return a copy of report whose image references are all inline (or unset)."""
    refs = collect_refs(report)
    if not refs:
        return report

    if client is None:
        async with httpx.AsyncClient(timeout=ASSET_FETCH_TIMEOUT_S) as own_client:
            results = await asyncio.gather(*(_resolve(own_client, u) for u in refs))
    else:
        results = await asyncio.gather(*(_resolve(client, u) for u in refs))
    resolved = dict(zip(refs, results))

    def swap(ref: Optional[str]) -> Optional[str]:
        if not ref or is_inline(ref):
            return ref
        return resolved.get(ref)

    assets = report.assets.model_copy(
        update={name: swap(getattr(report.assets, name)) for name in _ASSET_FIELDS}
    )
    components = []
    for comp in report.components:
        if isinstance(comp, ImageComponent):
            props = comp.props.model_copy(update={"url": swap(comp.props.url) or ""})
            comp = comp.model_copy(update={"props": props})
        components.append(comp)
    hydrated = sum(1 for r in results if r is not None)
    logger.info("Hydrated %d/%d image references", hydrated, len(refs))
    return report.model_copy(update={"assets": assets, "components": components})
