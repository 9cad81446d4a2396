# app/services/arasaac.py

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import List
from urllib.parse import quote

import requests

from app.core.config import settings
from app.core.logger import logger
from app.models.pictogram import Pictogram
from app.utils.errors import MalformedUpstreamRecord, SearchUnavailable

executor = ThreadPoolExecutor()


def pictogram_image_url(pictogram_id: int) -> str:
    size = settings.ARASAAC_IMAGE_SIZE
    return f"{settings.ARASAAC_STATIC_URL}/{pictogram_id}/{pictogram_id}_{size}.png"


def _extract_keywords(raw) -> List[str]:
    if not isinstance(raw, list):
        return []
    keywords = []
    for entry in raw:
        if isinstance(entry, dict):
            keyword = entry.get("keyword")
        else:
            keyword = entry
        if isinstance(keyword, str):
            keywords.append(keyword)
    return keywords


def decode_pictogram(record, query: str, language: str) -> Pictogram:
    """Build a Pictogram from one upstream record.

    ARASAAC returns the identifier as ``_id`` but some endpoints use ``id``;
    either is accepted. Raises MalformedUpstreamRecord when neither holds an integer.
    """
    if not isinstance(record, dict):
        raise MalformedUpstreamRecord(f"Expected an object, got {type(record).__name__}")

    raw_id = record.get("_id")
    if raw_id is None:
        raw_id = record.get("id")
    if raw_id is None or isinstance(raw_id, bool):
        raise MalformedUpstreamRecord("Record has no _id or id field")
    try:
        pictogram_id = int(raw_id)
    except (TypeError, ValueError):
        raise MalformedUpstreamRecord(f"Record id {raw_id!r} is not an integer")

    return Pictogram(
        id=pictogram_id,
        search_text=query,
        language=language,
        keywords=_extract_keywords(record.get("keywords")),
        image_url=pictogram_image_url(pictogram_id),
    )


def search_pictograms_sync(language: str, query: str) -> List[Pictogram]:
    trimmed = query.strip()
    if not trimmed:
        return []

    url = f"{settings.ARASAAC_API_URL}/pictograms/{quote(language, safe='')}/search/{quote(trimmed, safe='')}"

    try:
        response = requests.get(url, timeout=settings.ARASAAC_TIMEOUT_SECONDS)
    except requests.RequestException as e:
        raise SearchUnavailable(f"ARASAAC request failed for {trimmed!r}: {e}") from e

    if not response.ok:
        logger.warning(f"ARASAAC error {response.status_code} for query {trimmed!r}")
        return []

    try:
        data = response.json()
    except ValueError as e:
        raise SearchUnavailable(f"ARASAAC returned invalid JSON for {trimmed!r}") from e

    if not isinstance(data, list):
        raise SearchUnavailable(f"ARASAAC returned {type(data).__name__} instead of a list for {trimmed!r}")

    pictograms = []
    for record in data:
        try:
            pictograms.append(decode_pictogram(record, trimmed, language))
        except MalformedUpstreamRecord as e:
            logger.warning(f"Skipping ARASAAC record for {trimmed!r}: {e}")
    return pictograms


async def search_pictograms(language: str, query: str) -> List[Pictogram]:
    """Asynchronously search ARASAAC for pictograms matching the query."""
    if not query.strip():
        return []
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(executor, search_pictograms_sync, language, query)
