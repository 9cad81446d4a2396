# app/services/pictogram_engine.py

import asyncio
from typing import Iterable, List, Optional

from app.core.config import settings
from app.core.logger import logger
from app.models.pictogram import Pictogram, PictogramSearchResult
from app.services.arasaac import search_pictograms
from app.utils.errors import SearchUnavailable

MAX_QUERY_TOKENS = 3
MIN_TOKEN_LENGTH = 3
NO_RESULTS_MESSAGE = "No pictograms found"


def plan_queries(raw_text: str) -> List[str]:
    """
    Derive the search queries for a piece of text: the whole phrase first,
    then up to three tokens longer than two characters, in their original order.
    """
    prompt = raw_text.strip()
    if not prompt:
        return []

    queries = [prompt]
    tokens = [t for t in prompt.split() if len(t) >= MIN_TOKEN_LENGTH]
    for token in tokens[:MAX_QUERY_TOKENS]:
        if token not in queries:
            queries.append(token)
    return queries


def dedupe_pictograms(pictograms: Iterable[Pictogram], max_results: int) -> List[Pictogram]:
    seen = set()
    result = []
    for pictogram in pictograms:
        if len(result) >= max_results:
            break
        if pictogram.id in seen:
            continue
        seen.add(pictogram.id)
        result.append(pictogram)
    return result


async def _search_or_empty(language: str, query: str) -> List[Pictogram]:
    try:
        return await asyncio.wait_for(
            search_pictograms(language, query),
            timeout=settings.ARASAAC_SEARCH_DEADLINE_SECONDS,
        )
    except SearchUnavailable as e:
        logger.warning(f"Pictogram search unavailable: {e}")
    except asyncio.TimeoutError:
        logger.warning(f"Pictogram search timed out for query {query!r}")
    return []


async def aggregate_pictograms(
    language: str,
    queries: List[str],
    max_results: Optional[int] = None,
    concurrent: Optional[bool] = None,
) -> PictogramSearchResult:
    if max_results is None:
        max_results = settings.MAX_PICTOGRAMS
    if concurrent is None:
        concurrent = settings.PICTOGRAM_CONCURRENT_SEARCH

    if concurrent:
        # gather keeps the input order, so merging stays in planner order
        per_query = await asyncio.gather(*(_search_or_empty(language, q) for q in queries))
    else:
        per_query = [await _search_or_empty(language, q) for q in queries]

    aggregated = []
    used_queries = []
    for query, results in zip(queries, per_query):
        if results:
            aggregated.extend(results)
            used_queries.append(query)

    if not aggregated:
        return PictogramSearchResult(
            pictograms=[],
            used_queries=list(queries),
            message=NO_RESULTS_MESSAGE,
        )

    return PictogramSearchResult(
        pictograms=dedupe_pictograms(aggregated, max_results),
        used_queries=used_queries,
    )


async def generate_pictograms(text: str, language: str) -> PictogramSearchResult:
    queries = plan_queries(text)
    logger.info(f"Generating pictograms for {text.strip()!r} ({language}) with {len(queries)} queries")
    return await aggregate_pictograms(language, queries)
