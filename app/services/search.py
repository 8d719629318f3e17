from typing import Any, Dict, List

from app.errors import ClientInputError
from app.logging_setup import logger
from app.services.enrichment import fetch_enriched
from app.services.query_parser import parse_query
from app.services.resolvers import resolve_all, combine


async def run_search(ds, q: str) -> List[Dict[str, Any]]:
    """
    Runs a field-scoped search such as `artist:"hyji" tag:"dog%cat"`.

    Each key is resolved to a candidate id set, the sets are intersected and
    the surviving items are returned with their tags and artists attached.
    """
    if not q:
        raise ClientInputError("Missing search query")

    filters = parse_query(q)
    active = {key.value: values for key, values in filters.items() if values}
    logger.info("Search parsed", extra={"q": q, "filters": active})

    candidates = await resolve_all(ds, filters)
    item_ids = combine(candidates)
    if not item_ids:
        return []
    return await fetch_enriched(ds, item_ids)
