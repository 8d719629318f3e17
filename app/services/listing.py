import locale
from typing import Any, Dict, List, Optional

from app.config import ITEM_TABLE, LISTING_LIMIT, ARTIST_SORT_KEY, SORT_LOCALE
from app.logging_setup import logger
from app.models import SortOrder
from app.services.enrichment import enrich_items


def configure_sort_locale(name: str = SORT_LOCALE) -> None:
    """Selects the collation used for the in-memory Artist sort."""
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as e:
        logger.warning(f"Collation locale '{name}' unavailable, keeping current one: {e}")


def parse_languages(language: Optional[str]) -> List[str]:
    if not language:
        return []
    return [code.strip().lower() for code in language.split(",")]


def first_artist(item: Dict[str, Any]) -> Optional[str]:
    artists = item.get("artist")
    if isinstance(artists, list) and artists and artists[0]:
        return artists[0]
    return None


def sort_by_artist(items: List[Dict[str, Any]], order: SortOrder) -> List[Dict[str, Any]]:
    """
    Sorts by first artist name using locale collation. Items without an
    artist always go last, whatever the direction.
    """
    with_artist = [item for item in items if first_artist(item)]
    without_artist = [item for item in items if not first_artist(item)]
    with_artist.sort(key=lambda item: locale.strxfrm(first_artist(item)), reverse=not order.ascending)
    return with_artist + without_artist


async def run_listing(
    ds,
    sort_by: Optional[str] = None,
    order: SortOrder = SortOrder.ASC,
    language: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Lists up to LISTING_LIMIT items, optionally filtered by language codes.

    Ordinary columns are sorted by the store. `Artist` is derived from the
    join tables, so it is sorted here after enrichment.
    """
    languages = parse_languages(language)
    store_sort = sort_by if sort_by and sort_by != ARTIST_SORT_KEY else None

    items = await ds.select(
        ITEM_TABLE,
        in_={"language": languages} if languages else None,
        order_by=store_sort,
        ascending=order.ascending,
        limit=LISTING_LIMIT,
    )
    enriched = await enrich_items(ds, items)

    if sort_by == ARTIST_SORT_KEY:
        enriched = sort_by_artist(enriched, order)
    return enriched
