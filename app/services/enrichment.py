import asyncio
from collections import defaultdict
from typing import Any, Dict, List

from app.config import ITEM_TABLE, ITEM_FOREIGN_KEY
from app.models import FilterKey, ENRICHED_KEYS


async def fetch_names_by_item(ds, key: FilterKey, item_ids: List[Any]) -> Dict[Any, List[str]]:
    """
    Maps each item id to the names of the `key` references linked to it,
    using one batched lookup on the join table and one on the reference table.
    Links whose reference has no name are skipped.
    """
    join_rows = await ds.select(
        key.join_table, [ITEM_FOREIGN_KEY, key.foreign_key], in_={ITEM_FOREIGN_KEY: item_ids}
    )
    ref_ids = list({row.get(key.foreign_key) for row in join_rows} - {None})
    names: Dict[Any, str] = {}
    if ref_ids:
        ref_rows = await ds.select(key.reference_table, ["id", key.name_field], in_={"id": ref_ids})
        names = {row["id"]: row.get(key.name_field) for row in ref_rows}

    by_item: Dict[Any, List[str]] = defaultdict(list)
    for row in join_rows:
        name = names.get(row.get(key.foreign_key))
        if not name:
            continue
        by_item[row[ITEM_FOREIGN_KEY]].append(name)
    return dict(by_item)


def attach_names(items: List[Dict[str, Any]], names: Dict[str, Dict[Any, List[str]]]) -> List[Dict[str, Any]]:
    """Returns copies of `items` with one list per enriched field; items keep their order."""
    enriched = []
    for item in items:
        extra = {field: list(names[field].get(item.get("id"), [])) for field in names}
        enriched.append({**item, **extra})
    return enriched


async def enrich_items(ds, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not items:
        return []
    item_ids = [item["id"] for item in items]
    fields = list(ENRICHED_KEYS)
    maps = await asyncio.gather(
        *(fetch_names_by_item(ds, ENRICHED_KEYS[field], item_ids) for field in fields)
    )
    return attach_names(items, dict(zip(fields, maps)))


async def fetch_enriched(ds, item_ids: List[Any]) -> List[Dict[str, Any]]:
    """Fetches the full item records for `item_ids` and enriches them."""
    if not item_ids:
        return []
    items = await ds.select(ITEM_TABLE, in_={"id": item_ids})
    return await enrich_items(ds, items)
