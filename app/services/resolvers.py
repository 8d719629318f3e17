import asyncio
from typing import Any, Dict, List, Optional, Union

from app.config import ITEM_TABLE, ITEM_FOREIGN_KEY
from app.logging_setup import logger
from app.models import FilterKey
from app.services.id_set import IdSet
from app.services.query_parser import FilterSet


async def resolve_reference(ds, key: FilterKey, values: List[str]) -> Optional[IdSet]:
    """
    Resolves a reference-backed key (tag, artist, ...) to the items linked to
    every one of `values`.

    Values are looked up one after another: the first value that matches no
    reference row makes the whole key empty and the rest are skipped.
    """
    if not values:
        return None

    per_value: List[IdSet] = []
    for value in values:
        ref_rows = await ds.select(key.reference_table, ["id"], eq={key.name_field: value})
        if not ref_rows:
            logger.info(f"No {key.value} named '{value}'")
            return IdSet.empty()

        ref_ids = [row["id"] for row in ref_rows]
        join_rows = await ds.select(
            key.join_table, [ITEM_FOREIGN_KEY], in_={key.foreign_key: ref_ids}
        )
        per_value.append(IdSet.from_values(row[ITEM_FOREIGN_KEY] for row in join_rows))

    return IdSet.intersect_all(per_value)


def coerce_identifier(value: str) -> Union[int, str]:
    """Query values are text; numeric identifiers are stored as integers."""
    return int(value) if value.isascii() and value.isdigit() else value


def resolve_ids(values: List[str]) -> Optional[IdSet]:
    """
    Builds the id constraint without touching the store. Repeated values are
    intersected like any other key, so `id:1%2` matches nothing.
    """
    if not values:
        return None
    return IdSet.intersect_all(IdSet.from_values([coerce_identifier(v)]) for v in values)


async def resolve_title(ds, values: List[str]) -> Optional[IdSet]:
    """
    Title values form a single phrase matched as a case-insensitive substring.
    Unlike the other keys the words are not checked one by one: `cat dog`
    only matches titles containing the text "cat dog".
    """
    if not values:
        return None
    phrase = " ".join(values)
    rows = await ds.select(ITEM_TABLE, ["id"], ilike={"title": phrase})
    return IdSet.from_values(row["id"] for row in rows)


async def resolve_key(ds, key: FilterKey, values: List[str]) -> Optional[IdSet]:
    if key is FilterKey.TITLE:
        return await resolve_title(ds, values)
    elif key is FilterKey.ID:
        return resolve_ids(values)
    elif key.is_reference:
        return await resolve_reference(ds, key, values)
    raise ValueError(f"Unhandled filter key: {key!r}")


async def resolve_all(ds, filters: FilterSet) -> Dict[FilterKey, Optional[IdSet]]:
    """
    Resolves every key concurrently. A failure in any resolver propagates and
    aborts the whole search.
    """
    keys = list(FilterKey)
    results = await asyncio.gather(*(resolve_key(ds, key, filters.get(key, [])) for key in keys))
    return dict(zip(keys, results))


def combine(candidates: Dict[FilterKey, Optional[IdSet]]) -> List[Any]:
    """
    Intersects the constrained keys. No constrained key at all yields an
    empty list, not the whole catalog.
    """
    present = [id_set for id_set in candidates.values() if id_set is not None]
    final = IdSet.intersect_all(present)
    if final is None or final.is_empty():
        return []
    return final.to_list()
