from typing import Any, Dict, Iterable, List, Optional

import pytest

from app.errors import UpstreamLookupError


class FakeDataSource:
    """
    In-memory stand-in for MongoDataSource with the same `select` contract.
    Every call is recorded in `calls` as (table, filters) so tests can check
    which lookups actually ran.
    """

    def __init__(self, tables: Dict[str, List[Dict[str, Any]]], fail_on: Iterable[str] = ()):
        self.tables = tables
        self.fail_on = set(fail_on)
        self.calls: List[tuple] = []
        self.healthy = True

    async def select(
        self,
        table: str,
        columns: Optional[Iterable[str]] = None,
        *,
        eq: Optional[Dict[str, Any]] = None,
        in_: Optional[Dict[str, Iterable[Any]]] = None,
        ilike: Optional[Dict[str, str]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        self.calls.append((table, {"eq": eq, "in": in_, "ilike": ilike}))
        if table in self.fail_on:
            raise UpstreamLookupError(f"relation '{table}' is unavailable")

        rows = list(self.tables.get(table, []))
        for column, value in (eq or {}).items():
            rows = [r for r in rows if r.get(column) == value]
        for column, values in (in_ or {}).items():
            allowed = list(values)
            rows = [r for r in rows if r.get(column) in allowed]
        for column, fragment in (ilike or {}).items():
            rows = [r for r in rows if fragment.lower() in str(r.get(column, "")).lower()]
        if order_by:
            rows.sort(key=lambda r: r.get(order_by), reverse=not ascending)
        if limit:
            rows = rows[:limit]
        if columns:
            rows = [{c: r.get(c) for c in columns} for r in rows]
        return [dict(r) for r in rows]

    async def ping(self) -> bool:
        return self.healthy

    def tables_queried(self) -> List[str]:
        return [table for table, _ in self.calls]


def catalog_tables() -> Dict[str, List[Dict[str, Any]]]:
    manga = [
        {"id": 1, "title": "The Cat Dog Story", "language": "en", "pages": 30},
        {"id": 2, "title": "Cat and Dog", "language": "jp", "pages": 12},
        {"id": 3, "title": "Dog Days", "language": "en", "pages": 45},
        {"id": 4, "title": "Quiet Summer", "language": "fr", "pages": 20},
        {"id": 5, "title": "Summer of the cat dog", "language": "jp", "pages": 8},
    ]
    tag = [
        {"id": 10, "tag": "dog"},
        {"id": 11, "tag": "cat"},
        {"id": 12, "tag": "summer"},
        {"id": 13, "tag": None},
    ]
    artist = [
        {"id": 20, "artist": "hyji"},
        {"id": 21, "artist": "bob"},
        {"id": 22, "artist": "alice"},
    ]
    character = [{"id": 30, "character": "rin"}]
    mgroup = [{"id": 40, "mgroup": "circle one"}]
    parody = [{"id": 50, "parody": "original"}]
    return {
        "manga": manga,
        "tag": tag,
        "artist": artist,
        "character": character,
        "mgroup": mgroup,
        "parody": parody,
        "manga_tag": [
            {"manga_id": 1, "tag_id": 10},
            {"manga_id": 1, "tag_id": 11},
            {"manga_id": 2, "tag_id": 10},
            {"manga_id": 2, "tag_id": 11},
            {"manga_id": 3, "tag_id": 10},
            {"manga_id": 4, "tag_id": 12},
            {"manga_id": 4, "tag_id": 13},
            {"manga_id": 5, "tag_id": 11},
        ],
        "manga_artist": [
            {"manga_id": 1, "artist_id": 20},
            {"manga_id": 2, "artist_id": 21},
            {"manga_id": 3, "artist_id": 20},
            {"manga_id": 4, "artist_id": 22},
        ],
        "manga_character": [
            {"manga_id": 1, "character_id": 30},
            {"manga_id": 3, "character_id": 30},
        ],
        "manga_mgroup": [{"manga_id": 3, "mgroup_id": 40}],
        "manga_parody": [
            {"manga_id": 1, "parody_id": 50},
            {"manga_id": 2, "parody_id": 50},
        ],
    }


@pytest.fixture
def ds() -> FakeDataSource:
    return FakeDataSource(catalog_tables())


@pytest.fixture
def make_ds():
    def _make(fail_on: Iterable[str] = ()) -> FakeDataSource:
        return FakeDataSource(catalog_tables(), fail_on=fail_on)
    return _make
