import pytest

from app.errors import UpstreamLookupError
from app.models import FilterKey
from app.services.id_set import IdSet
from app.services.query_parser import parse_query
from app.services.resolvers import (
    resolve_reference,
    resolve_ids,
    resolve_title,
    resolve_all,
    combine,
    coerce_identifier,
)


@pytest.mark.asyncio
async def test_reference_without_values_is_unconstrained(ds):
    assert await resolve_reference(ds, FilterKey.TAG, []) is None
    assert ds.calls == []


@pytest.mark.asyncio
async def test_reference_single_value(ds):
    assert await resolve_reference(ds, FilterKey.ARTIST, ["hyji"]) == {1, 3}


@pytest.mark.asyncio
async def test_reference_values_are_intersected_not_unioned(ds):
    # dog -> {1, 2, 3}, cat -> {1, 2, 5}
    assert await resolve_reference(ds, FilterKey.TAG, ["dog", "cat"]) == {1, 2}


@pytest.mark.asyncio
async def test_unmatched_value_short_circuits_the_key(ds):
    result = await resolve_reference(ds, FilterKey.TAG, ["nope", "dog"])
    assert result == IdSet.empty()
    # Only the reference lookup for "nope" ran.
    assert ds.tables_queried() == ["tag"]


@pytest.mark.asyncio
async def test_reference_lookup_failure_propagates(make_ds):
    ds = make_ds(fail_on=["manga_parody"])
    with pytest.raises(UpstreamLookupError):
        await resolve_reference(ds, FilterKey.PARODY, ["original"])


def test_id_values_are_coerced_and_intersected():
    assert coerce_identifier("42") == 42
    assert coerce_identifier("abc-1") == "abc-1"
    assert coerce_identifier("²") == "²"
    assert resolve_ids(["3"]) == {3}
    assert resolve_ids(["1", "2"]).is_empty()
    assert resolve_ids([]) is None


@pytest.mark.asyncio
async def test_title_is_a_phrase_match_not_per_word(ds):
    # "Cat and Dog" (id 2) contains both words but not the phrase.
    assert await resolve_title(ds, ["cat", "dog"]) == {1, 5}


@pytest.mark.asyncio
async def test_title_without_values_is_unconstrained(ds):
    assert await resolve_title(ds, []) is None


@pytest.mark.asyncio
async def test_resolve_all_covers_every_key(ds):
    candidates = await resolve_all(ds, parse_query('artist:"hyji" tag:"dog%cat"'))
    assert set(candidates) == set(FilterKey)
    assert candidates[FilterKey.ARTIST] == {1, 3}
    assert candidates[FilterKey.TAG] == {1, 2}
    assert candidates[FilterKey.TITLE] is None
    assert combine(candidates) == [1]


def test_combine_without_constraints_is_empty():
    assert combine({key: None for key in FilterKey}) == []


def test_combine_with_an_empty_key_is_empty():
    candidates = {key: None for key in FilterKey}
    candidates[FilterKey.TAG] = IdSet([1, 2])
    candidates[FilterKey.ARTIST] = IdSet.empty()
    assert combine(candidates) == []


def test_combine_intersects_across_keys():
    candidates = {key: None for key in FilterKey}
    candidates[FilterKey.TAG] = IdSet([1, 2, 3])
    candidates[FilterKey.PARODY] = IdSet([2, 3])
    candidates[FilterKey.ID] = IdSet([3])
    assert combine(candidates) == [3]
