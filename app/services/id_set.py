from typing import Any, Hashable, Iterable, Iterator, List, Optional


class IdSet:
    """
    An immutable set of item identifiers.

    `None` (not an IdSet) stands for "no constraint"; an empty IdSet means
    the constraint matched nothing, which makes any intersection empty.
    """
    __slots__ = ("_ids",)

    def __init__(self, ids: Iterable[Hashable] = ()):
        self._ids = frozenset(ids)

    @classmethod
    def from_values(cls, values: Iterable[Hashable]) -> "IdSet":
        return cls(values)

    @classmethod
    def empty(cls) -> "IdSet":
        return cls()

    @classmethod
    def intersect_all(cls, sets: Iterable["IdSet"]) -> Optional["IdSet"]:
        """
        Intersects left to right and stops at the first empty intermediate
        result. Returns None when `sets` is empty.
        """
        result: Optional[IdSet] = None
        for id_set in sets:
            result = id_set if result is None else result.intersect(id_set)
            if result.is_empty():
                return result
        return result

    def intersect(self, other: "IdSet") -> "IdSet":
        return IdSet(self._ids & other._ids)

    def is_empty(self) -> bool:
        return not self._ids

    def to_list(self) -> List[Any]:
        return list(self._ids)

    def __contains__(self, item: Hashable) -> bool:
        return item in self._ids

    def __iter__(self) -> Iterator[Any]:
        return iter(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, IdSet):
            return self._ids == other._ids
        if isinstance(other, (set, frozenset)):
            return self._ids == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._ids)

    def __repr__(self) -> str:
        return f"IdSet({sorted(self._ids, key=str)!r})"
