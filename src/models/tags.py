"""Tag set model used for overlap scoring."""

from typing import Iterable, Iterator


class TagSet:
    """Case-normalized, de-duplicated collection of tags.

    Equality is set equality, but iteration keeps the order in which tags were
    first seen; match ordering in search results depends on it.
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[str] = ()):
        ordered: dict[str, None] = {}
        for tag in tags:
            if tag is None:
                continue
            normalized = str(tag).strip().lower()
            if normalized:
                ordered.setdefault(normalized, None)
        self._tags = tuple(ordered)

    def __contains__(self, tag: object) -> bool:
        if not isinstance(tag, str):
            return False
        return tag.lower() in self._tags

    def __iter__(self) -> Iterator[str]:
        return iter(self._tags)

    def __len__(self) -> int:
        return len(self._tags)

    def __bool__(self) -> bool:
        return bool(self._tags)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TagSet):
            return set(self._tags) == set(other._tags)
        if isinstance(other, (set, frozenset)):
            return set(self._tags) == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(frozenset(self._tags))

    def __repr__(self) -> str:
        return f"TagSet({list(self._tags)!r})"

    def as_list(self) -> list[str]:
        return list(self._tags)

    def union(self, *others: Iterable[str]) -> "TagSet":
        tags = list(self._tags)
        for other in others:
            tags.extend(other)
        return TagSet(tags)
