"""Application search – FieldRegistry allow-list."""
from __future__ import annotations

from types import MappingProxyType
from typing import Generic, Iterable, Iterator, Mapping, TypeVar

__all__ = ["FieldRegistry"]

A = TypeVar("A")


class FieldRegistry(Mapping[str, A], Generic[A]):
    """Immutable, case-insensitive map of external field names to accessors.

    The registry is the allow-list for dynamic queries: a name that is not
    registered cannot reach the data layer. ``searchable`` names the subset
    of fields that the free-text ``q`` term is matched against.

    Example::

        COMPANY_FILTERS = FieldRegistry(
            {"name": Company.name, "isActive": Company.is_active},
            searchable=("name",),
        )
        COMPANY_FILTERS["ISACTIVE"] is Company.is_active
    """

    def __init__(
        self,
        fields: Mapping[str, A] | Iterable[tuple[str, A]],
        *,
        searchable: Iterable[str] = (),
    ) -> None:
        items = fields.items() if isinstance(fields, Mapping) else fields
        accessors: dict[str, A] = {}
        names: dict[str, str] = {}
        for name, accessor in items:
            key = name.lower()
            if key in accessors:
                raise ValueError(f"Field {name!r} registered twice")
            accessors[key] = accessor
            names[key] = name

        search_keys = tuple(name.lower() for name in searchable)
        unknown = [name for name in search_keys if name not in accessors]
        if unknown:
            raise ValueError(f"Searchable fields are not registered: {unknown}")

        self._accessors = MappingProxyType(accessors)
        self._names = MappingProxyType(names)
        self._searchable = search_keys

    def __getitem__(self, name: str) -> A:
        return self._accessors[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._accessors

    def __iter__(self) -> Iterator[str]:
        return iter(self._names.values())

    def __len__(self) -> int:
        return len(self._accessors)

    def __repr__(self) -> str:
        return f"FieldRegistry({list(self._names.values())!r})"

    def resolve(self, name: str) -> A | None:
        """Return the accessor for *name*, or ``None`` when it is not allowed."""
        return self._accessors.get(name.lower())

    @property
    def searchable(self) -> tuple[A, ...]:
        return tuple(self._accessors[name] for name in self._searchable)
