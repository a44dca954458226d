"""Document mapping — converts domain objects into Solr input documents.

Field names and values pass through untouched; list and tuple values become
one repeated field entry per element, which is how Solr models multi-valued
fields.

Types that want full control over what gets indexed implement ``Indexable``::

    class Product:
        def field_entries(self):
            yield "id", self.sku
            yield "tags", self.tags
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator, Mapping
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel

from kima.search.exceptions import InvalidDocumentError

ERROR_INVALID_DOCUMENT = "Solr document must be an object or a list of objects"

_SCALARS = (str, bytes, bytearray, int, float, complex, bool)


@runtime_checkable
class Indexable(Protocol):
    """Explicit serialization contract for indexable types."""

    def field_entries(self) -> Iterable[tuple[str, Any]]:
        """Yield ``(field name, value or list of values)`` pairs in order."""
        ...


class SolrDocument:
    """An ordered list of ``(field, value)`` entries ready to be indexed."""

    def __init__(self) -> None:
        self._entries: list[tuple[str, Any]] = []

    def add_field(self, name: str, value: Any) -> None:
        self._entries.append((name, value))

    @property
    def entries(self) -> list[tuple[str, Any]]:
        return list(self._entries)

    @property
    def field_names(self) -> list[str]:
        """Distinct field names in first-seen order."""
        return list(dict.fromkeys(name for name, _ in self._entries))

    def get(self, name: str) -> list[Any]:
        """All values of a field, in insertion order."""
        return [value for field, value in self._entries if field == name]

    def to_json(self) -> dict[str, Any]:
        """Render as a Solr JSON document; repeated fields become lists."""
        grouped: dict[str, list[Any]] = {}
        for name, value in self._entries:
            grouped.setdefault(name, []).append(value)
        return {name: values[0] if len(values) == 1 else values for name, values in grouped.items()}

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"SolrDocument({self._entries!r})"


def _field_items(obj: Any) -> Iterable[tuple[str, Any]]:
    if obj is None or isinstance(obj, (_SCALARS, list, tuple, set, frozenset, type)):
        raise InvalidDocumentError(ERROR_INVALID_DOCUMENT)
    if isinstance(obj, Indexable):
        return obj.field_entries()
    if isinstance(obj, BaseModel):
        return iter(obj)
    if dataclasses.is_dataclass(obj):
        return ((f.name, getattr(obj, f.name)) for f in dataclasses.fields(obj))
    if isinstance(obj, Mapping):
        return obj.items()
    try:
        attrs = vars(obj)
    except TypeError:
        raise InvalidDocumentError(ERROR_INVALID_DOCUMENT) from None
    return ((name, value) for name, value in attrs.items() if not name.startswith("_"))


def to_document(obj: Any) -> SolrDocument:
    """Convert a structured object into a ``SolrDocument``.

    Args:
        obj: An ``Indexable``, pydantic model, dataclass instance, mapping, or
            any object with public instance attributes.

    Returns:
        The document, one entry per scalar field and one entry per element of
        each list or tuple field.

    Raises:
        InvalidDocumentError: If ``obj`` is not a structured object.
    """
    doc = SolrDocument()
    for name, value in _field_items(obj):
        if isinstance(value, (list, tuple)):
            for item in value:
                doc.add_field(name, item)
        else:
            doc.add_field(name, value)
    return doc
