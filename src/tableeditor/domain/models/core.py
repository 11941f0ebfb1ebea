from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from tableeditor.errors import UnknownFieldError

# Column order used by the view and the Qt adapter.
DATA_FIELDS: Tuple[str, ...] = (
    "id",
    "name",
    "address",
    "language",
    "version",
    "state",
    "created_date",
)
FLAG_FIELDS: Tuple[str, ...] = ("is_new", "is_edited")

# Fields a Patch may carry.  ``id`` is the patch key, never a patched value.
PATCHABLE_FIELDS: frozenset[str] = frozenset(DATA_FIELDS) - {"id"}

# Wire names used by JSON payloads.
WIRE_NAMES: Dict[str, str] = {
    "created_date": "createdDate",
    "is_new": "isNew",
    "is_edited": "isEdited",
}
_FROM_WIRE: Dict[str, str] = {wire: name for name, wire in WIRE_NAMES.items()}


def canonical_field(name: str) -> str:
    """Map a wire or attribute field name onto the attribute name."""

    canonical = _FROM_WIRE.get(name, name)
    if canonical not in DATA_FIELDS and canonical not in FLAG_FIELDS:
        raise UnknownFieldError(f"unknown field: {name!r}")
    return canonical


@dataclass(frozen=True)
class Row:
    id: str
    name: str = ""
    address: str = ""
    language: str = ""
    version: str = ""
    state: str = ""
    created_date: str = ""
    is_new: bool = False
    is_edited: bool = False

    def value(self, field_name: str) -> Any:
        return getattr(self, canonical_field(field_name))

    def text(self, field_name: str) -> str:
        """Return the string form of *field_name* as filter and sort see it."""

        value = self.value(field_name)
        if isinstance(value, bool):
            return "true" if value else "false"
        return "" if value is None else str(value)

    def searchable_texts(self) -> Tuple[str, ...]:
        """Texts the filter looks at: every data field plus the flags that are set."""

        texts = [self.text(name) for name in DATA_FIELDS]
        texts.extend(self.text(name) for name in FLAG_FIELDS if getattr(self, name))
        return tuple(texts)

    def to_record(self) -> Dict[str, Any]:
        return {
            WIRE_NAMES.get(name, name): getattr(self, name)
            for name in DATA_FIELDS + FLAG_FIELDS
        }


@dataclass(frozen=True)
class Page:
    """One fetched slice of rows; ``next_cursor`` is ``None`` at the end."""

    rows: Tuple[Row, ...] = ()
    next_cursor: Optional[int] = None

    @property
    def is_last(self) -> bool:
        return self.next_cursor is None

    def __len__(self) -> int:
        return len(self.rows)


def _freeze(values: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class Patch:
    """Accumulated local changes for one row id.

    ``is_new`` patches describe a whole row that only exists locally;
    ``is_edited`` is set once a user edit has been committed.
    """

    row_id: str
    values: Mapping[str, str] = field(default_factory=lambda: _freeze({}))
    is_new: bool = False
    is_edited: bool = False

    @staticmethod
    def check_field(field_name: str) -> str:
        canonical = _FROM_WIRE.get(field_name, field_name)
        if canonical not in PATCHABLE_FIELDS:
            raise UnknownFieldError(f"field cannot be patched: {field_name!r}")
        return canonical

    def merged(self, field_name: str, value: str, *, edited: bool = True) -> Patch:
        """Return a copy with *field_name* set to *value* (last write wins)."""

        canonical = self.check_field(field_name)
        values = dict(self.values)
        values[canonical] = value
        return replace(
            self,
            values=_freeze(values),
            is_edited=self.is_edited or edited,
        )

    def apply(self, row: Row) -> Row:
        return replace(row, **dict(self.values), is_edited=row.is_edited or self.is_edited)

    def as_row(self) -> Row:
        return Row(id=self.row_id, **dict(self.values), is_new=True, is_edited=self.is_edited)
