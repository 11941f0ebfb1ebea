from .core import DATA_FIELDS, FLAG_FIELDS, PATCHABLE_FIELDS, Page, Patch, Row, canonical_field
from .query import SortDirection, ViewQuery

__all__ = [
    "DATA_FIELDS",
    "FLAG_FIELDS",
    "PATCHABLE_FIELDS",
    "Page",
    "Patch",
    "Row",
    "SortDirection",
    "ViewQuery",
    "canonical_field",
]
