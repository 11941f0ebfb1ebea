"""Turn loosely shaped JSON records into :class:`Row` objects."""

from __future__ import annotations

import random
from typing import Any, Mapping, Optional

from tableeditor.config import (
    DEFAULT_CREATED_DATE,
    LANGUAGE_CHOICES,
    SOURCE_ROW_PREFIX,
    STATE_CHOICES,
)
from tableeditor.domain.models.core import Row
from tableeditor.errors import FetchError


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def normalize_record(
    item: Any,
    index: int,
    seed: Optional[int] = None,
) -> Row:
    """Build a Row from *item*, the record at absolute position *index*.

    Missing ``language``/``state`` values are drawn from small fixed sets with
    a generator seeded from *seed* and *index*, so reloading a record yields
    the same fallbacks.
    """

    if not isinstance(item, Mapping):
        raise FetchError(f"record {index} is not an object: {type(item).__name__}")
    rng = random.Random(f"{seed}:{index}")
    return Row(
        id=_text(item.get("id")) or f"{SOURCE_ROW_PREFIX}{index}",
        name=_text(item.get("name")),
        address=_text(item.get("address")),
        language=_text(item.get("language")) or rng.choice(LANGUAGE_CHOICES),
        version=_text(item.get("version")),
        state=_text(item.get("state")) or rng.choice(STATE_CHOICES),
        created_date=_text(item.get("createdDate") or item.get("created_date")) or DEFAULT_CREATED_DATE,
    )
