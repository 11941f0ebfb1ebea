"""Locale-aware sort keys for cell text."""

from __future__ import annotations

import locale
import unicodedata
from typing import Tuple


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def collation_key(text: str) -> Tuple[str, str, str]:
    """Return a key ordering *text* the way a human-facing collator would.

    Primary strength ignores case and accents, secondary restores accents and
    the tertiary level puts lower case before upper case.  Each level goes
    through :func:`locale.strxfrm`, so the process's ``LC_COLLATE`` applies.
    Python starts in the C locale, where strxfrm is code-point order and only
    the case and accent folding above take effect; the CLI switches to the
    user's locale with ``locale.setlocale(locale.LC_COLLATE, "")``.
    """

    base = _strip_accents(text).casefold()
    accented = unicodedata.normalize("NFC", text).casefold()
    return (
        locale.strxfrm(base),
        locale.strxfrm(accented),
        locale.strxfrm(text.swapcase()),
    )
