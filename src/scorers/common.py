"""Helper numerici e testuali condivisi dagli scorer."""

import re
from typing import Iterable, List, Optional, TypeVar

import numpy as np


T = TypeVar("T")


def round_half_up(value: float) -> int:
    """Arrotondamento commerciale (2.5 → 3), non bancario come round()."""
    return int(np.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Score intero in [0, 100]."""
    return int(np.clip(round_half_up(value), 0, 100))


def normalize_text(text: Optional[str]) -> str:
    return " ".join((text or "").lower().split())


def mentions(text: str, term: str) -> bool:
    """
    `term` compare in `text` (entrambi lowercase). Termini corti (<= 3 caratteri,
    es. "ai", "hr") richiedono confini di parola.
    """
    if not term or not text:
        return False
    if len(term) <= 3:
        return re.search(rf"(?<!\w){re.escape(term)}(?!\w)", text) is not None
    return term in text


def contains_word(text: str, word: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(word)}(?!\w)", text) is not None


def unique(items: Iterable[T]) -> List[T]:
    """Deduplica mantenendo l'ordine."""
    seen = set()
    out = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out
