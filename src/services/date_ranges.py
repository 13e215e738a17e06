"""
Date Ranges
Estrae anni da durate in testo libero ("2019 - Present", "Jan 2018 – Mar 2021", "2020").

L'anno corrente è sempre un parametro esplicito: nessuna lettura implicita
dell'orologio durante il calcolo degli score.
"""

import re
from datetime import date
from typing import Iterable, NamedTuple, Optional

from src.models.candidate import WorkEntry


YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")
ONGOING_PATTERN = re.compile(r"\b(?:present|current|now)", re.IGNORECASE)

# Durata stimata quando una voce non contiene anni leggibili
ESTIMATED_YEARS_PER_ENTRY = 2


class YearSpan(NamedTuple):
    start: int
    end: int
    ongoing: bool

    @property
    def years(self) -> int:
        return max(0, self.end - self.start)


def resolve_current_year(current_year: Optional[int] = None) -> int:
    return current_year if current_year is not None else date.today().year


def is_ongoing(text: Optional[str]) -> bool:
    return bool(text) and ONGOING_PATTERN.search(text) is not None


def entry_date_text(entry: WorkEntry) -> str:
    """Testo della durata: duration, poi year, poi "start - end" (end di default Present)."""
    if entry.duration:
        return entry.duration
    if entry.year:
        return entry.year
    if entry.start_date or entry.end_date:
        return f"{entry.start_date or ''} - {entry.end_date or 'Present'}"
    return ""


def parse_year_span(text: Optional[str], current_year: int) -> Optional[YearSpan]:
    """Primo/ultimo anno citato; le durate in corso terminano a current_year."""
    if not text:
        return None
    years = [int(y) for y in YEAR_PATTERN.findall(text)]
    if not years:
        return None
    ongoing = is_ongoing(text)
    end = current_year if ongoing else max(years)
    return YearSpan(start=min(years), end=end, ongoing=ongoing)


def total_span_years(entries: Iterable[WorkEntry], current_year: int) -> Optional[int]:
    """
    Anni tra l'inizio più remoto e la fine più recente (le sovrapposizioni
    non vengono sommate due volte). None se nessuna voce ha date leggibili.
    """
    earliest = None
    latest = None
    for entry in entries:
        span = parse_year_span(entry_date_text(entry), current_year)
        if span is None:
            continue
        earliest = span.start if earliest is None else min(earliest, span.start)
        latest = span.end if latest is None else max(latest, span.end)
    if earliest is None or latest is None:
        return None
    return max(0, latest - earliest)
