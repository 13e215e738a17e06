"""
Reference Data
Tabelle statiche del motore di matching, caricate una sola volta dai CSV in src/data.

Tabelle:
- title_adjacency.csv      → base_title, related_title, score
- skill_hierarchy.csv      → skill, implies, related, transferable_from, category (liste separate da "|")
- skill_synonyms.csv       → nome canonico, alias separati da virgola
- industry_relationships.csv → industry, industry correlate separate da virgola
- location_synonyms.csv    → località canonica, alias separati da virgola

Le strutture restituite sono read-only (tuple e MappingProxyType) e quindi
condivisibili tra thread durante il batch matching.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import pandas as pd


DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class SkillNode:
    """Nodo della gerarchia semantica delle skill."""
    name: str
    implies: Tuple[str, ...] = ()
    related: Tuple[str, ...] = ()
    transferable_from: Tuple[str, ...] = ()
    category: Optional[str] = None


@dataclass(frozen=True, eq=False)
class ReferenceData:
    """Contenitore immutabile di tutte le tabelle di riferimento."""
    # base title → ((related title, score), ...) nell'ordine del CSV
    title_adjacency: Tuple[Tuple[str, Tuple[Tuple[str, int], ...]], ...]
    # chiave lowercase → nodo
    skill_hierarchy: Mapping[str, SkillNode]
    # nome canonico → alias (lowercase)
    skill_synonyms: Tuple[Tuple[str, Tuple[str, ...]], ...]
    # industry lowercase → (nome, correlate)
    industry_relationships: Mapping[str, Tuple[str, Tuple[str, ...]]]
    location_synonyms: Tuple[Tuple[str, Tuple[str, ...]], ...]


def _split(value, sep: str) -> Tuple[str, ...]:
    if not pd.notna(value) or not str(value).strip():
        return ()
    return tuple(part.strip() for part in str(value).split(sep) if part.strip())


def _read(data_dir: Path, name: str) -> pd.DataFrame:
    return pd.read_csv(data_dir / name, dtype=str, keep_default_na=False)


def _load_title_adjacency(df: pd.DataFrame):
    grouped = {}
    for _, row in df.iterrows():
        base = row["base_title"].strip()
        grouped.setdefault(base, []).append((row["related_title"].strip(), int(row["score"])))
    # dict preserva l'ordine di prima apparizione del base title
    return tuple((base, tuple(related)) for base, related in grouped.items())


def _load_skill_hierarchy(df: pd.DataFrame) -> Mapping[str, SkillNode]:
    nodes = {}
    for _, row in df.iterrows():
        name = row["skill"].strip()
        nodes[name.lower()] = SkillNode(
            name=name,
            implies=_split(row["implies"], "|"),
            related=_split(row["related"], "|"),
            transferable_from=_split(row["transferable_from"], "|"),
            category=row["category"].strip() or None,
        )
    return MappingProxyType(nodes)


def _load_alias_table(df: pd.DataFrame, key: str) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
    table = []
    for _, row in df.iterrows():
        aliases = tuple(alias.lower() for alias in _split(row["aliases"], ","))
        table.append((row[key].strip(), aliases))
    return tuple(table)


def _load_industries(df: pd.DataFrame):
    industries = {}
    for _, row in df.iterrows():
        name = row["industry"].strip()
        industries[name.lower()] = (name, _split(row["related"], ","))
    return MappingProxyType(industries)


def load_reference_data(data_dir: Optional[Path] = None) -> ReferenceData:
    """Carica tutte le tabelle da una directory (default: src/data)."""
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    return ReferenceData(
        title_adjacency=_load_title_adjacency(_read(data_dir, "title_adjacency.csv")),
        skill_hierarchy=_load_skill_hierarchy(_read(data_dir, "skill_hierarchy.csv")),
        skill_synonyms=_load_alias_table(_read(data_dir, "skill_synonyms.csv"), "name"),
        industry_relationships=_load_industries(_read(data_dir, "industry_relationships.csv")),
        location_synonyms=_load_alias_table(_read(data_dir, "location_synonyms.csv"), "name"),
    )


@lru_cache(maxsize=1)
def default_reference_data() -> ReferenceData:
    """Istanza condivisa, caricata al primo utilizzo."""
    return load_reference_data()
