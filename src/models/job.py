import re
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, List, Optional


LOCATION_TYPE_SYNONYMS = {
    "onsite": "onsite",
    "on-site": "onsite",
    "on site": "onsite",
    "in office": "onsite",
    "in-office": "onsite",
    "office": "onsite",
    "on_site": "onsite",
    "remote": "remote",
    "fully remote": "remote",
    "full remote": "remote",
    "full_remote": "remote",
    "remote only": "remote",
    "work from home": "remote",
    "wfh": "remote",
    "hybrid": "hybrid",
    "flexible": "hybrid",
}


def split_skill_list(value: Any) -> List[str]:
    """Accetta lista o stringa separata da virgole; scarta voci vuote."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        items = [value]
    out = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text:
            out.append(text)
    return out


def parse_years(value: Any) -> Optional[int]:
    """Estrae un numero di anni da int/float/stringa ("3", "3+ years"). None se non leggibile."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if value != value:  # NaN
            return None
        return max(0, int(value))
    match = re.search(r"\d+", str(value))
    if not match:
        return None
    return int(match.group(0))


class JobSpecification(BaseModel):
    """Requisiti della posizione forniti dal chiamante."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = None
    department: Optional[str] = None
    industry: Optional[str] = None
    required_skills: List[str] = []
    preferred_skills: List[str] = []
    min_experience: int = 0
    max_experience: Optional[int] = None      # None = nessun limite superiore
    education: Optional[str] = None
    location: Optional[str] = None
    location_type: str = "onsite"             # "onsite", "remote", "hybrid"

    @field_validator("required_skills", "preferred_skills", mode="before")
    @classmethod
    def _parse_skills(cls, value):
        return split_skill_list(value)

    @field_validator("min_experience", mode="before")
    @classmethod
    def _parse_min(cls, value):
        years = parse_years(value)
        return 0 if years is None else years

    @field_validator("max_experience", mode="before")
    @classmethod
    def _parse_max(cls, value):
        # 0 = campo lasciato vuoto nel form, non un tetto reale
        return parse_years(value) or None

    @field_validator("location_type", mode="before")
    @classmethod
    def _parse_location_type(cls, value):
        if not value:
            return "onsite"
        return LOCATION_TYPE_SYNONYMS.get(str(value).strip().lower(), "onsite")

    @field_validator("title", "department", "industry", "education", "location", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return None
        return str(value)

