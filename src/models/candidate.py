from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union

from src.models.job import split_skill_list


class WorkEntry(BaseModel):
    """Singola esperienza lavorativa (più recente per prima nel profilo)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("title", "position", "jobTitle", "job_title")
    )
    company: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None          # Testo libero (es. "2019 - Present")
    year: Optional[str] = None              # Alcuni parser restituiscono solo l'anno
    start_date: Optional[str] = None
    end_date: Optional[str] = None

    @field_validator("title", "company", "description", "duration", "year",
                     "start_date", "end_date", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return None
        return str(value)


class Education(BaseModel):
    """Titolo di studio strutturato."""
    degree: Optional[str] = None
    field: Optional[str] = None
    institution: Optional[str] = None
    year: Optional[str] = None

    @field_validator("degree", "field", "institution", "year", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return None
        return str(value)


class CandidateProfile(BaseModel):
    """Profilo candidato già strutturato dal parser a monte."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    candidate_id: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("candidate_id", "candidateId", "id")
    )
    name: Optional[str] = None
    skills: List[str] = []
    experience: List[WorkEntry] = []
    education: Union[Education, str, List[Union[Education, str]], None] = None
    location: Optional[str] = None

    @field_validator("skills", mode="before")
    @classmethod
    def _parse_skills(cls, value):
        return split_skill_list(value)

    @field_validator("experience", mode="before")
    @classmethod
    def _parse_experience(cls, value):
        if not value:
            return []
        if isinstance(value, (dict, str, WorkEntry)):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return []
        entries = []
        for entry in value:
            # Voce in testo libero: il testo diventa il titolo
            if isinstance(entry, str) and entry.strip():
                entries.append({"title": entry.strip()})
            elif isinstance(entry, (dict, WorkEntry)) and entry:
                entries.append(entry)
        return entries

    @field_validator("education", mode="before")
    @classmethod
    def _parse_education(cls, value):
        if value is None or isinstance(value, (str, dict, Education)):
            return value
        if isinstance(value, (list, tuple)):
            return [item if isinstance(item, (str, dict, Education)) else str(item)
                    for item in value if item is not None]
        return str(value)

    @field_validator("candidate_id", "name", "location", mode="before")
    @classmethod
    def _as_text(cls, value):
        if value is None:
            return None
        return str(value)
