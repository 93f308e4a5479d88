# waterborne/schemas/catalog.py
from pydantic import BaseModel, Field
from typing import List


class DiseaseOut(BaseModel):
    """A disease rendered in the requested display language."""

    id: str
    name: str
    description: str
    remedies: List[str]
    symptoms: str
    causes: str
    treatment: str
    prevention: str
    fallback_fields: List[str] = Field(
        default_factory=list,
        description="Fields shown in the base language because no translation exists.",
    )


class DiseaseListOut(BaseModel):
    locale: str
    diseases: List[DiseaseOut]


class LocaleOut(BaseModel):
    code: str
    name: str


class LocaleListOut(BaseModel):
    default: str
    locales: List[LocaleOut]
