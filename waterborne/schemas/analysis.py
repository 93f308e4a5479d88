# waterborne/schemas/analysis.py
from pydantic import BaseModel, Field
from typing import List, Optional


class AnalysisRequest(BaseModel):
    """Request model for the symptom analysis endpoint."""

    symptoms: List[str] = Field(
        default_factory=list,
        max_length=100,
        description="Selected symptoms: canonical ids or labels in the active locale.",
    )
    locale: Optional[str] = Field(None, max_length=16, description="Display language, e.g. 'en' or 'hi-IN'.")


class DiseaseMatchOut(BaseModel):
    id: str = Field(..., description="Canonical disease id.")
    name: str
    description: str
    remedies: List[str]
    probability: int = Field(..., gt=0, le=100, description="Match confidence in percent.")


class AnalysisResponse(BaseModel):
    """Response model for the symptom analysis endpoint."""

    locale: str
    symptoms: List[str] = Field(..., description="Canonical symptom ids that were scored.")
    unrecognized: List[str] = Field(default_factory=list, description="Input labels that matched no symptom.")
    results: List[DiseaseMatchOut] = Field(..., description="At most three diseases, best match first.")
    detected: bool
    title: Optional[str] = None
    message: Optional[str] = None


class SymptomOption(BaseModel):
    id: str
    label: str


class SymptomListOut(BaseModel):
    locale: str
    symptoms: List[SymptomOption]
