# waterborne/routes/knowledge_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from waterborne.schemas.catalog import DiseaseListOut, DiseaseOut, LocaleListOut
from waterborne.services.composer import compose_disease
from waterborne.services.localization import Localizer, get_localizer


router = APIRouter(prefix="/api", tags=["knowledge"])


@router.get("/locales", response_model=LocaleListOut)
def list_locales(loc: Localizer = Depends(get_localizer)):
    return {"default": loc.default_locale, "locales": loc.supported_locales()}


@router.get("/diseases", response_model=DiseaseListOut)
def list_diseases(
    locale: Optional[str] = Query(None, max_length=16),
    loc: Localizer = Depends(get_localizer),
):
    active = loc.resolve_locale(locale)
    return {
        "locale": active,
        "diseases": [compose_disease(d.id, active, loc) for d in loc.kb.diseases],
    }


@router.get("/diseases/{disease_id}", response_model=DiseaseOut)
def get_disease(
    disease_id: str,
    locale: Optional[str] = Query(None, max_length=16),
    loc: Localizer = Depends(get_localizer),
):
    if loc.kb.disease(disease_id) is None:
        raise HTTPException(status_code=404, detail="Disease not found")
    return compose_disease(disease_id, loc.resolve_locale(locale), loc)
