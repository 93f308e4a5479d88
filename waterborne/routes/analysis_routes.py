# waterborne/routes/analysis_routes.py
import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from waterborne import settings
from waterborne.middleware.rate_limit import analysis_limit, limiter
from waterborne.schemas.analysis import (
    AnalysisRequest,
    AnalysisResponse,
    SymptomListOut,
)
from waterborne.services import scorer
from waterborne.services.composer import compose_analysis
from waterborne.services.localization import Localizer, get_localizer


router = APIRouter(prefix="/api", tags=["analysis"])
logger = logging.getLogger("waterborne")


@router.get("/symptoms", response_model=SymptomListOut)
def list_symptoms(
    locale: Optional[str] = Query(None, max_length=16),
    loc: Localizer = Depends(get_localizer),
):
    """Selectable symptom list, labelled in the requested language."""
    active = loc.resolve_locale(locale)
    return {"locale": active, "symptoms": loc.symptom_options(active)}


@router.post("/analysis", response_model=AnalysisResponse, status_code=status.HTTP_200_OK)
@limiter.limit(analysis_limit)
async def analyze(
    request: Request,
    payload: AnalysisRequest,
    loc: Localizer = Depends(get_localizer),
):
    """Score the selected symptoms and return up to three likely diseases.

    Accepts: {"symptoms": ["fever", "Diarrhea", "उल्टी"], "locale": "hi"}
    An empty selection is valid and yields no result.
    """
    active = loc.resolve_locale(payload.locale)
    ids, unrecognized = loc.canonicalize(payload.symptoms, active)

    if settings.ANALYSIS_DELAY_MS:
        await asyncio.sleep(settings.ANALYSIS_DELAY_MS / 1000)

    matches = scorer.score(ids, kb=loc.kb)
    results = compose_analysis(matches, active, loc)
    logger.info({
        "function": "analyze",
        "locale": active,
        "symptoms": ids,
        "unrecognized": len(unrecognized),
        "results": [(m.disease_id, m.confidence) for m in matches],
    })

    body = {
        "locale": active,
        "symptoms": ids,
        "unrecognized": unrecognized,
        "results": results,
        "detected": bool(results),
    }
    if not results:
        body["title"] = loc.text("analysis.noDiseaseDetectedTitle", active)
        body["message"] = loc.text("analysis.noDiseaseDetectedDescription", active)
    return body
