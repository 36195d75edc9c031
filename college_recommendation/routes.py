"""
Recommendation API Routes

Exposes the recommendation engine via REST API.
POST /recommendations, POST /recommendations/reviews, GET /recommendations/health
"""

import logging
from typing import Optional, Dict, Any
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from db import get_session
from .config import load_settings
from .logic.constants import ENGINE_VERSION
from .logic.contracts import ReviewFilters
from .logic.engine import RecommendationEngine
from .logic.errors import (
    CatalogUnavailableError,
    PreferenceValidationError,
    RecommendationTimeoutError,
)
from .logic.runner import build_engine, build_review_pipeline, run_review_report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class RecommendationRequest(BaseModel):
    """Request body for recommendations endpoint."""
    preferences: Dict[str, Any] = Field(
        ...,
        description="Candidate preferences",
        json_schema_extra={
            "example": {
                "exam_type": "KCET",
                "score": 92.5,
                "branch_preferences": ["Computer Science", "Electronics"],
                "location_preferences": ["Karnataka"],
                "institution_type_preferences": ["Government"],
            }
        },
    )
    max_results: Optional[int] = Field(
        default=None,
        ge=1,
        le=100,
        description="Max recommendations to return"
    )


class ReviewRequest(BaseModel):
    institution_name: str = Field(..., min_length=2)
    filters: Optional[ReviewFilters] = None


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_recommendation_engine(db: Session = Depends(get_session)) -> RecommendationEngine:
    return build_engine(db)


def get_review_pipeline():
    return build_review_pipeline(load_settings())


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.post("", summary="Get college recommendations")
@router.post("/", summary="Get college recommendations", include_in_schema=False)
def get_recommendations(
    request: RecommendationRequest,
    engine: RecommendationEngine = Depends(get_recommendation_engine)
):
    """
    Generate ranked college recommendations for an exam score and preferences.

    **Request Body:**
    - `preferences`: exam type, score, branch/location/type preferences, optional max fees
    - `max_results`: Maximum number of recommendations (default from settings)

    **Response:**
    - Ranked recommendations with match score, admission chance, reasons, pros/cons
    - Community review summary per institution
    """
    try:
        output = engine.recommend(request.preferences, max_results=request.max_results)
    except PreferenceValidationError as e:
        raise HTTPException(status_code=400, detail={"message": str(e), "errors": e.errors})
    except CatalogUnavailableError as e:
        logger.error(f"❌ Catalog unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except RecommendationTimeoutError as e:
        raise HTTPException(status_code=504, detail=str(e))

    return output.model_dump()


@router.post("/reviews", summary="Community review summary for one college")
def get_reviews(
    request: ReviewRequest,
    pipeline=Depends(get_review_pipeline)
):
    """Sentiment summary, topic ratings, key quotes and placement insights from community posts."""
    return run_review_report(request.institution_name, filters=request.filters, pipeline=pipeline)


# =============================================================================
# HEALTH CHECK
# =============================================================================

@router.get("/health", summary="Recommendation engine health check")
def health_check():
    """Check if recommendation engine is operational."""
    return {"status": "ok", "engine": "college-recommendation", "version": ENGINE_VERSION}
