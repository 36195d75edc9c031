from fastapi import FastAPI, Depends, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging
from dotenv import load_dotenv

from db import get_session, init_db
from college_recommendation.models import RecCollege
from college_recommendation.logic.adapter import transform_college
from college_recommendation.logic.catalog import SqlInstitutionCatalog
from college_recommendation.logic.contracts import CatalogFilter
from college_recommendation.logic.errors import CatalogUnavailableError
from college_recommendation.logic.ranker import compare_institutions
from college_recommendation.routes import router as recommendation_router

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("App starting with DATABASE_URL")

app = FastAPI(title="College Recommendation Engine")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

try:
    init_db()
except SQLAlchemyError as e:
    logging.error(f"❌ Could not create tables: {e}")

app.include_router(recommendation_router)


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}


@app.get("/colleges", tags=["colleges"], summary="List colleges from the catalog")
def list_colleges(
    state: Optional[List[str]] = Query(default=None),
    institution_type: Optional[List[str]] = Query(default=None),
    db: Session = Depends(get_session)
):
    catalog = SqlInstitutionCatalog(db)
    try:
        institutions = catalog.query(CatalogFilter(regions=state or [], institution_types=institution_type or []))
    except CatalogUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"colleges": [i.model_dump() for i in institutions], "count": len(institutions)}


@app.get("/colleges/compare", tags=["colleges"], summary="Compare colleges side by side")
def compare_colleges(
    ids: List[str] = Query(...),
    db: Session = Depends(get_session)
):
    rows = db.query(RecCollege).filter(RecCollege.id.in_(ids)).all()
    by_id = {row.id: transform_college(row) for row in rows}
    missing = [i for i in ids if by_id.get(i) is None]
    if missing:
        raise HTTPException(status_code=404, detail=f"Colleges not found: {', '.join(missing)}")
    return compare_institutions([by_id[i] for i in ids])


@app.get("/colleges/{college_id}", tags=["colleges"])
def get_college(
    college_id: str,
    db: Session = Depends(get_session)
):
    row = db.get(RecCollege, college_id)
    institution = transform_college(row) if row else None
    if institution is None:
        raise HTTPException(status_code=404, detail="College not found")
    return institution.model_dump()
