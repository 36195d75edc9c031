"""
REST surface via FastAPI TestClient; engine and pipeline dependencies are overridden.
"""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from college_recommendation.config import EngineSettings
from college_recommendation.logic.catalog import InMemoryInstitutionCatalog
from college_recommendation.logic.engine import RecommendationEngine
from college_recommendation.logic.errors import CatalogUnavailableError, RecommendationTimeoutError
from college_recommendation.logic.post_fetcher import PostFetcher
from college_recommendation.logic.post_sources import StaticPostSource
from college_recommendation.logic.review_pipeline import ReviewPipeline
from college_recommendation.routes import get_recommendation_engine, get_review_pipeline, router

BODY = {
    "preferences": {
        "exam_type": "KCET",
        "score": 92,
        "branch_preferences": ["Computer Science"],
    },
    "max_results": 5,
}


class RaisingEngine:
    def __init__(self, error):
        self.error = error

    def recommend(self, preferences, max_results=None):
        raise self.error


@pytest.fixture
def app():
    app = FastAPI()
    app.include_router(router)
    return app


@pytest.fixture
def client(app, make_institution, make_post):
    catalog = InMemoryInstitutionCatalog([
        make_institution(id="rvce", name="RVCE", cutoffs={"KCET": {"Computer Science": 95.0}}),
    ])
    pipeline = ReviewPipeline(PostFetcher([StaticPostSource("static", [
        make_post("1", title="RVCE placements are great, got 12 LPA", score=15),
        make_post("2", title="RVCE hostel is bad", score=4),
    ])], sleep=lambda s: None))

    app.dependency_overrides[get_recommendation_engine] = lambda: RecommendationEngine(
        catalog, review_pipeline=pipeline, settings=EngineSettings()
    )
    app.dependency_overrides[get_review_pipeline] = lambda: pipeline
    return TestClient(app)


def test_health(client):
    response = client.get("/recommendations/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_recommendations(client):
    response = client.post("/recommendations", json=BODY)
    assert response.status_code == 200

    data = response.json()
    assert data["total_recommended"] == 1
    recommendation = data["recommendations"][0]
    assert recommendation["institution"]["id"] == "rvce"
    assert recommendation["admission_chance"] == 45
    assert recommendation["review_summary"]["total_reviews"] == 2
    assert data["engine_version"] == "1.0.0"


def test_invalid_preferences_return_400(client):
    body = {**BODY, "preferences": {**BODY["preferences"], "branch_preferences": []}}
    response = client.post("/recommendations", json=body)
    assert response.status_code == 400
    assert response.json()["detail"]["errors"]


def test_catalog_failure_returns_503(app):
    app.dependency_overrides[get_recommendation_engine] = lambda: RaisingEngine(CatalogUnavailableError("down"))
    response = TestClient(app).post("/recommendations", json=BODY)
    assert response.status_code == 503


def test_timeout_returns_504(app):
    app.dependency_overrides[get_recommendation_engine] = lambda: RaisingEngine(RecommendationTimeoutError("slow"))
    response = TestClient(app).post("/recommendations", json=BODY)
    assert response.status_code == 504


def test_reviews_endpoint(client):
    response = client.post("/recommendations/reviews", json={"institution_name": "RVCE"})
    assert response.status_code == 200

    data = response.json()
    assert data["summary"]["total_reviews"] == 2
    assert data["summary"]["institution_id"] == "rvce"
    assert data["top_topics"][0]["topic"] in {"Placements", "Infrastructure"}
    assert data["placement_insights"]["average_package_mentioned"] == 12.0
    assert data["digest"].startswith("**Overall Sentiment:**")


def test_reviews_endpoint_with_filters(client):
    response = client.post(
        "/recommendations/reviews",
        json={"institution_name": "RVCE", "filters": {"sentiments": ["negative"]}},
    )
    assert response.status_code == 200
    assert response.json()["summary"]["total_reviews"] == 1
