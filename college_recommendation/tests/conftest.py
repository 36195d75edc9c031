"""
Shared fixtures: institution/post factories and a fixed clock.
"""

import pytest

from college_recommendation.logic.contracts import (
    CandidatePreferences,
    ClassifiedPost,
    CommunityPost,
    Institution,
    PlacementStats,
)

NOW = 1_700_000_000.0
DAY = 24 * 60 * 60


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_institution():
    def _make(id="inst-1", name="Test Institute of Technology", placement_percentage=None, **overrides):
        data = dict(
            id=id,
            name=name,
            city="Bengaluru",
            region="Karnataka",
            institution_type="Government",
            courses=["Computer Science Engineering"],
            cutoffs={"KCET": {"Computer Science": 90.0}},
        )
        if placement_percentage is not None:
            data["placement_stats"] = PlacementStats(placement_percentage=placement_percentage)
        data.update(overrides)
        return Institution(**data)
    return _make


@pytest.fixture
def make_preferences():
    def _make(**overrides):
        data = dict(
            student_id="student-1",
            exam_type="KCET",
            score=90.0,
            branch_preferences=["Computer Science"],
        )
        data.update(overrides)
        return CandidatePreferences(**data)
    return _make


@pytest.fixture
def make_post():
    def _make(id="p1", title="", body="", score=1, created_at=NOW, source="static", flair=None, author="student"):
        return CommunityPost(
            id=id,
            source=source,
            title=title,
            body=body,
            score=score,
            created_at=created_at,
            flair=flair,
            author=author,
        )
    return _make


@pytest.fixture
def make_classified():
    def _make(id="c1", sentiment="neutral", topics=None, created_at=NOW, score=1, body="", **extra):
        return ClassifiedPost(
            id=id,
            source="static",
            title=f"post {id}",
            body=body,
            score=score,
            created_at=created_at,
            sentiment=sentiment,
            topics=topics or ["General"],
            **extra,
        )
    return _make
