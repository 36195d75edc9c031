"""
Ranking order, explanations and review-derived pros/cons.
"""

from college_recommendation.logic.contracts import (
    PlacementStats,
    ReviewSummary,
    ScoredInstitution,
    SentimentDistribution,
    TopicRating,
)
from college_recommendation.logic.output_assembler import (
    generate_cons,
    generate_pros,
    generate_reasons,
)
from college_recommendation.logic.ranker import (
    compare_institutions,
    rank_recommendations,
    select_top,
    rank_candidates,
)


def _scored(institution, match_score, admission_chance):
    return ScoredInstitution(
        institution=institution,
        match_score=match_score,
        admission_chance=admission_chance,
    )


def test_sorted_by_match_score(make_institution, make_preferences):
    scored = [
        _scored(make_institution(id="a", name="A"), 40, 60),
        _scored(make_institution(id="b", name="B"), 90, 60),
        _scored(make_institution(id="c", name="C"), 70, 60),
    ]
    recommendations = rank_recommendations(scored, make_preferences(), {})
    assert [r.institution.id for r in recommendations] == ["b", "c", "a"]
    assert [r.rank for r in recommendations] == [1, 2, 3]


def test_ties_broken_by_admission_then_name(make_institution, make_preferences):
    scored = [
        _scored(make_institution(id="z", name="Zeta College"), 70, 60),
        _scored(make_institution(id="y", name="Alpha College"), 70, 60),
        _scored(make_institution(id="x", name="Mid College"), 70, 85),
    ]
    first = rank_recommendations(scored, make_preferences(), {})
    second = rank_recommendations(list(reversed(scored)), make_preferences(), {})
    assert [r.institution.id for r in first] == ["x", "y", "z"]
    assert [r.institution.id for r in second] == ["x", "y", "z"]


def test_each_institution_appears_once(make_institution, make_preferences):
    institution = make_institution(id="a")
    scored = [_scored(institution, 70, 60), _scored(institution, 70, 60)]
    assert len(rank_recommendations(scored, make_preferences(), {})) == 1


def test_missing_admission_chance_is_not_ranked(make_institution):
    scored = [
        _scored(make_institution(id="a"), 90, None),
        _scored(make_institution(id="b"), 50, 60),
    ]
    assert [s.institution.id for s in rank_candidates(scored)] == ["b"]


def test_select_top_applies_limit_and_threshold(make_institution):
    ranked = [
        _scored(make_institution(id="a"), 90, 95),
        _scored(make_institution(id="b"), 80, 45),
        _scored(make_institution(id="c"), 70, 60),
    ]
    assert [s.institution.id for s in select_top(ranked, 2)] == ["a", "b"]
    assert [s.institution.id for s in select_top(ranked, 5, min_admission_chance=50)] == ["a", "c"]


def test_missing_summary_defaults_to_empty(make_institution, make_preferences):
    recommendation = rank_recommendations([_scored(make_institution(id="a"), 50, 60)], make_preferences(), {})[0]
    assert recommendation.review_summary.institution_id == "a"
    assert recommendation.review_summary.total_reviews == 0
    assert recommendation.highly_rated is False


# =============================================================================
# EXPLANATIONS
# =============================================================================

def test_reasons_in_fixed_order(make_institution, make_preferences):
    institution = make_institution(
        region="Karnataka",
        rank=12,
        institution_type="Government",
        autonomous=True,
        placement_stats=PlacementStats(placement_percentage=90),
        courses=["Computer Science Engineering", "Electronics and Communication", "Civil Engineering"],
    )
    preferences = make_preferences(
        branch_preferences=["Computer Science", "Electronics", "Civil"],
        location_preferences=["Karnataka"],
    )
    assert generate_reasons(institution, preferences, 85) == [
        "Excellent match for your preferences",
        "Located in your preferred region: Karnataka",
        "Nationally ranked #12",
        "High placement rate: 90%",
        "Government institution with lower fees",
        "Autonomous institution with flexible curriculum",
        "Offers your preferred branches: Computer Science, Electronics",
    ]


def test_no_reasons_for_weak_match(make_institution, make_preferences):
    institution = make_institution(institution_type="Private", courses=[], cutoffs={"KCET": {"Civil": 50.0}})
    assert generate_reasons(institution, make_preferences(), 30) == []


def test_pros(make_institution):
    institution = make_institution(
        rank=40,
        autonomous=True,
        placement_stats=PlacementStats(placement_percentage=92, average_package=11.5),
        facilities=["Library", "Hostel", "Labs", "Gym"],
    )
    assert generate_pros(institution) == [
        "Strong placement record (92% placed)",
        "Average package: ₹11.5 LPA",
        "National rank: 40",
        "Affordable government fees",
        "Autonomous status",
        "Facilities: Library, Hostel, Labs",
    ]


def test_cons(make_institution, make_preferences):
    institution = make_institution(
        institution_type="Private",
        rank=None,
        facilities=["Library"],
        annual_fees=300000,
    )
    assert generate_cons(institution, make_preferences(max_fees=200000)) == [
        "Limited placement data available",
        "Lower national ranking",
        "Not autonomous - fixed curriculum",
        "Limited campus facilities",
        "Fees above your budget",
    ]


def test_rank_beyond_200_is_a_con(make_institution):
    assert "Lower national ranking" in generate_cons(make_institution(rank=201))
    assert "Lower national ranking" not in generate_cons(make_institution(rank=200))


def test_review_topics_feed_pros_and_cons(make_institution, make_preferences):
    institution = make_institution(id="a", rank=300)
    summary = ReviewSummary(
        institution_id="a",
        total_reviews=5,
        average_sentiment=0.2,
        sentiment_distribution=SentimentDistribution(positive=3, negative=2),
        topic_ratings={
            "Placements": TopicRating(topic="Placements", average_rating=4.5, mention_count=3, sentiment="positive"),
            "Faculty": TopicRating(topic="Faculty", average_rating=4.0, mention_count=3, sentiment="positive"),
            "Fees": TopicRating(topic="Fees", average_rating=0.5, mention_count=2, sentiment="negative"),
            "Location": TopicRating(topic="Location", average_rating=2.5, mention_count=4, sentiment="neutral"),
        },
    )
    recommendation = rank_recommendations([_scored(institution, 60, 75)], make_preferences(), {"a": summary})[0]

    assert recommendation.pros[:2] == ["Good faculty (3 reviews)", "Good placements (3 reviews)"]
    assert recommendation.cons[0] == "Concerns about fees (2 reviews)"
    assert len(recommendation.pros) <= 5
    assert len(recommendation.cons) <= 4


def test_compare_institutions(make_institution):
    a = make_institution(id="a", rank=20, placement_stats=PlacementStats(average_package=9.0, placement_percentage=80))
    b = make_institution(id="b", rank=5, placement_stats=PlacementStats(average_package=14.0, placement_percentage=75))
    c = make_institution(id="c", rank=None, annual_fees=50000)

    result = compare_institutions([a, b, c])

    assert result["institutions"] == ["a", "b", "c"]
    assert result["comparison_metrics"]["ranks"] == [20, 5, None]
    assert result["winner_by_metric"] == {
        "rank": "b",
        "average_package": "b",
        "placement_percentage": "a",
        "annual_fees": "c",
    }
