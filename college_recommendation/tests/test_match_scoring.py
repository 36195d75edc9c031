"""
Eligibility gate and match score dimensions.
"""

import pytest

from college_recommendation.logic.aggregator import aggregate_scores, match_score_from
from college_recommendation.logic.candidate_generator import (
    generate_candidates,
    is_eligible,
    qualifying_branches,
)
from college_recommendation.logic.contracts import DimensionScore, PlacementStats
from college_recommendation.logic.dimension_scorers import (
    score_branch_availability,
    score_facilities,
    score_location_match,
    score_placement_strength,
    score_rank_tier,
    score_type_match,
    score_autonomy,
)


# =============================================================================
# ELIGIBILITY
# =============================================================================

def test_eligible_at_exactly_eighty_percent_of_cutoff(make_institution, make_preferences):
    institution = make_institution(cutoffs={"KCET": {"Computer Science": 100.0}})
    assert is_eligible(institution, make_preferences(score=80.0))
    assert not is_eligible(institution, make_preferences(score=79.9))


def test_any_preferred_branch_can_qualify(make_institution, make_preferences):
    institution = make_institution(cutoffs={"KCET": {"Computer Science": 99.0, "Civil": 70.0}})
    preferences = make_preferences(score=75.0, branch_preferences=["Computer Science", "Civil"])
    assert qualifying_branches(institution, preferences) == ["Civil"]


def test_no_cutoff_for_exam_is_ineligible(make_institution, make_preferences):
    institution = make_institution(cutoffs={"JEE": {"Computer Science": 90.0}})
    assert not is_eligible(institution, make_preferences(exam_type="KCET", score=99.0))


def test_generate_candidates_dedupes_and_keeps_order(make_institution, make_preferences):
    a = make_institution(id="a", name="A")
    b = make_institution(id="b", name="B", cutoffs={"KCET": {"Computer Science": 200.0}})
    c = make_institution(id="c", name="C")
    candidates = generate_candidates([c, a, b, a], make_preferences(score=90.0))
    assert [i.id for i in candidates] == ["c", "a"]


# =============================================================================
# DIMENSIONS
# =============================================================================

def test_location_match(make_institution, make_preferences):
    institution = make_institution(region="Karnataka")
    assert score_location_match(make_preferences(), institution).points == 15
    assert score_location_match(make_preferences(location_preferences=["karnataka"]), institution).points == 25
    assert score_location_match(make_preferences(location_preferences=["Kerala"]), institution).points == 0


def test_type_match(make_institution, make_preferences):
    institution = make_institution(institution_type="Private")
    assert score_type_match(make_preferences(), institution).points == 10
    assert score_type_match(make_preferences(institution_type_preferences=["Private"]), institution).points == 15
    assert score_type_match(make_preferences(institution_type_preferences=["Government"]), institution).points == 0


def test_branch_availability_half_credit(make_institution, make_preferences):
    institution = make_institution(
        courses=["Computer Science Engineering"],
        cutoffs={"KCET": {"Computer Science": 90.0}},
    )
    preferences = make_preferences(branch_preferences=["Computer Science", "Mechanical"])
    dimension = score_branch_availability(preferences, institution)
    assert dimension.points == 10
    assert dimension.max_points == 20


def test_branch_offered_through_cutoff_only(make_institution, make_preferences):
    institution = make_institution(courses=[], cutoffs={"KCET": {"Computer Science": 90.0, "Civil": 60.0}})
    preferences = make_preferences(branch_preferences=["Computer Science", "Civil"])
    assert score_branch_availability(preferences, institution).points == 20


def test_cutoff_under_another_exam_does_not_offer_branch(make_institution, make_preferences):
    institution = make_institution(
        courses=["Computer Science Engineering"],
        cutoffs={"KCET": {"Computer Science": 90.0}, "JEE": {"Civil": 60.0}},
    )
    preferences = make_preferences(branch_preferences=["Computer Science", "Civil"])

    assert not institution.offers_branch("Civil", "KCET")
    assert institution.offers_branch("Civil", "JEE")
    assert score_branch_availability(preferences, institution).points == 10


def test_placement_strength(make_institution, make_preferences):
    assert score_placement_strength(make_preferences(), make_institution(placement_percentage=85)).points == 17
    assert score_placement_strength(make_preferences(), make_institution(placement_percentage=120)).points == 20
    assert score_placement_strength(make_preferences(), make_institution()).points == 0


@pytest.mark.parametrize("rank, points", [
    (1, 10), (50, 10), (51, 8), (100, 8), (101, 5), (200, 5), (201, 2), (None, 0),
])
def test_rank_tiers(make_institution, make_preferences, rank, points):
    assert score_rank_tier(make_preferences(), make_institution(rank=rank)).points == points


def test_autonomy_from_flag_or_type(make_institution, make_preferences):
    preferences = make_preferences()
    assert score_autonomy(preferences, make_institution(autonomous=True)).points == 5
    assert score_autonomy(preferences, make_institution(institution_type="Autonomous")).points == 5
    assert score_autonomy(preferences, make_institution()).points == 0


def test_facilities(make_institution, make_preferences):
    four = make_institution(facilities=["Library", "Hostel", "Labs", "Gym"])
    twelve = make_institution(facilities=[f"Facility {i}" for i in range(12)])
    assert score_facilities(make_preferences(), four).points == 2.0
    assert score_facilities(make_preferences(), twelve).points == 5.0


# =============================================================================
# MATCH SCORE
# =============================================================================

def test_perfect_match_scores_100(make_institution, make_preferences):
    institution = make_institution(
        region="Karnataka",
        institution_type="Government",
        rank=10,
        autonomous=True,
        placement_stats=PlacementStats(placement_percentage=100),
        facilities=[f"Facility {i}" for i in range(10)],
    )
    preferences = make_preferences(
        location_preferences=["Karnataka"],
        institution_type_preferences=["Government"],
    )
    scored = aggregate_scores(preferences, institution)
    assert scored.match_score == 100
    assert set(scored.dimension_scores) == {
        "location_match", "type_match", "branch_availability",
        "placement_strength", "rank_tier", "autonomy", "facilities",
    }


def test_minimal_institution_stays_in_bounds(make_institution, make_preferences):
    institution = make_institution(region="", courses=[], cutoffs={"KCET": {"Civil": 50.0}})
    preferences = make_preferences(location_preferences=["Goa"], institution_type_preferences=["Private"])
    scored = aggregate_scores(preferences, institution)
    assert scored.match_score == 0
    assert scored.admission_chance is None


def test_match_score_rounds_half_up():
    dimensions = [
        DimensionScore(dimension="a", points=62.5, max_points=100),
    ]
    assert match_score_from(dimensions) == 63


def test_admission_chance_attached(make_institution, make_preferences):
    institution = make_institution(cutoffs={"KCET": {"Computer Science": 100.0}})
    scored = aggregate_scores(make_preferences(score=100.0), institution)
    assert scored.admission_chance == 60
    assert 0 <= scored.match_score <= 100
