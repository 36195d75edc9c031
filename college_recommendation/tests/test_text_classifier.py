"""
Lexicon classifier: sentiment tie-breaks, topic buckets and post metadata.
"""

import pytest

from college_recommendation.logic.constants import Sentiment
from college_recommendation.logic.text_classifier import (
    LexiconTextClassifier,
    classify_post,
    decide_sentiment,
    extract_batch_year,
    extract_course,
)


@pytest.fixture
def classifier():
    return LexiconTextClassifier()


@pytest.mark.parametrize("positive, negative, expected", [
    (0, 0, Sentiment.NEUTRAL),
    (3, 1, Sentiment.POSITIVE),
    (1, 3, Sentiment.NEGATIVE),
    (1, 1, Sentiment.MIXED),
    (3, 2, Sentiment.MIXED),
    (4, 2, Sentiment.POSITIVE),
    (2, 4, Sentiment.NEGATIVE),
    (1, 0, Sentiment.POSITIVE),
])
def test_decide_sentiment(positive, negative, expected):
    assert decide_sentiment(positive, negative) == expected


def test_no_lexicon_hits_is_neutral(classifier):
    result = classifier.classify("Visited for counselling on Monday")
    assert result.sentiment == Sentiment.NEUTRAL


def test_positive_post_with_topics(classifier):
    result = classifier.classify("Great faculty and excellent lab equipment")
    assert result.sentiment == Sentiment.POSITIVE
    assert result.topics == ["Faculty", "Infrastructure"]


def test_negative_post(classifier):
    result = classifier.classify("Worst admin ever, terrible experience")
    assert result.sentiment == Sentiment.NEGATIVE
    assert result.topics == ["Administration"]


def test_near_equal_counts_are_mixed(classifier):
    assert classifier.classify("good hostel but bad food").sentiment == Sentiment.MIXED


def test_matching_is_case_insensitive(classifier):
    assert classifier.classify("GREAT PLACEMENTS").sentiment == Sentiment.POSITIVE


def test_untagged_text_falls_back_to_general(classifier):
    assert classifier.classify("hello there").topics == ["General"]


def test_empty_text(classifier):
    result = classifier.classify("")
    assert result.sentiment == Sentiment.NEUTRAL
    assert result.topics == ["General"]


def test_classify_is_idempotent(classifier):
    text = "Amazing campus, poor placement support, fees are affordable"
    assert classifier.classify(text) == classifier.classify(text)


def test_custom_lexicons_are_injectable():
    classifier = LexiconTextClassifier(
        positive_keywords=["stellar"],
        negative_keywords=["meh"],
        topic_keywords={"Food": ["canteen"]},
    )
    result = classifier.classify("Stellar canteen")
    assert result.sentiment == Sentiment.POSITIVE
    assert result.topics == ["Food"]


def test_classify_post_extracts_metadata(classifier, make_post):
    post = make_post(
        title="Batch of 2022 CSE review",
        body="Placements were great",
        flair="Verified Student",
    )
    classified = classify_post(post, classifier)

    assert classified.id == post.id
    assert classified.sentiment == Sentiment.POSITIVE
    assert "Placements" in classified.topics
    assert classified.batch_year == 2022
    assert classified.course == "CSE"
    assert classified.verified is True


def test_batch_year_outside_range_is_ignored():
    assert extract_batch_year("class of 2031") is None
    assert extract_batch_year("joined in 2019") == 2019


def test_course_requires_whole_word():
    assert extract_course("A long itinerary for the trip") is None
    assert extract_course("Took IT as my branch") == "IT"
