"""Tests for topic tags and political relevance."""

import pytest
from partyviews.core.topics import (
    parse_topic_tag, infer_topic, effective_topic, mentions_political_keyword, is_politically_relevant,
)


class TestTopicTags:
    """Test topic tag parsing."""

    def test_tag_with_confidence(self):
        topic, confidence, content = parse_topic_tag("Good point about rents. [[topic: Housing; confidence: 0.9]]")
        assert topic == "housing"
        assert confidence == 0.9
        assert content == "Good point about rents."

    def test_tag_without_confidence(self):
        topic, confidence, _ = parse_topic_tag("Noted. [[topic: nhs]]")
        assert topic == "nhs"
        assert confidence == 0.8

    def test_no_tag(self):
        assert parse_topic_tag("Just a reply") == ("", 0.0, "Just a reply")

    def test_tag_must_be_trailing(self):
        topic, _, _ = parse_topic_tag("[[topic: housing]] and then more text")
        assert topic == ""


class TestInference:
    """Test keyword topic inference."""

    def test_keyword_match(self):
        assert infer_topic("Rent keeps going up") == ("housing", 0.7)

    def test_case_insensitive(self):
        assert infer_topic("The NHS is struggling")[0] == "nhs"

    def test_no_match_is_general(self):
        assert infer_topic("Lovely weather today") == ("general", 0.3)


class TestRelevance:
    """Test the relevance predicate."""

    def test_effective_topic(self):
        assert effective_topic(" NHS ") == "nhs"
        assert effective_topic("General") is None
        assert effective_topic("") is None
        assert effective_topic(None) is None

    def test_keyword_relevance(self):
        assert mentions_political_keyword("What about Brexit?")
        assert not mentions_political_keyword("Lovely weather today")

    def test_topic_tag_makes_message_relevant(self):
        assert is_politically_relevant("Lovely weather today", topic="environment")

    def test_general_tag_does_not_count(self):
        assert not is_politically_relevant("Lovely weather today", topic="general")


if __name__ == "__main__":
    pytest.main([__file__])
